"""Translation between on-disk enum symbols and the wire vocabulary.

Each axis (clade, status, reproduction mode, proto_status) has a closed
table of symbol <-> tag pairs. Both directions are total: an unknown symbol
becomes the axis's ``*_UNSPECIFIED`` tag, and an unknown or unspecified tag
becomes the axis's default symbol. A symbol added to the document format
without a matching tag therefore degrades to "unspecified" on the wire
instead of failing.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType

from holonid.identity.model import DEFAULT_CLADE, DEFAULT_REPRODUCTION


class Clade(IntEnum):
    CLADE_UNSPECIFIED = 0
    DETERMINISTIC_PURE = 1
    DETERMINISTIC_STATEFUL = 2
    DETERMINISTIC_IO_BOUND = 3
    PROBABILISTIC_GENERATIVE = 4
    PROBABILISTIC_PERCEPTUAL = 5
    PROBABILISTIC_ADAPTIVE = 6


class Status(IntEnum):
    STATUS_UNSPECIFIED = 0
    DRAFT = 1
    STABLE = 2
    DEPRECATED = 3
    DEAD = 4


class ReproductionMode(IntEnum):
    REPRODUCTION_UNSPECIFIED = 0
    MANUAL = 1
    ASSISTED = 2
    AUTOMATIC = 3
    AUTOPOIETIC = 4
    BRED = 5


DEFAULT_STATUS = "draft"

_CLADE_TAGS = MappingProxyType(
    {
        "deterministic/pure": Clade.DETERMINISTIC_PURE,
        "deterministic/stateful": Clade.DETERMINISTIC_STATEFUL,
        "deterministic/io_bound": Clade.DETERMINISTIC_IO_BOUND,
        "probabilistic/generative": Clade.PROBABILISTIC_GENERATIVE,
        "probabilistic/perceptual": Clade.PROBABILISTIC_PERCEPTUAL,
        "probabilistic/adaptive": Clade.PROBABILISTIC_ADAPTIVE,
    }
)
_STATUS_TAGS = MappingProxyType(
    {
        "draft": Status.DRAFT,
        "stable": Status.STABLE,
        "deprecated": Status.DEPRECATED,
        "dead": Status.DEAD,
    }
)
_REPRODUCTION_TAGS = MappingProxyType(
    {
        "manual": ReproductionMode.MANUAL,
        "assisted": ReproductionMode.ASSISTED,
        "automatic": ReproductionMode.AUTOMATIC,
        "autopoietic": ReproductionMode.AUTOPOIETIC,
        "bred": ReproductionMode.BRED,
    }
)

_CLADE_SYMBOLS = MappingProxyType({tag: sym for sym, tag in _CLADE_TAGS.items()})
_STATUS_SYMBOLS = MappingProxyType({tag: sym for sym, tag in _STATUS_TAGS.items()})
_REPRODUCTION_SYMBOLS = MappingProxyType({tag: sym for sym, tag in _REPRODUCTION_TAGS.items()})


# ── Symbol → tag ─────────────────────────────────────────────


def clade_to_wire(symbol: str | None) -> Clade:
    return _CLADE_TAGS.get(symbol, Clade.CLADE_UNSPECIFIED)


def status_to_wire(symbol: str | None) -> Status:
    return _STATUS_TAGS.get(symbol, Status.STATUS_UNSPECIFIED)


def reproduction_to_wire(symbol: str | None) -> ReproductionMode:
    return _REPRODUCTION_TAGS.get(symbol, ReproductionMode.REPRODUCTION_UNSPECIFIED)


proto_status_to_wire = status_to_wire


# ── Tag → symbol ─────────────────────────────────────────────


def clade_from_wire(tag: int) -> str:
    return _CLADE_SYMBOLS.get(tag, DEFAULT_CLADE)


def status_from_wire(tag: int) -> str:
    return _STATUS_SYMBOLS.get(tag, DEFAULT_STATUS)


def reproduction_from_wire(tag: int) -> str:
    return _REPRODUCTION_SYMBOLS.get(tag, DEFAULT_REPRODUCTION)


proto_status_from_wire = status_from_wire
