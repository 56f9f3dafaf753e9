"""In-memory shape of a holon identity and its field invariants."""

from __future__ import annotations

import uuid as uuidlib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any

from holonid.identity.errors import FormatError, ValidationError

CLADES = (
    "deterministic/pure",
    "deterministic/stateful",
    "deterministic/io_bound",
    "probabilistic/generative",
    "probabilistic/perceptual",
    "probabilistic/adaptive",
)
STATUSES = ("draft", "stable", "deprecated", "dead")
REPRODUCTION_MODES = ("manual", "assisted", "automatic", "autopoietic", "bred")

DEFAULT_CLADE = CLADES[0]
DEFAULT_REPRODUCTION = REPRODUCTION_MODES[0]
GENERATED_BY = "sophia-who"

REQUIRED_FIELDS = ("given_name", "family_name", "motto", "composer")
IMMUTABLE_FIELDS = ("uuid", "born")
PINNING_FIELDS = ("binary_path", "binary_version", "git_tag", "git_commit", "os", "arch")

OPTIONAL_FIELDS = ("status", *PINNING_FIELDS, "wrapped_license", "proto_status")
SEQUENCE_FIELDS = ("parents", "dependencies", "aliases")

# Closed value sets; status and proto_status may also be absent.
VOCABULARIES = {
    "clade": CLADES,
    "status": STATUSES,
    "reproduction": REPRODUCTION_MODES,
    "proto_status": STATUSES,
}


@dataclass
class HolonIdentity:
    """One holon's identity record. Field order is the on-disk layout order."""

    uuid: str = ""
    given_name: str = ""
    family_name: str = ""
    motto: str = ""
    composer: str = ""
    clade: str = DEFAULT_CLADE
    status: str | None = None
    born: str = ""

    # Lineage
    parents: list[str] = field(default_factory=list)
    reproduction: str = DEFAULT_REPRODUCTION

    # Pinning
    binary_path: str | None = None
    binary_version: str | None = None
    git_tag: str | None = None
    git_commit: str | None = None
    os: str | None = None
    arch: str | None = None
    dependencies: list[str] = field(default_factory=list)

    # Optional
    aliases: list[str] = field(default_factory=list)
    wrapped_license: str | None = None

    # Metadata
    generated_by: str = ""
    lang: str = ""
    proto_status: str | None = None

    def __post_init__(self) -> None:
        self.normalize()

    def normalize(self) -> None:
        # An empty optional scalar means "not set"; the document writes null for it.
        for name in OPTIONAL_FIELDS:
            if getattr(self, name) == "":
                setattr(self, name, None)
        if not self.clade:
            self.clade = DEFAULT_CLADE
        if not self.reproduction:
            self.reproduction = DEFAULT_REPRODUCTION

    @property
    def display_name(self) -> str:
        return f"{self.given_name} {self.family_name}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HolonIdentity:
        """Build a record from a decoded structured block.

        Every field is decoded before the record is constructed, so a bad
        value raises FormatError without leaving a half-filled record behind.
        Keys that aren't record fields are ignored.
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            if f.name in SEQUENCE_FIELDS:
                values[f.name] = _as_str_list(f.name, raw)
            elif f.name in OPTIONAL_FIELDS:
                values[f.name] = None if raw is None else _as_str(f.name, raw)
            else:
                values[f.name] = "" if raw is None else _as_str(f.name, raw)
        return cls(**values)


def _as_str(name: str, value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise FormatError(f"block parse error: field {name!r} must be a scalar")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_str_list(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise FormatError(f"block parse error: field {name!r} must be a list")
    return [_as_str(name, item) for item in value]


def new_identity(**values: Any) -> HolonIdentity:
    """Create an unsaved record with a fresh UUID and today's birth date."""
    for name in IMMUTABLE_FIELDS:
        if name in values:
            raise ValidationError(f"{name} is assigned at creation and cannot be given")
    identity = HolonIdentity(**values)
    identity.uuid = str(uuidlib.uuid4())
    identity.born = date.today().isoformat()
    if not identity.generated_by:
        identity.generated_by = GENERATED_BY
    return identity


def validate_new(identity: HolonIdentity) -> None:
    """Raise ValidationError unless every creation-required field is filled and
    every enum-like field holds a known value."""
    missing = [name for name in REQUIRED_FIELDS if not getattr(identity, name).strip()]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")
    if not identity.uuid:
        raise ValidationError("uuid required")
    for name, allowed in VOCABULARIES.items():
        value = getattr(identity, name)
        if value is not None and value not in allowed:
            raise ValidationError(f"{name} must be one of {', '.join(allowed)}, got {value!r}")


def default_dir_name(identity: HolonIdentity) -> str:
    """Directory name convention for new holons, e.g. ``swift-transcriber``."""
    name = f"{identity.given_name}-{identity.family_name.removesuffix('?')}".lower()
    return name.replace(" ", "-")
