"""Tests for the symbol <-> wire tag codec."""

import pytest

from holonid.identity import enums
from holonid.identity.enums import Clade, ReproductionMode, Status
from holonid.identity.model import CLADES, REPRODUCTION_MODES, STATUSES

AXES = [
    (Clade, enums.clade_to_wire, enums.clade_from_wire, CLADES),
    (Status, enums.status_to_wire, enums.status_from_wire, STATUSES),
    (Status, enums.proto_status_to_wire, enums.proto_status_from_wire, STATUSES),
    (ReproductionMode, enums.reproduction_to_wire, enums.reproduction_from_wire, REPRODUCTION_MODES),
]


class TestForward:
    @pytest.mark.parametrize("wire, to_wire, _from_wire, symbols", AXES)
    def test_every_symbol_has_a_tag(self, wire, to_wire, _from_wire, symbols):
        tags = {to_wire(s) for s in symbols}
        assert len(tags) == len(symbols)
        assert all(tag != 0 for tag in tags)

    @pytest.mark.parametrize("wire, to_wire, _from_wire, _symbols", AXES)
    @pytest.mark.parametrize("symbol", ["", "Deterministic/Pure", "unknown", None, "draft "])
    def test_unknown_symbol_is_unspecified(self, wire, to_wire, _from_wire, _symbols, symbol):
        assert to_wire(symbol) == 0

    def test_examples(self):
        assert enums.clade_to_wire("probabilistic/adaptive") == Clade.PROBABILISTIC_ADAPTIVE
        assert enums.status_to_wire("dead") == Status.DEAD
        assert enums.reproduction_to_wire("bred") == ReproductionMode.BRED


class TestReverse:
    @pytest.mark.parametrize("wire, _to_wire, from_wire, symbols", AXES)
    def test_every_tag_maps_to_a_symbol(self, wire, _to_wire, from_wire, symbols):
        for tag in wire:
            symbol = from_wire(tag)
            assert symbol
            assert symbol in symbols

    @pytest.mark.parametrize("wire, to_wire, from_wire, symbols", AXES)
    def test_symbol_round_trip(self, wire, to_wire, from_wire, symbols):
        for symbol in symbols:
            assert from_wire(to_wire(symbol)) == symbol

    @pytest.mark.parametrize("tag", [0, 99, -1])
    def test_unknown_tags_fall_back_to_defaults(self, tag):
        assert enums.clade_from_wire(tag) == "deterministic/pure"
        assert enums.status_from_wire(tag) == "draft"
        assert enums.proto_status_from_wire(tag) == "draft"
        assert enums.reproduction_from_wire(tag) == "manual"

    def test_plain_ints_accepted(self):
        assert enums.clade_from_wire(3) == "deterministic/io_bound"
        assert enums.status_from_wire(2) == "stable"
