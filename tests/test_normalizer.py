"""
Tests for the normalizer and conversion table.
"""

import logging
import math

import pytest

from tadoku_stats.config import CONVERSION_TABLE_VERSION, KNOWN_MEDIA, KNOWN_UNITS
from tadoku_stats.scoring.normalizer import (
    DEFAULT_CONVERSION_TABLE,
    ConversionTable,
    UnknownConversion,
    normalize_entries,
    normalize_entry,
)
from tadoku_stats.scoring.records import MalformedRecord, RawEntry, ScoringError


class TestConversionTable:
    """Tests for ConversionTable construction and lookup."""

    def test_lookup(self, scenario_table):
        assert scenario_table.multiplier("game", "minutes") == 0.5

    def test_keys_lowercased(self):
        table = ConversionTable.from_dict({"Book": {"PAGES": 2}})
        assert table.multiplier("book", "pages") == 2.0

    def test_missing_pair(self, scenario_table):
        with pytest.raises(UnknownConversion) as exc:
            scenario_table.multiplier("book", "minutes")
        assert exc.value.medium == "book"
        assert exc.value.unit == "minutes"
        assert "book" in str(exc.value) and "minutes" in str(exc.value)

    def test_missing_medium(self, scenario_table):
        with pytest.raises(UnknownConversion):
            scenario_table.multiplier("anime", "episodes")

    @pytest.mark.parametrize("multiplier", [-1, math.nan, math.inf, "1", True, None])
    def test_rejects_bad_multiplier(self, multiplier):
        with pytest.raises(ValueError):
            ConversionTable.from_dict({"book": {"pages": multiplier}})

    def test_unusual_unit_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tadoku_stats.scoring.normalizer"):
            table = ConversionTable.from_dict({"other": {"sessions": 3}}, version="club")
        assert table.multiplier("other", "sessions") == 3.0
        assert "sessions" in caplog.text and "club" in caplog.text

    def test_known_units_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tadoku_stats.scoring.normalizer"):
            ConversionTable.from_dict({"book": {"pages": 1}, "anime": {"episodes": 4}})
        assert caplog.records == []

    def test_contains(self, scenario_table):
        assert ("book", "pages") in scenario_table
        assert ("book", "minutes") not in scenario_table
        assert ("drama", "episodes") not in scenario_table

    def test_pairs_sorted(self, scenario_table):
        assert scenario_table.pairs() == [("book", "pages"), ("game", "minutes")]

    def test_immutable(self, scenario_table):
        with pytest.raises(TypeError):
            scenario_table.multipliers["book"]["pages"] = 5

    def test_error_hierarchy(self):
        assert issubclass(UnknownConversion, ScoringError)
        assert issubclass(UnknownConversion, KeyError)


class TestDefaultTable:
    """Tests for the pinned contest scoring table."""

    def test_version(self):
        assert DEFAULT_CONVERSION_TABLE.version == CONVERSION_TABLE_VERSION

    def test_covers_every_known_medium(self):
        media = {medium for medium, _ in DEFAULT_CONVERSION_TABLE.pairs()}
        assert media == set(KNOWN_MEDIA)

    def test_uses_only_known_units(self):
        units = {unit for _, unit in DEFAULT_CONVERSION_TABLE.pairs()}
        assert units <= KNOWN_UNITS

    def test_book_pages_are_the_unit(self):
        assert DEFAULT_CONVERSION_TABLE.multiplier("book", "pages") == 1.0


class TestNormalizeEntry:
    """Tests for scoring single entries."""

    def test_score_is_quantity_times_multiplier(self, scenario_table):
        item = normalize_entry(RawEntry("alice", "game", "ja", 60, "minutes"), scenario_table)
        assert item.score == 30.0
        assert item.entry.quantity == 60.0

    def test_zero_quantity_scores_zero(self, scenario_table):
        assert normalize_entry(RawEntry("alice", "book", "en", 0, "pages"), scenario_table).score == 0.0

    def test_deterministic(self, scenario_table):
        entry = RawEntry("alice", "game", "ja", 61.3, "minutes")
        assert normalize_entry(entry, scenario_table) == normalize_entry(entry, scenario_table)

    def test_unknown_medium_folded_then_rejected(self, scenario_table):
        entry = RawEntry("carol", "boardgame", "en", 3, "sessions")
        with pytest.raises(UnknownConversion) as exc:
            normalize_entry(entry, scenario_table)
        assert (exc.value.medium, exc.value.unit) == ("other", "sessions")
        assert "test" in str(exc.value)  # table version
        assert "carol" in str(exc.value) and "boardgame" in str(exc.value)

    def test_overflowing_score_rejected(self):
        table = ConversionTable.from_dict({"book": {"pages": 10.0}})
        with pytest.raises(MalformedRecord, match="dave"):
            normalize_entry(RawEntry("dave", "book", "en", 1e308, "pages"), table)


class TestNormalizeEntries:
    """Tests for scoring sequences."""

    def test_preserves_order(self, scenario_table, scenario_entries):
        result = normalize_entries(scenario_entries, scenario_table)
        assert [item.entry for item in result] == scenario_entries
        assert [item.score for item in result] == [100.0, 50.0, 30.0]

    def test_empty(self, scenario_table):
        assert normalize_entries([], scenario_table) == []

    def test_fails_fast(self, scenario_table, scenario_entries):
        entries = scenario_entries + [RawEntry("dave", "anime", "ja", 2, "episodes")]
        with pytest.raises(UnknownConversion):
            normalize_entries(entries, scenario_table)
