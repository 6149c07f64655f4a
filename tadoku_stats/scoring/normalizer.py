"""
Normalizer

Converts a RawEntry's native quantity (pages, characters, minutes,
episodes) into a single page-equivalent score using an explicit
{medium -> {unit -> multiplier}} conversion table:

    score = quantity * multiplier

The table is data, not logic. A pinned, versioned default is built from
tadoku_stats.config; callers can pass their own to re-rank a snapshot
under different contest rules.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from tadoku_stats.config import CONVERSION_TABLE, CONVERSION_TABLE_VERSION, KNOWN_UNITS
from tadoku_stats.scoring.records import MalformedRecord, NormalizedEntry, RawEntry, ScoringError
from tadoku_stats.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class UnknownConversion(ScoringError, KeyError):
    """Raised when a (medium, unit) pair is absent from the conversion table"""

    def __init__(self, medium: str, unit: str, version: str | None = None, record: str | None = None):
        self.medium = medium
        self.unit = unit
        self.version = version
        self.record = record
        super().__init__(medium, unit)

    def __str__(self):
        table = f" (table version {self.version})" if self.version else ""
        message = f"No conversion for medium {self.medium!r} with unit {self.unit!r}{table}"
        if self.record:
            message += f" in record {self.record}"
        return message


@dataclass(frozen=True)
class ConversionTable:
    """Immutable medium -> unit -> multiplier mapping with a version label."""

    multipliers: Mapping[str, Mapping[str, float]]
    version: str | None = None

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Mapping[str, float]], version: str | None = None) -> "ConversionTable":
        """
        Build a table from a plain nested dict.

        Keys are lower-cased to match RawEntry normalization. Units outside
        KNOWN_UNITS are accepted and logged as a warning.

        Raises:
            ValueError: If a multiplier is negative, non-finite or not a number
        """
        frozen = {}
        for medium, units in mapping.items():
            medium_key = str(medium).strip().lower()
            unit_map = dict(frozen.get(medium_key, {}))
            for unit, multiplier in units.items():
                if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)):
                    raise ValueError(f"Multiplier for {medium}/{unit} must be a number, got {multiplier!r}")
                if not math.isfinite(multiplier) or multiplier < 0:
                    raise ValueError(f"Multiplier for {medium}/{unit} must be finite and non-negative, got {multiplier!r}")
                unit_key = str(unit).strip().lower()
                if unit_key not in KNOWN_UNITS:
                    logger.warning(f"Conversion table {version or '(unversioned)'}: unusual unit '{unit_key}' for {medium_key}")
                unit_map[unit_key] = float(multiplier)
            frozen[medium_key] = MappingProxyType(unit_map)
        return cls(multipliers=MappingProxyType(frozen), version=version)

    def multiplier(self, medium: str, unit: str) -> float:
        """
        Look up the page-equivalent multiplier for a (medium, unit) pair.

        Raises:
            UnknownConversion: If the pair is not in the table
        """
        try:
            return self.multipliers[medium][unit]
        except KeyError:
            raise UnknownConversion(medium, unit, self.version) from None

    def __contains__(self, pair) -> bool:
        medium, unit = pair
        return unit in self.multipliers.get(medium, {})

    def pairs(self) -> list[tuple[str, str]]:
        """All (medium, unit) pairs in sorted order."""
        return sorted(
            (medium, unit)
            for medium, units in self.multipliers.items()
            for unit in units
        )


DEFAULT_CONVERSION_TABLE = ConversionTable.from_dict(CONVERSION_TABLE, version=CONVERSION_TABLE_VERSION)


def normalize_entry(entry: RawEntry, table: ConversionTable = DEFAULT_CONVERSION_TABLE) -> NormalizedEntry:
    """
    Score one entry. Pure: identical input always yields an identical result.

    Raises:
        UnknownConversion: If the entry's (medium, unit) pair is not in the table
        MalformedRecord: If the score overflows to infinity
    """
    try:
        multiplier = table.multiplier(entry.medium, entry.unit)
    except UnknownConversion as e:
        raise UnknownConversion(e.medium, e.unit, e.version, record=entry.describe()) from None

    score = entry.quantity * multiplier
    if not math.isfinite(score):
        raise MalformedRecord(f"Score overflows for record {entry.describe()}: {entry.quantity!r} * {multiplier!r}")
    return NormalizedEntry(entry=entry, score=score)


def normalize_entries(
    entries: Iterable[RawEntry],
    table: ConversionTable = DEFAULT_CONVERSION_TABLE,
) -> list[NormalizedEntry]:
    """
    Score every entry, preserving input order.

    Raises:
        UnknownConversion: On the first entry whose pair is not in the table
        MalformedRecord: On the first entry whose score overflows
    """
    return [normalize_entry(entry, table) for entry in entries]
