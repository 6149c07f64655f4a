"""
Record Model

Canonical representations of contest data as it flows through scoring:
- RawEntry: one participant's submission for one medium
- NormalizedEntry: a RawEntry plus its page-equivalent score
- ParticipantTotal: per-participant aggregate for one ranking run

RawEntry validates shape on construction. Whether a (medium, unit) pair can
be scored is decided later by the Normalizer.
"""

import math
from dataclasses import dataclass, field

from tadoku_stats.config import KNOWN_MEDIA, OTHER_MEDIUM, SNAPSHOT_COLUMNS


class ScoringError(Exception):
    """Base exception for errors that abort a ranking run"""
    pass


class MalformedRecord(ScoringError, ValueError):
    """Raised when a record does not have a valid shape"""
    pass


def _text_field(name: str, value, lower: bool = True) -> str:
    if not isinstance(value, str):
        raise MalformedRecord(f"{name} must be a string, got {type(value).__name__}")
    value = value.strip()
    if not value:
        raise MalformedRecord(f"{name} must not be empty")
    return value.lower() if lower else value


def _quantity_field(value) -> float:
    if isinstance(value, bool):
        raise MalformedRecord(f"quantity must be a number, got {value!r}")
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        raise MalformedRecord(f"quantity must be a number, got {value!r}") from None
    if not math.isfinite(quantity):
        raise MalformedRecord(f"quantity must be finite, got {value!r}")
    if quantity < 0:
        raise MalformedRecord(f"quantity must be non-negative, got {value!r}")
    return quantity


@dataclass(frozen=True)
class RawEntry:
    """One participant's contribution for one medium in a contest period."""

    participant: str
    medium: str
    language: str
    quantity: float
    unit: str
    # Medium as given when it was folded into "other"; diagnostics only
    source_medium: str | None = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        try:
            participant = _text_field("participant", self.participant, lower=False)
            medium = _text_field("medium", self.medium)
            language = _text_field("language", self.language)
            unit = _text_field("unit", self.unit)
            quantity = _quantity_field(self.quantity)
        except MalformedRecord as e:
            raise MalformedRecord(f"Malformed record {self.describe()}: {e}") from None

        if medium not in KNOWN_MEDIA:
            object.__setattr__(self, "source_medium", medium)
            medium = OTHER_MEDIUM

        # Frozen dataclass: normalized values have to go through object.__setattr__
        object.__setattr__(self, "participant", participant)
        object.__setattr__(self, "medium", medium)
        object.__setattr__(self, "language", language)
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "unit", unit)

    def describe(self) -> str:
        """One-line summary of the fields, for error messages."""
        medium = repr(self.medium)
        if self.source_medium:
            medium += f" (given as {self.source_medium!r})"
        return (
            f"(participant={self.participant!r}, medium={medium}, "
            f"language={self.language!r}, quantity={self.quantity!r}, unit={self.unit!r})"
        )

    @classmethod
    def from_mapping(cls, row) -> "RawEntry":
        """
        Build an entry from a dict-like row keyed by field name.

        Raises:
            MalformedRecord: If a field is missing or invalid
        """
        missing = [col for col in SNAPSHOT_COLUMNS if col not in row]
        if missing:
            raise MalformedRecord(f"Record is missing fields: {', '.join(missing)}")
        return cls(**{col: row[col] for col in SNAPSHOT_COLUMNS})

    def to_dict(self) -> dict:
        """Return the entry's fields in canonical column order."""
        return {col: getattr(self, col) for col in SNAPSHOT_COLUMNS}


@dataclass(frozen=True)
class NormalizedEntry:
    """A RawEntry together with its score in page-equivalents."""

    entry: RawEntry
    score: float

    @property
    def participant(self) -> str:
        return self.entry.participant

    @property
    def medium(self) -> str:
        return self.entry.medium

    @property
    def language(self) -> str:
        return self.entry.language


@dataclass
class ParticipantTotal:
    """Aggregated scores for one participant, rebuilt on every run."""

    participant: str
    overall_score: float = 0.0
    by_medium: dict[str, float] = field(default_factory=dict)
    by_language: dict[str, float] = field(default_factory=dict)
