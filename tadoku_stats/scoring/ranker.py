"""
Ranker

Turns participant totals into the three ranking views:
- overall: everyone with a positive total, no cap
- per medium: top MEDIUM_TOP_N participants for each medium
- per language: top LANGUAGE_TOP_N participants for each language

Rows are ordered by score descending, then participant identifier
ascending, so every table has a total and reproducible order. Participants
with a zero score in a view are left out of it, and a category with no
remaining participants gets no table at all.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping

import pandas as pd

from tadoku_stats.config import LANGUAGE_TOP_N, MEDIUM_TOP_N
from tadoku_stats.scoring.records import ParticipantTotal
from tadoku_stats.utils import validate_top_n

OVERALL_VIEW = "overall"
MEDIUM_VIEW = "medium"
LANGUAGE_VIEW = "language"


@dataclass(frozen=True)
class RankingTable:
    """Ordered (participant, score) rows for one view."""

    view: str
    key: str | None
    rows: tuple[tuple[str, float], ...] = ()

    def __len__(self):
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return iter(self.rows)

    @property
    def participants(self) -> list[str]:
        return [participant for participant, _ in self.rows]

    @property
    def scores(self) -> list[float]:
        return [score for _, score in self.rows]

    @property
    def title(self) -> str:
        if self.view == OVERALL_VIEW:
            return "Overall"
        return f"{self.view.capitalize()}: {self.key}"

    def to_frame(self) -> pd.DataFrame:
        """Return the table as a DataFrame with 1-based rank positions."""
        df = pd.DataFrame(list(self.rows), columns=['participant', 'score'])
        df.insert(0, 'rank', range(1, len(df) + 1))
        return df


@dataclass(frozen=True)
class RankingSet:
    """Every table produced by one ranking run."""

    overall: RankingTable
    by_medium: dict[str, RankingTable] = field(default_factory=dict)
    by_language: dict[str, RankingTable] = field(default_factory=dict)

    def tables(self) -> Iterator[RankingTable]:
        """Yield every table in render order: overall, media, languages."""
        yield self.overall
        yield from self.by_medium.values()
        yield from self.by_language.values()


def _ranked_rows(scores: Mapping[str, float], top_n: int | None) -> tuple[tuple[str, float], ...]:
    rows = sorted(
        ((participant, score) for participant, score in scores.items() if score > 0),
        key=lambda row: (-row[1], row[0]),
    )
    if top_n is not None:
        rows = rows[:top_n]
    return tuple(rows)


def rank_overall(totals: Mapping[str, ParticipantTotal]) -> RankingTable:
    """Everyone with a positive overall score, best first."""
    scores = {participant: total.overall_score for participant, total in totals.items()}
    return RankingTable(view=OVERALL_VIEW, key=None, rows=_ranked_rows(scores, None))


def _rank_categories(
    totals: Mapping[str, ParticipantTotal],
    buckets: Callable[[ParticipantTotal], Mapping[str, float]],
    view: str,
    top_n: int | None,
) -> dict[str, RankingTable]:
    by_category: dict[str, dict[str, float]] = {}
    for participant, total in totals.items():
        for category, score in buckets(total).items():
            by_category.setdefault(category, {})[participant] = score

    tables = {}
    for category in sorted(by_category):
        rows = _ranked_rows(by_category[category], top_n)
        if rows:
            tables[category] = RankingTable(view=view, key=category, rows=rows)
    return tables


def rank_by_medium(totals: Mapping[str, ParticipantTotal], top_n: int | None = MEDIUM_TOP_N) -> dict[str, RankingTable]:
    """One table per medium with at least one positive score, keyed by medium."""
    validate_top_n(top_n, "medium_top_n")
    return _rank_categories(totals, lambda total: total.by_medium, MEDIUM_VIEW, top_n)


def rank_by_language(totals: Mapping[str, ParticipantTotal], top_n: int | None = LANGUAGE_TOP_N) -> dict[str, RankingTable]:
    """One table per language with at least one positive score, keyed by language."""
    validate_top_n(top_n, "language_top_n")
    return _rank_categories(totals, lambda total: total.by_language, LANGUAGE_VIEW, top_n)


def build_rankings(
    totals: Mapping[str, ParticipantTotal],
    medium_top_n: int | None = MEDIUM_TOP_N,
    language_top_n: int | None = LANGUAGE_TOP_N,
) -> RankingSet:
    """Produce the overall, per-medium and per-language tables."""
    return RankingSet(
        overall=rank_overall(totals),
        by_medium=rank_by_medium(totals, medium_top_n),
        by_language=rank_by_language(totals, language_top_n),
    )
