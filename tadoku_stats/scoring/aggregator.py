"""
Aggregator

Folds normalized entries into one ParticipantTotal per participant.
Sums are accumulated in input order so repeated runs on the same
snapshot produce bit-identical totals.
"""

import math
from typing import Iterable

from tadoku_stats.scoring.records import MalformedRecord, NormalizedEntry, ParticipantTotal


def aggregate(normalized: Iterable[NormalizedEntry]) -> dict[str, ParticipantTotal]:
    """
    Build the participant -> ParticipantTotal mapping for one run.

    Medium and language buckets are created at zero on first sight, so a
    zero-score entry still produces a bucket; filtering zeros is the
    Ranker's job. Participants with no entries are absent, not zero.

    Raises:
        MalformedRecord: If a participant's total overflows to infinity
    """
    totals: dict[str, ParticipantTotal] = {}

    for item in normalized:
        total = totals.get(item.participant)
        if total is None:
            total = totals[item.participant] = ParticipantTotal(participant=item.participant)

        total.overall_score += item.score
        # Scores are non-negative, so a finite overall total bounds every bucket
        if not math.isfinite(total.overall_score):
            raise MalformedRecord(
                f"Total for participant {item.participant!r} overflows at record {item.entry.describe()}"
            )
        total.by_medium[item.medium] = total.by_medium.get(item.medium, 0.0) + item.score
        total.by_language[item.language] = total.by_language.get(item.language, 0.0) + item.score

    return totals
