"""
Scoring Pipeline

Runs one snapshot of contest entries through Normalizer -> Aggregator ->
Ranker. Every value is threaded explicitly from one stage to the next; no
state survives between runs.

Usage:
    from tadoku_stats.scoring import run_rankings
    rankings = run_rankings(entries)
"""

from collections.abc import Iterable, Mapping

from tadoku_stats.config import LANGUAGE_TOP_N, MEDIUM_TOP_N
from tadoku_stats.scoring.aggregator import aggregate
from tadoku_stats.scoring.normalizer import DEFAULT_CONVERSION_TABLE, ConversionTable, normalize_entries
from tadoku_stats.scoring.ranker import RankingSet, build_rankings
from tadoku_stats.scoring.records import RawEntry
from tadoku_stats.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def coerce_entries(entries: Iterable[RawEntry | Mapping]) -> list[RawEntry]:
    """
    Materialize the input, building RawEntry values from mapping rows.

    Raises:
        MalformedRecord: If a row has an invalid shape
    """
    return [entry if isinstance(entry, RawEntry) else RawEntry.from_mapping(entry) for entry in entries]


def run_rankings(
    entries: Iterable[RawEntry | Mapping],
    table: ConversionTable = DEFAULT_CONVERSION_TABLE,
    medium_top_n: int | None = MEDIUM_TOP_N,
    language_top_n: int | None = LANGUAGE_TOP_N,
) -> RankingSet:
    """
    Rank one snapshot of entries.

    Args:
        entries: RawEntry values, or dict rows with the RawEntry fields
        table: Conversion table used to score entries
        medium_top_n: Cap for per-medium tables (None = no cap)
        language_top_n: Cap for per-language tables (None = no cap)

    Returns:
        RankingSet with the overall, per-medium and per-language tables

    Raises:
        MalformedRecord: If an entry has an invalid shape
        UnknownConversion: If an entry's (medium, unit) is not in the table
    """
    raw = coerce_entries(entries)
    normalized = normalize_entries(raw, table)
    totals = aggregate(normalized)
    rankings = build_rankings(totals, medium_top_n=medium_top_n, language_top_n=language_top_n)

    logger.info(
        f"Ranked {len(raw)} entries from {len(totals)} participants "
        f"({len(rankings.by_medium)} media, {len(rankings.by_language)} languages, "
        f"table version {table.version})"
    )
    return rankings
