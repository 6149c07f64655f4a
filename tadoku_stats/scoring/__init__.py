"""
Scoring and Ranking Engine

Modules:
- records: RawEntry / NormalizedEntry / ParticipantTotal and shape errors
- normalizer: Conversion table and page-equivalent scoring
- aggregator: Per-participant, per-medium and per-language totals
- ranker: Ordered, filtered and truncated ranking tables
- pipeline: End-to-end run over one snapshot
"""

_EXPORTS = {
    "RawEntry": "tadoku_stats.scoring.records",
    "NormalizedEntry": "tadoku_stats.scoring.records",
    "ParticipantTotal": "tadoku_stats.scoring.records",
    "ScoringError": "tadoku_stats.scoring.records",
    "MalformedRecord": "tadoku_stats.scoring.records",
    "ConversionTable": "tadoku_stats.scoring.normalizer",
    "DEFAULT_CONVERSION_TABLE": "tadoku_stats.scoring.normalizer",
    "UnknownConversion": "tadoku_stats.scoring.normalizer",
    "normalize_entries": "tadoku_stats.scoring.normalizer",
    "aggregate": "tadoku_stats.scoring.aggregator",
    "RankingTable": "tadoku_stats.scoring.ranker",
    "RankingSet": "tadoku_stats.scoring.ranker",
    "build_rankings": "tadoku_stats.scoring.ranker",
    "run_rankings": "tadoku_stats.scoring.pipeline",
}


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name in _EXPORTS:
        import importlib
        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
