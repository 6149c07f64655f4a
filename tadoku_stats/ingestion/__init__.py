"""
Data Ingestion

Modules:
- readmod_scraper: Scrape the contest ranking and user pages
- snapshot: Write and read RawEntry snapshots (CSV / JSON)
- errors: Ingestion exception hierarchy
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "ReadmodScraper":
        from tadoku_stats.ingestion.readmod_scraper import ReadmodScraper
        return ReadmodScraper
    if name == "write_snapshot":
        from tadoku_stats.ingestion.snapshot import write_snapshot
        return write_snapshot
    if name == "read_snapshot":
        from tadoku_stats.ingestion.snapshot import read_snapshot
        return read_snapshot
    if name == "latest_snapshot":
        from tadoku_stats.ingestion.snapshot import latest_snapshot
        return latest_snapshot
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
