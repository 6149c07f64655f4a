"""
Command Line Driver

Usage:
    tadoku-stats fetch [--output PATH] [--base-url URL]
    tadoku-stats rank [SNAPSHOT] [--medium-top N] [--language-top N] [--precision P]
    OR
    python -m tadoku_stats ...
"""

import argparse
import sys
from pathlib import Path

from tadoku_stats.config import BASE_URL, LANGUAGE_TOP_N, MEDIUM_TOP_N
from tadoku_stats.ingestion.errors import IngestionError
from tadoku_stats.ingestion.snapshot import latest_snapshot, read_snapshot, snapshot_path, write_snapshot
from tadoku_stats.render import format_rankings
from tadoku_stats.scoring.pipeline import run_rankings
from tadoku_stats.scoring.records import ScoringError
from tadoku_stats.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def _top_n(value: str) -> int | None:
    """argparse type: positive int, or 0 for no cap."""
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n or None


def _precision(value: str) -> int:
    """argparse type: number of decimal places, 0 or more."""
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tadoku-stats",
        description="Fetch tadoku contest results and print ranking tables",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Scrape the contest site and save a snapshot")
    fetch.add_argument('--output', type=Path, default=None,
                       help="Snapshot path (.csv or .json); default: dated file in data/snapshots")
    fetch.add_argument('--base-url', default=BASE_URL, help=f"Contest site root (default: {BASE_URL})")

    rank = subparsers.add_parser("rank", help="Rank a snapshot and print the tables")
    rank.add_argument('snapshot', nargs='?', type=Path, default=None,
                      help="Snapshot to rank; default: the latest one in data/snapshots")
    rank.add_argument('--medium-top', type=_top_n, default=MEDIUM_TOP_N,
                      help=f"Rows per medium table, 0 for all (default: {MEDIUM_TOP_N})")
    rank.add_argument('--language-top', type=_top_n, default=LANGUAGE_TOP_N,
                      help=f"Rows per language table, 0 for all (default: {LANGUAGE_TOP_N})")
    rank.add_argument('--precision', type=_precision, default=1, help="Decimal places for scores (default: 1)")

    return parser


def cmd_fetch(args) -> int:
    from tadoku_stats.ingestion.readmod_scraper import ReadmodScraper

    entries = ReadmodScraper(base_url=args.base_url).fetch_entries()
    path = write_snapshot(entries, args.output or snapshot_path())
    print(path)
    return 0


def cmd_rank(args) -> int:
    path = args.snapshot or latest_snapshot()
    if path is None:
        logger.error("No snapshot found. Run 'tadoku-stats fetch' first or pass a snapshot path.")
        return 1

    entries = read_snapshot(path)
    rankings = run_rankings(entries, medium_top_n=args.medium_top, language_top_n=args.language_top)
    sys.stdout.write(format_rankings(rankings, precision=args.precision))
    return 0


COMMANDS = {
    "fetch": cmd_fetch,
    "rank": cmd_rank,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except ScoringError as e:
        logger.error(f"Scoring failed: {e}")
        return 1
    except IngestionError as e:
        logger.error(f"Ingestion failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
