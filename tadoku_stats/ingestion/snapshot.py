"""
Snapshot Files

Lossless on-disk storage for a sequence of RawEntry values. Two formats
are supported, chosen by file suffix:
- .csv: one row per entry, written with pandas
- .json: a list of objects, one per entry

Reading a snapshot back reproduces the same entries in the same order.

Usage:
    from tadoku_stats.ingestion.snapshot import write_snapshot, read_snapshot
    write_snapshot(entries, snapshot_path())
    entries = read_snapshot(latest_snapshot())
"""

import csv
import json
from datetime import date
from pathlib import Path
from typing import Iterable

import pandas as pd

from tadoku_stats.config import OUTPUT_FOLDER, SNAPSHOT_COLUMNS, SNAPSHOT_PATTERN, SNAPSHOT_PREFIX
from tadoku_stats.ingestion.errors import SnapshotError
from tadoku_stats.scoring.records import MalformedRecord, RawEntry
from tadoku_stats.utils import atomic_write_csv, atomic_write_text, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json")
TEXT_COLUMNS = [col for col in SNAPSHOT_COLUMNS if col != "quantity"]


def entries_to_frame(entries: Iterable[RawEntry]) -> pd.DataFrame:
    """Build a DataFrame with one row per entry in canonical column order."""
    return pd.DataFrame([entry.to_dict() for entry in entries], columns=list(SNAPSHOT_COLUMNS))


def frame_to_entries(df: pd.DataFrame) -> list[RawEntry]:
    """
    Rebuild RawEntry values from a snapshot DataFrame.

    Raises:
        SnapshotError: If a column is missing or a row is malformed
    """
    missing = [col for col in SNAPSHOT_COLUMNS if col not in df.columns]
    if missing:
        raise SnapshotError(f"Snapshot is missing columns: {', '.join(missing)}")

    entries = []
    for i, row in enumerate(df[list(SNAPSHOT_COLUMNS)].to_dict('records')):
        try:
            entries.append(RawEntry.from_mapping(row))
        except MalformedRecord as e:
            raise SnapshotError(f"Row {i}: {e}") from e
    return entries


def _check_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SnapshotError(
            f"Unsupported snapshot format: '{path.suffix}'. "
            f"Supported: {', '.join(SUPPORTED_SUFFIXES)}"
        )
    return suffix


def write_snapshot(entries: Iterable[RawEntry], path: Path) -> Path:
    """
    Write entries to path atomically, in the format given by its suffix.

    Returns:
        The path written

    Raises:
        SnapshotError: If the suffix is not supported
    """
    path = Path(path)
    suffix = _check_suffix(path)
    entries = list(entries)

    if suffix == ".csv":
        # Quote text fields so embedded line breaks survive the round trip
        atomic_write_csv(entries_to_frame(entries), path, index=False, quoting=csv.QUOTE_NONNUMERIC)
    else:
        text = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False, indent=1)
        atomic_write_text(text, path)

    logger.info(f"Wrote {len(entries)} entries to {path}")
    return path


def read_snapshot(path: Path) -> list[RawEntry]:
    """
    Read entries back from a snapshot written by write_snapshot.

    Raises:
        SnapshotError: If the file cannot be read or holds malformed data
    """
    path = Path(path)
    suffix = _check_suffix(path)

    try:
        if suffix == ".csv":
            # Keep every text field verbatim ("na", "null" are valid names)
            # and read floats back bit-exact.
            df = pd.read_csv(
                path,
                dtype={col: str for col in TEXT_COLUMNS},
                keep_default_na=False,
                na_values=[],
                float_precision="round_trip",
            )
            entries = frame_to_entries(df)
        else:
            with open(path, encoding="utf-8") as f:
                rows = json.load(f)
            if not isinstance(rows, list):
                raise SnapshotError(f"Snapshot {path} must hold a JSON list, got {type(rows).__name__}")
            entries = []
            for i, row in enumerate(rows):
                if not isinstance(row, dict):
                    raise SnapshotError(f"Row {i}: expected an object, got {type(row).__name__}")
                try:
                    entries.append(RawEntry.from_mapping(row))
                except MalformedRecord as e:
                    raise SnapshotError(f"Row {i}: {e}") from e
    except (OSError, ValueError) as e:
        raise SnapshotError(f"Could not read snapshot {path}: {e}") from e

    logger.info(f"Loaded {len(entries)} entries from {path}")
    return entries


def snapshot_path(folder: Path | None = None, stamp: date | None = None, suffix: str = ".csv") -> Path:
    """Default snapshot location, e.g. data/snapshots/tadoku_snapshot_20171031.csv"""
    stamp = stamp or date.today()
    return (folder or OUTPUT_FOLDER) / f"{SNAPSHOT_PREFIX}_{stamp.strftime('%Y%m%d')}{suffix}"


def latest_snapshot(folder: Path | None = None) -> Path | None:
    """Most recent snapshot in folder by file name, or None if there is none."""
    target_folder = folder or OUTPUT_FOLDER
    files = sorted(
        f for f in target_folder.glob(SNAPSHOT_PATTERN)
        if f.suffix.lower() in SUPPORTED_SUFFIXES
    )
    if not files:
        return None
    return files[-1]
