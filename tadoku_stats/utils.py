"""
Shared utilities for Tadoku Stats.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import re
import shutil
import tempfile
from pathlib import Path

# --- Shared Regex Patterns for User Page Parsing ---
# Series name inside the progress chart script: name: "jp"
SERIES_NAME_RE = re.compile(r'name:\s*"([^"]*)"')

# Series data array: data: [294.2, 0, 8.0]
SERIES_DATA_RE = re.compile(r"data:\s*\[([^\]]*)\]")

# Collapse runs of whitespace (including non-breaking spaces) in cell text
WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Collapse internal whitespace and strip leading/trailing spaces."""
    return WHITESPACE_RE.sub(" ", text).strip()


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- File Operations ---
def _atomic_write(path: Path, suffix: str, write) -> None:
    """Run write(tmp_name) against a temp file beside path, then move it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix=suffix,
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp_path = Path(tmp.name)
        write(tmp_path)

        shutil.move(str(tmp_path), str(path))

    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    This prevents a half-written snapshot if the write is interrupted.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)
    _atomic_write(path, '.csv', lambda tmp: df.to_csv(tmp, **kwargs))
    logger.debug(f"Atomically wrote {len(df)} rows to {path}")


def atomic_write_text(text: str, path: Path) -> None:
    """Write UTF-8 text to path atomically."""
    logger = setup_logging(__name__)
    _atomic_write(path, path.suffix or '.tmp', lambda tmp: tmp.write_text(text, encoding='utf-8'))
    logger.debug(f"Atomically wrote {len(text)} characters to {path}")


# --- Validation ---
def validate_input_size(text: str, max_size: int) -> None:
    """
    Validate that input text does not exceed maximum size.

    Args:
        text: Input text to validate
        max_size: Maximum allowed size in bytes

    Raises:
        ValueError: If input exceeds max_size
    """
    if len(text) > max_size:
        raise ValueError(
            f"Input too large: {len(text):,} bytes. "
            f"Maximum allowed: {max_size:,} bytes"
        )


def validate_top_n(top_n: int | None, label: str) -> None:
    """
    Validate a table length cap.

    Raises:
        ValueError: If top_n is neither None nor a positive integer
    """
    if top_n is None:
        return
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise ValueError(f"Invalid {label}: {top_n!r}. Expected a positive integer or None")


__all__ = [
    # Logging
    'setup_logging',
    # File operations
    'atomic_write_csv',
    'atomic_write_text',
    # Validation
    'validate_input_size',
    'validate_top_n',
    # User page parsing
    'SERIES_NAME_RE',
    'SERIES_DATA_RE',
    'WHITESPACE_RE',
    'clean_text',
]
