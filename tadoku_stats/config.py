"""
Central configuration for Tadoku Stats.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
OUTPUT_FOLDER = DATA_FOLDER / "snapshots"

# --- Contest Site ---
BASE_URL = "http://readmod.com"
RANKING_PATH = "/ranking"
USER_PATH = "/users/{user_id}"
REQUEST_TIMEOUT = 30  # seconds, per request
USER_AGENT = "tadoku-stats/1.0"

# --- Snapshot Files ---
SNAPSHOT_PREFIX = "tadoku_snapshot"
SNAPSHOT_PATTERN = f"{SNAPSHOT_PREFIX}_*"
SNAPSHOT_COLUMNS = ("participant", "medium", "language", "quantity", "unit")

# --- Ranking Views ---
MEDIUM_TOP_N = 3  # Per-medium tables keep the podium only
LANGUAGE_TOP_N = 10

# --- Media and Units ---
# Open set: anything else is folded into OTHER_MEDIUM
KNOWN_MEDIA = frozenset({"book", "manga", "game", "anime", "drama", "other"})
OTHER_MEDIUM = "other"
KNOWN_UNITS = frozenset({"pages", "characters", "minutes", "episodes"})

# Language used for scraped users without any per-language series
DEFAULT_LANGUAGE = "jp"

# Content-tab headings on a user page -> (medium, unit)
CATEGORY_MAP = {
    "book": ("book", "pages"),
    "manga": ("manga", "pages"),
    "fullgame": ("game", "minutes"),
    "game": ("game", "minutes"),
    "net": ("other", "pages"),
    "news": ("other", "pages"),
    "nhk easy": ("other", "pages"),
    "lyric": ("other", "pages"),
    "sentences": ("other", "characters"),
    "subs": ("drama", "minutes"),
}
UNMAPPED_CATEGORY = (OTHER_MEDIUM, "pages")

# --- Scoring Table ---
# Page-equivalents per native unit. Contest policy: bump the version
# whenever a multiplier changes so old snapshots can be re-ranked with
# the table they were scored under.
CONVERSION_TABLE_VERSION = "2017.10"
CONVERSION_TABLE = {
    "book": {"pages": 1.0, "characters": 0.0025},
    "manga": {"pages": 0.2},
    "game": {"minutes": 0.5, "characters": 0.0025},
    "anime": {"episodes": 4.0, "minutes": 0.2},
    "drama": {"episodes": 9.0, "minutes": 0.2},
    "other": {"pages": 1.0, "characters": 0.0025, "minutes": 0.2},
}

# --- Input Validation ---
MAX_INPUT_SIZE = 2_000_000  # Maximum HTML page size in bytes (~2MB)
