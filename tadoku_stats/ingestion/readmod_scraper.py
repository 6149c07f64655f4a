"""
Contest Site Scraper

This module fetches the tadoku contest ranking page and per-user pages and
converts them into RawEntry records for the scoring engine.

The ranking page lists every registered user; only users with a non-zero
page count are fetched. Each user page carries:
- the raw count per category in its content table
- the total point value
- the per-language daily series in the progress chart script

Usage:
    from tadoku_stats.ingestion.readmod_scraper import ReadmodScraper
    entries = ReadmodScraper().fetch_entries()
"""

from dataclasses import dataclass, field

import requests
from bs4 import BeautifulSoup

from tadoku_stats.config import (
    BASE_URL,
    CATEGORY_MAP,
    DEFAULT_LANGUAGE,
    MAX_INPUT_SIZE,
    RANKING_PATH,
    REQUEST_TIMEOUT,
    UNMAPPED_CATEGORY,
    USER_AGENT,
    USER_PATH,
)
from tadoku_stats.ingestion.errors import FetchError, ParseError
from tadoku_stats.scoring.records import RawEntry
from tadoku_stats.utils import (
    SERIES_DATA_RE,
    SERIES_NAME_RE,
    clean_text,
    setup_logging,
    validate_input_size,
)

# --- Module Logger ---
logger = setup_logging(__name__)

OVERALL_SERIES = "Overall"


@dataclass
class UserInfo:
    """Everything scraped from one user page."""

    name: str
    countmap: dict[str, float] = field(default_factory=dict)
    seriesmap: dict[str, list[float]] = field(default_factory=dict)
    totalpoints: float = 0.0

    def primary_language(self) -> str | None:
        """Language series with the largest total (ties: alphabetical)."""
        languages = {k: sum(v) for k, v in self.seriesmap.items() if k != OVERALL_SERIES}
        if not languages:
            return None
        return min(languages, key=lambda lang: (-languages[lang], lang))


def _parse_float(text: str, what: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ParseError(f"Could not parse {what}: {text!r}") from None


def _soup(html: str) -> BeautifulSoup:
    try:
        validate_input_size(html, MAX_INPUT_SIZE)
    except ValueError as e:
        raise ParseError(str(e)) from None
    return BeautifulSoup(html, "html.parser")


def parse_mainpage(html: str) -> list[str]:
    """
    Parse the ranking page into the list of user IDs worth fetching.

    The relevant part of the page looks like:
        <table class="table ranking">
         <tbody>
          <tr>
           <td>1</td><td><img .../></td>
           <td><a href="/users/801">username</a></td>
           <td>638.9</td>
          </tr>
          ...

    Users whose page count is zero are skipped.

    Raises:
        ParseError: If the ranking table is missing or a row is malformed
    """
    soup = _soup(html)
    tbody = soup.select_one(".ranking tbody")
    if tbody is None:
        raise ParseError("Ranking table not found")

    users = []
    for tr in tbody.find_all("tr"):
        link = tr.find("a", href=True)
        cells = tr.find_all("td")
        if link is None or len(cells) < 4:
            raise ParseError(f"Unexpected ranking row: {clean_text(tr.get_text(' '))!r}")

        user_id = link["href"].rstrip("/").split("/")[-1]
        pagecount = _parse_float(clean_text(cells[3].get_text()), f"page count for user {user_id}")
        if pagecount != 0:
            users.append(user_id)

    logger.debug(f"Ranking page lists {len(users)} active users")
    return users


def _parse_series(script: str) -> dict[str, list[float]]:
    # One series for "Overall" and one per language, in the same order
    # as their data arrays.
    names = SERIES_NAME_RE.findall(script)
    arrays = [
        [_parse_float(v.strip(), "series value") for v in raw.split(",") if v.strip()]
        for raw in SERIES_DATA_RE.findall(script)
    ]
    if len(names) != len(arrays):
        raise ParseError(f"Progress chart has {len(names)} series names but {len(arrays)} data arrays")
    return dict(zip(names, arrays))


def parse_userpage(html: str) -> UserInfo:
    """
    Parse a user page.

    Raises:
        ParseError: If the avatar, content table or progress chart is missing
    """
    soup = _soup(html)

    avatar = soup.select_one("img.avatar")
    if avatar is None or not avatar.get("alt"):
        raise ParseError("User name (avatar alt text) not found")
    name = clean_text(avatar["alt"])

    table = soup.select_one("table.table-bordered")
    if table is None or table.thead is None or table.tbody is None:
        raise ParseError(f"Content table not found for user {name!r}")

    # First <th> is empty and the last one is "Total"
    headings = [clean_text(th.get_text()) for th in table.thead.find_all("th")][1:]
    headings = [h for h in headings if h != "Total"]

    rows = table.tbody.find_all("tr")
    if len(rows) < 2:
        raise ParseError(f"Content table for user {name!r} has {len(rows)} rows, expected 2")

    # First row: raw counts; second row: points, with the total in the last cell
    raw_cells = [clean_text(td.get_text()) for td in rows[0].find_all("td")][1:]
    rawcounts = [_parse_float(c, f"count for user {name!r}") for c in raw_cells if c]
    if len(rawcounts) != len(headings):
        raise ParseError(
            f"User {name!r}: {len(headings)} categories but {len(rawcounts)} counts"
        )

    total_cells = rows[1].find_all("td")
    if not total_cells:
        raise ParseError(f"Total points row is empty for user {name!r}")
    totalpoints = _parse_float(clean_text(total_cells[-1].get_text()), f"total points for user {name!r}")

    script = next(
        (s.get_text() for s in soup.find_all("script") if "progress_chart" in s.get_text()),
        None,
    )
    if script is None:
        raise ParseError(f"Progress chart not found for user {name!r}")

    return UserInfo(
        name=name,
        countmap=dict(zip(headings, rawcounts)),
        seriesmap=_parse_series(script),
        totalpoints=totalpoints,
    )


def user_entries(user: UserInfo, language: str | None = None) -> list[RawEntry]:
    """
    Convert a user's category counts into RawEntry records.

    Categories are mapped through CATEGORY_MAP; unknown ones count as
    other/pages. The language defaults to the user's primary language.
    """
    language = language or user.primary_language() or DEFAULT_LANGUAGE
    entries = []
    for heading, count in user.countmap.items():
        medium, unit = CATEGORY_MAP.get(heading.lower(), UNMAPPED_CATEGORY)
        entries.append(RawEntry(
            participant=user.name,
            medium=medium,
            language=language,
            quantity=count,
            unit=unit,
        ))
    return entries


class ReadmodScraper:
    """
    Sequential scraper for the contest site.

    Attributes:
        base_url: Site root, e.g. "http://readmod.com"
        session: requests-compatible session used for every request
        timeout: Per-request timeout in seconds
    """

    def __init__(self, base_url: str = BASE_URL, session=None, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch_url(self, url: str) -> str:
        """
        Fetch a page and return its text.

        Raises:
            FetchError: On any transport error or non-2xx status
        """
        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request failed for {url}: {e}") from e
        return response.text

    def fetch_user_ids(self) -> list[str]:
        return parse_mainpage(self.fetch_url(self.base_url + RANKING_PATH))

    def fetch_user(self, user_id: str) -> UserInfo:
        return parse_userpage(self.fetch_url(self.base_url + USER_PATH.format(user_id=user_id)))

    def fetch_entries(self) -> list[RawEntry]:
        """
        Fetch every active user and return their entries in ranking-page order.

        Raises:
            FetchError: If any page cannot be retrieved
            ParseError: If any page cannot be parsed
        """
        user_ids = self.fetch_user_ids()
        logger.info(f"Found {len(user_ids)} active users on {self.base_url}")

        entries = []
        for i, user_id in enumerate(user_ids, start=1):
            user = self.fetch_user(user_id)
            entries.extend(user_entries(user))
            logger.debug(f"  [{i}/{len(user_ids)}] {user.name}: {user.totalpoints} points")

        logger.info(f"Fetched {len(entries)} entries from {len(user_ids)} users")
        return entries
