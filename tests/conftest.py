"""
Shared fixtures for the Tadoku Stats tests.
"""

import pytest
import requests

from tadoku_stats.scoring.normalizer import ConversionTable
from tadoku_stats.scoring.records import RawEntry


@pytest.fixture
def scenario_table():
    """Minimal scoring table: books by the page, games by the minute."""
    return ConversionTable.from_dict({"book": {"pages": 1}, "game": {"minutes": 0.5}}, version="test")


@pytest.fixture
def scenario_entries():
    return [
        RawEntry("alice", "book", "en", 100, "pages"),
        RawEntry("bob", "book", "en", 50, "pages"),
        RawEntry("alice", "game", "ja", 60, "minutes"),
    ]


# --- Contest Site Pages ---
def make_ranking_html(rows):
    """Ranking page with one row per (user_id, name, pagecount)."""
    body = "\n".join(
        f'<tr><td>{i}</td><td><img src="/avatars/{uid}.png"/></td>'
        f'<td><a href="/users/{uid}">{name}</a></td><td>{pages}</td></tr>'
        for i, (uid, name, pages) in enumerate(rows, start=1)
    )
    return f"""<html><body>
<table class="table ranking">
 <thead><tr><th></th><th></th><th>User</th><th>Pages</th></tr></thead>
 <tbody>
{body}
 </tbody>
</table>
</body></html>"""


def make_user_html(name, counts, points, series):
    """User page with a content table and a progress chart script."""
    headings = "".join(f"<th>{h}</th>" for h in counts)
    raw = "".join(f"<td>{v}</td>" for v in counts.values())
    pts = "".join(f"<td>{v}</td>" for v in points)
    chart = ", ".join(
        f'{{\n   name: "{s}",\n   pointInterval: 86400000,\n   data: [{", ".join(str(v) for v in data)}]\n  }}'
        for s, data in series.items()
    )
    return f"""<html><body>
<img class="avatar" alt="{name}" src="/avatars/{name}.png"/>
<table class="table table-bordered">
 <thead><tr><th></th>{headings}<th>Total</th></tr></thead>
 <tbody>
  <tr><td>Raw</td>{raw}<td></td></tr>
  <tr><td>Points</td>{pts}</tr>
 </tbody>
</table>
<script>var unrelated = 1;</script>
<script>
$(function () {{ $('#progress_chart').highcharts({{
  series: [{chart}]
}}); }});
</script>
</body></html>"""


@pytest.fixture
def ranking_html():
    return make_ranking_html([
        ("801", "shenmedemo", "638.9"),
        ("42", "yomu", "12.0"),
        ("7", "idle", "0.0"),
    ])


@pytest.fixture
def user_html():
    return make_user_html(
        "shenmedemo",
        {"Book": 91.0, "Manga": 120.0, "Fullgame": 30.0},
        [91.0, 24.0, 15.0, 130.0],
        {"Overall": [100.0, 0, 30.0], "jp": [90.0, 0, 30.0], "en": [10.0, 0, 0]},
    )


@pytest.fixture
def second_user_html():
    return make_user_html(
        "yomu",
        {"Book": 12.0},
        [12.0, 12.0],
        {"Overall": [12.0], "en": [12.0]},
    )


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """requests.Session stand-in serving canned pages by URL."""

    def __init__(self, pages):
        self.pages = pages
        self.headers = {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            return FakeResponse("Not Found", status_code=404)
        return FakeResponse(page)


@pytest.fixture
def fake_session():
    """Factory: fake_session({url: html_or_exception}) -> FakeSession"""
    return FakeSession
