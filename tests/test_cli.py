"""
Tests for the command line driver.
"""

import pytest

from tadoku_stats import cli
from tadoku_stats.ingestion import readmod_scraper, snapshot
from tadoku_stats.ingestion.errors import FetchError
from tadoku_stats.ingestion.snapshot import read_snapshot, write_snapshot
from tadoku_stats.scoring.records import RawEntry


class TestRankCommand:
    """Tests for `tadoku-stats rank`."""

    def test_prints_tables(self, tmp_path, scenario_entries, capsys):
        path = write_snapshot(scenario_entries, tmp_path / "snap.csv")

        assert cli.main(["rank", str(path)]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Overall\n")
        assert "alice" in out and "130.0" in out
        assert "Medium: game" in out
        assert "Language: ja" in out

    def test_unknown_conversion_fails(self, tmp_path, scenario_entries, capsys, caplog):
        entries = scenario_entries + [RawEntry("carol", "boardgame", "en", 3, "sessions")]
        path = write_snapshot(entries, tmp_path / "snap.json")

        assert cli.main(["rank", str(path)]) == 1
        assert capsys.readouterr().out == ""
        assert "carol" in caplog.text

    def test_latest_snapshot_used(self, tmp_path, monkeypatch, scenario_entries, capsys):
        monkeypatch.setattr(snapshot, "OUTPUT_FOLDER", tmp_path)
        write_snapshot(scenario_entries, tmp_path / "tadoku_snapshot_20171031.csv")

        assert cli.main(["rank"]) == 0
        assert "alice" in capsys.readouterr().out

    def test_no_snapshot(self, tmp_path, monkeypatch):
        monkeypatch.setattr(snapshot, "OUTPUT_FOLDER", tmp_path)
        assert cli.main(["rank"]) == 1

    def test_unreadable_snapshot(self, tmp_path):
        assert cli.main(["rank", str(tmp_path / "missing.csv")]) == 1

    def test_caps(self):
        args = cli.build_parser().parse_args(["rank", "--medium-top", "0", "--language-top", "5"])
        assert args.medium_top is None
        assert args.language_top == 5

    def test_negative_cap_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["rank", "--medium-top", "-1"])

    def test_negative_precision_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["rank", "--precision", "-1"])

    def test_zero_precision(self, tmp_path, scenario_entries, capsys):
        path = write_snapshot(scenario_entries, tmp_path / "snap.csv")

        assert cli.main(["rank", str(path), "--precision", "0"]) == 0
        out = capsys.readouterr().out
        assert "130" in out and "130.0" not in out


class FakeScraper:
    entries = [RawEntry("amy", "book", "en", 5, "pages")]
    error = None

    def __init__(self, base_url):
        self.base_url = base_url

    def fetch_entries(self):
        if self.error:
            raise self.error
        return list(self.entries)


class TestFetchCommand:
    """Tests for `tadoku-stats fetch`."""

    def test_writes_snapshot(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(readmod_scraper, "ReadmodScraper", FakeScraper)
        out_path = tmp_path / "snap.json"

        assert cli.main(["fetch", "--output", str(out_path), "--base-url", "http://contest.test"]) == 0

        assert read_snapshot(out_path) == FakeScraper.entries
        assert capsys.readouterr().out.strip() == str(out_path)

    def test_fetch_error(self, tmp_path, monkeypatch):
        monkeypatch.setattr(readmod_scraper, "ReadmodScraper", FakeScraper)
        monkeypatch.setattr(FakeScraper, "error", FetchError("boom"))

        assert cli.main(["fetch", "--output", str(tmp_path / "snap.csv")]) == 1
        assert not (tmp_path / "snap.csv").exists()
