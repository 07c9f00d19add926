"""Test the command-line interface."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
import yaml
from click.testing import CliRunner

from unraidclean.api.client import APIError
from unraidclean.cli import main
from unraidclean.core.models import MediaType, Report, ReportItem
from unraidclean.report import write_json

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(temp_dir, test_config):
    path = temp_dir / "config.yaml"
    test_config.exceptions.movies.radarr_ids.append(1)
    with open(path, "w") as f:
        yaml.safe_dump(test_config.model_dump(), f, sort_keys=False)
    return path


@pytest.fixture
def report():
    return Report(
        generated_at=NOW,
        items=[
            ReportItem(
                type=MediaType.MOVIE,
                title="Heat (1995)",
                path="/data/movies/Heat (1995)",
                size_bytes=10,
                reason="never_watched",
            ),
            ReportItem(
                type=MediaType.SERIES,
                title="Lost",
                path="/data/tv/Lost",
                size_bytes=20,
                reason="watch_inactive",
            ),
        ],
    )


class TestScanCommand:
    """Test the scan command."""

    def test_writes_reports(self, runner, config_file, report, temp_dir):
        out = temp_dir / "review.json"
        csv_out = temp_dir / "review.csv"
        with patch("unraidclean.cli.run_scan", AsyncMock(return_value=report)) as run_scan:
            result = runner.invoke(
                main,
                ["--config", str(config_file), "scan", "--out", str(out), "--csv", str(csv_out),
                 "--sort", "added", "--order", "asc"],
            )

        assert result.exit_code == 0, result.output
        assert f"Wrote report to {out} (2 items)" in result.output
        assert f"Wrote CSV to {csv_out} (2 items)" in result.output
        assert len(json.loads(out.read_text())["items"]) == 2
        options = run_scan.call_args.args[1]
        assert (options.sort_by, options.sort_order) == ("added", "asc")

    def test_table(self, runner, config_file, report, temp_dir):
        with patch("unraidclean.cli.run_scan", AsyncMock(return_value=report)):
            result = runner.invoke(
                main, ["-c", str(config_file), "scan", "--out", str(temp_dir / "r.json"), "--table"]
            )

        assert result.exit_code == 0
        assert "TYPE" in result.output
        assert "Heat (1995)" in result.output

    def test_invalid_sort_rejected(self, runner, config_file):
        result = runner.invoke(main, ["-c", str(config_file), "scan", "--sort", "title"])
        assert result.exit_code != 0
        assert "title" in result.output

    def test_missing_config(self, runner, temp_dir):
        result = runner.invoke(main, ["-c", str(temp_dir / "nope.yaml"), "scan"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "does not exist" in result.output

    def test_api_failure(self, runner, config_file, temp_dir):
        failing = AsyncMock(side_effect=APIError("tautulli history: status 500: boom", 500))
        with patch("unraidclean.cli.run_scan", failing):
            result = runner.invoke(main, ["-c", str(config_file), "scan", "--out", str(temp_dir / "r.json")])

        assert result.exit_code == 1
        assert "tautulli history: status 500" in result.output
        assert not (temp_dir / "r.json").exists()


class TestSummaryCommand:
    """Test the summary command."""

    def test_counts(self, runner, report, temp_dir):
        path = temp_dir / "review.json"
        write_json(path, report)

        result = runner.invoke(main, ["summary", "--in", str(path)])

        assert result.exit_code == 0
        assert "Items: 2" in result.output
        assert "By type: movie=1, series=1" in result.output
        assert "By reason: never_watched=1, watch_inactive=1" in result.output

    def test_empty_report(self, runner, temp_dir):
        path = temp_dir / "review.json"
        write_json(path, Report(generated_at=NOW))

        result = runner.invoke(main, ["summary", "--in", str(path), "--table"])

        assert result.exit_code == 0
        assert "Items: 0" in result.output
        assert "By type" not in result.output
        assert "No items to review." in result.output

    def test_unreadable_report(self, runner, temp_dir):
        result = runner.invoke(main, ["summary", "--in", str(temp_dir / "missing.json")])

        assert result.exit_code == 1
        assert "read report" in result.output


class TestEnrichExceptionsCommand:
    """Test the enrich-exceptions command."""

    def test_updates_config(self, runner, config_file, sample_movie):
        catalogs = AsyncMock(return_value=([sample_movie], []))
        with patch("unraidclean.cli.fetch_catalogs", catalogs):
            result = runner.invoke(main, ["-c", str(config_file), "enrich-exceptions"])

        assert result.exit_code == 0, result.output
        assert "movie: The Matrix" in result.output
        assert f"Updated config: {config_file}" in result.output
        saved = yaml.safe_load(config_file.read_text())
        assert saved["exceptions"]["movies"]["titles"] == ["The Matrix"]
        assert saved["exceptions"]["movies"]["tmdb_ids"] == [603]

    def test_dry_run(self, runner, config_file, sample_movie):
        before = config_file.read_text()
        catalogs = AsyncMock(return_value=([sample_movie], []))
        with patch("unraidclean.cli.fetch_catalogs", catalogs):
            result = runner.invoke(main, ["-c", str(config_file), "enrich-exceptions", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run enabled; not writing config." in result.output
        assert config_file.read_text() == before

    def test_nothing_to_enrich(self, runner, config_file):
        with patch("unraidclean.cli.fetch_catalogs", AsyncMock(return_value=([], []))):
            result = runner.invoke(main, ["-c", str(config_file), "enrich-exceptions"])

        assert result.exit_code == 0
        assert "No exception entries to enrich." in result.output
