"""Unit tests for the search-scout plan command."""

import json
import logging

import pytest

from search_scout.cli.main import cli


class TestPlanText:
    """Tests for the human-readable plan."""

    def test_lists_searches_and_pauses(self, cli_runner, batch_file):
        """Each search is shown with its complexity and the pause after it."""
        result = cli_runner.invoke(cli, ["plan", str(batch_file)])

        assert result.exit_code == 0, result.output
        assert f"Would execute batch search from: {batch_file}" in result.output
        assert "Name: Bundler survey" in result.output
        assert "Output format: comparison" in result.output
        assert "Output directory: out" in result.output
        assert "  1. vite" in result.output
        assert "     Tags: bundler, esm" in result.output
        assert "     Complexity: low (pause 0.50s)" in result.output
        assert "     repository: webpack/webpack, vercel/next.js" in result.output
        assert "     Complexity: high (pause 2.00s)" in result.output
        assert "     Complexity: low (last search, no pause)" in result.output
        assert "Total scheduled pause: 2.50s" in result.output
        assert "Would generate comparison analysis between searches" in result.output

    def test_invalid_batch_file(self, cli_runner, tmp_path):
        """Validation errors are reported on stderr with exit code 1."""
        path = tmp_path / "bad.toml"
        path.write_text('[[searches]]\nname = "a"\n')

        result = cli_runner.invoke(cli, ["plan", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "searches.0.query" in result.output


class TestPlanJson:
    """Tests for the --json envelope."""

    def test_success_envelope(self, cli_runner, batch_file):
        """The plan is returned under data."""
        result = cli_runner.invoke(cli, ["plan", str(batch_file), "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["success"] is True
        assert payload["error"] is None
        data = payload["data"]
        assert [s["name"] for s in data["searches"]] == ["vite", "webpack", "rollup"]
        assert [s["pause_after"] for s in data["searches"]] == [0.5, 2.0, 0.0]
        assert data["searches"][1]["filters"] == {
            "language": "javascript",
            "repository": ["webpack/webpack", "vercel/next.js"],
        }
        assert data["total_pause"] == pytest.approx(2.5)
        assert data["output"]["compare"] is True

    def test_missing_file_envelope(self, cli_runner, tmp_path):
        """A missing batch file yields a CONFIG_ERROR envelope."""
        path = tmp_path / "missing.toml"

        result = cli_runner.invoke(cli, ["plan", str(path), "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["success"] is False
        assert payload["data"]["error_code"] == "CONFIG_ERROR"
        assert payload["data"]["details"] == {"path": str(path)}
        assert "remediation" in payload["data"]
        assert "failed to read file" in payload["error"]


class TestGlobalOptions:
    """Tests for options on the command group."""

    def test_config_overrides_scheduler_delays(self, cli_runner, batch_file, tmp_path):
        """--config settings change the scheduled pauses."""
        settings = tmp_path / "settings.toml"
        settings.write_text("[scheduler]\nlow_delay = 0.1\nhigh_delay = 5.0\n")

        result = cli_runner.invoke(cli, ["--config", str(settings), "plan", str(batch_file), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert [s["pause_after"] for s in data["searches"]] == [0.1, 5.0, 0.0]

    def test_project_config_is_discovered(self, cli_runner, batch_file, tmp_path):
        """A search-scout.toml in the working directory is applied."""
        (tmp_path / "search-scout.toml").write_text("[scheduler]\nlow_delay = 0.0\n")

        result = cli_runner.invoke(cli, ["plan", str(batch_file), "--json"])

        data = json.loads(result.output)["data"]
        assert data["searches"][0]["pause_after"] == 0.0

    def test_log_level_option(self, cli_runner, batch_file):
        """--log-level sets the package logger level."""
        result = cli_runner.invoke(cli, ["--log-level", "debug", "plan", str(batch_file), "--json"])

        assert result.exit_code == 0
        assert logging.getLogger("search_scout").level == logging.DEBUG

    def test_version(self, cli_runner):
        """--version prints the package version."""
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "search-scout" in result.output
