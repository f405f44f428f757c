"""Tests for batch file loading and validation."""

import pytest

from search_scout.config import load_batch_config
from search_scout.core.batch import ReportLevel, SearchTask
from search_scout.core.errors import ConfigError

VALID_BATCH = """
name = "Bundler survey"
description = "Compare bundler configs"

[output]
format = "comparison"
compare = true

[[searches]]
name = "vite"
query = "defineConfig plugins"
max_results = 25
tags = ["bundler", "esm"]

[searches.filters]
filename = "vite.config.ts"
repository = ["vitejs/vite"]

[[searches]]
name = "webpack"
query = "module.exports entry"
"""


@pytest.fixture
def write_batch(tmp_path):
    def _write(content, name="batch.toml"):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


class TestLoadBatchConfig:
    """Tests for load_batch_config on valid files."""

    def test_valid_file(self, write_batch):
        """All sections are parsed with defaults filled in."""
        config = load_batch_config(write_batch(VALID_BATCH))

        assert config.name == "Bundler survey"
        assert config.output.format == "comparison"
        assert config.output.compare is True
        assert config.output.aggregate is False
        assert [s.name for s in config.searches] == ["vite", "webpack"]
        assert config.searches[1].max_results == 50

    def test_tasks(self, write_batch):
        """tasks() yields core SearchTasks with only the set filters."""
        vite, webpack = load_batch_config(write_batch(VALID_BATCH)).tasks()

        assert vite == SearchTask(
            name="vite",
            query="defineConfig plugins",
            max_results=25,
            filters={"filename": "vite.config.ts", "repository": ["vitejs/vite"]},
            tags=("bundler", "esm"),
        )
        assert vite.has_filters is True
        assert webpack.filters == {}
        assert webpack.has_filters is False

    def test_options(self, write_batch):
        """options() carries name, description and compare."""
        options = load_batch_config(write_batch(VALID_BATCH)).options(ReportLevel.DETAILED)
        assert options.name == "Bundler survey"
        assert options.compare is True
        assert options.report is ReportLevel.DETAILED

    def test_default_output(self, write_batch):
        """A missing [output] table uses the combined format."""
        config = load_batch_config(write_batch('[[searches]]\nname = "a"\nquery = "q"\n'))
        assert config.output.format == "combined"
        assert config.output.compare is False


class TestInvalidBatchFiles:
    """Tests for ConfigError on bad files."""

    def test_missing_file(self, tmp_path):
        """An unreadable file raises ConfigError naming it."""
        path = tmp_path / "missing.toml"
        with pytest.raises(ConfigError) as exc_info:
            load_batch_config(path)
        assert "failed to read file" in str(exc_info.value)
        assert exc_info.value.path == str(path)

    def test_invalid_toml(self, write_batch):
        """Syntax errors raise ConfigError."""
        with pytest.raises(ConfigError, match="failed to parse TOML"):
            load_batch_config(write_batch("[[searches]\nname = 1"))

    def test_no_searches(self, write_batch):
        """At least one search is required."""
        with pytest.raises(ConfigError, match="at least one search"):
            load_batch_config(write_batch('name = "empty"\n'))

    @pytest.mark.parametrize(
        "search, problem",
        [
            ('query = "q"', "searches.0.name"),
            ('name = "a"', "searches.0.query"),
            ('name = "  "\nquery = "q"', "searches.0.name"),
            ('name = "a"\nquery = "q"\nmax_results = 0', "searches.0.max_results"),
            ('name = "a"\nquery = "q"\nmax_results = 5000', "searches.0.max_results"),
            ('name = "a"\nquery = "q"\n[searches.filters]\nlanguag = "go"', "searches.0.filters"),
        ],
    )
    def test_invalid_search(self, write_batch, search, problem):
        """The error names the first offending field."""
        with pytest.raises(ConfigError) as exc_info:
            load_batch_config(write_batch(f"[[searches]]\n{search}\n"))
        assert problem in str(exc_info.value)

    def test_invalid_output_format(self, write_batch):
        """Only combined, separate and comparison formats are accepted."""
        content = '[output]\nformat = "html"\n[[searches]]\nname = "a"\nquery = "q"\n'
        with pytest.raises(ConfigError, match="output.format"):
            load_batch_config(write_batch(content))

    def test_unknown_top_level_table(self, write_batch):
        """A misspelt table is rejected rather than silently dropped."""
        content = '[ouput]\ncompare = true\n[[searches]]\nname = "a"\nquery = "q"\n'
        with pytest.raises(ConfigError, match="ouput"):
            load_batch_config(write_batch(content))

    def test_duplicate_names(self, write_batch):
        """Search names must be unique."""
        content = '[[searches]]\nname = "a"\nquery = "q"\n[[searches]]\nname = "a"\nquery = "r"\n'
        with pytest.raises(ConfigError, match="duplicate search name 'a'"):
            load_batch_config(write_batch(content))
