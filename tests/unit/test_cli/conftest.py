"""Shared fixtures for CLI command tests."""

import logging
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

BATCH_FILE = """
name = "Bundler survey"
description = "Compare bundler configs"

[output]
format = "comparison"
directory = "out"
compare = true

[[searches]]
name = "vite"
query = "defineConfig"
tags = ["bundler", "esm"]

[[searches]]
name = "webpack"
query = "module exports entry plugins*"
max_results = 200

[searches.filters]
language = "javascript"
repository = ["webpack/webpack", "vercel/next.js"]

[[searches]]
name = "rollup"
query = "rollup"
"""


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config files and SEARCH_SCOUT_* variables out of CLI runs."""
    home = tmp_path / "home"
    home.mkdir()
    for name in list(os.environ):
        if name.startswith("SEARCH_SCOUT_") or name == "XDG_CONFIG_HOME":
            monkeypatch.delenv(name)
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture(autouse=True)
def restore_package_logger():
    """The CLI attaches a handler to the runner's stderr; drop it afterwards."""
    package_logger = logging.getLogger("search_scout")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)


@pytest.fixture
def batch_file(tmp_path):
    path = tmp_path / "batch.toml"
    path.write_text(BATCH_FILE)
    return path
