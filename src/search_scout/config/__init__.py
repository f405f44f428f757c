"""Configuration package for search-scout.

Sub-modules:
    parsing  – value parsing helpers that warn and reject bad input
    settings – ScoutConfig dataclass and layered TOML/env loading
    batch    – batch file models and load_batch_config
"""

from search_scout.config.batch import (
    BatchFileConfig,
    OutputConfig,
    SearchConfig,
    SearchFiltersConfig,
    load_batch_config,
)
from search_scout.config.settings import ScoutConfig

__all__ = [
    "BatchFileConfig",
    "OutputConfig",
    "SearchConfig",
    "SearchFiltersConfig",
    "load_batch_config",
    "ScoutConfig",
]
