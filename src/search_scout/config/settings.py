"""ScoutConfig dataclass and layered configuration loading.

Retry and pacing settings come from, lowest to highest priority: built-in
defaults, the XDG config file, the home-directory file, the project file,
an explicit file, and ``SEARCH_SCOUT_*`` environment variables.

Example ``search-scout.toml``::

    [retry]
    max_retries = 5
    base_delay = 2.0

    [scheduler]
    high_delay = 3.0

    [logging]
    level = "DEBUG"
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from search_scout.config.parsing import _normalize_log_level, _parse_float, _parse_int
from search_scout.core.resilience.models import OperationComplexity, RetryPolicy
from search_scout.core.resilience.scheduling import DEFAULT_DELAYS, DelayScheduler

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "SEARCH_SCOUT_CONFIG_FILE"
PROJECT_CONFIG_NAME = "search-scout.toml"
HOME_CONFIG_NAME = ".search-scout.toml"

_DEFAULT_POLICY = RetryPolicy()

_POSITIVE = (lambda v: v > 0, "a number > 0")
_NON_NEGATIVE = (lambda v: v >= 0, "a number >= 0")

# field -> (parser, (check, expected))
_RETRY_FIELDS: Dict[str, Any] = {
    "max_retries": (_parse_int, (lambda v: v >= 0, "an integer >= 0")),
    "base_delay": (_parse_float, _POSITIVE),
    "max_delay": (_parse_float, _POSITIVE),
    "backoff_factor": (_parse_float, (lambda v: v >= 1, "a number >= 1")),
    "rate_limit_reset_cap": (_parse_float, _POSITIVE),
}

_SCHEDULER_FIELDS: Dict[str, Any] = {
    "low_delay": (_parse_float, _NON_NEGATIVE),
    "medium_delay": (_parse_float, _NON_NEGATIVE),
    "high_delay": (_parse_float, _NON_NEGATIVE),
}

_ENV_FIELDS = {
    "SEARCH_SCOUT_MAX_RETRIES": "max_retries",
    "SEARCH_SCOUT_BASE_DELAY": "base_delay",
    "SEARCH_SCOUT_MAX_DELAY": "max_delay",
    "SEARCH_SCOUT_BACKOFF_FACTOR": "backoff_factor",
    "SEARCH_SCOUT_RATE_LIMIT_RESET_CAP": "rate_limit_reset_cap",
}


@dataclass
class ScoutConfig:
    """Retry, pacing and logging settings.

    Attributes:
        max_retries: Retries after the first attempt
        base_delay: Initial backoff delay in seconds
        max_delay: Ceiling for computed backoff in seconds
        backoff_factor: Backoff multiplier per attempt
        rate_limit_reset_cap: Ceiling on an API-reported rate-limit reset
        low_delay: Pause after a low-complexity search
        medium_delay: Pause after a medium-complexity search
        high_delay: Pause after a high-complexity search
        log_level: Level name for the ``search_scout`` logger
    """

    max_retries: int = _DEFAULT_POLICY.max_retries
    base_delay: float = _DEFAULT_POLICY.base_delay
    max_delay: float = _DEFAULT_POLICY.max_delay
    backoff_factor: float = _DEFAULT_POLICY.backoff_factor
    rate_limit_reset_cap: float = _DEFAULT_POLICY.rate_limit_reset_cap
    low_delay: float = DEFAULT_DELAYS[OperationComplexity.LOW]
    medium_delay: float = DEFAULT_DELAYS[OperationComplexity.MEDIUM]
    high_delay: float = DEFAULT_DELAYS[OperationComplexity.HIGH]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ScoutConfig":
        """
        Create configuration from TOML files and environment variables.

        Priority (highest to lowest):
        1. Environment variables
        2. Explicit config file (``config_file`` or SEARCH_SCOUT_CONFIG_FILE)
        3. Project TOML config (./search-scout.toml)
        4. User TOML config (~/.search-scout.toml)
        5. XDG config (~/.config/search-scout/config.toml)
        6. Default values
        """
        config = cls()

        for path in cls.discover_config_files():
            config._load_toml(path)
            logger.debug("Loaded config from %s", path)

        explicit = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if explicit:
            config._load_toml(Path(explicit))

        config._load_env()
        return config

    @staticmethod
    def discover_config_files() -> List[Path]:
        """Existing implicit config files, lowest priority first."""
        xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        candidates = [
            Path(xdg_config_home) / "search-scout" / "config.toml",
            Path.home() / HOME_CONFIG_NAME,
            Path(PROJECT_CONFIG_NAME),
        ]
        return [path for path in candidates if path.exists()]

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config file {path}: {e}")
            return

        source = str(path)
        if isinstance(data.get("retry"), dict):
            self._apply(data["retry"], _RETRY_FIELDS, source=f"{source} [retry]")
        if isinstance(data.get("scheduler"), dict):
            self._apply(data["scheduler"], _SCHEDULER_FIELDS, source=f"{source} [scheduler]")
        if isinstance(data.get("logging"), dict) and "level" in data["logging"]:
            level = _normalize_log_level(data["logging"]["level"], source=source)
            if level is not None:
                self.log_level = level

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        for env_var, field_name in _ENV_FIELDS.items():
            if raw := os.environ.get(env_var):
                self._apply({field_name: raw}, _RETRY_FIELDS, source=env_var)

        if log_level := os.environ.get("SEARCH_SCOUT_LOG_LEVEL"):
            level = _normalize_log_level(log_level, source="SEARCH_SCOUT_LOG_LEVEL")
            if level is not None:
                self.log_level = level

    def _apply(self, values: Mapping[str, Any], fields: Dict[str, Any], *, source: str) -> None:
        for name, raw in values.items():
            if name not in fields:
                logger.debug("Ignoring unknown setting %r from %s", name, source)
                continue
            parser, (check, expected) = fields[name]
            parsed = parser(raw, name=name, source=source, check=check, expected=expected)
            if parsed is not None:
                setattr(self, name, parsed)

    def retry_policy(self) -> RetryPolicy:
        """Build the runtime retry policy from these settings."""
        return RetryPolicy.from_overrides(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            backoff_factor=self.backoff_factor,
            rate_limit_reset_cap=self.rate_limit_reset_cap,
        )

    def delay_scheduler(self) -> DelayScheduler:
        """Build the runtime delay scheduler from these settings."""
        return DelayScheduler(
            {
                OperationComplexity.LOW: self.low_delay,
                OperationComplexity.MEDIUM: self.medium_delay,
                OperationComplexity.HIGH: self.high_delay,
            }
        )
