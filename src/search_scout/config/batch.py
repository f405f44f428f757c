"""Batch file models and loading.

A batch file is a TOML document describing an ordered list of searches::

    name = "Config survey"
    description = "Compare bundler configs"

    [output]
    format = "comparison"
    compare = true

    [[searches]]
    name = "vite"
    query = "defineConfig plugins"
    max_results = 25
    tags = ["bundler"]

    [searches.filters]
    filename = "vite.config.ts"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from search_scout.core.batch.models import (
    DEFAULT_MAX_RESULTS,
    BatchOptions,
    ReportLevel,
    SearchTask,
)
from search_scout.core.errors.config import ConfigError

MAX_RESULTS_LIMIT = 1000


class SearchFiltersConfig(BaseModel):
    """Qualifier filters for one search. Unset filters are omitted."""

    model_config = ConfigDict(extra="forbid")

    language: Optional[str] = Field(default=None, description="Language qualifier")
    filename: Optional[str] = Field(default=None, description="Exact filename")
    extension: Optional[str] = Field(default=None, description="File extension")
    path: Optional[str] = Field(default=None, description="Path prefix")
    repository: List[str] = Field(default_factory=list, description="owner/name repositories")
    owner: List[str] = Field(default_factory=list, description="Users or organizations")
    size: Optional[str] = Field(default=None, description="File size range, e.g. '<1000'")
    min_stars: int = Field(default=0, ge=0, description="Minimum repository stars")
    max_age: Optional[str] = Field(default=None, description="Maximum repository age")
    fork: Optional[str] = Field(default=None, description="Fork handling: true, false or only")
    match: List[str] = Field(default_factory=list, description="Fields to match against")

    def as_mapping(self) -> Dict[str, Any]:
        return self.model_dump(exclude_defaults=True)


class SearchConfig(BaseModel):
    """One ``[[searches]]`` entry."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Unique search name")
    query: str = Field(..., description="Search terms")
    max_results: int = Field(
        default=DEFAULT_MAX_RESULTS, ge=1, le=MAX_RESULTS_LIMIT, description="Results to request"
    )
    filters: SearchFiltersConfig = Field(default_factory=SearchFiltersConfig)
    tags: List[str] = Field(default_factory=list)

    @field_validator("name", "query")
    @classmethod
    def validate_non_blank(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("must be non-empty")
        return normalized

    def to_task(self) -> SearchTask:
        return SearchTask(
            name=self.name,
            query=self.query,
            max_results=self.max_results,
            filters=self.filters.as_mapping(),
            tags=tuple(self.tags),
        )


class OutputConfig(BaseModel):
    """The ``[output]`` table."""

    model_config = ConfigDict(extra="forbid")

    format: Literal["combined", "separate", "comparison"] = "combined"
    directory: Optional[str] = None
    compare: bool = False
    aggregate: bool = False


class BatchFileConfig(BaseModel):
    """A validated batch file."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    description: str = ""
    output: OutputConfig = Field(default_factory=OutputConfig)
    searches: List[SearchConfig] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_unique_names(self) -> "BatchFileConfig":
        seen = set()
        for search in self.searches:
            if search.name in seen:
                raise ValueError(f"duplicate search name '{search.name}'")
            seen.add(search.name)
        return self

    def tasks(self) -> List[SearchTask]:
        """Searches as core tasks, in file order."""
        return [search.to_task() for search in self.searches]

    def options(self, report: ReportLevel = ReportLevel.SUMMARY) -> BatchOptions:
        return BatchOptions(
            name=self.name,
            description=self.description,
            compare=self.output.compare,
            report=report,
        )


def _first_problem(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def load_batch_config(path: Union[str, Path]) -> BatchFileConfig:
    """Read and validate a TOML batch file.

    Args:
        path: Batch file location.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or
            fails validation. The message names the file and the first
            problem found.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"failed to read file {path}: {e}", path=str(path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"failed to parse TOML in {path}: {e}", path=str(path)) from e

    if "searches" not in data or not data["searches"]:
        raise ConfigError(
            f"{path}: configuration must contain at least one search", path=str(path)
        )

    try:
        return BatchFileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path}: {_first_problem(e)}", path=str(path)) from e
