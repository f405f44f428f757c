"""Configuration error classes."""

from typing import Optional


class ConfigError(Exception):
    """A configuration or batch file could not be read or validated.

    Attributes:
        path: File that was being loaded, if any.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
