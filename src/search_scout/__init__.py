"""Rate-limit-aware batch orchestration for code-search APIs."""

__version__ = "0.1.0"
