"""CLI commands."""

from search_scout.cli.commands.plan import plan_cmd

__all__ = ["plan_cmd"]
