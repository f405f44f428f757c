"""Entry point for the ``search-scout`` command."""

import click

from search_scout import __version__
from search_scout.cli.commands import plan_cmd
from search_scout.config.settings import ScoutConfig
from search_scout.core.observability import configure_logging


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings TOML file (overrides discovered config files).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (defaults to the configured level).",
)
@click.version_option(__version__, prog_name="search-scout")
@click.pass_context
def cli(ctx: click.Context, config_file: str, log_level: str) -> None:
    """Plan and pace batches of code searches against a rate-limited API."""
    config = ScoutConfig.from_env(config_file)
    if log_level:
        config.log_level = log_level.upper()
    configure_logging(config.log_level)
    ctx.obj = {"config": config}


cli.add_command(plan_cmd)


if __name__ == "__main__":
    cli()
