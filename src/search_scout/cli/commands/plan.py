"""``search-scout plan``: show what a batch file would execute.

Loads and validates the batch file, then reports each search with its
estimated complexity and the pause scheduled after it. Nothing is sent to
the search API.
"""

import logging
from typing import Any, Dict, List

import click

from search_scout.cli.output import emit_error, emit_success
from search_scout.config.batch import BatchFileConfig, load_batch_config
from search_scout.config.settings import ScoutConfig
from search_scout.core.errors.config import ConfigError
from search_scout.core.resilience.scheduling import DelayScheduler, estimate_complexity

logger = logging.getLogger(__name__)


def build_plan(batch: BatchFileConfig, scheduler: DelayScheduler) -> Dict[str, Any]:
    """Describe the searches of ``batch`` and the pauses between them."""
    tasks = batch.tasks()
    searches: List[Dict[str, Any]] = []
    total_pause = 0.0

    for index, task in enumerate(tasks):
        complexity = estimate_complexity(task.query, task.max_results, task.has_filters)
        is_last = index == len(tasks) - 1
        pause = 0.0 if is_last else scheduler.delay_for(complexity)
        total_pause += pause
        searches.append(
            {
                "name": task.name,
                "query": task.query,
                "tags": list(task.tags),
                "max_results": task.max_results,
                "filters": dict(task.filters),
                "complexity": complexity.value,
                "pause_after": pause,
            }
        )

    return {
        "name": batch.name,
        "description": batch.description,
        "output": batch.output.model_dump(),
        "searches": searches,
        "total_pause": total_pause,
    }


def _format_filter(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def _echo_plan(plan: Dict[str, Any], config_file: str) -> None:
    click.echo(f"Would execute batch search from: {config_file}")
    if plan["name"]:
        click.echo(f"Name: {plan['name']}")
    if plan["description"]:
        click.echo(f"Description: {plan['description']}")
    output = plan["output"]
    click.echo(f"Output format: {output['format']}")
    if output.get("directory"):
        click.echo(f"Output directory: {output['directory']}")

    click.echo("\nSearches to execute:")
    for index, search in enumerate(plan["searches"], start=1):
        click.echo(f"  {index}. {search['name']}")
        click.echo(f"     Query: {search['query']}")
        if search["tags"]:
            click.echo(f"     Tags: {', '.join(search['tags'])}")
        click.echo(f"     Max results: {search['max_results']}")
        for key, value in search["filters"].items():
            click.echo(f"     {key}: {_format_filter(value)}")
        if index == len(plan["searches"]):
            click.echo(f"     Complexity: {search['complexity']} (last search, no pause)")
        else:
            click.echo(
                f"     Complexity: {search['complexity']} (pause {search['pause_after']:.2f}s)"
            )
        click.echo()

    click.echo(f"Total scheduled pause: {plan['total_pause']:.2f}s")
    if output.get("compare"):
        click.echo("Would generate comparison analysis between searches")


@click.command("plan")
@click.argument("config_file", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Emit the plan as a JSON envelope.")
@click.pass_context
def plan_cmd(ctx: click.Context, config_file: str, as_json: bool) -> None:
    """Show the searches in CONFIG_FILE and the pauses between them."""
    settings: ScoutConfig = (ctx.obj or {}).get("config") or ScoutConfig()

    try:
        batch = load_batch_config(config_file)
    except ConfigError as e:
        logger.debug("Batch file rejected: %s", e)
        if as_json:
            emit_error(
                str(e),
                code="CONFIG_ERROR",
                remediation="Fix the batch file and run plan again",
                details={"path": e.path},
            )
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    plan = build_plan(batch, settings.delay_scheduler())
    if as_json:
        emit_success(plan)
    else:
        _echo_plan(plan, config_file)
