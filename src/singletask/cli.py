"""SingleTask CLI - one task at a time."""

import json
import logging
import sys

import click

from .config import DATA_DIR, load_config
from .core.tasks import Task
from .core.time import resolve_timezone
from .errors import MissingParameterError, SingleTaskError
from .workflows import ProcessResult, process_params


def _task_to_json(task: Task) -> dict:
    return {
        "id": task.id,
        "content": task.content,
        "priority": task.priority.label,
        "due": task.due.date if task.due else None,
        "recurring": task.due.is_recurring if task.due else False,
    }


def _run(params: dict[str, str | None]) -> ProcessResult:
    """Run one request, mapping errors to exit codes."""
    config = load_config()
    if not config.cache_path:
        config.cache_path = str(DATA_DIR / "cache.sqlite3")

    try:
        result = process_params(
            {k: v for k, v in params.items() if v is not None},
            config=config,
        )
    except MissingParameterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except SingleTaskError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result.completion_error:
        click.echo(f"Warning: {result.completion_error}", err=True)
    return result


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@click.group()
@click.version_option(package_name="singletask")
def main():
    """SingleTask - work through a task list one task at a time."""
    pass


@main.command("next")
@click.option("--token", envvar="TODOIST_TOKEN", help="Task API token")
@click.option("--filter", "filter_expression", help="Filter, comma-separated for several")
@click.option("--timezone", default=None, help="Timezone (defaults to the account's)")
@click.option("--complete", "complete_task_id", default=None, help="Complete this task first")
@click.option("--skip", "skip_task_id", default=None, help="Skip this task")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def next_task(token, filter_expression, timezone, complete_task_id, skip_task_id, as_json, debug):
    """Show the next task."""
    _configure_logging(debug)
    result = _run(
        {
            "token": token,
            "filter": filter_expression,
            "timezone": timezone,
            "complete_task_id": complete_task_id,
            "skip_task_id": skip_task_id,
        }
    )

    task = result.next_task
    if as_json:
        click.echo(
            json.dumps(
                {
                    "title": result.title,
                    "no_task": result.no_task,
                    "task": _task_to_json(task) if task else None,
                    "remaining": len(result.tasks),
                },
                indent=2,
            )
        )
        return

    if not task:
        click.echo("No tasks left for this filter.")
        return

    due = f" (due {task.due.string or task.due.date})" if task.due else ""
    click.echo(f"[{task.priority.label}] {task.content}{due}")
    click.echo(f"id: {task.id}  ({len(result.tasks)} remaining)")


@main.command("tasks")
@click.option("--token", envvar="TODOIST_TOKEN", help="Task API token")
@click.option("--filter", "filter_expression", help="Filter, comma-separated for several")
@click.option("--timezone", default=None, help="Timezone (defaults to the account's)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def list_tasks(token, filter_expression, timezone, as_json, debug):
    """List every remaining task, in the order they will be shown."""
    _configure_logging(debug)
    result = _run({"token": token, "filter": filter_expression, "timezone": timezone})

    if as_json:
        click.echo(json.dumps([_task_to_json(t) for t in result.tasks], indent=2))
        return

    if result.no_task:
        click.echo("No tasks left for this filter.")
        return

    for task in result.tasks:
        due = f" (due {task.due.date})" if task.due else ""
        click.echo(f"• {task.content}{due}")


@main.command("timezone")
@click.argument("name")
def timezone_cmd(name: str):
    """Resolve a timezone name or GMT offset."""
    try:
        click.echo(resolve_timezone(name).key)
    except SingleTaskError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
