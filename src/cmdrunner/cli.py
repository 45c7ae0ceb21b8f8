"""Command-line interface for cmdrunner."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from cmdrunner import __version__
from cmdrunner.cli_commands.list_tasks import list_tasks
from cmdrunner.cli_commands.run_task import run_task
from cmdrunner.cli_commands.show_task import show_task
from cmdrunner.config import MATCH_STRATEGIES, TASK_OUTPUT_MODES
from cmdrunner.console_logger import ConsoleLogger
from cmdrunner.logging import LogLevel

app = typer.Typer(
    help="cmdrunner - Run the commands defined in commands.json with build macros resolved",
    add_completion=False,
    no_args_is_help=False,
)
console = Console()


def _parse_log_level(value: str) -> LogLevel:
    try:
        return LogLevel[value.upper()]
    except KeyError:
        raise typer.BadParameter(
            f"must be one of {', '.join(level.name.lower() for level in LogLevel)}"
        ) from None


def _check_choice(value: Optional[str], choices: tuple[str, ...]) -> Optional[str]:
    if value is not None and value not in choices:
        raise typer.BadParameter(f"must be one of {', '.join(choices)}")
    return value


def _check_match_strategy(value: Optional[str]) -> Optional[str]:
    return _check_choice(value, MATCH_STRATEGIES)


def _check_task_output(value: Optional[str]) -> Optional[str]:
    return _check_choice(value, TASK_OUTPUT_MODES)


@app.command()
def main(
    task: Optional[str] = typer.Argument(None, help="Name of the task to run"),
    list_opt: bool = typer.Option(False, "--list", "-l", help="List all available tasks"),
    show: Optional[str] = typer.Option(None, "--show", help="Show a task's resolved command"),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to commands.json (default: search upwards from cwd)"
    ),
    solution: Optional[str] = typer.Option(
        None, "--solution", help="Solution file providing build macros (default: search upwards)"
    ),
    configuration: Optional[str] = typer.Option(
        None, "--configuration", help="Build configuration, e.g. Debug"
    ),
    platform: Optional[str] = typer.Option(None, "--platform", help="Build platform, e.g. x64"),
    devenv_dir: Optional[str] = typer.Option(None, "--devenv-dir", help="Value of $(DevEnvDir)"),
    match: Optional[str] = typer.Option(
        None,
        "--match",
        help="Project matching: substring or prefix",
        callback=_check_match_strategy,
    ),
    task_output: Optional[str] = typer.Option(
        None,
        "--task-output",
        help="Task output: all or none",
        callback=_check_task_output,
    ),
    log_level: str = typer.Option(
        "info", "--log-level", "-L", help="fatal, error, warn, info, debug or trace"
    ),
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    """List, show or run command tasks."""
    if version:
        console.print(f"cmdrunner version {__version__}")
        raise typer.Exit()

    logger = ConsoleLogger(console, _parse_log_level(log_level))
    overrides = {
        "configuration_name": configuration,
        "platform_name": platform,
        "devenv_dir": devenv_dir,
        "match_strategy": match,
        "task_output": task_output,
    }

    if show is not None:
        show_task(logger, show, config, solution, overrides)
        return

    if list_opt or task is None:
        list_tasks(logger, config, solution, overrides)
        return

    run_task(logger, task, config, solution, overrides)


if __name__ == "__main__":
    app()
