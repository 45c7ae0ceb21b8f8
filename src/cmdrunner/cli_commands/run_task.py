"""Run task command implementation."""

from __future__ import annotations

from typing import Any, Optional

import typer
from rich.markup import escape

from cmdrunner.cli_commands import (
    NO_TASKS_MESSAGE,
    get_action_failure_string,
    get_action_success_string,
    load_task_config,
)
from cmdrunner.logging import Logger
from cmdrunner.process_runner import (
    ExecutionError,
    TaskOutputTypes,
    execute_command,
    make_process_runner,
)


def run_task(
    logger: Logger,
    task_name: str,
    config_file: Optional[str] = None,
    solution_file: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> None:
    """
    Run a task by its resolved name.

    Tasks from the primary file take precedence over user tasks with the
    same name.

    Raises:
    typer.Exit: With the task's exit code if it fails, or 1 if it can't run
    """
    task_config, settings = load_task_config(logger, config_file, solution_file, overrides)
    if task_config is None:
        logger.error(NO_TASKS_MESSAGE)
        raise typer.Exit(1)

    task = task_config.find_task(task_name)
    if task is None:
        logger.error(f"[red]Task not found: {escape(task_name)}[/red]")
        logger.info("\nAvailable tasks:")
        for category, leaf in task_config.hierarchy.iter_leaves():
            logger.info(f"  - {escape(leaf.name)} [dim]({category})[/dim]")
        raise typer.Exit(1)

    runner = make_process_runner(TaskOutputTypes(settings.task_output), logger)
    try:
        exit_code = execute_command(task.command, runner, logger)
    except ExecutionError as e:
        logger.error(
            f"[red]{get_action_failure_string()} Task '{escape(task_name)}' failed: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)

    if exit_code != 0:
        logger.error(
            f"[red]{get_action_failure_string()} Task '{escape(task_name)}' failed with exit code {exit_code}[/red]"
        )
        raise typer.Exit(exit_code)

    logger.info(
        f"[green]{get_action_success_string()} Task '{escape(task_name)}' completed successfully[/green]"
    )
