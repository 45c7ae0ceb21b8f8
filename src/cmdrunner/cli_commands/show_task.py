from __future__ import annotations

from typing import Any, Optional

import typer
from rich.markup import escape
from rich.table import Table

from cmdrunner.cli_commands import NO_TASKS_MESSAGE, load_task_config
from cmdrunner.logging import Logger


def show_task(
    logger: Logger,
    task_name: str,
    config_file: Optional[str] = None,
    solution_file: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> None:
    """
    Show the resolved command a task would run.
    """
    task_config, _ = load_task_config(logger, config_file, solution_file, overrides)
    if task_config is None:
        logger.error(NO_TASKS_MESSAGE)
        raise typer.Exit(1)

    task = task_config.find_task(task_name)
    if task is None:
        logger.error(f"[red]Task not found: {escape(task_name)}[/red]")
        raise typer.Exit(1)

    command = task.command
    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Task", escape(task.name))
    table.add_row("File name", escape(command.file_name))
    table.add_row("Arguments", escape(command.arguments))
    table.add_row("Working directory", escape(command.working_directory))
    table.add_row("Task file directory", escape(command.root_directory))

    logger.info(table)
