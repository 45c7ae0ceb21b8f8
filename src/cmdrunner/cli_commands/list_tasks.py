from __future__ import annotations

from typing import Any, Optional

from rich.markup import escape
from rich.tree import Tree

from cmdrunner.cli_commands import NO_TASKS_MESSAGE, load_task_config
from cmdrunner.hierarchy import TaskNode
from cmdrunner.logging import Logger


def list_tasks(
    logger: Logger,
    config_file: Optional[str] = None,
    solution_file: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> None:
    """
    Show the task tree: categories in file order, tasks sorted by name.
    """
    task_config, _ = load_task_config(logger, config_file, solution_file, overrides)
    if task_config is None:
        logger.warn(NO_TASKS_MESSAGE)
        return

    logger.info(_build_rich_tree(task_config.hierarchy))


def _build_rich_tree(root: TaskNode) -> Tree:
    """
    Build a Rich Tree visualization of the task hierarchy.

    Args:
        root: Root node returned by the hierarchy builder

    Returns:
        Rich Tree object for terminal display
    """
    tree = Tree(f"[bold]{escape(root.name)}[/bold]")

    for category in root.children:
        branch = tree.add(
            f"[bold]{escape(category.name)}[/bold] [dim]{escape(category.description)}[/dim]"
        )
        for leaf in category.children:
            branch.add(f"[cyan]{escape(leaf.name)}[/cyan]")

    return tree
