"""Assemble the command task tree from the primary and user task files."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from cmdrunner.build_context import BuildContext
from cmdrunner.logging import Logger
from cmdrunner.parser import (
    ConfigError,
    ConfigReadError,
    TaskRecord,
    get_user_config_path,
    load_tasks,
)
from cmdrunner.variables import VariableResolver

__all__ = [
    "ROOT_NAME",
    "ICON",
    "CommandDescriptor",
    "TaskNode",
    "TaskRunnerConfig",
    "HierarchyBuilder",
    "make_leaf",
]

ROOT_NAME = "Command Task Runner"
ICON = "resources/project.png"

CATEGORIES = (
    ("Commands", "A list of commands to execute"),
    ("User Commands", "A list of user commands to execute"),
)


@dataclass(frozen=True)
class CommandDescriptor:
    """Everything an executor needs to launch a task later."""

    root_directory: str
    working_directory: str
    file_name: str
    arguments: str


@dataclass
class TaskNode:
    """A node of the task tree: the root, a category, or a runnable leaf."""

    name: str
    description: str = ""
    children: list[TaskNode] = field(default_factory=list)
    is_leaf: bool = False
    command: CommandDescriptor | None = None

    def __post_init__(self):
        """Leaves carry a command; containers never do."""
        if self.is_leaf != (self.command is not None):
            raise ValueError(
                f"Task node '{self.name}' must have a command if and only if it is a leaf"
            )

    def iter_leaves(self):
        """Yield (category name, leaf) pairs, depth-first in tree order."""
        for category in self.children:
            for leaf in category.children:
                yield category.name, leaf


@dataclass(frozen=True)
class TaskRunnerConfig:
    """A populated task tree ready for presentation."""

    hierarchy: TaskNode
    icon: str = ICON

    def find_task(self, name: str) -> TaskNode | None:
        """Find a leaf by its resolved name; "Commands" wins over "User Commands"."""
        for _, leaf in self.hierarchy.iter_leaves():
            if leaf.name == name:
                return leaf
        return None


def make_leaf(
    record: TaskRecord,
    resolved_name: str,
    resolved_working_dir: str | None,
    root_dir: str,
) -> TaskNode:
    """Wrap a resolved task record into a runnable leaf node.

    The description shows the record's file name and arguments as written.
    The working directory falls back to `root_dir` (the task file's
    directory) when the record doesn't set one.
    """
    cwd = resolved_working_dir if resolved_working_dir is not None else root_dir
    return TaskNode(
        name=resolved_name,
        description=f"Filename:\t {record.file_name}\r\nArguments:\t {record.arguments}",
        is_leaf=True,
        command=CommandDescriptor(
            root_directory=root_dir,
            working_directory=cwd,
            file_name=record.file_name,
            arguments=record.arguments,
        ),
    )


class HierarchyBuilder:
    """Merges the primary and user task files into one tree."""

    def __init__(self, resolver: VariableResolver, logger: Logger) -> None:
        self._resolver = resolver
        self._logger = logger

    def build(self, config_path: Path) -> TaskNode:
        """Build the task tree for a primary task file.

        Categories are appended in fixed order: "Commands" from the primary
        file, then "User Commands" from its user override. A file that
        doesn't exist or is malformed contributes no category; a file that
        exists with zero commands contributes an empty one.

        Raises:
            ConfigReadError: If a task file exists but cannot be read
        """
        root = TaskNode(ROOT_NAME)
        # One snapshot per build keeps every task of the pass consistent
        context = self._resolver.get_context()

        paths = (config_path, get_user_config_path(config_path))
        for path, (name, description) in zip(paths, CATEGORIES):
            category = self._load_category(path, name, description, context)
            if category is not None:
                root.children.append(category)

        return root

    def _load_category(
        self, path: Path, name: str, description: str, context: BuildContext | None
    ) -> TaskNode | None:
        try:
            records = load_tasks(path)
        except ConfigReadError:
            raise
        except ConfigError as e:
            self._logger.warn(f"[yellow]Skipping {path}: {e}[/yellow]")
            return None

        if records is None:
            self._logger.debug(f"No task file at {path}")
            return None

        root_dir = str(path.parent)
        category = TaskNode(name, description=description)

        # sorted() is stable, so equal names keep file order
        for record in sorted(records, key=lambda r: r.name):
            resolved_name = self._resolver.resolve(record.name, root_dir, context)
            resolved_cwd = self._resolver.resolve(record.working_directory, root_dir, context)
            category.children.append(make_leaf(record, resolved_name, resolved_cwd, root_dir))

        self._logger.debug(f"Loaded {len(category.children)} task(s) from {path}")
        return category

    def parse_config(self, config_path: Path) -> TaskRunnerConfig | None:
        """Build the tree and check that it holds something to show.

        Returns:
            The populated config, or None when no task runner configuration
            is available (no categories, or the first category is empty)
        """
        hierarchy = self.build(config_path)

        if not hierarchy.children or not hierarchy.children[0].children:
            return None

        return TaskRunnerConfig(hierarchy)

    async def parse_config_async(self, config_path: Path) -> TaskRunnerConfig | None:
        """Run `parse_config` on a worker thread."""
        return await asyncio.to_thread(self.parse_config, config_path)
