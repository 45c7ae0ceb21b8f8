"""Pick the project whose metadata applies to a task file."""

from __future__ import annotations

import ntpath
import posixpath
from typing import Callable

from cmdrunner.build_context import ItemKind, ProjectMetadata, ProjectTree

__all__ = [
    "MatchStrategy",
    "ProjectSelector",
    "flatten_projects",
    "get_match_strategy",
    "prefix_match",
    "substring_match",
]

# (project, task config directory) -> does the project apply?
MatchStrategy = Callable[[ProjectMetadata, str], bool]


def substring_match(project: ProjectMetadata, config_dir: str) -> bool:
    """Accept a project whose file path contains the config directory.

    This is a plain substring test: '/src/app' also matches a project at
    '/src/app2/app2.csproj'.
    """
    return config_dir in project.file_path


def prefix_match(project: ProjectMetadata, config_dir: str) -> bool:
    """Accept a project located in the config directory or below it."""
    pathmod = ntpath if "\\" in project.file_path or "\\" in config_dir else posixpath
    directory = pathmod.normcase(pathmod.normpath(config_dir))
    project_path = pathmod.normcase(pathmod.normpath(project.file_path))
    return project_path.startswith(directory.rstrip(pathmod.sep) + pathmod.sep)


_STRATEGIES: dict[str, MatchStrategy] = {
    "substring": substring_match,
    "prefix": prefix_match,
}


def get_match_strategy(name: str) -> MatchStrategy:
    """Look up a match strategy by its settings name.

    Raises:
        ValueError: If no strategy has that name
    """
    try:
        return _STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown match strategy '{name}'; expected one of {', '.join(_STRATEGIES)}"
        ) from None


def flatten_projects(tree: ProjectTree) -> list[ProjectMetadata]:
    """List every project in the tree, expanding solution folders in place.

    Traversal is depth-first in solution order, driven by an explicit stack
    so folder nesting depth is unbounded.
    """
    projects: list[ProjectMetadata] = []
    stack = list(reversed(tree.roots))

    while stack:
        item = tree.items.get(stack.pop())
        if item is None:
            continue

        if item.kind is ItemKind.SOLUTION_FOLDER:
            stack.extend(reversed(item.children))
        elif item.project is not None:
            projects.append(item.project)

    return projects


class ProjectSelector:
    """Selects the first project accepted by a match strategy."""

    def __init__(self, strategy: MatchStrategy = substring_match) -> None:
        self._strategy = strategy

    def select(
        self, all_projects: list[ProjectMetadata], task_config_directory: str
    ) -> ProjectMetadata | None:
        for project in all_projects:
            if self._strategy(project, task_config_directory):
                return project
        return None
