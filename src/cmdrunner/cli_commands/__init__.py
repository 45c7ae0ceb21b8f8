"""CLI command implementations and shared utilities."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from cmdrunner.build_context import (
    BuildContextError,
    BuildContextProvider,
    SolutionFileProvider,
    StaticBuildContextProvider,
    find_solution_file,
)
from cmdrunner.config import Settings, SettingsError, load_settings
from cmdrunner.hierarchy import HierarchyBuilder, TaskRunnerConfig
from cmdrunner.logging import Logger
from cmdrunner.msbuild import MSBuildPropertyProvider
from cmdrunner.parser import FILENAME, ConfigReadError, find_commands_file
from cmdrunner.selector import ProjectSelector, get_match_strategy
from cmdrunner.variables import VariableResolver

NO_CONFIG_MESSAGE = f"[red]No task file found ({FILENAME})[/red]"
NO_TASKS_MESSAGE = "[yellow]No task runner configuration available[/yellow]"


def _supports_unicode() -> bool:
    """
    Check if the terminal supports Unicode characters.

    Returns:
    True if terminal supports UTF-8, False otherwise
    """
    # Classic Windows console (conhost)
    if os.name == "nt" and "WT_SESSION" not in os.environ:
        return False

    encoding = sys.stdout.encoding
    if not encoding:
        return False

    try:
        "✓✗".encode(encoding)
        return True
    except UnicodeEncodeError:
        return False


def get_action_success_string() -> str:
    """
    Get the appropriate success symbol based on terminal capabilities.
    """
    return "✓" if _supports_unicode() else "[ OK ]"


def get_action_failure_string() -> str:
    """
    Get the appropriate failure symbol based on terminal capabilities.
    """
    return "✗" if _supports_unicode() else "[ FAIL ]"


def _make_provider(
    logger: Logger, config_path: Path, solution_file: Optional[str], settings: Settings
) -> BuildContextProvider:
    solution_path = Path(solution_file) if solution_file else find_solution_file(config_path.parent)
    if solution_path is None:
        logger.debug("No solution file found; build macros stay unresolved")
        return StaticBuildContextProvider(None)

    logger.debug(f"Using solution {solution_path}")
    return SolutionFileProvider(
        solution_path.resolve(),
        logger,
        configuration_name=settings.configuration_name,
        platform_name=settings.platform_name,
        devenv_dir=settings.devenv_dir,
    )


def load_task_config(
    logger: Logger,
    config_file: Optional[str] = None,
    solution_file: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> tuple[Optional[TaskRunnerConfig], Settings]:
    """
    Locate, parse and resolve the task files.

    Args:
    logger: Logger interface for output
    config_file: Path to commands.json (searched upwards from cwd if omitted)
    solution_file: Path to the solution file (searched upwards if omitted)
    overrides: Settings given on the command line

    Returns:
    The task tree (None if no task runner configuration is available) and
    the effective settings

    Raises:
    typer.Exit: If no task file exists or any file is unusable
    """
    config_path = Path(config_file) if config_file else find_commands_file()
    if config_path is None or not config_path.exists():
        logger.error(NO_CONFIG_MESSAGE)
        raise typer.Exit(1)

    # Project matching compares against this directory, so it must be absolute
    config_path = config_path.resolve()

    try:
        settings = load_settings(config_path.parent).merged_with(overrides or {})
        provider = _make_provider(logger, config_path, solution_file, settings)
        resolver = VariableResolver(
            provider,
            logger,
            selector=ProjectSelector(get_match_strategy(settings.match_strategy)),
            macro_provider=MSBuildPropertyProvider(logger),
        )
        builder = HierarchyBuilder(resolver, logger)
        task_config = asyncio.run(builder.parse_config_async(config_path))
    except (SettingsError, BuildContextError, ConfigReadError, ValueError) as e:
        logger.error(f"[red]{e}[/red]")
        raise typer.Exit(1)

    return task_config, settings
