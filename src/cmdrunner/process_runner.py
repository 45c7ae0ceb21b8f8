"""Process execution abstraction layer.

This module provides an interface for running subprocesses, allowing for
better testability and dependency injection, and the function that launches
a resolved command descriptor through it.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from cmdrunner.hierarchy import CommandDescriptor
from cmdrunner.logging import Logger

__all__ = [
    "ExecutionError",
    "ProcessRunner",
    "PassthroughProcessRunner",
    "SilentProcessRunner",
    "TaskOutputTypes",
    "build_command_line",
    "execute_command",
    "make_process_runner",
]


class ExecutionError(Exception):
    """Raised when a task's process cannot be started."""

    pass


class TaskOutputTypes(Enum):
    """
    Enum defining task output control modes.
    """

    ALL = "all"
    NONE = "none"


class ProcessRunner(ABC):
    """
    Abstract interface for running subprocess commands.
    """

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command.

        This method signature matches subprocess.run() to allow for direct
        substitution in existing code.

        Args:
        *args: Positional arguments passed to subprocess.run
        **kwargs: Keyword arguments passed to subprocess.run

        Returns:
        subprocess.CompletedProcess: The completed process result
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """
    Process runner that directly delegates to subprocess.run.
    """

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        return subprocess.run(*args, **kwargs)


class SilentProcessRunner(ProcessRunner):
    """
    Process runner that suppresses all subprocess output by redirecting to DEVNULL.
    """

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command with stdout and stderr suppressed.

        This implementation forces stdout=DEVNULL and stderr=DEVNULL to discard
        all subprocess output, regardless of what the caller requests.
        """
        kwargs["stdout"] = subprocess.DEVNULL
        kwargs["stderr"] = subprocess.DEVNULL
        return subprocess.run(*args, **kwargs)


def make_process_runner(output_type: TaskOutputTypes, logger: Logger) -> ProcessRunner:
    """
    Factory function for creating ProcessRunner instances.

    Args:
    output_type: The type of output control to use

    Returns:
    ProcessRunner: A new ProcessRunner instance

    Raises:
    ValueError: If an invalid TaskOutputTypes value is provided
    """
    match output_type:
        case TaskOutputTypes.ALL:
            return PassthroughProcessRunner(logger)
        case TaskOutputTypes.NONE:
            return SilentProcessRunner(logger)
        case _:
            raise ValueError(f"Invalid TaskOutputTypes: {output_type}")


def build_command_line(command: CommandDescriptor) -> list[str]:
    """Split a descriptor into an argv list: file name first, then arguments.

    Arguments follow POSIX shell quoting except on Windows, where quotes are
    kept for the target program to interpret.
    """
    return [command.file_name, *shlex.split(command.arguments, posix=os.name != "nt")]


def execute_command(command: CommandDescriptor, runner: ProcessRunner, logger: Logger) -> int:
    """
    Launch a resolved command and wait for it.

    A relative working directory is taken from the task file directory.

    Args:
        command: The descriptor attached to a task leaf
        runner: Process runner controlling output handling
        logger: Logger for progress output

    Returns:
        The process exit code

    Raises:
        ExecutionError: If the arguments can't be split, or the executable or
            working directory doesn't exist
    """
    try:
        argv = build_command_line(command)
    except ValueError as e:
        raise ExecutionError(f"Invalid arguments '{command.arguments}': {e}") from e

    working_directory = os.path.join(command.root_directory, command.working_directory)
    logger.debug(f"Running {argv} in {working_directory}")

    try:
        result = runner.run(argv, cwd=working_directory, check=False)
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        raise ExecutionError(f"Cannot run '{command.file_name}': {e}") from e

    return result.returncode
