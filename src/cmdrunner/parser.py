"""Parse command task files (commands.json / commands.user.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "FILENAME",
    "USER_FILENAME",
    "TaskRecord",
    "ConfigError",
    "ConfigReadError",
    "find_commands_file",
    "get_user_config_path",
    "load_tasks",
]

FILENAME = "commands.json"
USER_FILENAME = "commands.user.json"


class ConfigError(Exception):
    """Raised when a command task file is malformed."""

    pass


class ConfigReadError(ConfigError):
    """Raised when a command task file exists but cannot be read.

    Unlike a malformed file, this is never treated as an absent source.
    """

    pass


@dataclass(frozen=True)
class TaskRecord:
    """A single command entry from a task file."""

    name: str
    file_name: str
    arguments: str = ""
    working_directory: str | None = None


def get_user_config_path(config_path: Path) -> Path:
    """Derive the user override file path from the primary task file path.

    The reserved primary filename is swapped for the user filename; the
    directory is unchanged.

    Example:
        >>> get_user_config_path(Path("/src/app/commands.json"))
        PosixPath('/src/app/commands.user.json')
    """
    return Path(str(config_path).replace(FILENAME, USER_FILENAME))


def find_commands_file(start_dir: Path | None = None) -> Path | None:
    """Find commands.json in the current or parent directories.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the task file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / FILENAME
        if candidate.exists():
            return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_tasks(path: Path) -> list[TaskRecord] | None:
    """Read the task records defined in a command task file.

    The file is a JSON document; it is loaded with PyYAML so the YAML
    superset is accepted as well:

        {
          "commands": {
            "Build": {
              "fileName": "cmd.exe",
              "workingDirectory": ".",
              "arguments": "/c build.cmd"
            }
          }
        }

    Args:
        path: Path to the task file

    Returns:
        Task records in file order, or None if the file doesn't exist, is
        empty, or has no 'commands' section

    Raises:
        ConfigReadError: If the file exists but cannot be read
        ConfigError: If the document is malformed
    """
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8-sig")
    except (IOError, OSError) as e:
        raise ConfigReadError(f"Error reading task file '{path}': {e}") from e

    if not content.strip():
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error parsing task file '{path}': {e}") from e

    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError(f"Error in task file '{path}': top level must be an object")

    if "commands" not in data:
        return None

    commands = data["commands"]
    if commands is None:
        return []

    if not isinstance(commands, dict):
        raise ConfigError(f"Error in task file '{path}': 'commands' must be an object")

    return [_parse_command(path, str(name), entry) for name, entry in commands.items()]


def _parse_command(path: Path, name: str, entry: object) -> TaskRecord:
    if not isinstance(entry, dict):
        raise ConfigError(f"Error in task file '{path}': command '{name}' must be an object")

    file_name = entry.get("fileName")
    if not isinstance(file_name, str) or not file_name:
        raise ConfigError(
            f"Error in task file '{path}': command '{name}' missing required 'fileName' field"
        )

    arguments = entry.get("arguments", "")
    if arguments is None:
        arguments = ""
    if not isinstance(arguments, str):
        raise ConfigError(
            f"Error in task file '{path}': Field 'arguments' of command '{name}' must be a string"
        )

    working_directory = entry.get("workingDirectory")
    if working_directory is not None and not isinstance(working_directory, str):
        raise ConfigError(
            f"Error in task file '{path}': Field 'workingDirectory' of command '{name}' must be a string"
        )

    return TaskRecord(
        name=name,
        file_name=file_name,
        arguments=arguments,
        working_directory=working_directory,
    )
