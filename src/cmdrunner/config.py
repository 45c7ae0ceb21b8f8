"""
Settings files for default build configuration and project matching.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import platformdirs
import yaml

__all__ = [
    "Settings",
    "SettingsError",
    "get_user_settings_path",
    "get_machine_settings_path",
    "find_project_settings",
    "parse_settings_file",
    "load_settings",
]

PROJECT_SETTINGS_FILENAME = ".cmdrunner-config.yml"
MATCH_STRATEGIES = ("substring", "prefix")
TASK_OUTPUT_MODES = ("all", "none")


class SettingsError(Exception):
    """
    Raised when a settings file is invalid.
    """

    pass


@dataclass(frozen=True)
class Settings:
    """Tool settings; empty strings mean "use the solution's default"."""

    configuration_name: str = ""
    platform_name: str = ""
    devenv_dir: str = ""
    match_strategy: str = "substring"
    task_output: str = "all"

    def merged_with(self, overrides: dict[str, Any]) -> Settings:
        """Return a copy with every non-empty override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v})


def get_machine_settings_path() -> Path:
    """
    Get the path to the machine-level (system-wide) settings file.

    Returns:
        Path to the machine settings file (may not exist)
    """
    config_dir = Path(platformdirs.site_config_dir("cmdrunner"))
    return config_dir / "config.yml"


def get_user_settings_path() -> Path:
    """
    Get the path to the user-level settings file.

    Uses platformdirs to determine the appropriate user config directory
    for the current platform, then appends 'cmdrunner/config.yml'.

    Returns:
        Path to the user settings file (may not exist)
    """
    config_dir: Path = Path(platformdirs.user_config_dir("cmdrunner"))
    return config_dir / "config.yml"


def find_project_settings(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .cmdrunner-config.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to .cmdrunner-config.yml if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() raises on invalid paths or symlink loops
        return None

    max_depth = 100
    for _ in range(max_depth):
        try:
            settings_path = current / PROJECT_SETTINGS_FILENAME
            if settings_path.exists():
                return settings_path
        except (OSError, PermissionError):
            pass

        parent = current.parent
        if parent == current:
            break

        current = parent

    return None


def parse_settings_file(path: Path) -> dict[str, str]:
    """
    Parse a cmdrunner settings file.

    Only the keys present in the file are returned, so callers can layer
    several files on top of each other.

    Args:
        path: Path to the settings file

    Returns:
        Mapping of setting name to value; empty if the file doesn't exist
        or is empty

    Raises:
        SettingsError: If the file is unreadable, is malformed YAML, or
                       contains unknown keys or invalid values

    Example:
        .cmdrunner-config.yml:
            ```yaml
            configuration_name: Release
            platform_name: x64
            match_strategy: prefix
            ```
    """
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise SettingsError(f"Error reading settings file '{path}': {e}") from e

    if not content.strip():
        return {}

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsError(f"Error parsing YAML in settings file '{path}': {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise SettingsError(f"Error in settings file '{path}': top level must be a dictionary")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise SettingsError(
            f"Error in settings file '{path}': Unknown settings: {', '.join(unknown)}"
        )

    for key, value in data.items():
        if not isinstance(value, str):
            raise SettingsError(
                f"Error in settings file '{path}': Field '{key}' must be a string"
            )

    if data.get("match_strategy", "substring") not in MATCH_STRATEGIES:
        raise SettingsError(
            f"Error in settings file '{path}': 'match_strategy' must be one of "
            f"{', '.join(MATCH_STRATEGIES)}"
        )

    if data.get("task_output", "all") not in TASK_OUTPUT_MODES:
        raise SettingsError(
            f"Error in settings file '{path}': 'task_output' must be one of "
            f"{', '.join(TASK_OUTPUT_MODES)}"
        )

    return data


def load_settings(start_dir: Path) -> Settings:
    """
    Load settings from machine, user and project files, in that precedence.

    Args:
        start_dir: Directory to start the project settings search from

    Returns:
        Settings with later files overriding earlier ones

    Raises:
        SettingsError: If any of the files is invalid
    """
    settings = Settings()
    for path in (get_machine_settings_path(), get_user_settings_path()):
        settings = settings.merged_with(parse_settings_file(path))

    project_path = find_project_settings(start_dir)
    if project_path is not None:
        settings = settings.merged_with(parse_settings_file(project_path))

    return settings
