"""MSBuild project file properties and the property macro family.

Only statically declared properties are understood: property groups are
read from the project XML, conditions of the form
`'$(Configuration)|$(Platform)' == 'Debug|AnyCPU'` are evaluated, and
imports/targets are ignored.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path

from cmdrunner.logging import Logger

__all__ = [
    "MSBUILD_PROJECT_EXTENSIONS",
    "MacroProvider",
    "NullMacroProvider",
    "MSBuildPropertyProvider",
    "load_project_properties",
]

MSBUILD_PROJECT_EXTENSIONS = (".csproj", ".vbproj", ".fsproj", ".vcxproj", ".proj")

CONDITION_PATTERN = re.compile(r"^\s*'([^']*)'\s*==\s*'([^']*)'\s*$")


def _local_name(tag: str) -> str:
    # Old-style projects put everything in the msbuild/2003 namespace
    return tag.rsplit("}", 1)[-1]


def _normalise(value: str) -> str:
    return value.replace(" ", "").lower()


def _condition_matches(condition: str, configuration: str | None, platform: str | None) -> bool:
    match = CONDITION_PATTERN.match(condition)
    if match is None or configuration is None:
        return False

    left = match.group(1)
    left = left.replace("$(Configuration)", configuration)
    left = left.replace("$(Platform)", platform or "")
    return _normalise(left) == _normalise(match.group(2))


def load_project_properties(
    path: Path,
    configuration: str | None = None,
    platform: str | None = None,
) -> dict[str, str] | None:
    """Read the properties an MSBuild project declares.

    Unconditional property groups are always read. When a configuration is
    given, groups whose condition matches the configuration/platform pair
    are applied on top, in document order.

    Args:
        path: Path to the project file
        configuration: Active configuration name (e.g. 'Debug')
        platform: Active platform name (e.g. 'Any CPU')

    Returns:
        Property name to value mapping, or None if the file is missing or
        is not an MSBuild project
    """
    if path.suffix.lower() not in MSBUILD_PROJECT_EXTENSIONS or not path.is_file():
        return None

    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError):
        return None

    if _local_name(root.tag) != "Project":
        return None

    properties: dict[str, str] = {}
    for group in root:
        if _local_name(group.tag) != "PropertyGroup":
            continue

        condition = group.get("Condition")
        if condition is not None and not _condition_matches(condition, configuration, platform):
            continue

        for prop in group:
            if not isinstance(prop.tag, str):
                continue
            properties[_local_name(prop.tag)] = (prop.text or "").strip()

    return properties


class MacroProvider(ABC):
    """Build-tool specific macro family keyed by project file path."""

    @abstractmethod
    def expand(self, project_file: str, text: str) -> str:
        """Return `text` with the provider's macros substituted."""
        ...


class NullMacroProvider(MacroProvider):
    """Provider that leaves text untouched."""

    def expand(self, project_file: str, text: str) -> str:
        return text


class MSBuildPropertyProvider(MacroProvider):
    """
    Substitutes `$(Property)` tokens for properties declared in a project file.

    Parsed properties are cached per project path for the lifetime of the
    provider.
    """

    def __init__(self, logger: Logger) -> None:
        self._logger = logger
        self._cache: dict[str, dict[str, str]] = {}

    def _properties(self, project_file: str) -> dict[str, str]:
        if project_file not in self._cache:
            properties = load_project_properties(Path(project_file))
            if properties is None:
                self._logger.debug(f"No MSBuild properties available for {project_file}")
                properties = {}
            self._cache[project_file] = properties
        return self._cache[project_file]

    def expand(self, project_file: str, text: str) -> str:
        for name, value in self._properties(project_file).items():
            text = text.replace(f"$({name})", value)
        return text
