"""Solution and project metadata consumed by macro resolution."""

from __future__ import annotations

import enum
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import Mapping

from cmdrunner.logging import Logger
from cmdrunner.msbuild import load_project_properties

__all__ = [
    "SOLUTION_FOLDER_TYPE",
    "BuildContext",
    "BuildContextError",
    "BuildContextProvider",
    "ItemKind",
    "ProjectMetadata",
    "ProjectTree",
    "SolutionFileProvider",
    "SolutionItem",
    "StaticBuildContextProvider",
    "find_solution_file",
]

SOLUTION_FOLDER_TYPE = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"

PROJECT_PATTERN = re.compile(
    r'^Project\("(?P<type>\{[^}]+\})"\)\s*=\s*"(?P<name>[^"]*)"\s*,\s*'
    r'"(?P<path>[^"]*)"\s*,\s*"(?P<guid>\{[^}]+\})"'
)
SECTION_PATTERN = re.compile(r"^GlobalSection\((?P<name>\w+)\)")
MAPPING_PATTERN = re.compile(r"^(?P<key>[^=]+?)\s*=\s*(?P<value>.+?)$")


class BuildContextError(Exception):
    """Raised when a build context cannot be obtained."""

    pass


class ItemKind(enum.Enum):
    PROJECT = "project"
    SOLUTION_FOLDER = "solution_folder"


@dataclass(frozen=True)
class ProjectMetadata:
    """Build metadata of a single project.

    `configuration_properties` is None for project kinds that expose no
    buildable configuration; target-level macros are skipped for those.
    """

    file_path: str
    name: str
    output_directory: str = ""
    output_file_name: str = ""
    configuration_properties: Mapping[str, str] | None = None


@dataclass(frozen=True)
class SolutionItem:
    """A node of the solution tree: a project or a solution folder."""

    id: str
    kind: ItemKind
    project: ProjectMetadata | None = None
    children: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectTree:
    """Arena of solution items indexed by identifier, plus ordered roots."""

    items: Mapping[str, SolutionItem] = field(default_factory=dict)
    roots: tuple[str, ...] = ()

    @classmethod
    def from_projects(cls, projects: list[ProjectMetadata]) -> ProjectTree:
        """Build a flat tree with every project at the top level."""
        items = {
            project.file_path: SolutionItem(project.file_path, ItemKind.PROJECT, project)
            for project in projects
        }
        return cls(items=items, roots=tuple(items))


@dataclass(frozen=True)
class BuildContext:
    """Read-only snapshot of the solution-level build environment."""

    solution_path: str
    configuration_name: str = ""
    platform_name: str = ""
    devenv_dir: str = ""
    projects: ProjectTree = field(default_factory=ProjectTree)


class BuildContextProvider(ABC):
    """Source of the build context used for macro resolution."""

    @abstractmethod
    def get_context(self) -> BuildContext | None:
        """Return the current build context, or None if no solution is open."""
        ...


class StaticBuildContextProvider(BuildContextProvider):
    """Provider returning a fixed, pre-built context."""

    def __init__(self, context: BuildContext | None) -> None:
        self._context = context

    def get_context(self) -> BuildContext | None:
        return self._context


def find_solution_file(start_dir: Path) -> Path | None:
    """Find the solution file governing `start_dir`.

    Walks up from `start_dir`; the first directory holding exactly one
    `*.sln` file wins. Directories with several solutions are ambiguous and
    skipped.

    Returns:
        Path to the solution file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        solutions = sorted(current.glob("*.sln"))
        if len(solutions) == 1:
            return solutions[0]

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


class SolutionFileProvider(BuildContextProvider):
    """
    Builds the context by reading a Visual Studio solution file.

    Project entries, solution folders and their nesting come from the
    `.sln` file; output directories and file names come from the MSBuild
    project files it references.
    """

    def __init__(
        self,
        solution_path: Path,
        logger: Logger,
        configuration_name: str = "",
        platform_name: str = "",
        devenv_dir: str = "",
    ) -> None:
        self._solution_path = solution_path
        self._logger = logger
        self._configuration_name = configuration_name
        self._platform_name = platform_name
        self._devenv_dir = devenv_dir or os.environ.get("DevEnvDir", "")

    def get_context(self) -> BuildContext:
        """Parse the solution file.

        Raises:
            BuildContextError: If the solution file cannot be read
        """
        try:
            lines = self._solution_path.read_text(encoding="utf-8-sig").splitlines()
        except (IOError, OSError) as e:
            raise BuildContextError(
                f"Error reading solution file '{self._solution_path}': {e}"
            ) from e

        entries, sections = _parse_solution_lines(lines)

        configuration, platform = self._configuration_name, self._platform_name
        solution_configurations = sections.get("SolutionConfigurationPlatforms", [])
        if solution_configurations and not (configuration and platform):
            default_configuration, _, default_platform = solution_configurations[0][0].partition("|")
            configuration = configuration or default_configuration.strip()
            platform = platform or default_platform.strip()

        self._logger.debug(
            f"Solution {self._solution_path}: {len(entries)} entries, "
            f"configuration '{configuration}|{platform}'"
        )

        solution_dir = self._solution_path.parent
        items: dict[str, SolutionItem] = {}
        for guid, type_guid, name, rel_path in entries:
            if type_guid.upper() == SOLUTION_FOLDER_TYPE:
                items[guid] = SolutionItem(guid, ItemKind.SOLUTION_FOLDER)
            else:
                project_path = solution_dir.joinpath(*PureWindowsPath(rel_path).parts)
                project = _read_project(project_path, name, configuration, platform)
                items[guid] = SolutionItem(guid, ItemKind.PROJECT, project)

        nested: dict[str, list[str]] = {}
        child_ids = set()
        for child, parent in sections.get("NestedProjects", []):
            child, parent = child.upper(), parent.upper()
            if child in items and parent in items:
                nested.setdefault(parent, []).append(child)
                child_ids.add(child)

        # Children keep solution file order, not NestedProjects order
        order = {guid: index for index, guid in enumerate(items)}
        for guid, children in nested.items():
            children.sort(key=order.__getitem__)
            items[guid] = SolutionItem(
                guid, items[guid].kind, items[guid].project, tuple(children)
            )

        roots = tuple(guid for guid in items if guid not in child_ids)
        return BuildContext(
            solution_path=str(self._solution_path),
            configuration_name=configuration,
            platform_name=platform,
            devenv_dir=self._devenv_dir,
            projects=ProjectTree(items=items, roots=roots),
        )


def _parse_solution_lines(
    lines: list[str],
) -> tuple[list[tuple[str, str, str, str]], dict[str, list[tuple[str, str]]]]:
    """Split a solution file into project entries and global section mappings."""
    entries = []
    sections: dict[str, list[tuple[str, str]]] = {}
    current_section: str | None = None

    for raw in lines:
        line = raw.strip()

        match = PROJECT_PATTERN.match(line)
        if match:
            entries.append((
                match.group("guid").upper(),
                match.group("type"),
                match.group("name"),
                match.group("path"),
            ))
            continue

        match = SECTION_PATTERN.match(line)
        if match:
            current_section = match.group("name")
            sections.setdefault(current_section, [])
            continue

        if line == "EndGlobalSection":
            current_section = None
            continue

        if current_section is not None:
            match = MAPPING_PATTERN.match(line)
            if match:
                sections[current_section].append((match.group("key"), match.group("value")))

    return entries, sections


def _read_project(path: Path, name: str, configuration: str, platform: str) -> ProjectMetadata:
    properties = load_project_properties(path, configuration, platform)
    if properties is None:
        # Website folders and non-MSBuild projects have no build configuration
        return ProjectMetadata(file_path=str(path), name=name)

    output_path = properties.get("OutputPath") or f"bin\\{configuration}\\"
    properties["OutputPath"] = output_path

    assembly_name = properties.get("AssemblyName") or name
    extension = properties.get("TargetExt")
    if not extension:
        output_type = properties.get("OutputType", "Library").lower()
        extension = ".exe" if output_type in ("exe", "winexe") else ".dll"

    return ProjectMetadata(
        file_path=str(path),
        name=name,
        output_directory=output_path,
        output_file_name=f"{assembly_name}{extension}",
        configuration_properties=properties,
    )
