"""Build macro substitution for task names and working directories.

This module replaces `$(Name)` tokens with values taken from the active
solution and the project a task file belongs to. Substitution is literal:
tokens without a known value are left exactly as written.
"""

from __future__ import annotations

import ntpath
import posixpath
import re
from types import ModuleType

from cmdrunner.build_context import BuildContext, BuildContextProvider, ProjectMetadata
from cmdrunner.logging import Logger
from cmdrunner.msbuild import MacroProvider, NullMacroProvider
from cmdrunner.selector import ProjectSelector, flatten_projects

__all__ = [
    "SOLUTION_MACROS",
    "PROJECT_MACROS",
    "VariableResolver",
    "apply_variables",
    "build_project_variables",
    "build_solution_variables",
]

SOLUTION_MACROS = (
    "$(ConfigurationName)",
    "$(DevEnvDir)",
    "$(PlatformName)",
    "$(SolutionDir)",
    "$(SolutionExt)",
    "$(SolutionFileName)",
    "$(SolutionName)",
    "$(SolutionPath)",
)

PROJECT_MACROS = (
    "$(OutDir)",
    "$(ProjectDir)",
    "$(ProjectExt)",
    "$(ProjectFileName)",
    "$(ProjectName)",
    "$(ProjectPath)",
    "$(TargetDir)",
    "$(TargetExt)",
    "$(TargetFileName)",
    "$(TargetName)",
    "$(TargetPath)",
)

WINDOWS_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


def _pathmod(path: str) -> ModuleType:
    """Pick Windows or POSIX path rules from the shape of `path`."""
    if "\\" in path or WINDOWS_DRIVE_PATTERN.match(path):
        return ntpath
    return posixpath


def _stem(pathmod: ModuleType, path: str) -> str:
    return pathmod.splitext(pathmod.basename(path))[0]


def apply_variables(text: str, variables: dict[str, str]) -> str:
    """Replace every token of `variables` in `text`, in mapping order.

    Args:
        text: Text containing `$(Name)` tokens
        variables: Ordered mapping of literal token to replacement value

    Returns:
        A new string; unknown tokens are left unchanged
    """
    for token, value in variables.items():
        text = text.replace(token, value)
    return text


def build_solution_variables(context: BuildContext) -> dict[str, str]:
    """Solution-level macros: configuration, platform and solution file parts.

    Example:
        >>> build_solution_variables(BuildContext("/x/MySolution.sln"))["$(SolutionName)"]
        'MySolution'
    """
    solution = context.solution_path
    pathmod = _pathmod(solution)
    return {
        "$(ConfigurationName)": context.configuration_name,
        "$(DevEnvDir)": context.devenv_dir,
        "$(PlatformName)": context.platform_name,
        "$(SolutionDir)": pathmod.dirname(solution),
        "$(SolutionExt)": pathmod.splitext(solution)[1],
        "$(SolutionFileName)": pathmod.basename(solution),
        "$(SolutionName)": _stem(pathmod, solution),
        "$(SolutionPath)": solution,
    }


def build_project_variables(project: ProjectMetadata) -> dict[str, str] | None:
    """Project and target macros for `project`.

    Returns:
        The macro mapping, or None when the project exposes no build
        configuration (its macros must then stay unresolved)
    """
    properties = project.configuration_properties
    if properties is None:
        return None

    pathmod = _pathmod(project.file_path)
    out_dir = properties.get("OutputPath", project.output_directory)
    project_dir = pathmod.dirname(project.file_path)
    target_file_name = project.output_file_name

    return {
        "$(OutDir)": out_dir,
        "$(ProjectDir)": project_dir,
        "$(ProjectExt)": pathmod.splitext(project.file_path)[1],
        "$(ProjectFileName)": pathmod.basename(project.file_path),
        "$(ProjectName)": project.name,
        "$(ProjectPath)": project.file_path,
        "$(TargetDir)": pathmod.join(project_dir, out_dir),
        "$(TargetExt)": pathmod.splitext(target_file_name)[1],
        "$(TargetFileName)": target_file_name,
        "$(TargetName)": project.name,
        "$(TargetPath)": pathmod.join(project_dir, out_dir, target_file_name),
    }


class VariableResolver:
    """
    Resolves build macros against the context supplied by a provider.

    Collaborators are injected: the build context provider, the project
    selector and the build-tool macro provider.
    """

    def __init__(
        self,
        provider: BuildContextProvider,
        logger: Logger,
        selector: ProjectSelector | None = None,
        macro_provider: MacroProvider | None = None,
    ) -> None:
        self._provider = provider
        self._logger = logger
        self._selector = selector or ProjectSelector()
        self._macro_provider = macro_provider or NullMacroProvider()

    def get_context(self) -> BuildContext | None:
        return self._provider.get_context()

    def resolve(
        self,
        template: str | None,
        cmds_dir: str,
        context: BuildContext | None = None,
    ) -> str | None:
        """Substitute every available macro in `template`.

        Args:
            template: Text to resolve; None is passed through untouched
            cmds_dir: Directory of the task file, used to select the project
            context: Pre-fetched build context; fetched from the provider
                when omitted

        Returns:
            The resolved text, or None if `template` is None
        """
        if template is None:
            return None

        if context is None:
            context = self._provider.get_context()
        if context is None:
            self._logger.trace("No solution context; macros left unresolved")
            return template

        result = apply_variables(template, build_solution_variables(context))

        project = self._selector.select(flatten_projects(context.projects), cmds_dir)
        if project is None:
            self._logger.trace(f"No project matches {cmds_dir}")
            return result

        project_variables = build_project_variables(project)
        if project_variables is not None:
            result = apply_variables(result, project_variables)
        else:
            self._logger.trace(f"Project {project.name} has no build configuration")

        result = self._macro_provider.expand(project.file_path, result)

        if result != template:
            self._logger.debug(f"Resolved '{template}' -> '{result}' ({project.name})")
        return result
