"""cmdrunner - Command tasks with build macro resolution."""

__version__ = "0.1.0"

from cmdrunner.build_context import (
    BuildContext,
    BuildContextError,
    BuildContextProvider,
    ProjectMetadata,
    ProjectTree,
    SolutionFileProvider,
    StaticBuildContextProvider,
)
from cmdrunner.hierarchy import (
    CommandDescriptor,
    HierarchyBuilder,
    TaskNode,
    TaskRunnerConfig,
    make_leaf,
)
from cmdrunner.parser import ConfigError, ConfigReadError, TaskRecord, load_tasks
from cmdrunner.selector import ProjectSelector, prefix_match, substring_match
from cmdrunner.variables import VariableResolver

__all__ = [
    "__version__",
    "BuildContext",
    "BuildContextError",
    "BuildContextProvider",
    "ProjectMetadata",
    "ProjectTree",
    "SolutionFileProvider",
    "StaticBuildContextProvider",
    "CommandDescriptor",
    "HierarchyBuilder",
    "TaskNode",
    "TaskRunnerConfig",
    "make_leaf",
    "ConfigError",
    "ConfigReadError",
    "TaskRecord",
    "load_tasks",
    "ProjectSelector",
    "prefix_match",
    "substring_match",
    "VariableResolver",
]
