""".NET solution and project file operations."""

from nuget_switch.dotnet.paths import relative_path
from nuget_switch.dotnet.project_file import (
    PackageRef,
    add_file_references,
    list_package_references,
    remove_package_reference,
)
from nuget_switch.dotnet.solution import Project, Solution
from nuget_switch.dotnet.solution_file import SolutionRef, parse_projects

__all__ = [
    "relative_path",
    "PackageRef",
    "add_file_references",
    "list_package_references",
    "remove_package_reference",
    "Project",
    "Solution",
    "SolutionRef",
    "parse_projects",
]
