"""Git integration for modified project files."""

from nuget_switch.git.operations import GitOperations

__all__ = ["GitOperations"]
