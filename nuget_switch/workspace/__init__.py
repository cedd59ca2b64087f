"""Workspace document recording local library selections per package."""

from nuget_switch.workspace.document import WorkspaceDocument
from nuget_switch.workspace.storage import WorkspaceStorage

__all__ = [
    "WorkspaceDocument",
    "WorkspaceStorage",
]
