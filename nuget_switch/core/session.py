"""Workspace session: the host-facing surface over a solution and its workspace document."""

from pathlib import Path
from typing import Protocol

from nuget_switch.config import WorkspaceSettings
from nuget_switch.core.exceptions import IOFailureError, SessionStateError
from nuget_switch.dotnet.solution import Solution
from nuget_switch.utils.logging import get_logger
from nuget_switch.workspace.document import WorkspaceDocument
from nuget_switch.workspace.storage import WorkspaceStorage

logger = get_logger(__name__)


class SelectionProvider(Protocol):
    """What the host supplies: a solution to open and libraries to add."""

    def choose_solution(self) -> str | None:
        """Return a solution file path, or None if the user cancelled."""
        ...

    def choose_libraries(self, start_folder: Path) -> list[str] | None:
        """Return absolute library paths, or None if the user cancelled."""
        ...


class WorkspaceSession:
    """
    One open solution together with its workspace document.

    Every operation returns plain values (usually status lines) or raises;
    the host derives its own enablement state from the ``can_*`` properties.
    """

    def __init__(
        self,
        provider: SelectionProvider | None = None,
        settings: WorkspaceSettings | None = None,
    ):
        self.provider = provider
        self.settings = settings or WorkspaceSettings()
        self.storage = WorkspaceStorage(suffix=self.settings.workspace_suffix)
        self.solution: Solution | None = None
        self.document: WorkspaceDocument | None = None

    @property
    def is_open(self) -> bool:
        return self.solution is not None

    @property
    def is_dirty(self) -> bool:
        return self.document is not None and self.document.dirty

    @property
    def can_switch(self) -> bool:
        return self.document is not None and self.document.has_any_selections()

    @property
    def can_delete_obj_folders(self) -> bool:
        return self.solution is not None and bool(self.solution.projects)

    @property
    def package_ids(self) -> list[str]:
        return list(self.solution.package_ids) if self.solution else []

    def libraries(self, package_id: str) -> list[str]:
        """Libraries selected for a package in the open workspace."""
        if self.document is None:
            return []
        return self.document.get_selections(package_id)

    def _require_open(self) -> tuple[Solution, WorkspaceDocument]:
        if self.solution is None or self.document is None:
            raise SessionStateError("No solution open")
        return self.solution, self.document

    def open(self, solution_path: str | Path | None = None) -> list[str]:
        """
        Open a solution and its workspace document.

        Without ``solution_path`` the provider is asked for one; a cancelled
        choice opens nothing and returns no messages.

        Returns:
            Status lines about the workspace document
        """
        if self.solution is not None:
            raise SessionStateError(f"A solution is already open: {self.solution.file_path}")

        if solution_path is None:
            if self.provider is None:
                raise SessionStateError("No solution path given and no selection provider configured")
            solution_path = self.provider.choose_solution()
            if solution_path is None:
                return []

        messages = []
        workspace_file = self.storage.path_for(solution_path)
        try:
            document = self.storage.load(solution_path)
        except IOFailureError as e:
            logger.warning(str(e))
            document = None
            messages.append(f"Failed to load workspace document: {e.message}")

        if document is not None:
            messages.append(f"Workspace document found: {workspace_file}")
        else:
            document = WorkspaceDocument()
            if not messages:
                messages.append(f"No workspace document found for: {solution_path}")

        solution = Solution(
            solution_path,
            max_workers=self.settings.max_workers,
            obj_folder_name=self.settings.obj_folder_name,
        )
        solution.load()

        self.solution = solution
        self.document = document
        return messages

    def add_local_references(self, package_id: str, paths: list[str] | None = None) -> list[str]:
        """
        Select local libraries for a package.

        Without ``paths`` the provider is asked, starting in the solution
        folder. A cancelled or empty choice changes nothing.

        Returns:
            The paths that were added
        """
        solution, document = self._require_open()

        if paths is None:
            if self.provider is None:
                raise SessionStateError("No libraries given and no selection provider configured")
            paths = self.provider.choose_libraries(solution.folder)
            if not paths:
                return []

        return document.add_local_references(package_id, paths)

    def remove_libraries(self, package_id: str, paths: list[str]) -> None:
        _, document = self._require_open()
        document.remove_libraries(package_id, paths)

    def switch(self) -> list[str]:
        """Switch package references of the open solution to the selected libraries."""
        solution, document = self._require_open()
        return solution.switch(document)

    def reload(self) -> None:
        """Re-read the solution's projects, e.g. after project files were reverted."""
        solution, _ = self._require_open()
        solution.load()

    def delete_obj_folders(self) -> list[str]:
        solution, _ = self._require_open()
        return solution.delete_obj_folders()

    def close(self) -> list[str]:
        """
        Close the solution, saving the workspace document if it changed.

        Returns:
            Status lines about the save
        """
        solution, document = self._require_open()

        messages = []
        if document.dirty:
            path = self.storage.save(solution.file_path, document)
            messages.append(f"Workspace saved: {path}")

        self.solution = None
        self.document = None
        return messages
