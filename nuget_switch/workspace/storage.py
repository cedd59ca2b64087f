"""Persistence of workspace documents next to the solution file."""

from pathlib import Path

import orjson
from pydantic import BaseModel, Field, ValidationError

from nuget_switch.core.exceptions import IOFailureError
from nuget_switch.utils.json_utils import JsonHandler
from nuget_switch.utils.logging import get_logger
from nuget_switch.workspace.document import WorkspaceDocument

logger = get_logger(__name__)


class _WorkspaceFile(BaseModel):
    """On-disk shape of the workspace side file."""

    libraries: dict[str, list[str]] = Field(default_factory=dict)


class WorkspaceStorage:
    """
    Loads and saves the workspace document of a solution.

    The document lives beside the solution as ``<solution file><suffix>``.
    The default suffix ends in ``.tmp`` so version control ignores it.
    """

    def __init__(self, suffix: str = ".nugetswitch.tmp"):
        self.suffix = suffix

    def path_for(self, solution_path: str | Path) -> Path:
        """Side file path for a solution manifest."""
        solution_path = Path(solution_path)
        return solution_path.with_name(solution_path.name + self.suffix)

    def load(self, solution_path: str | Path) -> WorkspaceDocument | None:
        """
        Load the workspace document of a solution.

        Returns:
            The document, or None when no side file exists

        Raises:
            IOFailureError: If the side file cannot be read or is malformed
        """
        path = self.path_for(solution_path)
        if not path.is_file():
            return None

        try:
            data = _WorkspaceFile.model_validate(JsonHandler.load_file(path))
        except (OSError, orjson.JSONDecodeError, ValidationError) as e:
            raise IOFailureError(f"Failed to load workspace document {path}: {e}", path=str(path)) from e

        logger.info(f"Loaded workspace document: {path}")
        return WorkspaceDocument.from_dict(data.model_dump())

    def save(self, solution_path: str | Path, document: WorkspaceDocument) -> Path:
        """Write the document and clear its dirty flag."""
        path = self.path_for(solution_path)
        try:
            JsonHandler.dump_file(document.to_dict(), path)
        except OSError as e:
            raise IOFailureError(f"Failed to save workspace document {path}: {e}", path=str(path)) from e

        document.dirty = False
        logger.info(f"Saved workspace document: {path}")
        return path
