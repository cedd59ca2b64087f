"""Solution aggregate: loaded projects, package switching and obj cleanup."""

import ntpath
import re
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from nuget_switch.core.exceptions import InvalidArgumentError, NuGetSwitchError, OperationError
from nuget_switch.dotnet.paths import relative_path
from nuget_switch.dotnet.project_file import (
    PackageRef,
    add_file_references,
    list_package_references,
    remove_package_reference,
)
from nuget_switch.dotnet.solution_file import parse_projects
from nuget_switch.utils.logging import get_logger
from nuget_switch.workspace.document import WorkspaceDocument

logger = get_logger(__name__)

NO_OBJ_FOLDERS_MESSAGE = "No obj folders found to delete."


@dataclass
class Project:
    """A project of a loaded solution."""

    name: str
    path: str  # relative to the solution folder, as written in the manifest
    packages: list[PackageRef] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name} - {self.path}"


class Solution:
    """
    A Visual Studio solution and the NuGet packages of its projects.

    ``package_ids`` is rebuilt by every ``load()`` and holds each package id
    once, in the order it was first seen.
    """

    def __init__(self, file_path: str | Path, max_workers: int = 8, obj_folder_name: str = "obj"):
        if not str(file_path).strip():
            raise InvalidArgumentError("Solution file path must not be blank", argument="file_path")

        self.file_path = Path(file_path).absolute()
        self.folder = self.file_path.parent
        self.max_workers = max_workers
        self.obj_folder_name = obj_folder_name
        self.projects: list[Project] = []
        self.package_ids: list[str] = []

    def project_file(self, project: Project) -> Path:
        """Absolute path of a project file."""
        # Manifests are written on Windows; accept either separator
        return self.folder.joinpath(*re.split(r"[\\/]", project.path))

    def load(self) -> None:
        """Parse the manifest and read the package references of every project."""
        self.projects = []
        self.package_ids = []
        seen: set[str] = set()

        for ref in parse_projects(self.file_path):
            project = Project(name=ref.name, path=ref.path)
            project.packages = list_package_references(self.project_file(project))
            self.projects.append(project)

            for package in project.packages:
                if package.package_id not in seen:
                    seen.add(package.package_id)
                    self.package_ids.append(package.package_id)

        logger.info(
            f"Loaded {self.file_path.name}: {len(self.projects)} projects, "
            f"{len(self.package_ids)} packages"
        )

    def switch(self, document: WorkspaceDocument) -> list[str]:
        """
        Replace package references with the local libraries chosen in ``document``.

        The whole traversal runs on a worker thread; the caller blocks until
        it is done and gets every status line at once. The first failure
        aborts the traversal.

        Returns:
            Status lines describing each step

        Raises:
            OperationError: Carrying the status lines produced before the failure
        """
        messages: list[str] = []
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="switch") as executor:
            future = executor.submit(self._switch_projects, document, messages)
            try:
                future.result()
            except NuGetSwitchError as e:
                logger.error(f"Switch aborted: {e}")
                raise OperationError(f"Switch failed: {e.message}", messages=list(messages)) from e
            except OSError as e:
                logger.error(f"Switch aborted: {e}")
                raise OperationError(f"Switch failed: {e}", messages=list(messages)) from e

        return messages

    def _switch_projects(self, document: WorkspaceDocument, messages: list[str]) -> None:
        for project in self.projects:
            project_path = self.project_file(project)
            project_dir = str(project_path.parent)

            messages.append(f"Updating project: {project_path}")

            for package in project.packages:
                libraries = document.get_selections(package.package_id)
                if not libraries:
                    messages.append(f"\tSkipping: {package.package_id}, no dlls selected")
                    continue

                messages.append(f"\tUpdating: {package.package_id}")
                messages.append(f"\t\tRemove package: {package.package_id}")
                if not remove_package_reference(project_path, package.package_id):
                    messages.append(
                        f"\t\tSkipping: {package.package_id}, package reference not found in project file"
                    )
                    continue

                references = []
                for library in libraries:
                    hint_path = relative_path(library, project_dir)
                    name = ntpath.splitext(ntpath.basename(library))[0]
                    messages.append(f"\t\tAdd reference: {hint_path}")
                    references.append((name, hint_path))

                add_file_references(project_path, references)

            logger.info(f"Switched {project.name}")

    def delete_obj_folders(self) -> list[str]:
        """
        Delete the obj folder beside every project file, one task per folder.

        Every deletion runs to completion even if another one fails. Failures
        are collected and raised together once all tasks are done.

        Returns:
            One line per deleted folder, or a single line when there were none

        Raises:
            OperationError: If any folder could not be deleted
        """
        folders = []
        for project in self.projects:
            obj_folder = self.project_file(project).parent / self.obj_folder_name
            if obj_folder.is_dir() and obj_folder not in folders:
                folders.append(obj_folder)

        if not folders:
            return [NO_OBJ_FOLDERS_MESSAGE]

        messages: list[str] = []
        failures: list[str] = []
        lock = threading.Lock()

        def delete(folder: Path) -> None:
            shutil.rmtree(folder)
            with lock:
                messages.append(f"Deleted: {folder}")

        workers = min(self.max_workers, len(folders))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="obj-cleanup") as executor:
            futures = {executor.submit(delete, folder): folder for folder in folders}
            for future in as_completed(futures):
                try:
                    future.result()
                except OSError as e:
                    logger.error(f"Failed to delete {futures[future]}: {e}")
                    failures.append(f"Failed to delete {futures[future]}: {e}")

        if failures:
            raise OperationError(
                f"Failed to delete {len(failures)} of {len(folders)} obj folders",
                messages=messages,
                failures=failures,
            )

        return messages
