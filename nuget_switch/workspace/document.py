"""Workspace document: chosen local libraries for each NuGet package."""

import ntpath
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from nuget_switch.core.exceptions import InvalidArgumentError, KeyNotFoundError


def _file_name(path: str) -> str:
    # Selections may come from Windows hosts, so split on both separators
    return ntpath.basename(path)


def _require_package_id(package_id: str) -> None:
    if not package_id or not package_id.strip():
        raise InvalidArgumentError("Package id must not be blank", argument="package_id")


@dataclass
class WorkspaceDocument:
    """
    Mapping of package id to the local library paths chosen for it.

    A package registered with an empty list behaves as if it had no entry;
    keys are never purged. ``dirty`` is set by every mutating call and is
    not persisted.
    """

    selections: dict[str, list[str]] = field(default_factory=dict)
    dirty: bool = False

    def has_any_selections(self) -> bool:
        """True if any package has at least one selected library."""
        return any(paths for paths in self.selections.values())

    def add_local_references(self, package_id: str, paths: Iterable[str]) -> list[str]:
        """
        Add libraries for a package.

        A path is only added if no library with the same file name is
        already selected for the package, even from another directory.

        Args:
            package_id: NuGet package id
            paths: Absolute library paths

        Returns:
            The paths that were actually added
        """
        _require_package_id(package_id)
        paths = list(paths)
        if not paths:
            raise InvalidArgumentError("No libraries to add", argument="paths")

        existing = self.selections.setdefault(package_id, [])
        known_names = {_file_name(p) for p in existing}

        added = []
        for path in paths:
            name = _file_name(path)
            if name in known_names:
                continue
            existing.append(path)
            known_names.add(name)
            added.append(path)

        self.dirty = True
        return added

    def remove_libraries(self, package_id: str, paths: Iterable[str]) -> None:
        """Remove exact library paths from a registered package."""
        _require_package_id(package_id)
        paths = list(paths)
        if not paths:
            raise InvalidArgumentError("No libraries to remove", argument="paths")
        if package_id not in self.selections:
            raise KeyNotFoundError(f"Package not registered: {package_id}", key=package_id)

        selected = self.selections[package_id]
        for path in paths:
            if path in selected:
                selected.remove(path)

        self.dirty = True

    def get_selections(self, package_id: str) -> list[str]:
        """Libraries selected for a package; empty when none."""
        _require_package_id(package_id)
        return list(self.selections.get(package_id, []))

    def to_dict(self) -> dict[str, Any]:
        return {"libraries": {key: list(paths) for key, paths in self.selections.items()}}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkspaceDocument":
        libraries = data.get("libraries") or {}
        return cls(selections={key: list(paths) for key, paths in libraries.items()})
