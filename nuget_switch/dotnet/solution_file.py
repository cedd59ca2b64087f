"""Parse Visual Studio solution manifests (line-oriented text, not XML)."""

import re
from dataclasses import dataclass
from pathlib import Path

from nuget_switch.core.exceptions import NotFoundError
from nuget_switch.utils.logging import get_logger

logger = get_logger(__name__)

# Project("{TYPE-GUID}") = "Name", "Path\To\Project.csproj", "{PROJECT-GUID}"
_PROJECT_LINE = re.compile(
    r'^Project\("\{[^}]+\}"\)\s*=\s*"([^"]+)",\s*"([^"]+)",\s*"\{[^}]+\}"'
)


@dataclass(frozen=True)
class SolutionRef:
    """A project entry from a solution manifest."""

    name: str
    path: str  # relative to the solution folder, as written in the manifest


def parse_projects(manifest_path: str | Path) -> list[SolutionRef]:
    """
    Extract the member projects of a solution manifest.

    Lines that do not declare a project (global sections, nested project
    sections, configuration maps) are ignored.

    Args:
        manifest_path: Path to the .sln file

    Returns:
        Projects in file order

    Raises:
        NotFoundError: If the manifest cannot be read
    """
    manifest_path = Path(manifest_path)

    try:
        with open(manifest_path, "r", encoding="utf-8-sig") as f:
            lines = f.readlines()
    except OSError as e:
        raise NotFoundError(
            f"Solution file not found: {manifest_path}",
            path=str(manifest_path),
        ) from e

    projects = []
    for line in lines:
        match = _PROJECT_LINE.match(line)
        if match:
            projects.append(SolutionRef(name=match.group(1), path=match.group(2)))

    logger.debug(f"Found {len(projects)} projects in {manifest_path.name}")
    return projects
