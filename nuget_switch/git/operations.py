"""Git status and revert of project files touched by a switch."""

from pathlib import Path

import git
from git import GitCommandError, Repo

from nuget_switch.core.exceptions import GitOperationError
from nuget_switch.utils.logging import get_logger

logger = get_logger(__name__)

PROJECT_FILE_SUFFIX = ".csproj"


class GitOperations:
    """
    Wrapper for the Git operations used around a switch, using GitPython.

    Lists project files modified in the working tree and reverts them to HEAD.
    """

    def __init__(self, repo: Repo):
        self.repo = repo
        self.repo_path = Path(repo.working_tree_dir)

    @classmethod
    def discover(cls, path: str | Path) -> "GitOperations | None":
        """
        Find the repository containing ``path``.

        Returns:
            GitOperations for the enclosing repository, or None if ``path``
            is not inside a Git working tree
        """
        try:
            repo = Repo(path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            logger.info(f"No Git repository found for {path}")
            return None

        if repo.bare:
            return None
        return cls(repo)

    def modified_project_files(self) -> list[str]:
        """Project files (repository relative) modified in the working tree."""
        try:
            changed = [item.a_path for item in self.repo.index.diff(None)]
        except GitCommandError as e:
            raise GitOperationError(
                "Failed to get repository status",
                command="git diff",
                stderr=e.stderr,
            ) from e

        return sorted(
            path for path in set(changed) if path.lower().endswith(PROJECT_FILE_SUFFIX)
        )

    def revert(self, paths: list[str]) -> int:
        """
        Restore the given repository-relative paths from HEAD.

        Returns:
            Number of files reverted
        """
        if not paths:
            return 0

        logger.info(f"[GIT] Reverting {len(paths)} files to HEAD")
        try:
            self.repo.git.checkout("HEAD", "--", *paths)
        except GitCommandError as e:
            raise GitOperationError(
                "Failed to revert files",
                command="git checkout HEAD --",
                stderr=e.stderr,
            ) from e

        return len(paths)
