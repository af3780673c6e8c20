"""Git helpers for discovering the files tracked in a repository."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitOperationError(Exception):
    """Exception raised when git operations fail."""


def _git_executable() -> str:
    """Resolve the full path to the ``git`` executable."""
    return shutil.which("git") or "git"


def list_tracked_files(repo_path: Path | str) -> list[str]:
    """List files tracked by git, relative to the repository root.

    Args:
        repo_path: Path inside a git working tree.

    Returns:
        Repository-relative paths using ``/`` separators.

    Raises:
        GitOperationError: If git is missing or *repo_path* is not a repository.
    """
    path = Path(repo_path)
    try:
        result = subprocess.run(
            [_git_executable(), "ls-files", "--full-name", "-z"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise GitOperationError("git executable not found") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or str(exc)).strip()
        raise GitOperationError(f"Failed to list tracked files: {detail}") from exc

    files = [entry for entry in result.stdout.split("\0") if entry]
    logger.debug("git ls-files returned %d files in %s", len(files), path)
    return files
