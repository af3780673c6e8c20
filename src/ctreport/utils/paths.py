"""Path normalization helpers shared by report parsers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def normalize_file_path(path: str) -> str:
    """Strip *path* and convert Windows separators to ``/``."""
    if not path:
        return path
    return path.strip().replace("\\", "/")


def normalize_dir_path(path: str, *, add_trailing_slash: bool = True) -> str:
    """Normalize a directory path, optionally ensuring a trailing ``/``."""
    if not path:
        return path
    path = normalize_file_path(path)
    if add_trailing_slash and not path.endswith("/"):
        path += "/"
    return path


def get_base_path(path: str, tracked_files: Iterable[str]) -> str | None:
    """Infer the directory *path* was resolved against.

    Tracked files are normally repository-relative (``src/a.cpp``) while
    compilers and test frameworks report absolute paths
    (``/home/ci/work/repo/src/a.cpp``).  The longest tracked file that is
    a suffix of *path* on a path-component boundary gives the base
    (``/home/ci/work/repo/``).

    Returns:
        ``""`` when *path* is itself tracked, the inferred base directory,
        or ``None`` when no tracked file matches.
    """
    path = normalize_file_path(path)
    tracked = [normalize_file_path(file) for file in tracked_files]
    if path in tracked:
        return ""

    best = ""
    for file in tracked:
        if len(file) <= len(best) or not path.endswith(file):
            continue
        prefix = path[: len(path) - len(file)]
        if prefix.endswith("/") or file.startswith("/"):
            best = file

    if not best:
        return None
    return path[: len(path) - len(best)]
