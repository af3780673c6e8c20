"""Locate the source of a failure inside free-form diagnostic text.

CTest captures whatever the test binary printed, so references come in
several compiler and framework styles::

    /repo/src/math_test.cpp:42: Failure                 (GoogleTest, GCC)
    /repo/src/math_test.cpp:42:17: error: ...           (Clang)
    C:\\repo\\src\\math_test.cpp(42): error C2065: ...   (MSVC)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ctreport.utils.paths import normalize_file_path

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

_SOURCE_REF_REGEX = re.compile(
    r"(?P<path>(?:[A-Za-z]:)?[^\s:()<>\"'|*?]+)"
    r"(?::(?P<line>\d+)|\((?P<paren_line>\d+)(?:,\d+)?\))"
)


@dataclass(frozen=True)
class SourceLocation:
    """A resolved ``path:line`` reference."""

    path: str
    line: int


def get_exception_source(
    text: str,
    tracked_files: Iterable[str],
    get_relative_path: Callable[[str], str],
) -> SourceLocation | None:
    """Return the first reference in *text* that points at a tracked file.

    Every candidate is normalized and passed through *get_relative_path*;
    it matches when either its absolute or its relative form is tracked.

    Args:
        text: Diagnostic output of a failed test.
        tracked_files: Known repository files.
        get_relative_path: Rewrites a normalized path relative to the
            working directory.
    """
    tracked = {normalize_file_path(file) for file in tracked_files}
    if not text or not tracked:
        return None

    for line in text.splitlines():
        for match in _SOURCE_REF_REGEX.finditer(line):
            file_path = normalize_file_path(match.group("path"))
            relative = get_relative_path(file_path)
            if not relative:
                continue
            if relative in tracked or file_path in tracked:
                line_no = int(match.group("line") or match.group("paren_line"))
                return SourceLocation(path=relative, line=line_no)

    logger.debug("No tracked source reference found in failure text")
    return None
