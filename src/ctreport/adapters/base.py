"""Abstract base class and shared types for test report parsers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctreport.models.test_result import TestRunResult


@dataclass(frozen=True)
class ParseOptions:
    """Options shared by all report parsers."""

    parse_errors: bool = False
    """Resolve failure source locations for failed test cases."""

    work_dir: str | None = None
    """Explicit working directory; inferred from ``tracked_files`` when unset."""

    tracked_files: frozenset[str] = field(default_factory=frozenset)
    """Repository files that failure locations may point at."""


class TestParser(ABC):
    """Abstract base class for test report parsers.

    A parser turns the text of one report file into a ``TestRunResult``.
    Implementations must not keep per-report state on the instance, so a
    single parser can be reused for many reports.
    """

    def __init__(self, options: ParseOptions) -> None:
        self.options = options

    @abstractmethod
    async def parse(self, path: str, content: str) -> TestRunResult:
        """Parse *content* read from *path* into a ``TestRunResult``.

        Args:
            path: Report location, used for error messages and as the
                result's ``path``.
            content: Raw report text.

        Raises:
            ReportParseError: If the report cannot be parsed.
        """
