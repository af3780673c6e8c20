"""CTest JUnit adapter: turns ``ctest --output-junit`` reports into results.

Implements ``TestParser`` for the single-``testsuite`` JUnit dialect that
CTest writes.  Test cases are grouped by classname in report order, each
case gets a tri-state outcome and a millisecond duration, and, when
enabled, failures are traced back to a tracked source file and line.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ctreport.adapters.base import ParseOptions, TestParser
from ctreport.errors import InvalidDurationError
from ctreport.models.test_result import (
    TestCaseError,
    TestCaseResult,
    TestExecutionResult,
    TestGroupResult,
    TestRunResult,
    TestSuiteResult,
)
from ctreport.parsing.junit_xml import decode_junit_report
from ctreport.utils.paths import get_base_path, normalize_dir_path, normalize_file_path
from ctreport.utils.source_location import get_exception_source

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ctreport.parsing.junit_xml import JunitReport, JunitTestCase, JunitTestSuite
    from ctreport.utils.source_location import SourceLocation

    SourceFinder = Callable[[str, Iterable[str], Callable[[str], str]], SourceLocation | None]
    BasePathFinder = Callable[[str, Iterable[str]], str | None]

logger = logging.getLogger(__name__)

_MS_PER_SECOND = 1000.0


# ── Case classification ──────────────────────────────────────────


def parse_time_ms(raw: str | None) -> float:
    """Convert a declared ``time`` attribute in seconds to milliseconds.

    Raises:
        InvalidDurationError: If *raw* is missing, non-numeric, or not finite.
    """
    if raw is None:
        raise InvalidDurationError(raw)
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise InvalidDurationError(raw) from exc
    if not math.isfinite(seconds):
        raise InvalidDurationError(raw)
    return seconds * _MS_PER_SECOND


def classify_test_case(tc: JunitTestCase) -> TestExecutionResult:
    """Failure wins over skipped; a case with neither marker succeeded."""
    if tc.failure:
        return TestExecutionResult.FAILED
    if tc.skipped:
        return TestExecutionResult.SKIPPED
    return TestExecutionResult.SUCCESS


# ── Grouping ─────────────────────────────────────────────────────


def group_test_cases(suite: JunitTestSuite) -> list[tuple[str, list[JunitTestCase]]]:
    """Partition the suite's cases by raw classname.

    Groups appear in order of the first case carrying their classname and
    keep their cases in report order.
    """
    if suite.testcase is None:
        return []

    groups: dict[str, list[JunitTestCase]] = {}
    for tc in suite.testcase:
        groups.setdefault(tc.classname, []).append(tc)
    return list(groups.items())


# ── Working directory ────────────────────────────────────────────


class WorkDirResolver:
    """Working directory for one parse operation.

    An explicit ``work_dir`` always wins.  Otherwise the directory is
    inferred from the first failure path that matches a tracked file and
    reused for the rest of the report.
    """

    def __init__(
        self,
        work_dir: str | None,
        tracked_files: Iterable[str],
        base_path_finder: BasePathFinder = get_base_path,
    ) -> None:
        self._work_dir = normalize_dir_path(work_dir) if work_dir else None
        self._tracked_files = tracked_files
        self._base_path_finder = base_path_finder
        self._assumed_work_dir: str | None = None

    def resolve(self, path: str) -> str | None:
        if self._work_dir is not None:
            return self._work_dir
        if self._assumed_work_dir is None:
            self._assumed_work_dir = self._base_path_finder(path, self._tracked_files)
            if self._assumed_work_dir is not None:
                logger.debug("Assuming working directory %r", self._assumed_work_dir)
        return self._assumed_work_dir

    def relative_path(self, path: str) -> str:
        """Normalize *path* and strip the working directory prefix from it."""
        path = normalize_file_path(path)
        work_dir = self.resolve(path)
        if work_dir and path.startswith(work_dir):
            path = path[len(work_dir) :]
        return path


# ── Parser ───────────────────────────────────────────────────────


class CtestJunitParser(TestParser):
    """Parser for CTest JUnit XML reports."""

    def __init__(
        self,
        options: ParseOptions,
        *,
        source_finder: SourceFinder = get_exception_source,
        base_path_finder: BasePathFinder = get_base_path,
    ) -> None:
        super().__init__(options)
        self._source_finder = source_finder
        self._base_path_finder = base_path_finder

    async def parse(self, path: str, content: str) -> TestRunResult:
        """Parse one CTest JUnit report.

        Raises:
            MalformedXmlError: If *content* is not well-formed XML.
            InvalidDurationError: If a ``time`` attribute is not numeric.
        """
        report = decode_junit_report(path, content)
        work_dir = WorkDirResolver(
            self.options.work_dir, self.options.tracked_files, self._base_path_finder
        )
        try:
            return self._get_test_run_result(path, report, work_dir)
        except InvalidDurationError as exc:
            raise InvalidDurationError(exc.value, path) from exc

    def _get_test_run_result(
        self, path: str, report: JunitReport, work_dir: WorkDirResolver
    ) -> TestRunResult:
        if report.testsuite is None:
            return TestRunResult(path=path, suites=(), time=0.0)

        ts = report.testsuite
        time = parse_time_ms(ts.time)
        suite = TestSuiteResult(
            name=ts.name.strip(),
            groups=self._get_groups(ts, work_dir),
            time=time,
        )
        logger.debug(
            "Parsed suite %r with %d groups from %s", suite.name, len(suite.groups), path
        )
        return TestRunResult(path=path, suites=(suite,), time=time)

    def _get_groups(
        self, suite: JunitTestSuite, work_dir: WorkDirResolver
    ) -> tuple[TestGroupResult, ...]:
        return tuple(
            TestGroupResult(
                name=classname,
                tests=tuple(self._get_test_case_result(tc, work_dir) for tc in cases),
            )
            for classname, cases in group_test_cases(suite)
        )

    def _get_test_case_result(
        self, tc: JunitTestCase, work_dir: WorkDirResolver
    ) -> TestCaseResult:
        return TestCaseResult(
            name=tc.name.strip(),
            result=classify_test_case(tc),
            time=parse_time_ms(tc.time),
            error=self._get_test_case_error(tc, work_dir),
        )

    def _get_test_case_error(
        self, tc: JunitTestCase, work_dir: WorkDirResolver
    ) -> TestCaseError | None:
        if not self.options.parse_errors or not tc.failure:
            return None

        details = tc.failure[0]
        src = self._source_finder(details, self.options.tracked_files, work_dir.relative_path)
        if src is None:
            return TestCaseError(details=details)
        return TestCaseError(details=details, path=src.path, line=src.line)
