"""Serialize parsed test results to JSON for downstream tooling."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ctreport.models.test_result import (
        TestCaseError,
        TestCaseResult,
        TestGroupResult,
        TestRunResult,
        TestSuiteResult,
    )

logger = logging.getLogger(__name__)


class JSONReporter:
    """Generate JSON documents from ``TestRunResult`` trees.

    Times are emitted in milliseconds and outcomes as their enum values.
    """

    def generate(self, output_path: Path, results: Sequence[TestRunResult]) -> Path:
        """Write *results* to *output_path* and return it."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(results), encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, results: Sequence[TestRunResult]) -> str:
        """Return *results* as a JSON string."""
        payload = {"runs": [run_to_dict(run) for run in results]}
        return json.dumps(payload, indent=2, ensure_ascii=False)


def run_to_dict(run: TestRunResult) -> dict[str, Any]:
    return {
        "path": run.path,
        "time": run.time,
        "suites": [_suite_to_dict(suite) for suite in run.suites],
    }


def _suite_to_dict(suite: TestSuiteResult) -> dict[str, Any]:
    return {
        "name": suite.name,
        "time": suite.time,
        "groups": [_group_to_dict(group) for group in suite.groups],
    }


def _group_to_dict(group: TestGroupResult) -> dict[str, Any]:
    return {"name": group.name, "tests": [_case_to_dict(tc) for tc in group.tests]}


def _case_to_dict(tc: TestCaseResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": tc.name,
        "result": tc.result.value,
        "time": tc.time,
    }
    if tc.error is not None:
        data["error"] = _error_to_dict(tc.error)
    return data


def _error_to_dict(error: TestCaseError) -> dict[str, Any]:
    data: dict[str, Any] = {"details": error.details}
    if error.path is not None:
        data["path"] = error.path
    if error.line is not None:
        data["line"] = error.line
    return data
