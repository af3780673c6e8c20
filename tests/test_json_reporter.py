"""Tests for the JSON reporter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ctreport.models.test_result import (
    TestCaseError,
    TestCaseResult,
    TestExecutionResult,
    TestGroupResult,
    TestRunResult,
    TestSuiteResult,
)
from ctreport.reporters.json_reporter import JSONReporter, run_to_dict


@pytest.fixture
def reporter() -> JSONReporter:
    return JSONReporter()


@pytest.fixture
def sample_run() -> TestRunResult:
    suite = TestSuiteResult(
        name="Linux",
        time=1500.0,
        groups=(
            TestGroupResult(
                name="math",
                tests=(
                    TestCaseResult(name="add", result=TestExecutionResult.SUCCESS, time=200.0),
                    TestCaseResult(
                        name="div",
                        result=TestExecutionResult.FAILED,
                        time=100.0,
                        error=TestCaseError(details="boom", path="src/math.cpp", line=9),
                    ),
                ),
            ),
            TestGroupResult(
                name="io",
                tests=(
                    TestCaseResult(
                        name="read",
                        result=TestExecutionResult.FAILED,
                        time=0.0,
                        error=TestCaseError(details="no location"),
                    ),
                    TestCaseResult(name="write", result=TestExecutionResult.SKIPPED, time=0.0),
                ),
            ),
        ),
    )
    return TestRunResult(path="build/ctest.xml", suites=(suite,), time=1500.0)


def test_generate_file(reporter: JSONReporter, sample_run: TestRunResult, tmp_path: Path) -> None:
    output = tmp_path / "out" / "report.json"
    result_path = reporter.generate(output, [sample_run])
    assert result_path == output

    data = json.loads(output.read_text(encoding="utf-8"))
    assert [run["path"] for run in data["runs"]] == ["build/ctest.xml"]


def test_generate_string_structure(reporter: JSONReporter, sample_run: TestRunResult) -> None:
    data = json.loads(reporter.generate_string([sample_run]))
    (run,) = data["runs"]
    assert run["time"] == 1500.0
    (suite,) = run["suites"]
    assert suite["name"] == "Linux"
    assert [g["name"] for g in suite["groups"]] == ["math", "io"]
    assert [t["result"] for t in suite["groups"][1]["tests"]] == ["failed", "skipped"]


def test_error_fields(sample_run: TestRunResult) -> None:
    groups = run_to_dict(sample_run)["suites"][0]["groups"]
    add, div = groups[0]["tests"]
    read = groups[1]["tests"][0]
    assert "error" not in add
    assert div["error"] == {"details": "boom", "path": "src/math.cpp", "line": 9}
    assert read["error"] == {"details": "no location"}


def test_empty_run(reporter: JSONReporter) -> None:
    data = json.loads(reporter.generate_string([TestRunResult(path="empty.xml")]))
    assert data == {"runs": [{"path": "empty.xml", "time": 0.0, "suites": []}]}
