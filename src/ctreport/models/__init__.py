"""Data models for ctreport."""

from ctreport.models.test_result import (
    TestCaseError,
    TestCaseResult,
    TestExecutionResult,
    TestGroupResult,
    TestRunResult,
    TestSuiteResult,
)

__all__ = [
    "TestCaseError",
    "TestCaseResult",
    "TestExecutionResult",
    "TestGroupResult",
    "TestRunResult",
    "TestSuiteResult",
]
