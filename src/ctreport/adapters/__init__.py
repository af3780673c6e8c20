"""Report parsers producing the normalized test-result model."""

from ctreport.adapters.base import ParseOptions, TestParser
from ctreport.adapters.ctest_junit_adapter import CtestJunitParser

__all__ = [
    "CtestJunitParser",
    "ParseOptions",
    "TestParser",
]
