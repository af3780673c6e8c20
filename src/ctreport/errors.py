"""Exceptions raised while parsing test reports."""

from __future__ import annotations


class ReportParseError(Exception):
    """Base exception for failures while parsing a test report."""


class MalformedXmlError(ReportParseError):
    """Raised when a report is not well-formed XML."""

    def __init__(self, path: str, diagnostic: str) -> None:
        self.path = path
        self.diagnostic = diagnostic
        super().__init__(f"Invalid XML at {path}\n\n{diagnostic}")


class InvalidDurationError(ReportParseError):
    """Raised when a declared ``time`` attribute is not a finite number."""

    def __init__(self, value: str | None, path: str | None = None) -> None:
        self.value = value
        self.path = path
        location = f" in {path}" if path else ""
        super().__init__(f"Invalid duration {value!r}{location}")
