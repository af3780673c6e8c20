"""CTest JUnit XML decoding.

Turns report text into a loosely-typed document mirroring the XML that
``ctest --output-junit`` writes: a ``testsuite`` root with ``testcase``
children, each optionally carrying ``failure`` and ``skipped`` markers.
Only the structure is checked; attribute values stay as raw text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from ctreport.errors import MalformedXmlError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

_SUITE_TAG = "testsuite"
_CASE_TAG = "testcase"
_FAILURE_TAG = "failure"
_SKIPPED_TAG = "skipped"


@dataclass(frozen=True)
class JunitTestCase:
    """A ``testcase`` element."""

    classname: str
    name: str
    time: str | None
    file: str | None = None
    failure: list[str] | None = None
    """Text of each ``failure`` child; ``None`` when there are none."""
    skipped: list[str] | None = None
    """Text of each ``skipped`` child; ``None`` when there are none."""


@dataclass(frozen=True)
class JunitTestSuite:
    """The ``testsuite`` root element."""

    name: str
    tests: str
    errors: str
    failures: str
    skipped: str
    time: str | None
    timestamp: str | None = None
    testcase: list[JunitTestCase] | None = None


@dataclass(frozen=True)
class JunitReport:
    """A decoded report; ``testsuite`` is ``None`` for any other root."""

    testsuite: JunitTestSuite | None = None


def decode_junit_report(path: str, text: str) -> JunitReport:
    """Decode CTest JUnit XML *text* read from *path*.

    Raises:
        MalformedXmlError: If *text* is not well-formed XML, or contains
            constructs (entity declarations, external references) that are
            refused for safety.
    """
    try:
        root = ElementTree.fromstring(text)
    except (DefusedParseError, DefusedXmlException) as exc:
        raise MalformedXmlError(path, str(exc)) from exc

    if _local_tag(root) != _SUITE_TAG:
        logger.debug("Report %s has root <%s>, not <testsuite>", path, _local_tag(root))
        return JunitReport()

    return JunitReport(testsuite=_decode_suite(root))


def _decode_suite(elem: XmlElement) -> JunitTestSuite:
    cases = [_decode_case(child) for child in elem if _local_tag(child) == _CASE_TAG]
    return JunitTestSuite(
        name=elem.get("name", ""),
        tests=elem.get("tests", ""),
        errors=elem.get("errors", ""),
        failures=elem.get("failures", ""),
        skipped=elem.get("skipped", ""),
        time=elem.get("time"),
        timestamp=elem.get("timestamp"),
        testcase=cases or None,
    )


def _decode_case(elem: XmlElement) -> JunitTestCase:
    failures = [_marker_text(child) for child in elem if _local_tag(child) == _FAILURE_TAG]
    skipped = [_marker_text(child) for child in elem if _local_tag(child) == _SKIPPED_TAG]
    return JunitTestCase(
        classname=elem.get("classname", ""),
        name=elem.get("name", ""),
        time=elem.get("time"),
        file=elem.get("file"),
        failure=failures or None,
        skipped=skipped or None,
    )


def _marker_text(elem: XmlElement) -> str:
    """Body text of a marker element, falling back to its ``message``."""
    text = elem.text or ""
    if text.strip():
        return text
    return elem.get("message", "")


def _local_tag(elem: XmlElement) -> str:
    return elem.tag.split("}")[-1] if "}" in elem.tag else elem.tag
