"""Configuration parsing from ``.ctreport.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ctreport.adapters.base import ParseOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".ctreport.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning("Ignoring non-boolean config value %r", value)
    return default


@dataclass
class ReportConfig:
    """Options for parsing CTest reports in one project."""

    root: str
    """Project root directory."""

    parse_errors: bool = False
    """Resolve source file and line for failed test cases."""

    work_dir: str | None = None
    """Directory the tests were built in; inferred when unset."""

    tracked_files: list[str] = field(default_factory=list)
    """Explicit list of source files failures may point at."""

    use_git_tracked_files: bool = True
    """Add ``git ls-files`` output to ``tracked_files``."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML (for forward compat)."""

    def to_parse_options(self, extra_tracked_files: list[str] | None = None) -> ParseOptions:
        """Build parser options, merging in *extra_tracked_files*."""
        tracked = set(self.tracked_files)
        if extra_tracked_files:
            tracked.update(extra_tracked_files)
        return ParseOptions(
            parse_errors=self.parse_errors,
            work_dir=self.work_dir or None,
            tracked_files=frozenset(tracked),
        )


def load_config(root: str | Path) -> ReportConfig:
    """Load ``.ctreport.yml`` from *root*.

    Falls back to ``CTREPORT_*`` environment variables and defaults when
    the YAML file is missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            logger.warning("%s does not contain a mapping; using defaults", config_file)

    tracked_raw = raw.get("tracked_files", [])
    if not isinstance(tracked_raw, list):
        tracked_raw = []

    work_dir = raw.get("work_dir", os.environ.get("CTREPORT_WORK_DIR"))

    return ReportConfig(
        root=str(root_path),
        parse_errors=_parse_bool(
            raw.get("parse_errors", os.environ.get("CTREPORT_PARSE_ERRORS")), default=False
        ),
        work_dir=str(work_dir) if work_dir else None,
        tracked_files=[str(item) for item in tracked_raw if item],
        use_git_tracked_files=_parse_bool(raw.get("use_git_tracked_files"), default=True),
        raw=raw,
    )


def validate_config(config: ReportConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not config.root:
        errors.append("root is required")

    if config.work_dir is not None and not config.work_dir.strip():
        errors.append("work_dir must not be blank")

    if config.parse_errors and not config.tracked_files and not config.use_git_tracked_files:
        errors.append(
            "parse_errors requires tracked_files or use_git_tracked_files to locate failures"
        )

    return errors
