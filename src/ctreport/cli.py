"""ctreport CLI: top-level command group."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ctreport import __version__
from ctreport.adapters.ctest_junit_adapter import CtestJunitParser
from ctreport.config import load_config, validate_config
from ctreport.errors import ReportParseError
from ctreport.models.test_result import TestExecutionResult, TestRunResult
from ctreport.reporters.json_reporter import JSONReporter
from ctreport.utils.git import GitOperationError, list_tracked_files

logger = logging.getLogger(__name__)
console = Console()

_RESULT_STYLES = {
    TestExecutionResult.SUCCESS: "green",
    TestExecutionResult.FAILED: "red",
    TestExecutionResult.SKIPPED: "yellow",
}

_MAX_DETAILS_LENGTH = 200


def _configure_verbose_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _collect_tracked_files(root: Path, *, use_git: bool) -> list[str]:
    if not use_git:
        return []
    try:
        return list_tracked_files(root)
    except GitOperationError as exc:
        logger.warning("Could not list tracked files in %s: %s", root, exc)
        return []


async def _parse_reports(
    parser: CtestJunitParser, reports: tuple[str, ...]
) -> tuple[list[TestRunResult], list[tuple[str, str]]]:
    """Parse every report independently; one bad report never stops the rest."""
    results: list[TestRunResult] = []
    failures: list[tuple[str, str]] = []
    for report in reports:
        try:
            content = Path(report).read_text(encoding="utf-8", errors="replace")
            results.append(await parser.parse(report, content))
        except (OSError, ReportParseError) as exc:
            logger.warning("Failed to parse %s: %s", report, exc)
            failures.append((report, str(exc)))
    return results, failures


def _display_run(run: TestRunResult) -> None:
    """Display one parsed report as a rich table."""
    if not run.suites:
        console.print(f"[dim]{escape(run.path)}: no test suite found[/dim]")
        return

    for suite in run.suites:
        title = f"{escape(suite.name)} ({suite.time / 1000:.2f}s)"
        table = Table(title=title, title_justify="left")
        table.add_column("Group")
        table.add_column("Test")
        table.add_column("Result")
        table.add_column("Time", justify="right")
        table.add_column("Location")
        for group in suite.groups:
            for tc in group.tests:
                location = ""
                if tc.error is not None and tc.error.path:
                    location = f"{tc.error.path}:{tc.error.line}"
                table.add_row(
                    Text(group.name),
                    Text(tc.name),
                    Text(tc.result.value, style=_RESULT_STYLES[tc.result]),
                    f"{tc.time:.0f}ms",
                    Text(location),
                )
        console.print(table)

        for group in suite.groups:
            for tc in group.tests:
                if tc.error is not None and tc.error.details:
                    console.print(Text(f"  • {group.name} / {tc.name}", style="red"))
                    details = tc.error.details.strip()[:_MAX_DETAILS_LENGTH]
                    console.print(Text(f"    {details}", style="dim red"))


@click.group()
@click.version_option(version=__version__, prog_name="ctreport")
def cli() -> None:
    """Parse CTest JUnit reports."""


@cli.command()
@click.argument("reports", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--path",
    "root",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root holding .ctreport.yml and the git checkout.",
)
@click.option("--work-dir", default=None, help="Directory the tests were built and run in.")
@click.option(
    "--parse-errors/--no-parse-errors",
    default=None,
    help="Resolve source locations of failures (overrides config).",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def parse(
    reports: tuple[str, ...],
    root: str,
    work_dir: str | None,
    parse_errors: bool | None,
    *,
    as_json: bool,
    verbose: bool,
) -> None:
    """Parse one or more CTest JUnit REPORTS."""
    if verbose:
        _configure_verbose_logging()

    config = load_config(root)
    if work_dir is not None:
        config.work_dir = work_dir
    if parse_errors is not None:
        config.parse_errors = parse_errors

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Config error:[/red] {error}")
        sys.exit(2)

    tracked = _collect_tracked_files(Path(config.root), use_git=config.use_git_tracked_files)
    parser = CtestJunitParser(config.to_parse_options(tracked))
    results, failures = asyncio.run(_parse_reports(parser, reports))

    if as_json:
        click.echo(JSONReporter().generate_string(results))
    else:
        for run in results:
            _display_run(run)

    for report, message in failures:
        click.echo(f"Error: {report}: {message}", err=True)
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    cli()
