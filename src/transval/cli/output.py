"""Rich terminal output for validation reports.

Provides the summary table of failing files, the headline messages and
JSON output for ValidationReport display in terminal and CI.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from transval.loader.errors import ERROR_DESCRIPTIONS, ErrorFormatter

if TYPE_CHECKING:
    from transval.models.report import ValidationReport

SUCCESS_MESSAGE = "No errors in translation files. You are good to go :)"
FAILURE_MESSAGE = "There are some errors in translation files. You shall not pass!!!"


def render_success(report: ValidationReport, console: Console) -> None:
    """Print the single positive confirmation line."""
    console.print(f"[bold green]✓[/bold green] {SUCCESS_MESSAGE}")
    console.print(f"[dim]{report.files_checked} file(s) checked[/dim]")


def render_failures(report: ValidationReport, console: Console) -> None:
    """Render one table row per failing file.

    Args:
        report: The ValidationReport to display.
        console: Rich Console for output.
    """
    formatter = ErrorFormatter(ci_mode=False)
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("File", style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Error", style="red")
    table.add_column("Near")

    for failure in report.failures:
        code = formatter.error_code(failure.kind)
        table.add_row(
            escape(failure.path),
            str(failure.line) if failure.line is not None else "-",
            f"{code} {ERROR_DESCRIPTIONS.get(code, 'parse error')}",
            escape(failure.snippet.strip()) if failure.snippet else "",
        )

    console.print(table)
    console.print(
        f"[bold red]{report.failure_count}[/bold red] of "
        f"{report.files_checked} file(s) failed"
    )


def output_json(report: ValidationReport) -> None:
    """Write the report as pure JSON to stdout."""
    sys.stdout.write(report.model_dump_json(indent=2))
    sys.stdout.write("\n")
