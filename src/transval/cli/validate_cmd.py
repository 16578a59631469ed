"""transval validate CLI command for translation directory validation.

Strictly parses every YAML file under a translations directory, reporting
all failing files at once. The failure count is the exit code unless
--throw-parse-exception turns any failure into a raised error.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from transval.cli.output import (
    FAILURE_MESSAGE,
    output_json,
    render_failures,
    render_success,
)
from transval.loader.errors import ErrorFormatter
from transval.loader.validator import validate_directory
from transval.loader.yaml_parser import YAMLParseError
from transval.models.config import CONFIG_FILENAME, find_project_root, load_project_config

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

# Exit codes are truncated to a byte by the OS
MAX_EXIT_CODE = 255


class TranslationsInvalidError(Exception):
    """Raised when --throw-parse-exception is set and any file failed.

    Not a ``YAMLParseError``: it summarises a batch rather than one file.
    """

    def __init__(self, message: str, failure_count: int) -> None:
        self.message = message
        self.failure_count = failure_count
        super().__init__(message)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def validate(
    path: Optional[str] = typer.Argument(
        None,
        help="Translations directory (default: lang_dir from transval.yaml, resources/lang)",
    ),
    throw_parse_exception: bool = typer.Option(
        False,
        "--throw-parse-exception",
        help="Raise an error when any file fails instead of returning the failure count",
    ),
    ci: bool = typer.Option(False, "--ci", help="CI-friendly concise output"),
    format_json: bool = typer.Option(False, "--json", help="Output the report as JSON to stdout"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
) -> None:
    """Check that all translation YAML files are strictly valid.

    Duplicated keys and missing spaces after colons are treated as errors.
    Exits with 0 if every file is valid, otherwise with the number of
    failing files.
    """
    _configure_logging(verbose)

    project_root = find_project_root()
    try:
        config = load_project_config(project_root)
    except (YAMLParseError, ValidationError) as e:
        message = e.describe() if isinstance(e, YAMLParseError) else str(e)
        typer.echo(f"Error: invalid {CONFIG_FILENAME}: {message}", err=True)
        raise typer.Exit(code=1)

    root = Path(path) if path else project_root / config.lang_dir
    logger.debug("Validating translations under %s", root)
    try:
        report = validate_directory(
            root,
            extensions=config.extensions,
            encodings=config.encodings,
        )
    except FileNotFoundError:
        typer.echo(f"Error: Directory not found: {root}", err=True)
        raise typer.Exit(code=1)

    throw = throw_parse_exception or config.throw_parse_exception
    if format_json:
        output_json(report)
    elif report.ok:
        render_success(report, console)
    else:
        formatter = ErrorFormatter(ci_mode=True if (ci or config.ci_mode) else None)
        if not throw:
            err_console.print(f"[bold red]{FAILURE_MESSAGE}[/bold red]")
            err_console.print()
        err_console.print(escape(formatter.format_all(report.failures)), highlight=False, soft_wrap=True)
        if not throw and not formatter.ci_mode:
            render_failures(report, err_console)

    if report.ok:
        return
    if throw:
        raise TranslationsInvalidError(FAILURE_MESSAGE, report.failure_count)
    raise typer.Exit(code=min(report.failure_count, MAX_EXIT_CODE))
