"""Error formatter with dual-mode output (rich human and CI concise).

Produces Rust/Elm-style annotated error messages in human mode and
concise file:line:col -- message format in CI mode.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from transval.loader.yaml_parser import ParseErrorKind

if TYPE_CHECKING:
    from transval.models.report import FileFailure


ERROR_CODES: dict[ParseErrorKind, str] = {
    ParseErrorKind.SYNTAX: "E001",
    ParseErrorKind.DUPLICATE_KEY: "E002",
    ParseErrorKind.COLON_SPACING: "E003",
    ParseErrorKind.ENCODING: "E004",
    ParseErrorKind.UNREADABLE: "E005",
}

# Human-readable descriptions for error codes
ERROR_DESCRIPTIONS: dict[str, str] = {
    "E001": "YAML syntax error",
    "E002": "duplicate key",
    "E003": "no space after colon",
    "E004": "undecodable file",
    "E005": "unreadable file",
}


class ErrorFormatter:
    """Formats file failures for human or CI consumption.

    In human mode, produces annotated errors with the line number, the
    offending source line and an arrow under the column. In CI mode,
    produces concise file:line:col -- message lines.

    Args:
        ci_mode: If True, use CI-friendly concise output. If None,
            auto-detect from the CI environment variable.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        if ci_mode is None:
            self.ci_mode = os.environ.get("CI", "").lower() in ("true", "1", "yes")
        else:
            self.ci_mode = ci_mode

    def error_code(self, kind: ParseErrorKind) -> str:
        return ERROR_CODES.get(kind, "E999")

    def format_failure(self, failure: FileFailure) -> str:
        """Format a single failure for display."""
        if self.ci_mode:
            return self._format_ci(failure)
        return self._format_rich(failure)

    def _format_ci(self, failure: FileFailure) -> str:
        """Format: filename:line:col -- message"""
        line = failure.line if failure.line is not None else 0
        col = failure.column if failure.column is not None else 0
        return f"{failure.path}:{line}:{col} -- {failure.message}"

    def _format_rich(self, failure: FileFailure) -> str:
        """Format a failure in Rust/Elm-style.

        Produces output like:
            error[E003]: no space after colon
              --> lang/en/messages.yml:3:7
               |
             3 |   foo:bar
               |       ^ No space after colon in "lang/en/messages.yml" ...
               |
        """
        code = self.error_code(failure.kind)
        lines = [f"error[{code}]: {ERROR_DESCRIPTIONS.get(code, 'parse error')}"]

        if failure.line is None:
            lines.append(f"  --> {failure.path}")
            lines.append("   |")
            lines.append(f"   | {failure.message}")
            lines.append("   |")
            return "\n".join(lines)

        col = failure.column if failure.column is not None else 1
        lines.append(f"  --> {failure.path}:{failure.line}:{col}")
        lines.append("   |")
        if failure.snippet is not None:
            line_num = str(failure.line)
            padding = " " * len(line_num)
            lines.append(f" {line_num} | {failure.snippet.rstrip()}")
            lines.append(f" {padding} | {' ' * (col - 1)}^ {failure.message}")
        else:
            lines.append(f"   | {failure.message}")
        lines.append("   |")
        return "\n".join(lines)

    def format_all(self, failures: list[FileFailure]) -> str:
        """Format all failures, separated by blank lines in human mode."""
        separator = "\n" if self.ci_mode else "\n\n"
        return separator.join(self.format_failure(failure) for failure in failures)
