"""Report models for batch validation runs.

A ValidationReport is built incrementally by the batch validator, one
FileFailure per failing file in iteration order, and is serializable to
JSON for machine consumption.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from transval.loader.yaml_parser import ParseErrorKind, YAMLParseError


class FileFailure(BaseModel):
    """A single failing file and the first problem found in it."""

    path: str
    kind: ParseErrorKind
    message: str = Field(min_length=1)
    line: int | None = None
    column: int | None = None
    snippet: str | None = None

    @classmethod
    def from_error(cls, path: str, error: YAMLParseError) -> FileFailure:
        """Build a failure record from a parse error attributed to ``path``."""
        attributed = error.with_filename(path)
        return cls(
            path=path,
            kind=attributed.kind,
            message=attributed.describe(),
            line=attributed.line,
            column=attributed.column,
            snippet=attributed.snippet,
        )


class ValidationReport(BaseModel):
    """Outcome of validating a set of files."""

    files_checked: int = 0
    failures: list[FileFailure] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def messages(self) -> list[str]:
        """One message per failing file, in iteration order."""
        return [failure.message for failure in self.failures]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def add_failure(self, path: str, error: YAMLParseError) -> FileFailure:
        failure = FileFailure.from_error(path, error)
        self.failures.append(failure)
        return failure
