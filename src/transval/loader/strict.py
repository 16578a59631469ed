"""Strict YAML parsing: duplicate keys and missing spaces after colons are errors.

``StrictYamlParser`` wraps a lenient structural parse with two extra checks:

1. Duplicate-key diagnostics emitted as warnings while the structural parse
   runs are intercepted and escalated to ``DuplicateKeyError``.
2. A line-oriented scan of the original text rejects the first line whose
   first colon is followed by anything other than a space, NUL or newline.
"""

from __future__ import annotations

import logging
import re
import threading
import warnings
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import yaml

from transval.loader.yaml_parser import (
    ColonSpacingError,
    DuplicateKeyError,
    YAMLParseError,
    parse_yaml,
    syntax_error_from_yaml,
)

logger = logging.getLogger(__name__)

DUPLICATE_KEY_PATTERN = re.compile(r'Duplicate key ".*?" detected whilst parsing YAML', re.DOTALL)

NO_SPACE_AFTER_COLON = "No space after colon"

# Characters str.strip() would miss but which count as blank here
_BLANK = " \t\n\r\0\x0b"

_YAML_DIRECTIVE = re.compile(r"^%YAML[: ][\d.]+.*\n")
_LEADING_COMMENTS = re.compile(r"^(?:#[^\n]*\n)+")
_DOCUMENT_START = re.compile(r"^---[^\n]*\n")
_DOCUMENT_END = re.compile(r"\.\.\.\s*\Z")

# warnings.showwarning is process-wide
_hook_lock = threading.RLock()

Parser = Callable[[str], Any]


def match_duplicate_key_diagnostic(text: str) -> str | None:
    """Return the duplicate-key part of a parser diagnostic, or None.

    This is the only place that depends on the wording of the structural
    parser's duplicate-key message.
    """
    match = DUPLICATE_KEY_PATTERN.search(text)
    if match is None:
        return None
    return match.group(0)


@contextmanager
def intercept_duplicate_keys(filename: str = "<string>") -> Iterator[None]:
    """Escalate duplicate-key warnings raised inside the block to errors.

    Installs a ``warnings.showwarning`` hook for the duration of the block.
    The previous filters and hook are restored on every exit path.

    Raises:
        DuplicateKeyError: From inside the block, at the first warning whose
            text is a duplicate-key diagnostic.
    """
    with _hook_lock, warnings.catch_warnings():
        previous = warnings.showwarning

        def _escalate(message, category, source, lineno, file=None, line=None):
            matched = match_duplicate_key_diagnostic(str(message))
            if matched is None:
                previous(message, category, source, lineno, file, line)
                return
            raise DuplicateKeyError(
                matched,
                line=getattr(message, "line", None),
                column=getattr(message, "column", None),
                filename=filename,
            )

        warnings.simplefilter("always")
        warnings.showwarning = _escalate
        yield


def normalize_for_scan(source: str) -> tuple[str, int]:
    """Prepare text for the colon scan.

    Unifies line endings and strips a leading ``%YAML`` directive, a leading
    block of comment lines and a leading ``---`` marker (in which case a
    trailing ``...`` marker goes too).

    Returns:
        Tuple of (normalized text, number of leading lines removed).
    """
    value = source.replace("\r\n", "\n").replace("\r", "\n")
    offset = 0

    value, count = _YAML_DIRECTIVE.subn("", value, count=1)
    offset += count

    trimmed, count = _LEADING_COMMENTS.subn("", value, count=1)
    if count:
        offset += value.count("\n") - trimmed.count("\n")
        value = trimmed

    trimmed, count = _DOCUMENT_START.subn("", value, count=1)
    if count:
        offset += value.count("\n") - trimmed.count("\n")
        value = _DOCUMENT_END.sub("", trimmed, count=1)

    return value, offset


def space_follows_first_colon(line: str) -> bool:
    """Check the character after the first colon of ``line``.

    Lines starting with a colon, lines without one, and lines ending in
    one always pass.
    """
    if line.strip(_BLANK).startswith(":"):
        return True
    position = line.find(":")
    if position == -1:
        return True
    following = line[position + 1 : position + 2]
    return following in ("", " ", "\0", "\n")


def check_spaces_after_colons(source: str, filename: str = "<string>") -> None:
    """Reject the first line whose first colon is not followed by a space.

    Raises:
        ColonSpacingError: With the raw offending line as snippet.
    """
    content, offset = normalize_for_scan(source)
    for index, line in enumerate(content.split("\n")):
        if not space_follows_first_colon(line):
            raise ColonSpacingError(
                NO_SPACE_AFTER_COLON,
                line=offset + index + 1,
                column=line.find(":") + 2,
                filename=filename,
                snippet=line,
            )


class StrictYamlParser:
    """Parses YAML, treating duplicate keys and ``key:value`` as errors.

    Args:
        parser: Structural parse capability, ``parse(text) -> value``.
            Defaults to the lenient ``parse_yaml``.
    """

    def __init__(self, parser: Parser | None = None) -> None:
        self._parser = parser or parse_yaml

    def parse(self, source: str, filename: str = "<string>") -> Any:
        """Parse a YAML string to a Python value.

        Raises:
            YAMLParseError: A ``YAMLSyntaxError``, ``DuplicateKeyError`` or
                ``ColonSpacingError`` for the first problem found.
        """
        with intercept_duplicate_keys(filename):
            try:
                output = self._parser(source)
            except yaml.YAMLError as e:
                raise syntax_error_from_yaml(e, source, filename) from e
            except YAMLParseError as e:
                if e.filename == filename:
                    raise
                raise e.with_filename(filename) from e

        check_spaces_after_colons(source, filename)
        return output


def check(
    source: str,
    filename: str = "<string>",
    parser: Parser | None = None,
) -> tuple[Any, YAMLParseError | None]:
    """Strictly parse ``source`` without raising.

    Returns:
        Tuple of (value, None) on success, or (None, error) on failure.
    """
    try:
        return StrictYamlParser(parser).parse(source, filename=filename), None
    except YAMLParseError as e:
        logger.debug("Strict parse of %s failed: %s", filename, e.message)
        return None, e
