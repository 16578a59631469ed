"""Lenient YAML parsing with duplicate-key diagnostics.

Provides a custom PyYAML loader that behaves like ``yaml.safe_load`` (the
last occurrence of a repeated mapping key wins) but announces every repeated
key through a non-fatal ``DuplicateKeyWarning``. Callers that want duplicate
keys to be fatal intercept that warning; see ``transval.loader.strict``.

Also defines the parse-failure exception hierarchy shared by the whole
package.
"""

from __future__ import annotations

import copy
import re
import warnings
from collections.abc import Hashable
from enum import Enum
from typing import Any

import yaml
from yaml.constructor import ConstructorError

MERGE_TAG = "tag:yaml.org,2002:merge"

# Line breaks as PyYAML counts them when computing marks
_LINE_BREAK = re.compile(r"\r\n|[\n\r\x85\u2028\u2029]")

_ESCAPED_BREAKS = {
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\x85"): "\\x85",
    ord("\u2028"): "\\u2028",
    ord("\u2029"): "\\u2029",
}


class ParseErrorKind(str, Enum):
    """Discriminant for the kinds of parse failure."""

    SYNTAX = "syntax"
    DUPLICATE_KEY = "duplicate_key"
    COLON_SPACING = "colon_spacing"
    ENCODING = "encoding"
    UNREADABLE = "unreadable"


class YAMLParseError(Exception):
    """Raised when a YAML document is rejected.

    Attributes:
        message: Human-readable description of the problem. Never empty.
        line: 1-indexed line number where the error occurred.
        column: 1-indexed column number where the error occurred.
        filename: Name of the file being parsed, or '<string>'.
        snippet: The raw source line the error refers to, if known.
    """

    kind: ParseErrorKind = ParseErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
        snippet: str | None = None,
    ) -> None:
        if not message:
            raise ValueError("parse error message must not be empty")
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        self.snippet = snippet
        super().__init__(message)

    def with_filename(self, filename: str) -> YAMLParseError:
        """Return a copy of this error attributed to ``filename``."""
        clone = copy.copy(self)
        clone.filename = filename
        return clone

    def describe(self) -> str:
        """Render the full message, e.g.

        ``No space after colon in "lang/en.yml" at line 3 (near "foo:bar")``
        """
        text = self.message
        trailing_dot = text.endswith(".")
        if trailing_dot:
            text = text[:-1]
        if self.filename and self.filename != "<string>":
            text += f' in "{self.filename}"'
        if self.line is not None:
            text += f" at line {self.line}"
        if self.snippet:
            text += f' (near "{self.snippet}")'
        if trailing_dot:
            text += "."
        return text


class YAMLSyntaxError(YAMLParseError):
    """Structural YAML is malformed."""

    kind = ParseErrorKind.SYNTAX


class DuplicateKeyError(YAMLParseError):
    """A mapping key repeats within the same mapping."""

    kind = ParseErrorKind.DUPLICATE_KEY


class ColonSpacingError(YAMLParseError):
    """A colon is followed by something other than whitespace."""

    kind = ParseErrorKind.COLON_SPACING


class UndecodableFileError(YAMLParseError):
    """File bytes could not be decoded with any candidate encoding."""

    kind = ParseErrorKind.ENCODING


class UnreadableFileError(YAMLParseError):
    """File could not be read from disk."""

    kind = ParseErrorKind.UNREADABLE


class DuplicateKeyWarning(UserWarning):
    """Non-fatal diagnostic emitted for every repeated mapping key.

    Attributes:
        key: The repeated key as constructed.
        path: Dotted path of the key inside the document.
        line: 1-indexed line of the repeated occurrence.
        column: 1-indexed column of the repeated occurrence.
    """

    def __init__(self, key: Any, path: str, line: int | None, column: int | None) -> None:
        self.key = key
        self.path = path
        self.line = line
        self.column = column
        location = f" at line {line}" if line is not None else ""
        printable = str(key).translate(_ESCAPED_BREAKS)
        super().__init__(f'Duplicate key "{printable}" detected whilst parsing YAML{location}.')


class DuplicateTrackingLoader(yaml.SafeLoader):
    """YAML SafeLoader subclass that reports repeated keys per mapping.

    Maintains a prefix stack so each diagnostic names the dotted path of
    the repeated key (``messages.welcome``).
    """

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self._prefix_stack: list[str] = []

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        """Override to announce keys that appear twice in the same mapping."""
        own_pairs = sum(1 for key_node, _ in node.value if key_node.tag != MERGE_TAG)
        self.flatten_mapping(node)
        # flatten_mapping puts merged pairs first; only explicit keys are checked
        merged_pairs = len(node.value) - own_pairs

        mapping: dict[Any, Any] = {}
        seen: set[Any] = set()
        for index, (key_node, value_node) in enumerate(node.value):
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found unhashable key",
                    key_node.start_mark,
                )

            if index >= merged_pairs:
                if key in seen:
                    self._warn_duplicate(key, key_node)
                seen.add(key)

            if isinstance(value_node, (yaml.MappingNode, yaml.SequenceNode)):
                self._prefix_stack.append(str(key))
                value = self.construct_object(value_node, deep=deep)
                self._prefix_stack.pop()
            else:
                value = self.construct_object(value_node, deep=deep)

            mapping[key] = value

        return mapping

    def construct_sequence(self, node: yaml.SequenceNode, deep: bool = False) -> list[Any]:
        """Override to track list item indices in the key path."""
        result = []
        for idx, child_node in enumerate(node.value):
            self._prefix_stack.append(str(idx))
            result.append(self.construct_object(child_node, deep=deep))
            self._prefix_stack.pop()
        return result

    def construct_yaml_map(self, node: yaml.MappingNode) -> Any:
        """Top-level mapping constructor that delegates to construct_mapping."""
        data = self.construct_mapping(node, deep=True)
        yield data

    def construct_yaml_seq(self, node: yaml.SequenceNode) -> Any:
        """Top-level sequence constructor that delegates to construct_sequence."""
        data = self.construct_sequence(node, deep=True)
        yield data

    def _warn_duplicate(self, key: Any, key_node: yaml.Node) -> None:
        line = column = None
        if key_node.start_mark is not None:
            line = key_node.start_mark.line + 1
            column = key_node.start_mark.column + 1
        path = ".".join([*self._prefix_stack, str(key)])
        warnings.warn(DuplicateKeyWarning(key, path, line, column), stacklevel=2)


DuplicateTrackingLoader.add_constructor(
    "tag:yaml.org,2002:map",
    DuplicateTrackingLoader.construct_yaml_map,
)

DuplicateTrackingLoader.add_constructor(
    "tag:yaml.org,2002:seq",
    DuplicateTrackingLoader.construct_yaml_seq,
)


def _source_line(source: str, line: int | None) -> str | None:
    if line is None:
        return None
    lines = _LINE_BREAK.split(source)
    if 0 < line <= len(lines):
        return lines[line - 1]
    return None


def syntax_error_from_yaml(
    error: yaml.YAMLError,
    source: str,
    filename: str = "<string>",
) -> YAMLSyntaxError:
    """Convert a PyYAML error into a YAMLSyntaxError with 1-indexed position."""
    line = None
    column = None
    mark = getattr(error, "problem_mark", None)
    if mark is not None:
        line = mark.line + 1
        column = mark.column + 1
    return YAMLSyntaxError(
        message=str(error) or error.__class__.__name__,
        line=line,
        column=column,
        filename=filename,
        snippet=_source_line(source, line),
    )


def parse_yaml(source: str, filename: str = "<string>") -> Any:
    """Parse a YAML string leniently.

    Repeated keys do not fail the parse; each one emits a
    ``DuplicateKeyWarning`` and the later value wins.

    Args:
        source: YAML content as a string.
        filename: Filename for error messages.

    Returns:
        The parsed value tree, or None for empty or comment-only YAML.

    Raises:
        YAMLSyntaxError: If the YAML contains syntax errors.
    """
    try:
        loader = DuplicateTrackingLoader(source)
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()
    except yaml.YAMLError as e:
        raise syntax_error_from_yaml(e, source, filename) from e
