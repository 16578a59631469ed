"""Tests for the lenient YAML parser and the parse error types."""

import warnings

import pytest
import yaml

from transval.loader.yaml_parser import (
    ColonSpacingError,
    DuplicateKeyError,
    DuplicateKeyWarning,
    ParseErrorKind,
    UnreadableFileError,
    YAMLParseError,
    YAMLSyntaxError,
    parse_yaml,
    syntax_error_from_yaml,
)


class TestParseYaml:
    """Tests for parse_yaml function."""

    def test_returns_value_tree_from_valid_yaml(self):
        """parse_yaml returns nested dicts and lists from valid YAML."""
        source = "greeting: Hello\nmenu:\n  items:\n    - Home\n    - About\n"
        data = parse_yaml(source)
        assert data == {"greeting": "Hello", "menu": {"items": ["Home", "About"]}}

    def test_empty_yaml_input(self):
        """Empty YAML input returns None."""
        assert parse_yaml("") is None

    def test_yaml_with_only_comments(self):
        """YAML with only comments returns None."""
        assert parse_yaml("# this is a comment\n# another comment\n") is None

    def test_duplicate_key_warns_and_last_value_wins(self):
        """A repeated key emits DuplicateKeyWarning but the parse succeeds."""
        with pytest.warns(DuplicateKeyWarning, match='Duplicate key "foo" detected whilst parsing YAML'):
            data = parse_yaml("foo: bar\nfoo: baz\n")
        assert data == {"foo": "baz"}

    def test_duplicate_key_warning_carries_position_and_path(self):
        """The warning names the dotted path and the line of the repeat."""
        source = "messages:\n  hello: Hi\n  hello: Hey\n"
        with pytest.warns(DuplicateKeyWarning) as record:
            parse_yaml(source)
        warning = record[0].message
        assert warning.key == "hello"
        assert warning.path == "messages.hello"
        assert warning.line == 3
        assert warning.column == 3

    def test_duplicate_inside_sequence_item_path(self):
        """Keys inside sequence items include the item index in the path."""
        source = "items:\n  - name: a\n    name: b\n"
        with pytest.warns(DuplicateKeyWarning) as record:
            parse_yaml(source)
        assert record[0].message.path == "items.0.name"

    def test_duplicate_key_warning_escapes_line_breaks(self):
        """A key holding a line break is printed on one line."""
        with pytest.warns(DuplicateKeyWarning) as record:
            parse_yaml('"a\\nb": 1\n"a\\nb": 2\n')
        warning = record[0].message
        assert warning.key == "a\nb"
        assert str(warning) == 'Duplicate key "a\\nb" detected whilst parsing YAML at line 2.'

    def test_same_key_in_different_mappings_is_not_a_duplicate(self):
        """Sibling mappings may reuse the same keys."""
        source = "en:\n  hello: Hi\nfr:\n  hello: Salut\n"
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            data = parse_yaml(source)
        assert data["fr"]["hello"] == "Salut"

    def test_merge_key_override_is_not_a_duplicate(self):
        """Explicit keys may override keys pulled in with <<."""
        source = (
            "base: &base\n"
            "  title: Base\n"
            "  body: Text\n"
            "derived:\n"
            "  <<: *base\n"
            "  title: Derived\n"
        )
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            data = parse_yaml(source)
        assert data["derived"] == {"title": "Derived", "body": "Text"}

    def test_yaml_syntax_error_raises_yaml_syntax_error(self):
        """YAML syntax errors raise YAMLSyntaxError with line/column info."""
        source = "greeting: Hello\nmenu: [unclosed\n"
        with pytest.raises(YAMLSyntaxError) as exc_info:
            parse_yaml(source)
        err = exc_info.value
        assert err.line is not None
        assert err.column is not None
        assert err.message
        assert err.kind is ParseErrorKind.SYNTAX

    def test_yaml_syntax_error_snippet_is_offending_line(self):
        """The snippet is the source line the parser stopped at."""
        source = "key: value\n  bad: indent\n"
        with pytest.raises(YAMLSyntaxError) as exc_info:
            parse_yaml(source)
        assert exc_info.value.line == 2
        assert exc_info.value.snippet == "  bad: indent"

    @pytest.mark.parametrize("source", ["a: 1\x0cb\nc: [\n", "a: 1\x1db\nc: [\n"])
    def test_snippet_counts_only_yaml_line_breaks(self, source):
        """Form feeds and other separators do not shift the snippet line."""
        mark = yaml.error.Mark("<string>", 0, 1, 0, None, None)
        error = yaml.error.MarkedYAMLError(problem="unexpected end", problem_mark=mark)
        converted = syntax_error_from_yaml(error, source)
        assert converted.line == 2
        assert converted.snippet == "c: ["

    def test_unhashable_key_is_a_syntax_error(self):
        """A sequence used as a mapping key is rejected."""
        with pytest.raises(YAMLSyntaxError, match="unhashable"):
            parse_yaml("? [a, b]\n: value\n")

    def test_yaml_parse_error_has_filename(self):
        """YAMLSyntaxError includes filename when provided."""
        with pytest.raises(YAMLSyntaxError) as exc_info:
            parse_yaml("menu: [unclosed\n", filename="en.yml")
        assert exc_info.value.filename == "en.yml"


class TestYAMLParseError:
    """Tests for the parse error hierarchy."""

    def test_empty_message_is_rejected(self):
        """A parse error always carries a message."""
        with pytest.raises(ValueError):
            YAMLParseError("")

    def test_describe_with_all_parts(self):
        """describe() appends file, line and snippet."""
        err = ColonSpacingError("No space after colon", line=3, filename="en.yml", snippet="foo:bar")
        assert err.describe() == 'No space after colon in "en.yml" at line 3 (near "foo:bar")'

    def test_describe_without_location(self):
        """describe() is the bare message when nothing else is known."""
        assert YAMLSyntaxError("Something broke").describe() == "Something broke"

    def test_describe_moves_trailing_period_to_the_end(self):
        """A trailing period stays at the very end of the message."""
        err = DuplicateKeyError('Duplicate key "a" detected.', line=2, filename="en.yml")
        assert err.describe() == 'Duplicate key "a" detected in "en.yml" at line 2.'

    def test_with_filename_returns_new_instance_of_same_kind(self):
        """with_filename leaves the original error untouched."""
        err = DuplicateKeyError('Duplicate key "a" detected whilst parsing YAML', line=2)
        attributed = err.with_filename("lang/en.yml")
        assert isinstance(attributed, DuplicateKeyError)
        assert attributed is not err
        assert attributed.filename == "lang/en.yml"
        assert attributed.line == 2
        assert err.filename == "<string>"

    def test_kinds_are_distinct(self):
        """Each error class carries its own discriminant."""
        assert YAMLSyntaxError("x").kind is ParseErrorKind.SYNTAX
        assert DuplicateKeyError("x").kind is ParseErrorKind.DUPLICATE_KEY
        assert ColonSpacingError("x").kind is ParseErrorKind.COLON_SPACING
        assert UnreadableFileError("x").kind is ParseErrorKind.UNREADABLE
