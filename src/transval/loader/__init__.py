"""transval YAML loader - lenient parsing, strict checks, error types."""

from transval.loader.strict import (
    StrictYamlParser,
    check,
    check_spaces_after_colons,
    intercept_duplicate_keys,
    match_duplicate_key_diagnostic,
)
from transval.loader.yaml_parser import (
    ColonSpacingError,
    DuplicateKeyError,
    DuplicateKeyWarning,
    ParseErrorKind,
    UndecodableFileError,
    UnreadableFileError,
    YAMLParseError,
    YAMLSyntaxError,
    parse_yaml,
)

__all__ = [
    "ColonSpacingError",
    "DuplicateKeyError",
    "DuplicateKeyWarning",
    "ParseErrorKind",
    "StrictYamlParser",
    "UndecodableFileError",
    "UnreadableFileError",
    "YAMLParseError",
    "YAMLSyntaxError",
    "check",
    "check_spaces_after_colons",
    "intercept_duplicate_keys",
    "match_duplicate_key_diagnostic",
    "parse_yaml",
]
