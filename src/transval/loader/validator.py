"""Batch validation of translation files.

Runs the strict parser over every candidate file, collecting one failure
per bad file and carrying on to the next, so a single run reports every
broken file at once.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from transval.loader.strict import Parser, StrictYamlParser
from transval.loader.yaml_parser import UndecodableFileError, UnreadableFileError, YAMLParseError
from transval.models.report import ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("yml", "yaml")
DEFAULT_ENCODINGS: tuple[str, ...] = ("utf-8", "iso-8859-1")


def decode_translation(raw: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """Decode file bytes with the first candidate encoding that fits.

    A UTF-8 byte order mark is dropped before decoding.

    Raises:
        UndecodableFileError: If no candidate decodes the bytes strictly.
    """
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    for encoding in encodings:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise UndecodableFileError(
        f"Unable to decode file using any of: {', '.join(encodings)}"
    )


def find_translation_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[Path]:
    """Recursively collect files under ``root`` with a matching extension.

    Returns:
        Sorted list of file paths.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")
    suffixes = {f".{ext.lstrip('.')}" for ext in extensions}
    return sorted(
        path for path in root.rglob("*") if path.is_file() and path.suffix in suffixes
    )


def _read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise UnreadableFileError(f"Unable to read file: {e.strerror or e}") from e


def validate_documents(
    documents: Iterable[tuple[str, str | bytes | Path]],
    parser: Parser | None = None,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> ValidationReport:
    """Strictly parse each (path, text) pair and collect the failures.

    Every document is checked, whatever happened to the previous ones.
    Paths are read here, so a file that cannot be read is recorded as an
    ``UnreadableFileError`` failure. Bytes are decoded with
    ``decode_translation`` first.

    Args:
        documents: (path, content) pairs, checked in the given order.
        parser: Structural parse capability handed to StrictYamlParser.
        encodings: Candidate encodings for bytes content.

    Returns:
        ValidationReport with one failure per failing document.
    """
    strict = StrictYamlParser(parser)
    report = ValidationReport()

    for path, content in documents:
        report.files_checked += 1
        logger.debug("Checking %s", path)
        try:
            if isinstance(content, Path):
                content = _read_file(content)
            text = content if isinstance(content, str) else decode_translation(content, encodings)
            strict.parse(text, filename=path)
        except YAMLParseError as e:
            failure = report.add_failure(path, e)
            logger.debug("Recorded failure: %s", failure.message)

    logger.info(
        "Checked %d file(s), %d with errors",
        report.files_checked,
        report.failure_count,
    )
    return report


def validate_directory(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
    parser: Parser | None = None,
) -> ValidationReport:
    """Validate every translation file under ``root``.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    files = find_translation_files(root, extensions)
    logger.debug("Found %d translation file(s) under %s", len(files), root)
    documents = ((str(path), path) for path in files)
    return validate_documents(documents, parser=parser, encodings=encodings)
