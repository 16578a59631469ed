"""Tests for transval.models.report - FileFailure and ValidationReport."""

import json

import pytest
from pydantic import ValidationError

from transval.loader.yaml_parser import DuplicateKeyError, ParseErrorKind
from transval.models.report import FileFailure, ValidationReport


class TestFileFailure:
    """Test FileFailure model."""

    def test_from_error_attributes_path(self):
        """from_error renders the message against the given path."""
        err = DuplicateKeyError('Duplicate key "a" detected whilst parsing YAML', line=4)
        failure = FileFailure.from_error("en.yml", err)
        assert failure.kind is ParseErrorKind.DUPLICATE_KEY
        assert failure.message == 'Duplicate key "a" detected whilst parsing YAML in "en.yml" at line 4'
        assert failure.line == 4
        assert err.filename == "<string>"

    def test_rejects_empty_message(self):
        with pytest.raises(ValidationError):
            FileFailure(path="en.yml", kind=ParseErrorKind.SYNTAX, message="")


class TestValidationReport:
    """Test ValidationReport model."""

    def test_defaults(self):
        report = ValidationReport()
        assert report.ok
        assert report.files_checked == 0
        assert report.failure_count == 0
        assert report.messages == []

    def test_failure_count_tracks_messages(self):
        report = ValidationReport(files_checked=2)
        report.add_failure("a.yml", DuplicateKeyError('Duplicate key "x" detected whilst parsing YAML'))
        report.add_failure("b.yml", DuplicateKeyError('Duplicate key "y" detected whilst parsing YAML'))
        assert not report.ok
        assert report.failure_count == len(report.messages) == 2
        assert '"a.yml"' in report.messages[0]
        assert '"b.yml"' in report.messages[1]

    def test_json_includes_derived_fields(self):
        report = ValidationReport(files_checked=1)
        report.add_failure("a.yml", DuplicateKeyError('Duplicate key "x" detected whilst parsing YAML'))
        data = json.loads(report.model_dump_json())
        assert data["failure_count"] == 1
        assert data["messages"] == [report.messages[0]]
        assert data["failures"][0]["kind"] == "duplicate_key"
