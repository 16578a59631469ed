"""transval data models - re-exports all public model classes."""

from transval.models.config import ProjectConfig
from transval.models.report import FileFailure, ValidationReport

__all__ = [
    "FileFailure",
    "ProjectConfig",
    "ValidationReport",
]
