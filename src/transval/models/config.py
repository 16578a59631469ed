"""Project configuration model for transval.

Captures transval.yaml fields with defaults matching a conventional
translations layout: YAML files under resources/lang, decoded as UTF-8
with an ISO-8859-1 fallback.
"""

from __future__ import annotations

import codecs
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "transval.yaml"


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from transval.yaml."""

    model_config = {"extra": "forbid"}

    lang_dir: str = "resources/lang"
    extensions: list[str] = Field(default_factory=lambda: ["yml", "yaml"], min_length=1)
    encodings: list[str] = Field(default_factory=lambda: ["utf-8", "iso-8859-1"], min_length=1)
    throw_parse_exception: bool = False
    ci_mode: bool = False

    @field_validator("extensions")
    @classmethod
    def _strip_leading_dots(cls, value: list[str]) -> list[str]:
        return [ext.lstrip(".") for ext in value]

    @field_validator("encodings")
    @classmethod
    def _known_codecs(cls, value: list[str]) -> list[str]:
        for name in value:
            try:
                codecs.lookup(name)
            except LookupError as e:
                raise ValueError(f"unknown encoding: {name}") from e
        return value


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for transval.yaml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        Path to the directory containing transval.yaml, or cwd if none
        is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from transval.yaml. Returns defaults if not found.

    The file is read with the strict parser, so it obeys the same rules
    as the translation files it configures.

    Args:
        project_root: Path to the project root directory. If None,
            uses find_project_root() to locate it.

    Returns:
        Validated ProjectConfig instance.

    Raises:
        YAMLParseError: If transval.yaml itself is not strict YAML.
    """
    from transval.loader.strict import StrictYamlParser

    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()

    raw = StrictYamlParser().parse(
        config_path.read_text(encoding="utf-8"),
        filename=str(config_path),
    )
    if raw is None:
        return ProjectConfig()
    return ProjectConfig.model_validate(raw)
