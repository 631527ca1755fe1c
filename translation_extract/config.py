"""Extraction configuration model and YAML loader."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from translation_extract.compilers.factory import CatalogFormat
from translation_extract.extraction.base import names_or_default

DEFAULT_PATTERNS: list[str] = ["**/*.html", "**/*.ts"]


class ParserName(str, Enum):
    """Key parsers that can be enabled for a run."""

    directive = "directive"
    pipe = "pipe"


class ExtractorConfig(BaseModel):
    """Everything an extraction run needs: sources, outputs and options."""

    model_config = ConfigDict(extra="forbid")

    input: list[str]
    output: list[str]
    patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_PATTERNS))
    format: CatalogFormat = CatalogFormat.json
    indentation: str = "\t"
    newline_at_end_of_file: bool = True
    sort: bool = False
    clean: bool = False
    replace: bool = False
    marker_attributes: list[str] = Field(default_factory=lambda: ["translate"])
    pipe_names: list[str] = Field(default_factory=lambda: ["translate"])
    string_as_default_value: str | None = None
    parsers: list[ParserName] = Field(
        default_factory=lambda: [ParserName.directive, ParserName.pipe]
    )

    @field_validator("input", "output")
    @classmethod
    def paths_not_empty(cls, v: list[str]) -> list[str]:
        paths = [p for p in v if p and p.strip()]
        if not paths:
            raise ValueError("at least one path is required")
        return paths

    @field_validator("patterns")
    @classmethod
    def patterns_or_default(cls, v: list[str]) -> list[str]:
        return [p for p in v if p] or list(DEFAULT_PATTERNS)

    @field_validator("marker_attributes", "pipe_names")
    @classmethod
    def names_fall_back_to_translate(cls, v: list[str]) -> list[str]:
        return names_or_default(v)

    @field_validator("parsers")
    @classmethod
    def parsers_not_empty(cls, v: list[ParserName]) -> list[ParserName]:
        if not v:
            raise ValueError("at least one parser must be enabled")
        return list(dict.fromkeys(v))


def load_config(path: Path | str, **overrides: Any) -> ExtractorConfig:
    """Load an ``ExtractorConfig`` from a YAML file.

    Keyword overrides that are not ``None`` replace values from the file.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the YAML is not a mapping or fails validation.
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return ExtractorConfig.model_validate(data)
