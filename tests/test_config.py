"""Tests for ExtractorConfig and YAML loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from translation_extract.compilers.factory import CatalogFormat
from translation_extract.config import DEFAULT_PATTERNS, ExtractorConfig, ParserName, load_config


class TestExtractorConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = ExtractorConfig(input=["src"], output=["i18n/en.json"])
        assert config.patterns == DEFAULT_PATTERNS
        assert config.format == CatalogFormat.json
        assert config.indentation == "\t"
        assert config.newline_at_end_of_file is True
        assert (config.sort, config.clean, config.replace) == (False, False, False)
        assert config.marker_attributes == ["translate"]
        assert config.pipe_names == ["translate"]
        assert config.string_as_default_value is None
        assert config.parsers == [ParserName.directive, ParserName.pipe]

    def test_input_required(self):
        with pytest.raises(ValidationError):
            ExtractorConfig(input=[], output=["en.json"])

    def test_blank_output_rejected(self):
        with pytest.raises(ValidationError, match="at least one path"):
            ExtractorConfig(input=["src"], output=["  "])

    def test_empty_name_lists_fall_back(self):
        config = ExtractorConfig(input=["src"], output=["en.json"], marker_attributes=[], pipe_names=[""])
        assert config.marker_attributes == ["translate"]
        assert config.pipe_names == ["translate"]

    def test_empty_patterns_fall_back(self):
        config = ExtractorConfig(input=["src"], output=["en.json"], patterns=[])
        assert config.patterns == DEFAULT_PATTERNS

    def test_unknown_format(self):
        with pytest.raises(ValidationError):
            ExtractorConfig(input=["src"], output=["en.json"], format="xliff")

    def test_unknown_parser(self):
        with pytest.raises(ValidationError):
            ExtractorConfig(input=["src"], output=["en.json"], parsers=["marker"])

    def test_no_parsers(self):
        with pytest.raises(ValidationError, match="at least one parser"):
            ExtractorConfig(input=["src"], output=["en.json"], parsers=[])

    def test_duplicate_parsers_collapsed(self):
        config = ExtractorConfig(input=["src"], output=["en.json"], parsers=["pipe", "pipe"])
        assert config.parsers == [ParserName.pipe]

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ExtractorConfig(input=["src"], output=["en.json"], verbose=True)


class TestLoadConfig:
    """YAML configuration files."""

    def _write(self, tmp_path: Path, data) -> Path:
        path = tmp_path / "extract.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        return path

    def test_load(self, tmp_path):
        path = self._write(
            tmp_path,
            {
                "input": ["src"],
                "output": ["i18n/en.json"],
                "format": "namespaced-json",
                "sort": True,
                "marker_attributes": ["translate", "i18n"],
            },
        )
        config = load_config(path)
        assert config.format == CatalogFormat.namespaced_json
        assert config.sort is True
        assert config.marker_attributes == ["translate", "i18n"]

    def test_overrides_win(self, tmp_path):
        path = self._write(tmp_path, {"input": ["src"], "output": ["en.json"], "clean": False})
        config = load_config(path, clean=True, output=["de.json"], sort=None)
        assert config.clean is True
        assert config.output == ["de.json"]
        assert config.sort is False

    def test_empty_file_uses_overrides(self, tmp_path):
        path = tmp_path / "extract.yaml"
        path.write_text("")
        config = load_config(path, input=["src"], output=["en.json"])
        assert config.input == ["src"]

    def test_non_mapping_rejected(self, tmp_path):
        path = self._write(tmp_path, ["src"])
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")
