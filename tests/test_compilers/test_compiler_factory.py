"""Tests for compiler selection."""

import pytest

from translation_extract.compilers.factory import CatalogFormat, CompilerFactory, create_compiler
from translation_extract.compilers.json_compiler import JsonCompiler, NamespacedJsonCompiler


class TestCompilerFactory:
    def test_json(self):
        assert type(CompilerFactory.create("json")) is JsonCompiler

    def test_namespaced_json(self):
        assert isinstance(create_compiler(CatalogFormat.namespaced_json), NamespacedJsonCompiler)

    def test_options_passed_through(self):
        compiler = create_compiler("namespaced-json", indentation="  ", newline_at_end_of_file=False)
        assert compiler.indentation == "  "
        assert compiler.newline_at_end_of_file is False

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown format 'po'"):
            create_compiler("po")
