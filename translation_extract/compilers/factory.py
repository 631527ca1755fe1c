"""Compiler selection by output format name."""

from __future__ import annotations

from enum import Enum
from typing import Any

from translation_extract.compilers.base import CompilerInterface
from translation_extract.compilers.json_compiler import JsonCompiler, NamespacedJsonCompiler


class CatalogFormat(str, Enum):
    """Supported catalog output formats."""

    json = "json"
    namespaced_json = "namespaced-json"


_COMPILERS: dict[CatalogFormat, type[CompilerInterface]] = {
    CatalogFormat.json: JsonCompiler,
    CatalogFormat.namespaced_json: NamespacedJsonCompiler,
}


class CompilerFactory:
    """Builds the compiler for a format name."""

    @staticmethod
    def create(format: str | CatalogFormat, **options: Any) -> CompilerInterface:
        try:
            catalog_format = CatalogFormat(format)
        except ValueError:
            known = ", ".join(f.value for f in CatalogFormat)
            raise ValueError(f"Unknown format '{format}' (expected one of: {known})") from None
        return _COMPILERS[catalog_format](**options)


def create_compiler(format: str | CatalogFormat, **options: Any) -> CompilerInterface:
    """Shorthand for ``CompilerFactory.create``."""
    return CompilerFactory.create(format, **options)
