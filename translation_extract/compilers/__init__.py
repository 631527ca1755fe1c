"""Catalog compilers: flat and namespaced JSON."""

from translation_extract.compilers.base import CompilerInterface
from translation_extract.compilers.factory import CatalogFormat, CompilerFactory, create_compiler
from translation_extract.compilers.json_compiler import (
    JsonCompiler,
    NamespacedJsonCompiler,
    flatten_catalog,
    unflatten_catalog,
)

__all__ = [
    "CatalogFormat",
    "CompilerFactory",
    "CompilerInterface",
    "JsonCompiler",
    "NamespacedJsonCompiler",
    "create_compiler",
    "flatten_catalog",
    "unflatten_catalog",
]
