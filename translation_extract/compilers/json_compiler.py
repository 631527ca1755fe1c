"""JSON catalog compilers.

``JsonCompiler`` writes a flat ``{"key": "value"}`` object.
``NamespacedJsonCompiler`` treats dots in keys as nesting:
``{"HOME": {"TITLE": "..."}}`` for the key ``HOME.TITLE``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from translation_extract.collection import TranslationCollection
from translation_extract.compilers.base import CompilerInterface
from translation_extract.template.inline import strip_bom

logger = logging.getLogger(__name__)


def flatten_catalog(data: dict[str, Any], separator: str = ".") -> dict[str, str]:
    """Flatten nested objects into dotted keys, preserving key order."""
    flat: dict[str, str] = {}
    stack: list[tuple[str, Any]] = [("", data)]
    # Reversed pushes keep the output in document order.
    while stack:
        prefix, value = stack.pop()
        if isinstance(value, dict) and (value or not prefix):
            for key, child in reversed(list(value.items())):
                stack.append((f"{prefix}{separator}{key}" if prefix else key, child))
        elif isinstance(value, dict):
            flat[prefix] = ""
        else:
            flat[prefix] = "" if value is None else str(value)
    return flat


def unflatten_catalog(values: dict[str, str], separator: str = ".") -> dict[str, Any]:
    """Nest dotted keys into objects.

    When a key is both a leaf and a namespace (``A`` and ``A.B``) the first
    one written wins and the later key is dropped with a warning.
    """
    nested: dict[str, Any] = {}
    for key, value in values.items():
        parts = key.split(separator)
        node = nested
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                node = None
                break
            node = child
        if node is None or parts[-1] in node:
            logger.warning("Skipping key '%s': conflicts with an existing namespace or value", key)
            continue
        node[parts[-1]] = value
    return nested


class JsonCompiler(CompilerInterface):
    """Flat JSON catalog."""

    extension = "json"

    def __init__(self, indentation: str | int = "\t", newline_at_end_of_file: bool = True) -> None:
        self.indentation = indentation
        self.newline_at_end_of_file = newline_at_end_of_file

    def _dump(self, data: dict[str, Any]) -> str:
        text = json.dumps(data, indent=self.indentation, ensure_ascii=False)
        if self.newline_at_end_of_file:
            text += "\n"
        return text

    def _load(self, contents: str) -> dict[str, Any]:
        data = json.loads(strip_bom(contents))
        if not isinstance(data, dict):
            raise ValueError("Translation catalog must be a JSON object")
        return data

    def compile(self, collection: TranslationCollection) -> str:
        return self._dump(collection.values)

    def parse(self, contents: str) -> TranslationCollection:
        return TranslationCollection(flatten_catalog(self._load(contents)))


class NamespacedJsonCompiler(JsonCompiler):
    """Nested JSON catalog keyed by dot-separated namespaces."""

    def compile(self, collection: TranslationCollection) -> str:
        return self._dump(unflatten_catalog(collection.values))
