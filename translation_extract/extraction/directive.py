"""Marker attribute extractor.

Finds elements carrying a marker attribute (``translate`` by default) and
takes their key from, in order of precedence:

1. the static attribute value: ``<p translate="KEY">``;
2. the literals of the bound expression: ``<p [translate]="a ? 'A' : 'B'">``;
3. the element's own text, whitespace-normalized: ``<p translate>Key</p>``.
"""

from __future__ import annotations

import re

from translation_extract.collection import TranslationCollection
from translation_extract.extraction.base import ParserInterface, names_or_default
from translation_extract.extraction.flattener import literal_strings
from translation_extract.extraction.walker import iter_elements_with_attribute
from translation_extract.template.expressions import ASTWithSource, EmptyExpr
from translation_extract.template.nodes import Element, Template, Text

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Trim and collapse every whitespace run to a single space."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def _is_empty_binding(value: ASTWithSource) -> bool:
    return isinstance(value.ast, EmptyExpr)


class DirectiveParser(ParserInterface):
    """Extracts keys from elements marked with a translate attribute."""

    def __init__(self, attribute_names: list[str] | None = None) -> None:
        self.attribute_names = names_or_default(attribute_names)

    def extract(self, source: str, file_path: str) -> TranslationCollection:
        collection = TranslationCollection()
        nodes = self.parse_nodes(source, file_path)
        for element in iter_elements_with_attribute(nodes, self.attribute_names):
            collection = collection.add_keys(self.extract_from_element(element))
        return collection

    def extract_from_element(self, element: Element | Template) -> list[str]:
        """Keys for one marked element; exactly one precedence rule applies."""
        static_values = [
            attr.value
            for attr in element.attributes
            if attr.name in self.attribute_names and attr.value
        ]
        if static_values:
            return static_values

        bound = [
            attr
            for attr in element.inputs
            if attr.name in self.attribute_names and not _is_empty_binding(attr.value)
        ]
        if bound:
            return [key for attr in bound for key in literal_strings(attr.value)]

        keys = [
            normalize_whitespace(child.value)
            for child in element.children
            if isinstance(child, Text)
        ]
        return [key for key in keys if key]
