"""Base class shared by the template key parsers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from translation_extract.collection import TranslationCollection
from translation_extract.template.inline import (
    extract_inline_template,
    is_component_path,
    strip_bom,
)
from translation_extract.template.nodes import Node
from translation_extract.template.parser import parse_template

DEFAULT_NAMES: tuple[str, ...] = ("translate",)


def names_or_default(names: list[str] | tuple[str, ...] | None) -> list[str]:
    """Configured names, or the default ``["translate"]`` when none are given."""
    cleaned = [name for name in (names or []) if name]
    return cleaned or list(DEFAULT_NAMES)


class ParserInterface(ABC):
    """Extracts translation keys from one source file."""

    @abstractmethod
    def extract(self, source: str, file_path: str) -> TranslationCollection:
        """Return the keys found in ``source``.

        Raises:
            TemplateParseError: if the template cannot be parsed.
        """
        ...

    def parse_nodes(self, source: str, file_path: str) -> list[Node]:
        """Parse ``source`` into template nodes.

        For component source files (``.ts``/``.js``) only the inline
        ``template:`` string is parsed.
        """
        source = strip_bom(source)
        if file_path and is_component_path(file_path):
            source = extract_inline_template(source)
        return parse_template(source, file_path)
