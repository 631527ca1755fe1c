"""Catalog compiler interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from translation_extract.collection import TranslationCollection


class CompilerInterface(ABC):
    """Serializes a collection to catalog text and reads it back."""

    extension: str

    @abstractmethod
    def compile(self, collection: TranslationCollection) -> str:
        ...

    @abstractmethod
    def parse(self, contents: str) -> TranslationCollection:
        """Read catalog text.

        Raises:
            ValueError: if the contents are not a valid catalog.
        """
        ...
