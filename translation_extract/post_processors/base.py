"""Post-processor interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from translation_extract.collection import TranslationCollection


class PostProcessorInterface(ABC):
    """Transforms the merged draft before it is compiled."""

    name: str

    @abstractmethod
    def process(
        self,
        draft: TranslationCollection,
        extracted: TranslationCollection,
        existing: TranslationCollection,
    ) -> TranslationCollection:
        ...
