"""Sort catalog keys."""

from __future__ import annotations

from translation_extract.collection import TranslationCollection
from translation_extract.post_processors.base import PostProcessorInterface


class SortByKeyPostProcessor(PostProcessorInterface):
    """Case-insensitive ascending key order; ties broken by exact string."""

    name = "SortByKey"

    def process(
        self,
        draft: TranslationCollection,
        extracted: TranslationCollection,
        existing: TranslationCollection,
    ) -> TranslationCollection:
        return draft.sort()
