"""Drop keys that are no longer used in any template."""

from __future__ import annotations

from translation_extract.collection import TranslationCollection
from translation_extract.post_processors.base import PostProcessorInterface


class PurgeObsoletePostProcessor(PostProcessorInterface):
    name = "PurgeObsolete"

    def process(
        self,
        draft: TranslationCollection,
        extracted: TranslationCollection,
        existing: TranslationCollection,
    ) -> TranslationCollection:
        return draft.intersect(extracted)
