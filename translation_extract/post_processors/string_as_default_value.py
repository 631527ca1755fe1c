"""Default value for newly extracted keys."""

from __future__ import annotations

from translation_extract.collection import TranslationCollection
from translation_extract.post_processors.base import PostProcessorInterface


class StringAsDefaultValuePostProcessor(PostProcessorInterface):
    """Sets ``value`` on every key that is not already in the existing catalog."""

    name = "StringAsDefaultValue"

    def __init__(self, value: str) -> None:
        self.value = value

    def process(
        self,
        draft: TranslationCollection,
        extracted: TranslationCollection,
        existing: TranslationCollection,
    ) -> TranslationCollection:
        return draft.map(lambda key, current: current if existing.has(key) else self.value)
