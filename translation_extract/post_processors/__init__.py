"""Post-processors applied to the merged catalog before compiling."""

from translation_extract.post_processors.base import PostProcessorInterface
from translation_extract.post_processors.purge_obsolete import PurgeObsoletePostProcessor
from translation_extract.post_processors.sort_by_key import SortByKeyPostProcessor
from translation_extract.post_processors.string_as_default_value import (
    StringAsDefaultValuePostProcessor,
)

__all__ = [
    "PostProcessorInterface",
    "PurgeObsoletePostProcessor",
    "SortByKeyPostProcessor",
    "StringAsDefaultValuePostProcessor",
]
