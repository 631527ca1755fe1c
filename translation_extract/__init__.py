"""translation-extract: pull translation keys out of Angular templates."""

__version__ = "0.1.0"

from translation_extract.collection import TranslationCollection
from translation_extract.extraction import DirectiveParser, PipeParser
from translation_extract.template import TemplateParseError, parse_template

__all__ = [
    "DirectiveParser",
    "PipeParser",
    "TemplateParseError",
    "TranslationCollection",
    "__version__",
    "parse_template",
]
