"""Key extraction: expression flattening, marker attributes, translate pipes."""

from translation_extract.extraction.base import DEFAULT_NAMES, ParserInterface, names_or_default
from translation_extract.extraction.directive import DirectiveParser, normalize_whitespace
from translation_extract.extraction.flattener import (
    flatten_literals,
    flatten_pipe_operand,
    literal_strings,
    string_values,
)
from translation_extract.extraction.pipe import PipeParser
from translation_extract.extraction.walker import (
    block_children,
    iter_elements_with_attribute,
    iter_expressions,
)

__all__ = [
    "DEFAULT_NAMES",
    "ParserInterface",
    "names_or_default",
    "DirectiveParser",
    "normalize_whitespace",
    "flatten_literals",
    "flatten_pipe_operand",
    "literal_strings",
    "string_values",
    "PipeParser",
    "block_children",
    "iter_elements_with_attribute",
    "iter_expressions",
]
