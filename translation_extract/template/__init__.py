"""Template parsing: markup, control-flow blocks and binding expressions."""

from translation_extract.template.errors import TemplateParseError
from translation_extract.template.expression_parser import (
    parse_binding,
    parse_interpolation,
    parse_template_bindings,
)
from translation_extract.template.inline import (
    extract_inline_template,
    is_component_path,
    strip_bom,
)
from translation_extract.template.parser import parse_template

__all__ = [
    "TemplateParseError",
    "parse_binding",
    "parse_interpolation",
    "parse_template_bindings",
    "extract_inline_template",
    "is_component_path",
    "strip_bom",
    "parse_template",
]
