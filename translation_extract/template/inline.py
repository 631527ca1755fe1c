"""Inline template support for component source files."""

from __future__ import annotations

import re

_COMPONENT_PATH = re.compile(r"\.(ts|js)$", re.IGNORECASE)
_INLINE_TEMPLATE = re.compile(r"\btemplate\s*:\s*([\"'`])((?:\\[\s\S]|(?!\1)[^\\])*)\1")
_STRING_ESCAPE = re.compile(r"\\(\r\n|[\s\S])")
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}

BOM = "\ufeff"


def is_component_path(path: str) -> bool:
    """True for TypeScript/JavaScript sources that may hold an inline template."""
    return bool(_COMPONENT_PATH.search(path))


def _unescape(match: re.Match) -> str:
    escaped = match.group(1)
    if escaped in ("\n", "\r\n"):
        # Line continuation.
        return ""
    return _ESCAPES.get(escaped, escaped)


def extract_inline_template(source: str) -> str:
    """Return the ``template:`` string of a component decorator, or ``""``.

    Backslash escapes in the string literal are decoded.
    """
    match = _INLINE_TEMPLATE.search(source)
    if match is None:
        return ""
    return _STRING_ESCAPE.sub(_unescape, match.group(2))


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(BOM) else text
