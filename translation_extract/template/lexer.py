"""Expression lexer: split binding source text into tokens.

Handles identifiers, keywords, numeric and string literals (with escape
sequences), operators and punctuation characters used by the expression
grammar.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from translation_extract.template.errors import TemplateParseError


class TokenType(str, Enum):
    """Token categories produced by the lexer."""

    character = "character"
    identifier = "identifier"
    keyword = "keyword"
    string = "string"
    operator = "operator"
    number = "number"


class Token(BaseModel):
    """A single lexed token with its source offsets."""

    model_config = ConfigDict(frozen=True)

    type: TokenType
    value: str
    index: int
    end: int
    number: int | float | None = None

    def is_character(self, char: str) -> bool:
        return self.type == TokenType.character and self.value == char

    def is_operator(self, op: str) -> bool:
        return self.type == TokenType.operator and self.value == op

    def is_keyword(self, word: str) -> bool:
        return self.type == TokenType.keyword and self.value == word


KEYWORDS: frozenset[str] = frozenset(
    {"let", "as", "null", "undefined", "true", "false", "if", "else", "this", "typeof", "in"}
)

_CHARACTERS = "()[]{},:;."

# Longest first so that e.g. "===" wins over "==".
_OPERATORS: tuple[str, ...] = (
    "===",
    "!==",
    "**",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "??",
    "?.",
    "+",
    "-",
    "*",
    "/",
    "%",
    "<",
    ">",
    "!",
    "=",
    "&",
    "|",
    "?",
    "^",
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "f": "\f",
    "b": "\b",
    "0": "\0",
}


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


class Lexer:
    """Tokenizer for a single expression source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.index = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self._scan_token()
            if token is None:
                return tokens
            tokens.append(token)

    def _error(self, message: str, index: int) -> TemplateParseError:
        return TemplateParseError(
            f"Lexer error: {message} at column {index} in [{self.source}]"
        )

    def _scan_token(self) -> Token | None:
        source = self.source
        while self.index < self.length and source[self.index].isspace():
            self.index += 1
        if self.index >= self.length:
            return None

        start = self.index
        ch = source[start]

        if _is_identifier_start(ch):
            return self._scan_identifier()
        if ch.isdigit():
            return self._scan_number()
        if ch == "." and start + 1 < self.length and source[start + 1].isdigit():
            return self._scan_number()
        if ch in "'\"":
            return self._scan_string(ch)
        if ch == "`":
            raise self._error("template literals are not supported", start)
        if ch == "?" and source.startswith("?.", start):
            # "cond ? .5 : 1" is a conditional, not a safe navigation.
            if start + 2 < self.length and source[start + 2].isdigit():
                self.index += 1
                return Token(type=TokenType.operator, value="?", index=start, end=start + 1)
        if ch in _CHARACTERS:
            self.index += 1
            return Token(type=TokenType.character, value=ch, index=start, end=self.index)
        for op in _OPERATORS:
            if source.startswith(op, start):
                self.index += len(op)
                return Token(type=TokenType.operator, value=op, index=start, end=self.index)
        raise self._error(f"Unexpected character [{ch}]", start)

    def _scan_identifier(self) -> Token:
        start = self.index
        self.index += 1
        while self.index < self.length and _is_identifier_part(self.source[self.index]):
            self.index += 1
        word = self.source[start:self.index]
        token_type = TokenType.keyword if word in KEYWORDS else TokenType.identifier
        return Token(type=token_type, value=word, index=start, end=self.index)

    def _scan_number(self) -> Token:
        source = self.source
        start = self.index
        is_float = False
        while self.index < self.length:
            ch = source[self.index]
            if ch.isdigit() or ch == "_":
                pass
            elif ch == "." and not is_float:
                next_char = source[self.index + 1:self.index + 2]
                if self.index != start and not next_char.isdigit():
                    break
                is_float = True
            elif ch in "eE":
                is_float = True
                if self.index + 1 < self.length and source[self.index + 1] in "+-":
                    self.index += 1
            else:
                break
            self.index += 1
        text = source[start:self.index].replace("_", "")
        try:
            number: int | float = float(text) if is_float else int(text)
        except ValueError:
            raise self._error(f"Invalid number [{text}]", start)
        return Token(
            type=TokenType.number,
            value=source[start:self.index],
            index=start,
            end=self.index,
            number=number,
        )

    def _scan_string(self, quote: str) -> Token:
        source = self.source
        start = self.index
        self.index += 1
        parts: list[str] = []
        while True:
            if self.index >= self.length:
                raise self._error("Unterminated quote", start)
            ch = source[self.index]
            if ch == quote:
                self.index += 1
                break
            if ch != "\\":
                parts.append(ch)
                self.index += 1
                continue
            self.index += 1
            if self.index >= self.length:
                raise self._error("Unterminated quote", start)
            escaped = source[self.index]
            if escaped == "u":
                hex_digits = source[self.index + 1:self.index + 5]
                if len(hex_digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                    raise self._error(f"Invalid unicode escape [\\u{hex_digits}]", self.index)
                parts.append(chr(int(hex_digits, 16)))
                self.index += 5
            elif escaped == "x":
                hex_digits = source[self.index + 1:self.index + 3]
                if len(hex_digits) != 2 or not all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                    raise self._error(f"Invalid hex escape [\\x{hex_digits}]", self.index)
                parts.append(chr(int(hex_digits, 16)))
                self.index += 3
            else:
                parts.append(_SIMPLE_ESCAPES.get(escaped, escaped))
                self.index += 1
        return Token(type=TokenType.string, value="".join(parts), index=start, end=self.index)


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression source string."""
    return Lexer(source).tokenize()
