"""Expression parser: turn binding source text into Expression trees.

Three entry points mirror the places expressions appear in a template:

- ``parse_binding``: property bindings, block parameters and ``@let`` values
  (a single expression, pipes allowed).
- ``parse_interpolation``: text or attribute values containing ``{{ }}``.
- ``parse_template_bindings``: structural-directive microsyntax such as
  ``*ngFor="let item of items; trackBy: byId"``.

The grammar is precedence climbing over the lexer's tokens. Pipes bind
loosest, then conditionals, then the binary operator levels in
``_BINARY_PRECEDENCE``, then prefix operators and postfix access chains.
"""

from __future__ import annotations

import sys

from pydantic import BaseModel, ConfigDict

from translation_extract.template.errors import TemplateParseError
from translation_extract.template.expressions import (
    ASTWithSource,
    Binary,
    BindingPipe,
    Call,
    Conditional,
    EmptyExpr,
    Expression,
    Interpolation,
    KeyedRead,
    LiteralArray,
    LiteralMap,
    LiteralPrimitive,
    NonNullAssert,
    PrefixNot,
    PropertyRead,
    ThisReceiver,
    TypeofExpression,
    Unary,
)
from translation_extract.template.lexer import Token, TokenType, tokenize

INTERPOLATION_START = "{{"
INTERPOLATION_END = "}}"

_BINARY_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "??": 3,
    "==": 4,
    "!=": 4,
    "===": 4,
    "!==": 4,
    "<": 5,
    ">": 5,
    "<=": 5,
    ">=": 5,
    "in": 5,
    "+": 6,
    "-": 6,
    "*": 7,
    "/": 7,
    "%": 7,
    "**": 8,
}


# ---------------------------------------------------------------------------
# Microsyntax bindings
# ---------------------------------------------------------------------------


class ExpressionBinding(BaseModel):
    """``key: expression`` (or a bare key when ``value`` is None)."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: ASTWithSource | None = None


class VariableBinding(BaseModel):
    """``let name = value`` or ``expression as name``."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | None = None


TemplateBinding = ExpressionBinding | VariableBinding


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    """Recursive-descent parser over a token list for one source string."""

    def __init__(self, source: str, location: str, tokens: list[Token]) -> None:
        self.source = source
        self.location = location
        self.tokens = tokens
        self.index = 0

    # -- token helpers ------------------------------------------------------

    @property
    def next(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    @property
    def input_index(self) -> int:
        token = self.next
        return token.index if token is not None else len(self.source)

    def error(self, message: str) -> TemplateParseError:
        if self.at_end:
            where = "the end of the expression"
        else:
            where = f"column {self.input_index + 1}"
        suffix = f" in {self.location}" if self.location else ""
        return TemplateParseError(
            f"Parser Error: {message} at {where} [{self.source}]{suffix}"
        )

    def optional_character(self, char: str) -> bool:
        token = self.next
        if token is not None and token.is_character(char):
            self.index += 1
            return True
        return False

    def expect_character(self, char: str) -> None:
        if not self.optional_character(char):
            raise self.error(f"Missing expected {char}")

    def optional_operator(self, op: str) -> bool:
        token = self.next
        if token is not None and token.is_operator(op):
            self.index += 1
            return True
        return False

    def optional_keyword(self, word: str) -> bool:
        token = self.next
        if token is not None and token.is_keyword(word):
            self.index += 1
            return True
        return False

    def expect_identifier_or_keyword(self) -> str:
        token = self.next
        if token is None or token.type not in (TokenType.identifier, TokenType.keyword):
            found = "end of input" if token is None else f"[{token.value}]"
            raise self.error(f"Unexpected {found}, expected identifier or keyword")
        self.index += 1
        return token.value

    def source_between(self, start: int) -> str:
        end = self.tokens[self.index - 1].end if self.index > 0 else start
        return self.source[start:end]

    # -- grammar ------------------------------------------------------------

    def parse_chain(self) -> Expression:
        """Parse a complete binding; trailing tokens are an error."""
        if self.at_end:
            return EmptyExpr()
        expression = self.parse_pipe()
        while self.optional_character(";"):
            pass
        if not self.at_end:
            raise self.error(f"Unexpected token '{self.next.value}'")
        return expression

    def parse_pipe(self) -> Expression:
        result = self.parse_expression()
        while self.optional_operator("|"):
            name = self.expect_identifier_or_keyword()
            args: list[Expression] = []
            while self.optional_character(":"):
                args.append(self.parse_expression())
            result = BindingPipe(exp=result, name=name, args=args)
        return result

    def parse_expression(self) -> Expression:
        return self.parse_conditional()

    def parse_conditional(self) -> Expression:
        condition = self.parse_binary(1)
        if not self.optional_operator("?"):
            return condition
        true_exp = self.parse_pipe()
        if not self.optional_character(":"):
            raise self.error("Conditional expression requires all 3 expressions")
        false_exp = self.parse_pipe()
        return Conditional(condition=condition, true_exp=true_exp, false_exp=false_exp)

    def _binary_operator(self) -> str | None:
        token = self.next
        if token is None:
            return None
        if token.type == TokenType.operator and token.value in _BINARY_PRECEDENCE:
            return token.value
        if token.is_keyword("in"):
            return "in"
        return None

    def parse_binary(self, min_precedence: int) -> Expression:
        left = self.parse_prefix()
        while True:
            op = self._binary_operator()
            if op is None or _BINARY_PRECEDENCE[op] < min_precedence:
                return left
            self.index += 1
            precedence = _BINARY_PRECEDENCE[op]
            # "**" is right-associative.
            next_min = precedence if op == "**" else precedence + 1
            right = self.parse_binary(next_min)
            left = Binary(operation=op, left=left, right=right)

    def parse_prefix(self) -> Expression:
        token = self.next
        if token is not None and token.type == TokenType.operator:
            if token.value in ("+", "-"):
                self.index += 1
                return Unary(operator=token.value, expression=self.parse_prefix())
            if token.value == "!":
                self.index += 1
                return PrefixNot(expression=self.parse_prefix())
        if token is not None and token.is_keyword("typeof"):
            self.index += 1
            return TypeofExpression(expression=self.parse_prefix())
        return self.parse_call_chain()

    def parse_call_chain(self) -> Expression:
        result = self.parse_primary()
        while True:
            if self.optional_character("."):
                result = PropertyRead(receiver=result, name=self.expect_identifier_or_keyword())
            elif self.optional_operator("?."):
                if self.optional_character("["):
                    key = self.parse_pipe()
                    self.expect_character("]")
                    result = KeyedRead(receiver=result, key=key, safe=True)
                elif self.optional_character("("):
                    result = Call(receiver=result, args=self.parse_call_arguments(), safe=True)
                else:
                    result = PropertyRead(
                        receiver=result, name=self.expect_identifier_or_keyword(), safe=True
                    )
            elif self.optional_character("["):
                key = self.parse_pipe()
                self.expect_character("]")
                result = KeyedRead(receiver=result, key=key)
            elif self.optional_character("("):
                result = Call(receiver=result, args=self.parse_call_arguments())
            elif self.optional_operator("!"):
                result = NonNullAssert(expression=result)
            else:
                return result

    def parse_call_arguments(self) -> list[Expression]:
        args: list[Expression] = []
        if self.optional_character(")"):
            return args
        while True:
            args.append(self.parse_pipe())
            if not self.optional_character(","):
                break
            if self.next is not None and self.next.is_character(")"):
                break
        self.expect_character(")")
        return args

    def parse_primary(self) -> Expression:
        token = self.next
        if token is None:
            raise self.error("Unexpected end of expression")

        if token.is_character("("):
            self.index += 1
            result = self.parse_pipe()
            self.expect_character(")")
            return result
        if token.is_character("["):
            self.index += 1
            return self.parse_array()
        if token.is_character("{"):
            self.index += 1
            return self.parse_map()

        if token.type == TokenType.keyword:
            if token.value in ("null", "undefined"):
                self.index += 1
                return LiteralPrimitive(value=None)
            if token.value in ("true", "false"):
                self.index += 1
                return LiteralPrimitive(value=token.value == "true")
            if token.value == "this":
                self.index += 1
                return ThisReceiver()
            raise self.error(f"Unexpected keyword '{token.value}'")
        if token.type == TokenType.identifier:
            self.index += 1
            return PropertyRead(receiver=None, name=token.value)
        if token.type == TokenType.number:
            self.index += 1
            return LiteralPrimitive(value=token.number)
        if token.type == TokenType.string:
            self.index += 1
            return LiteralPrimitive(value=token.value)
        raise self.error(f"Unexpected token '{token.value}'")

    def parse_array(self) -> LiteralArray:
        expressions: list[Expression] = []
        if not self.optional_character("]"):
            while True:
                expressions.append(self.parse_pipe())
                if not self.optional_character(","):
                    break
                if self.next is not None and self.next.is_character("]"):
                    break
            self.expect_character("]")
        return LiteralArray(expressions=expressions)

    def parse_map(self) -> LiteralMap:
        keys: list[str] = []
        values: list[Expression] = []
        if not self.optional_character("}"):
            while True:
                token = self.next
                if token is not None and token.type == TokenType.string:
                    self.index += 1
                    key = token.value
                    self.expect_character(":")
                    value = self.parse_pipe()
                else:
                    key = self.expect_identifier_or_keyword()
                    if self.optional_character(":"):
                        value = self.parse_pipe()
                    else:
                        value = PropertyRead(receiver=None, name=key)
                keys.append(key)
                values.append(value)
                if not self.optional_character(","):
                    break
                if self.next is not None and self.next.is_character("}"):
                    break
            self.expect_character("}")
        return LiteralMap(keys=keys, values=values)

    # -- microsyntax --------------------------------------------------------

    def parse_template_bindings(self, template_key: str) -> list[TemplateBinding]:
        bindings: list[TemplateBinding] = self._parse_keyword_bindings(template_key)
        while not self.at_end:
            let_binding = self._parse_let_binding()
            if let_binding is not None:
                bindings.append(let_binding)
            else:
                key = self._expect_binding_key()
                as_binding = self._parse_as_binding(key)
                if as_binding is not None:
                    bindings.append(as_binding)
                else:
                    directive_key = template_key + key[0].upper() + key[1:]
                    bindings.extend(self._parse_keyword_bindings(directive_key))
            self._consume_statement_terminator()
        return bindings

    def _parse_keyword_bindings(self, key: str) -> list[TemplateBinding]:
        self.optional_character(":")
        value: ASTWithSource | None = None
        token = self.next
        if token is not None and not (token.is_keyword("as") or token.is_keyword("let")):
            start = token.index
            ast = self.parse_pipe()
            value = ASTWithSource(ast=ast, source=self.source_between(start), location=self.location)
        bindings: list[TemplateBinding] = [ExpressionBinding(key=key, value=value)]
        as_binding = self._parse_as_binding(key)
        if as_binding is not None:
            bindings.append(as_binding)
        else:
            self._consume_statement_terminator()
        return bindings

    def _parse_as_binding(self, value: str) -> VariableBinding | None:
        if not self.optional_keyword("as"):
            return None
        name = self._expect_binding_key()
        self._consume_statement_terminator()
        return VariableBinding(name=name, value=value)

    def _parse_let_binding(self) -> VariableBinding | None:
        if not self.optional_keyword("let"):
            return None
        name = self._expect_binding_key()
        value = "$implicit"
        if self.optional_operator("="):
            value = self._expect_binding_key()
        self._consume_statement_terminator()
        return VariableBinding(name=name, value=value)

    def _expect_binding_key(self) -> str:
        parts = [self.expect_identifier_or_keyword()]
        while self.next is not None and self.next.is_operator("-"):
            self.index += 1
            parts.append(self.expect_identifier_or_keyword())
        return "-".join(parts)

    def _consume_statement_terminator(self) -> None:
        if not self.optional_character(";"):
            self.optional_character(",")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


# Each nesting level costs several parser frames; this admits several hundred
# levels of parentheses, arrays or maps.
_RECURSION_LIMIT = 10000


def _run(source: str, location: str, action):
    limit = sys.getrecursionlimit()
    if limit < _RECURSION_LIMIT:
        sys.setrecursionlimit(_RECURSION_LIMIT)
    try:
        parser = _Parser(source, location, tokenize(source))
        return action(parser)
    except RecursionError:
        suffix = f" in {location}" if location else ""
        raise TemplateParseError(
            f"Expression nesting too deep [{source[:60]}...]{suffix}"
        ) from None
    finally:
        sys.setrecursionlimit(limit)


def parse_binding(source: str, location: str = "") -> ASTWithSource:
    """Parse a property binding or block parameter expression."""
    ast = _run(source, location, lambda parser: parser.parse_chain())
    return ASTWithSource(ast=ast, source=source, location=location)


def split_interpolation(text: str) -> tuple[list[str], list[str]] | None:
    """Split ``text`` into literal strings and ``{{ }}`` expression sources.

    Returns None when the text holds no complete interpolation. Quotes inside
    an interpolation hide ``}}``; an unterminated ``{{`` stays literal text.
    """
    strings: list[str] = []
    expressions: list[str] = []
    position = 0
    current = ""
    while True:
        start = text.find(INTERPOLATION_START, position)
        if start == -1:
            current += text[position:]
            break
        end = find_interpolation_end(text, start + len(INTERPOLATION_START))
        if end == -1:
            current += text[position:]
            break
        strings.append(current + text[position:start])
        current = ""
        expressions.append(text[start + len(INTERPOLATION_START):end])
        position = end + len(INTERPOLATION_END)
    if not expressions:
        return None
    strings.append(current)
    return strings, expressions


def find_interpolation_end(text: str, start: int) -> int:
    """Index of the ``}}`` closing an interpolation opened before ``start``."""
    quote: str | None = None
    index = start
    length = len(text)
    while index < length:
        ch = text[index]
        if quote is not None:
            if ch == "\\":
                index += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif text.startswith(INTERPOLATION_END, index):
            return index
        index += 1
    return -1


def parse_interpolation(text: str, location: str = "") -> ASTWithSource | None:
    """Parse text containing ``{{ }}``; None when there is no interpolation."""
    parts = split_interpolation(text)
    if parts is None:
        return None
    strings, sources = parts
    expressions: list[Expression] = []
    for source in sources:
        if not source.strip():
            raise TemplateParseError(
                f"Parser Error: Blank expressions are not allowed in interpolated strings [{text}]"
                + (f" in {location}" if location else "")
            )
        expressions.append(_run(source, location, lambda parser: parser.parse_chain()))
    ast = Interpolation(strings=strings, expressions=expressions)
    return ASTWithSource(ast=ast, source=text, location=location)


def parse_template_bindings(
    template_key: str, source: str, location: str = ""
) -> list[TemplateBinding]:
    """Parse structural-directive microsyntax for ``*template_key="source"``."""

    def action(parser: _Parser) -> list[TemplateBinding]:
        return parser.parse_template_bindings(template_key)

    return _run(source, location, action)
