"""Expression AST: Pydantic v2 models for parsed binding expressions.

Every node carries a ``kind`` tag and the full set of node types forms the
closed ``Expression`` union. Nodes are frozen; parsers build them bottom-up
and consumers only read them.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ExpressionNode(BaseModel):
    """Base class for all expression nodes."""

    model_config = ConfigDict(frozen=True)


class EmptyExpr(ExpressionNode):
    """An empty binding, e.g. ``[translate]=""``."""

    kind: Literal["empty"] = "empty"


class ThisReceiver(ExpressionNode):
    kind: Literal["this"] = "this"


class LiteralPrimitive(ExpressionNode):
    """A string, number, boolean, ``null`` or ``undefined`` literal."""

    kind: Literal["literal"] = "literal"
    value: str | int | float | bool | None = None


class Interpolation(ExpressionNode):
    """``{{ a }} text {{ b }}``: ``strings`` interleave ``expressions``."""

    kind: Literal["interpolation"] = "interpolation"
    strings: list[str] = Field(default_factory=list)
    expressions: list[Expression] = Field(default_factory=list)


class LiteralArray(ExpressionNode):
    kind: Literal["array"] = "array"
    expressions: list[Expression] = Field(default_factory=list)


class LiteralMap(ExpressionNode):
    """Object literal; ``keys`` and ``values`` are parallel lists."""

    kind: Literal["map"] = "map"
    keys: list[str] = Field(default_factory=list)
    values: list[Expression] = Field(default_factory=list)


class BindingPipe(ExpressionNode):
    """``exp | name:arg1:arg2``."""

    kind: Literal["pipe"] = "pipe"
    exp: Expression
    name: str
    args: list[Expression] = Field(default_factory=list)


class Conditional(ExpressionNode):
    kind: Literal["conditional"] = "conditional"
    condition: Expression
    true_exp: Expression
    false_exp: Expression


class Binary(ExpressionNode):
    kind: Literal["binary"] = "binary"
    operation: str
    left: Expression
    right: Expression


class Unary(ExpressionNode):
    """Prefix ``-x`` / ``+x``."""

    kind: Literal["unary"] = "unary"
    operator: str
    expression: Expression


class PrefixNot(ExpressionNode):
    kind: Literal["not"] = "not"
    expression: Expression


class TypeofExpression(ExpressionNode):
    kind: Literal["typeof"] = "typeof"
    expression: Expression


class NonNullAssert(ExpressionNode):
    kind: Literal["non_null"] = "non_null"
    expression: Expression


class PropertyRead(ExpressionNode):
    """``receiver.name``; ``receiver`` is None for the implicit component scope."""

    kind: Literal["property"] = "property"
    receiver: Expression | None = None
    name: str
    safe: bool = False


class KeyedRead(ExpressionNode):
    kind: Literal["keyed"] = "keyed"
    receiver: Expression
    key: Expression
    safe: bool = False


class Call(ExpressionNode):
    kind: Literal["call"] = "call"
    receiver: Expression
    args: list[Expression] = Field(default_factory=list)
    safe: bool = False


class ASTWithSource(ExpressionNode):
    """Transparent wrapper pairing a parsed expression with its source text."""

    kind: Literal["source"] = "source"
    ast: Expression
    source: str | None = None
    location: str = ""


Expression = Union[
    EmptyExpr,
    ThisReceiver,
    LiteralPrimitive,
    Interpolation,
    LiteralArray,
    LiteralMap,
    BindingPipe,
    Conditional,
    Binary,
    Unary,
    PrefixNot,
    TypeofExpression,
    NonNullAssert,
    PropertyRead,
    KeyedRead,
    Call,
    ASTWithSource,
]


for _model in (
    Interpolation,
    LiteralArray,
    LiteralMap,
    BindingPipe,
    Conditional,
    Binary,
    Unary,
    PrefixNot,
    TypeofExpression,
    NonNullAssert,
    PropertyRead,
    KeyedRead,
    Call,
    ASTWithSource,
):
    _model.model_rebuild()
