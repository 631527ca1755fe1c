"""Expression literal flattener.

Resolves an expression tree to the string literals it can statically
evaluate to, under every branch. Both functions walk the tree with an
explicit stack, so arbitrarily deep expressions are safe.
"""

from __future__ import annotations

from translation_extract.template.expressions import (
    ASTWithSource,
    Binary,
    BindingPipe,
    Conditional,
    Expression,
    Interpolation,
    LiteralArray,
    LiteralMap,
    LiteralPrimitive,
)


def _literal_children(node: Expression) -> list[Expression]:
    """Sub-expressions whose literals flow into ``node``'s value, in order."""
    if isinstance(node, (Interpolation, LiteralArray)):
        return list(node.expressions)
    if isinstance(node, LiteralMap):
        return list(node.values)
    if isinstance(node, BindingPipe):
        # Pipe arguments are configuration, never translatable text.
        return [node.exp]
    if isinstance(node, Conditional):
        return [node.true_exp, node.false_exp]
    if isinstance(node, Binary):
        return [node.left, node.right]
    if isinstance(node, ASTWithSource):
        return [node.ast]
    return []


def _operand_children(node: Expression) -> list[Expression]:
    """Sub-expressions that can be the value of a piped operand as a whole."""
    if isinstance(node, BindingPipe):
        return [node.exp]
    if isinstance(node, Conditional):
        return [node.true_exp, node.false_exp]
    if isinstance(node, ASTWithSource):
        return [node.ast]
    return []


def _collect(root: Expression | None, children_of) -> list[LiteralPrimitive]:
    if root is None:
        return []
    found: list[LiteralPrimitive] = []
    stack: list[Expression] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, LiteralPrimitive):
            found.append(node)
            continue
        # Reversed so the leftmost child is popped first.
        stack.extend(reversed(children_of(node)))
    return found


def flatten_literals(node: Expression | None) -> list[LiteralPrimitive]:
    """All literal primitives that ``node`` can evaluate to, in source order.

    Interpolations and arrays contribute every element, maps every value
    (never keys), pipes their operand (never arguments), conditionals both
    branches (true first), binary operations both operands (left first).
    Any other node kind contributes nothing.
    """
    return _collect(node, _literal_children)


def flatten_pipe_operand(node: Expression | None) -> list[LiteralPrimitive]:
    """Literals a piped operand evaluates to as a whole.

    Only conditionals, nested pipes and wrappers are looked through; a
    concatenation or any other computed value is a dynamic key and yields
    nothing.
    """
    return _collect(node, _operand_children)


def string_values(literals: list[LiteralPrimitive]) -> list[str]:
    """Non-empty string values; numbers, booleans, null and ``''`` are not keys."""
    return [lit.value for lit in literals if isinstance(lit.value, str) and lit.value]


def literal_strings(node: Expression | None) -> list[str]:
    """String values of ``flatten_literals(node)``."""
    return string_values(flatten_literals(node))
