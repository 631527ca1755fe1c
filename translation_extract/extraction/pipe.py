"""Pipe-invocation extractor.

Finds string literals piped through a translate pipe anywhere in a
template: interpolations, attribute bindings, structural directives, block
parameters and ``@let`` values, including pipe arguments. Only the operand
of a matching pipe is resolved; literals passed as pipe arguments are never
keys.
"""

from __future__ import annotations

from translation_extract.collection import TranslationCollection
from translation_extract.extraction.base import ParserInterface, names_or_default
from translation_extract.extraction.flattener import flatten_pipe_operand, string_values
from translation_extract.extraction.walker import iter_expressions
from translation_extract.template.expressions import (
    ASTWithSource,
    Binary,
    BindingPipe,
    Call,
    Conditional,
    Expression,
    Interpolation,
    KeyedRead,
    LiteralArray,
    LiteralMap,
    NonNullAssert,
    PrefixNot,
    PropertyRead,
    TypeofExpression,
    Unary,
)


def _search_children(node: Expression) -> list[Expression]:
    """Sub-expressions that may contain a translate pipe, in source order."""
    if isinstance(node, ASTWithSource):
        return [node.ast]
    if isinstance(node, (Interpolation, LiteralArray)):
        return list(node.expressions)
    if isinstance(node, LiteralMap):
        return list(node.values)
    if isinstance(node, BindingPipe):
        return [node.exp, *node.args]
    if isinstance(node, Conditional):
        return [node.condition, node.true_exp, node.false_exp]
    if isinstance(node, Binary):
        return [node.left, node.right]
    if isinstance(node, Call):
        return [node.receiver, *node.args]
    if isinstance(node, KeyedRead):
        return [node.receiver, node.key]
    if isinstance(node, PropertyRead):
        return [node.receiver] if node.receiver is not None else []
    if isinstance(node, (Unary, PrefixNot, TypeofExpression, NonNullAssert)):
        return [node.expression]
    return []


class PipeParser(ParserInterface):
    """Extracts keys from ``'literal' | translate`` pipe invocations."""

    def __init__(self, pipe_names: list[str] | None = None) -> None:
        self.pipe_names = names_or_default(pipe_names)

    def extract(self, source: str, file_path: str) -> TranslationCollection:
        collection = TranslationCollection()
        for expression in iter_expressions(self.parse_nodes(source, file_path)):
            collection = collection.add_keys(self.extract_from_expression(expression))
        return collection

    def find_pipes(self, root: Expression) -> list[BindingPipe]:
        """Matching pipe invocations in ``root``, outermost first, in source order."""
        found: list[BindingPipe] = []
        stack: list[Expression] = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, BindingPipe) and node.name in self.pipe_names:
                found.append(node)
            stack.extend(reversed(_search_children(node)))
        return found

    def extract_from_expression(self, root: Expression) -> list[str]:
        """Keys from every matching pipe in ``root``."""
        keys: list[str] = []
        for pipe in self.find_pipes(root):
            keys.extend(string_values(flatten_pipe_operand(pipe.exp)))
        return keys
