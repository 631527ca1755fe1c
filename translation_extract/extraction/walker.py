"""Tree walker: iterate template trees without recursion.

Two traversals are provided:

- ``iter_elements_with_attribute`` yields element-like nodes that carry one of
  the given attribute names (static or bound), for marker-attribute
  extraction.
- ``iter_expressions`` yields every bound expression in the tree in document
  order, for pipe extraction.

Both keep pending work on an explicit stack, so template nesting depth is
bounded only by memory.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from translation_extract.template.expressions import ASTWithSource
from translation_extract.template.nodes import (
    BoundAttribute,
    BoundText,
    DeferredBlock,
    DeferredBlockError,
    DeferredBlockLoading,
    DeferredBlockPlaceholder,
    Element,
    ForLoopBlock,
    ForLoopBlockEmpty,
    IfBlock,
    IfBlockBranch,
    LetDeclaration,
    Node,
    SwitchBlock,
    SwitchBlockCase,
    Template,
)

ELEMENT_LIKE = (Element, Template)
BLOCK_NODES = (IfBlock, ForLoopBlock, SwitchBlock, DeferredBlock)


def is_element_like(node: object) -> bool:
    return isinstance(node, ELEMENT_LIKE)


def is_block(node: object) -> bool:
    return isinstance(node, BLOCK_NODES)


def deferred_sub_blocks(
    block: DeferredBlock,
) -> list[DeferredBlockPlaceholder | DeferredBlockLoading | DeferredBlockError]:
    """``@placeholder``, ``@loading`` and ``@error``, in that order, when present."""
    return [sub for sub in (block.placeholder, block.loading, block.error) if sub is not None]


def block_children(block: IfBlock | ForLoopBlock | SwitchBlock | DeferredBlock) -> list[Node]:
    """Children of every branch of ``block``, branch by branch.

    - ``@if``: each branch in declared order;
    - ``@for``: the loop body, then ``@empty``;
    - ``@switch``: each ``@case``/``@default`` in declared order;
    - ``@defer``: the main body, then ``@placeholder``, ``@loading``, ``@error``.
    """
    if isinstance(block, IfBlock):
        return [child for branch in block.branches for child in branch.children]
    if isinstance(block, ForLoopBlock):
        return [*block.children, *(block.empty.children if block.empty else [])]
    if isinstance(block, SwitchBlock):
        return [child for case in block.cases for child in case.children]
    if isinstance(block, DeferredBlock):
        children = list(block.children)
        for sub_block in deferred_sub_blocks(block):
            children.extend(sub_block.children)
        return children
    return []


def has_attribute(element: Element | Template, names: Iterable[str]) -> bool:
    names = set(names)
    return any(attr.name in names for attr in element.attributes) or any(
        attr.name in names for attr in element.inputs
    )


def iter_elements_with_attribute(
    nodes: list[Node], names: Iterable[str]
) -> Iterator[Element | Template]:
    """Element-like nodes carrying a static or bound attribute in ``names``.

    Within one sibling list, element-like nodes are visited first, each
    followed by its qualifying descendants; then each block's branch
    children are visited, block by block, as a sibling list of their own.
    """
    names = frozenset(names)
    # Entries are ("element", node) or ("level", sibling list).
    stack: list[tuple[str, object]] = [("level", nodes)]
    while stack:
        entry_type, item = stack.pop()
        if entry_type == "element":
            if has_attribute(item, names):
                yield item
            stack.append(("level", item.children))
            continue
        work: list[tuple[str, object]] = [
            ("element", node) for node in item if is_element_like(node)
        ]
        work.extend(("level", block_children(node)) for node in item if is_block(node))
        stack.extend(reversed(work))


def _expression_parts(node) -> list:
    """Bound expressions and child nodes of ``node``, in document order."""
    if isinstance(node, BoundText):
        return [node.value]
    if isinstance(node, Element):
        return [*(attr.value for attr in node.inputs), *node.children]
    if isinstance(node, Template):
        bound_template_attrs = [
            attr.value for attr in node.template_attrs if isinstance(attr, BoundAttribute)
        ]
        return [*bound_template_attrs, *(attr.value for attr in node.inputs), *node.children]
    if isinstance(node, IfBlock):
        return list(node.branches)
    if isinstance(node, IfBlockBranch):
        return [*([node.expression] if node.expression else []), *node.children]
    if isinstance(node, ForLoopBlock):
        parts: list = [node.expression]
        if node.track_by is not None:
            parts.append(node.track_by)
        parts.extend(node.children)
        if node.empty is not None:
            parts.append(node.empty)
        return parts
    if isinstance(node, SwitchBlock):
        return [node.expression, *node.cases]
    if isinstance(node, SwitchBlockCase):
        return [*([node.expression] if node.expression else []), *node.children]
    if isinstance(node, DeferredBlock):
        return [*node.children, *deferred_sub_blocks(node)]
    if isinstance(
        node, (ForLoopBlockEmpty, DeferredBlockPlaceholder, DeferredBlockLoading, DeferredBlockError)
    ):
        return list(node.children)
    if isinstance(node, LetDeclaration):
        return [node.value]
    return []


def iter_expressions(nodes: list[Node]) -> Iterator[ASTWithSource]:
    """Every bound expression in ``nodes`` and their descendants, in document order.

    Covers interpolated text, property and interpolated attribute bindings,
    structural-directive bindings, block parameters and ``@let`` values.
    """
    stack: list = list(reversed(nodes))
    while stack:
        item = stack.pop()
        if isinstance(item, ASTWithSource):
            yield item
            continue
        stack.extend(reversed(_expression_parts(item)))
