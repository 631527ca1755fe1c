"""Template AST: Pydantic v2 models for parsed template nodes.

Nodes fall into three groups:

- element-like: ``Element`` and ``Template`` (``<ng-template>`` or the wrapper
  a structural directive such as ``*ngIf`` produces around its element);
- text: ``Text`` (static) and ``BoundText`` (contains interpolation);
- blocks: ``IfBlock``, ``ForLoopBlock``, ``SwitchBlock``, ``DeferredBlock``
  with their branch types, plus ``LetDeclaration``.

``Node`` is the closed union of everything that can appear in a children list.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from translation_extract.template.expressions import ASTWithSource


class TemplateNode(BaseModel):
    """Base class for all template nodes."""

    model_config = ConfigDict(frozen=True)


class BindingType(str, Enum):
    """How a bound attribute was written in the template."""

    property = "property"
    attribute = "attribute"
    class_ = "class"
    style = "style"
    two_way = "two_way"
    interpolation = "interpolation"


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


class TextAttribute(TemplateNode):
    kind: Literal["text_attribute"] = "text_attribute"
    name: str
    value: str = ""


class BoundAttribute(TemplateNode):
    """``[name]="expr"`` and friends, or ``name="text {{ expr }}"``."""

    kind: Literal["bound_attribute"] = "bound_attribute"
    name: str
    value: ASTWithSource
    binding_type: BindingType = BindingType.property


class BoundEvent(TemplateNode):
    """``(name)="handler"``; the handler statement is kept as source text."""

    kind: Literal["bound_event"] = "bound_event"
    name: str
    handler: str = ""


class Reference(TemplateNode):
    kind: Literal["reference"] = "reference"
    name: str
    value: str = ""


class Variable(TemplateNode):
    kind: Literal["variable"] = "variable"
    name: str
    value: str = "$implicit"


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


class Text(TemplateNode):
    kind: Literal["text"] = "text"
    value: str


class BoundText(TemplateNode):
    kind: Literal["bound_text"] = "bound_text"
    value: ASTWithSource


# ---------------------------------------------------------------------------
# Element-like nodes
# ---------------------------------------------------------------------------


class Element(TemplateNode):
    kind: Literal["element"] = "element"
    name: str
    attributes: list[TextAttribute] = Field(default_factory=list)
    inputs: list[BoundAttribute] = Field(default_factory=list)
    outputs: list[BoundEvent] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)
    children: list[Node] = Field(default_factory=list)


class Template(TemplateNode):
    """An ``<ng-template>`` or a structural-directive wrapper.

    For ``<div *ngIf="cond">`` the wrapper has ``tag_name="div"``, the
    ``ngIf`` binding in ``template_attrs`` and the ``<div>`` element as its
    only child.
    """

    kind: Literal["template"] = "template"
    tag_name: str
    attributes: list[TextAttribute] = Field(default_factory=list)
    inputs: list[BoundAttribute] = Field(default_factory=list)
    outputs: list[BoundEvent] = Field(default_factory=list)
    template_attrs: list[Union[BoundAttribute, TextAttribute]] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)
    variables: list[Variable] = Field(default_factory=list)
    children: list[Node] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Control-flow blocks
# ---------------------------------------------------------------------------


class IfBlockBranch(TemplateNode):
    """One ``@if`` / ``@else if`` / ``@else`` branch; ``@else`` has no expression."""

    kind: Literal["if_branch"] = "if_branch"
    expression: ASTWithSource | None = None
    expression_alias: str | None = None
    children: list[Node] = Field(default_factory=list)


class IfBlock(TemplateNode):
    kind: Literal["if"] = "if"
    branches: list[IfBlockBranch] = Field(default_factory=list)


class ForLoopBlockEmpty(TemplateNode):
    kind: Literal["for_empty"] = "for_empty"
    children: list[Node] = Field(default_factory=list)


class ForLoopBlock(TemplateNode):
    kind: Literal["for"] = "for"
    item_name: str
    expression: ASTWithSource
    track_by: ASTWithSource | None = None
    children: list[Node] = Field(default_factory=list)
    empty: ForLoopBlockEmpty | None = None


class SwitchBlockCase(TemplateNode):
    """``@case (expr)``; ``@default`` has no expression."""

    kind: Literal["switch_case"] = "switch_case"
    expression: ASTWithSource | None = None
    children: list[Node] = Field(default_factory=list)


class SwitchBlock(TemplateNode):
    kind: Literal["switch"] = "switch"
    expression: ASTWithSource
    cases: list[SwitchBlockCase] = Field(default_factory=list)


class DeferredBlockPlaceholder(TemplateNode):
    kind: Literal["defer_placeholder"] = "defer_placeholder"
    children: list[Node] = Field(default_factory=list)


class DeferredBlockLoading(TemplateNode):
    kind: Literal["defer_loading"] = "defer_loading"
    children: list[Node] = Field(default_factory=list)


class DeferredBlockError(TemplateNode):
    kind: Literal["defer_error"] = "defer_error"
    children: list[Node] = Field(default_factory=list)


class DeferredBlock(TemplateNode):
    kind: Literal["defer"] = "defer"
    triggers: list[str] = Field(default_factory=list)
    children: list[Node] = Field(default_factory=list)
    placeholder: DeferredBlockPlaceholder | None = None
    loading: DeferredBlockLoading | None = None
    error: DeferredBlockError | None = None


class LetDeclaration(TemplateNode):
    """``@let name = expression;``."""

    kind: Literal["let"] = "let"
    name: str
    value: ASTWithSource


Node = Union[
    Text,
    BoundText,
    Element,
    Template,
    IfBlock,
    ForLoopBlock,
    SwitchBlock,
    DeferredBlock,
    LetDeclaration,
]

ElementLike = Union[Element, Template]
BlockNode = Union[IfBlock, ForLoopBlock, SwitchBlock, DeferredBlock]


for _model in (
    Element,
    Template,
    IfBlockBranch,
    IfBlock,
    ForLoopBlockEmpty,
    ForLoopBlock,
    SwitchBlockCase,
    SwitchBlock,
    DeferredBlockPlaceholder,
    DeferredBlockLoading,
    DeferredBlockError,
    DeferredBlock,
):
    _model.model_rebuild()
