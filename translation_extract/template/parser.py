"""Template parser: turn template source into a list of template nodes.

The scanner walks the source once, keeping open elements and blocks on an
explicit stack, so nesting depth is limited only by memory. Each element is
converted to its final node (attribute bindings parsed, structural directive
wrapped in a ``Template``) when it closes; connected blocks (``@else``,
``@empty``, ``@placeholder`` ...) are merged into the block they follow.

Whitespace-only text between nodes is dropped. Unclosed elements are closed
implicitly at the end of input or at the end of the enclosing block; every
other structural problem raises ``TemplateParseError``.
"""

from __future__ import annotations

import html
import re

from translation_extract.template.errors import TemplateParseError
from translation_extract.template.expression_parser import (
    ExpressionBinding,
    INTERPOLATION_END,
    INTERPOLATION_START,
    VariableBinding,
    parse_binding,
    parse_interpolation,
    parse_template_bindings,
)
from translation_extract.template.nodes import (
    BindingType,
    BoundAttribute,
    BoundEvent,
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
    Reference,
    SwitchBlock,
    SwitchBlockCase,
    Template,
    Text,
    TextAttribute,
    Variable,
)

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Content is kept verbatim up to the closing tag.
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})
# Content is text only (entities and interpolation allowed, no tags).
ESCAPABLE_RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"textarea", "title"})

PRIMARY_BLOCKS: frozenset[str] = frozenset({"if", "for", "switch", "defer"})
CONNECTED_BLOCKS: dict[str, str] = {
    "else if": "if",
    "else": "if",
    "empty": "for",
    "placeholder": "defer",
    "loading": "defer",
    "error": "defer",
}
SWITCH_CASE_BLOCKS: frozenset[str] = frozenset({"case", "default"})

_BLOCK_START = re.compile(
    r"@(else\s+if|if|else|for|empty|switch|case|default|defer|placeholder|loading|error)(?![\w$])"
)
_LET_START = re.compile(r"@let\s+([A-Za-z_$][\w$]*)\s*=")
_TAG_NAME = re.compile(r"[A-Za-z][^\s/>]*|:[A-Za-z][^\s/>]*")
_FOR_LOOP_EXPRESSION = re.compile(r"^\s*([A-Za-z_$][\w$]*)\s+of\s+([\s\S]+?)\s*$")
_FOR_TRACK = re.compile(r"^track\s+([\s\S]+)$")
_IF_ALIAS = re.compile(r"^as\s+([A-Za-z_$][\w$]*)\s*$")
_WHITESPACE_CHARS = " \t\n\r\f\v"


def _is_whitespace_only(text: str) -> bool:
    return not text.strip(_WHITESPACE_CHARS)


class _ElementFrame:
    """An element whose closing tag has not been reached yet."""

    def __init__(self, name: str, attrs: list[tuple[str, str, int]], offset: int) -> None:
        self.name = name
        self.attrs = attrs
        self.offset = offset
        self.children: list = []


class _BlockFrame:
    """A ``@block (...) {`` whose closing brace has not been reached yet."""

    def __init__(self, name: str, parameters: list[str], offset: int) -> None:
        self.name = name
        self.parameters = parameters
        self.offset = offset
        self.children: list = []


class _TemplateParser:
    def __init__(self, source: str, file_path: str) -> None:
        self.source = source
        self.file_path = file_path
        self.length = len(source)
        self.pos = 0
        self.root: list = []
        self.stack: list[_ElementFrame | _BlockFrame] = []

    # -- helpers ------------------------------------------------------------

    def _position(self, offset: int) -> tuple[int, int]:
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def error(self, message: str, offset: int | None = None) -> TemplateParseError:
        line, column = self._position(self.pos if offset is None else offset)
        return TemplateParseError(message, self.file_path, line, column)

    def location(self, offset: int) -> str:
        line, column = self._position(offset)
        return f"{self.file_path or 'template'}@{line}:{column}"

    @property
    def current_children(self) -> list:
        return self.stack[-1].children if self.stack else self.root

    def _block_is_open(self) -> bool:
        return any(isinstance(frame, _BlockFrame) for frame in self.stack)

    def _is_tag_start(self, index: int) -> bool:
        if self.source[index] != "<":
            return False
        following = self.source[index + 1:index + 2]
        if following == "!":
            return True
        if following == "/":
            following = self.source[index + 2:index + 3]
        return following.isalpha() or following == ":"

    # -- main loop ----------------------------------------------------------

    def parse(self) -> list[Node]:
        source = self.source
        while self.pos < self.length:
            if source.startswith("<!--", self.pos):
                self._consume_comment()
            elif source.startswith("<![CDATA[", self.pos):
                self._consume_cdata()
            elif source.startswith("<!", self.pos):
                self._consume_doctype()
            elif source.startswith("</", self.pos) and self._is_tag_start(self.pos):
                self._consume_end_tag()
            elif self._is_tag_start(self.pos):
                self._consume_start_tag()
            elif source[self.pos] == "@" and _LET_START.match(source, self.pos):
                self._consume_let()
            elif source[self.pos] == "@" and _BLOCK_START.match(source, self.pos):
                self._consume_block_start()
            elif source[self.pos] == "}" and self._block_is_open():
                self._consume_block_end()
            else:
                self._consume_text()

        while self.stack:
            frame = self.stack[-1]
            if isinstance(frame, _BlockFrame):
                raise self.error(f'Unclosed block "@{frame.name}"', frame.offset)
            self._close_element()
        return self.root

    # -- comments and text --------------------------------------------------

    def _consume_comment(self) -> None:
        end = self.source.find("-->", self.pos + 4)
        if end == -1:
            raise self.error("Unterminated comment")
        self.pos = end + 3

    def _consume_cdata(self) -> None:
        start = self.pos + len("<![CDATA[")
        end = self.source.find("]]>", start)
        if end == -1:
            raise self.error("Unterminated CDATA section")
        text = self.source[start:end]
        if not _is_whitespace_only(text):
            self.current_children.append(Text(value=text))
        self.pos = end + 3

    def _consume_doctype(self) -> None:
        end = self.source.find(">", self.pos)
        if end == -1:
            raise self.error("Unterminated declaration")
        self.pos = end + 1

    def _scan_interpolation_end(self, start: int) -> int:
        """End offset of ``}}`` for an interpolation starting at ``start``.

        Returns -1 when a tag starts (outside quotes) before the interpolation
        is closed; the ``{{`` is then ordinary text.
        """
        source = self.source
        index = start + len(INTERPOLATION_START)
        quote: str | None = None
        while index < self.length:
            ch = source[index]
            if quote is not None:
                if ch == "\\":
                    index += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in "'\"`":
                quote = ch
            elif source.startswith(INTERPOLATION_END, index):
                return index + len(INTERPOLATION_END)
            elif self._is_tag_start(index):
                return -1
            index += 1
        return -1

    def _consume_text(self) -> None:
        source = self.source
        start = self.pos
        index = self.pos
        block_open = self._block_is_open()
        while index < self.length:
            if source.startswith(INTERPOLATION_START, index):
                end = self._scan_interpolation_end(index)
                if end != -1:
                    index = end
                    continue
                index += len(INTERPOLATION_START)
                continue
            ch = source[index]
            if index > start:
                if ch == "<" and self._is_tag_start(index):
                    break
                if ch == "@" and (_BLOCK_START.match(source, index) or _LET_START.match(source, index)):
                    break
                if ch == "}" and block_open:
                    break
            index += 1
        self.pos = index
        self._add_text(source[start:index], start)

    def _add_text(self, raw: str, offset: int) -> None:
        if _is_whitespace_only(raw):
            return
        text = html.unescape(raw)
        bound = parse_interpolation(text, self.location(offset)) if INTERPOLATION_START in text else None
        if bound is not None:
            self.current_children.append(BoundText(value=bound))
        else:
            self.current_children.append(Text(value=text))

    # -- tags ---------------------------------------------------------------

    def _consume_start_tag(self) -> None:
        source = self.source
        tag_start = self.pos
        match = _TAG_NAME.match(source, self.pos + 1)
        if match is None:
            raise self.error("Invalid tag name")
        name = match.group(0)
        self.pos = match.end()

        attrs: list[tuple[str, str, int]] = []
        self_closing = False
        while True:
            while self.pos < self.length and source[self.pos].isspace():
                self.pos += 1
            if self.pos >= self.length:
                raise self.error(f'Unterminated start tag "<{name}>"', tag_start)
            if source[self.pos] == ">":
                self.pos += 1
                break
            if source.startswith("/>", self.pos):
                self.pos += 2
                self_closing = True
                break
            if source[self.pos] == "/":
                self.pos += 1
                continue
            attrs.append(self._consume_attribute())

        frame = _ElementFrame(name, attrs, tag_start)
        lowered = name.lower()
        if self_closing or lowered in VOID_ELEMENTS:
            self.current_children.append(self._build_element(frame))
            return

        self.stack.append(frame)
        if lowered in RAW_TEXT_ELEMENTS or lowered in ESCAPABLE_RAW_TEXT_ELEMENTS:
            self._consume_raw_text(frame, lowered)

    def _consume_attribute(self) -> tuple[str, str, int]:
        source = self.source
        start = self.pos
        while self.pos < self.length:
            ch = source[self.pos]
            if ch.isspace() or ch in "=>" or source.startswith("/>", self.pos):
                break
            self.pos += 1
        name = source[start:self.pos]
        if not name:
            raise self.error("Invalid attribute name")

        index = self.pos
        while index < self.length and source[index].isspace():
            index += 1
        if index >= self.length or source[index] != "=":
            return name, "", start

        self.pos = index + 1
        while self.pos < self.length and source[self.pos].isspace():
            self.pos += 1
        if self.pos >= self.length:
            raise self.error(f'Missing value for attribute "{name}"', start)
        quote = source[self.pos]
        if quote in "'\"":
            end = source.find(quote, self.pos + 1)
            if end == -1:
                raise self.error(f'Unterminated value for attribute "{name}"', start)
            value = source[self.pos + 1:end]
            self.pos = end + 1
        else:
            value_start = self.pos
            while self.pos < self.length and not source[self.pos].isspace() and source[self.pos] != ">":
                self.pos += 1
            value = source[value_start:self.pos]
        return name, html.unescape(value), start

    def _consume_raw_text(self, frame: _ElementFrame, lowered: str) -> None:
        closing = re.compile(rf"</{re.escape(lowered)}\s*>", re.IGNORECASE)
        match = closing.search(self.source, self.pos)
        end = match.start() if match else self.length
        raw = self.source[self.pos:end]
        if lowered in RAW_TEXT_ELEMENTS:
            if raw:
                frame.children.append(Text(value=raw))
        else:
            self._add_text(raw, self.pos)
        self.pos = end
        if match:
            self.pos = match.end()
            self._close_element()

    def _consume_end_tag(self) -> None:
        source = self.source
        start = self.pos
        match = _TAG_NAME.match(source, self.pos + 2)
        if match is None:
            raise self.error("Invalid closing tag")
        name = match.group(0)
        end = source.find(">", match.end())
        if end == -1:
            raise self.error(f'Unterminated closing tag "</{name}>"', start)
        self.pos = end + 1

        lowered = name.lower()
        if lowered in VOID_ELEMENTS:
            raise self.error(f'Void elements do not have end tags "{name}"', start)
        for depth in range(len(self.stack) - 1, -1, -1):
            frame = self.stack[depth]
            if isinstance(frame, _BlockFrame):
                break
            if frame.name.lower() == lowered:
                while len(self.stack) > depth:
                    self._close_element()
                return
        raise self.error(
            f'Unexpected closing tag "{name}". It may happen when the tag has already '
            "been closed by another tag.",
            start,
        )

    def _close_element(self) -> None:
        frame = self.stack.pop()
        self.current_children.append(self._build_element(frame))

    def _build_element(self, frame: _ElementFrame) -> Node:
        attributes: list[TextAttribute] = []
        inputs: list[BoundAttribute] = []
        outputs: list[BoundEvent] = []
        references: list[Reference] = []
        variables: list[Variable] = []
        template_attrs: list[BoundAttribute | TextAttribute] | None = None
        template_variables: list[Variable] = []

        for name, value, offset in frame.attrs:
            location = self.location(offset)
            if name.startswith("*"):
                if template_attrs is not None:
                    raise self.error(
                        "Can't have multiple template bindings on one element. "
                        "Use only one attribute prefixed by *",
                        offset,
                    )
                template_attrs = []
                for binding in parse_template_bindings(name[1:], value, location):
                    if isinstance(binding, VariableBinding):
                        template_variables.append(
                            Variable(name=binding.name, value=binding.value or "$implicit")
                        )
                    elif binding.value is None:
                        template_attrs.append(TextAttribute(name=binding.key))
                    else:
                        template_attrs.append(BoundAttribute(name=binding.key, value=binding.value))
            elif name.startswith("[(") and name.endswith(")]") or name.startswith("bindon-"):
                target = name[2:-2] if name.startswith("[(") else name[len("bindon-"):]
                inputs.append(
                    BoundAttribute(
                        name=target,
                        value=parse_binding(value, location),
                        binding_type=BindingType.two_way,
                    )
                )
                outputs.append(BoundEvent(name=f"{target}Change", handler=value))
            elif name.startswith("[") and name.endswith("]") or name.startswith("bind-"):
                target = name[1:-1] if name.startswith("[") else name[len("bind-"):]
                inputs.append(self._property_binding(target, value, location))
            elif name.startswith("(") and name.endswith(")") or name.startswith("on-"):
                target = name[1:-1] if name.startswith("(") else name[len("on-"):]
                outputs.append(BoundEvent(name=target, handler=value))
            elif name.startswith("#") or name.startswith("ref-"):
                target = name[1:] if name.startswith("#") else name[len("ref-"):]
                references.append(Reference(name=target, value=value))
            elif name.startswith("let-"):
                variables.append(Variable(name=name[len("let-"):], value=value or "$implicit"))
            else:
                interpolation = (
                    parse_interpolation(value, location) if INTERPOLATION_START in value else None
                )
                if interpolation is not None:
                    inputs.append(
                        BoundAttribute(
                            name=name, value=interpolation, binding_type=BindingType.interpolation
                        )
                    )
                else:
                    attributes.append(TextAttribute(name=name, value=value))

        tag = frame.name
        node: Node
        if tag == "ng-template" or tag.endswith(":ng-template"):
            node = Template(
                tag_name=tag,
                attributes=attributes,
                inputs=inputs,
                outputs=outputs,
                references=references,
                variables=variables,
                children=frame.children,
            )
        else:
            node = Element(
                name=tag,
                attributes=attributes,
                inputs=inputs,
                outputs=outputs,
                references=references,
                children=frame.children,
            )

        if template_attrs is None:
            return node
        return Template(
            tag_name=tag,
            template_attrs=template_attrs,
            variables=template_variables,
            children=[node],
        )

    @staticmethod
    def _property_binding(target: str, value: str, location: str) -> BoundAttribute:
        binding_type = BindingType.property
        for prefix, prefixed_type in (
            ("attr.", BindingType.attribute),
            ("class.", BindingType.class_),
            ("style.", BindingType.style),
        ):
            if target.startswith(prefix):
                target = target[len(prefix):]
                binding_type = prefixed_type
                break
        return BoundAttribute(
            name=target, value=parse_binding(value, location), binding_type=binding_type
        )

    # -- blocks -------------------------------------------------------------

    def _consume_let(self) -> None:
        start = self.pos
        match = _LET_START.match(self.source, self.pos)
        name = match.group(1)
        value_start = match.end()
        end = self._find_outside_quotes(";", value_start)
        if end == -1:
            raise self.error(f'Unterminated @let declaration "{name}"', start)
        value = self.source[value_start:end]
        self.pos = end + 1
        self.current_children.append(
            LetDeclaration(name=name, value=parse_binding(value.strip(), self.location(value_start)))
        )

    def _find_outside_quotes(self, target: str, start: int) -> int:
        quote: str | None = None
        index = start
        while index < self.length:
            ch = self.source[index]
            if quote is not None:
                if ch == "\\":
                    index += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in "'\"`":
                quote = ch
            elif ch == target:
                return index
            index += 1
        return -1

    def _consume_block_start(self) -> None:
        source = self.source
        start = self.pos
        match = _BLOCK_START.match(source, self.pos)
        name = " ".join(match.group(1).split())
        self.pos = match.end()

        while self.pos < self.length and source[self.pos].isspace():
            self.pos += 1
        parameters: list[str] = []
        if self.pos < self.length and source[self.pos] == "(":
            parameters = self._consume_block_parameters()
            while self.pos < self.length and source[self.pos].isspace():
                self.pos += 1
        if self.pos >= self.length or source[self.pos] != "{":
            raise self.error(f'Incomplete block "@{name}". Blocks must have a body "{{"', start)
        self.pos += 1

        if name in SWITCH_CASE_BLOCKS:
            parent = self.stack[-1] if self.stack else None
            if not isinstance(parent, _BlockFrame) or parent.name != "switch":
                raise self.error(f'"@{name}" block can only be used inside an @switch block', start)
        self.stack.append(_BlockFrame(name, parameters, start))

    def _consume_block_parameters(self) -> list[str]:
        source = self.source
        start = self.pos
        self.pos += 1
        depth = 1
        quote: str | None = None
        parameters: list[str] = []
        current_start = self.pos
        while self.pos < self.length:
            ch = source[self.pos]
            if quote is not None:
                if ch == "\\":
                    self.pos += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in "'\"`":
                quote = ch
            elif ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
                if depth == 0:
                    parameters.append(source[current_start:self.pos])
                    self.pos += 1
                    return [p.strip() for p in parameters if p.strip()]
            elif ch == ";" and depth == 1:
                parameters.append(source[current_start:self.pos])
                current_start = self.pos + 1
            self.pos += 1
        raise self.error("Unclosed block parameters", start)

    def _consume_block_end(self) -> None:
        while isinstance(self.stack[-1], _ElementFrame):
            self._close_element()
        frame = self.stack.pop()
        self.pos += 1
        self._build_block(frame)

    def _build_block(self, frame: _BlockFrame) -> None:
        siblings = self.current_children
        name = frame.name
        location = self.location(frame.offset)

        if name in SWITCH_CASE_BLOCKS:
            expression = None
            if name == "case":
                if len(frame.parameters) != 1:
                    raise self.error('@case block must have exactly one parameter', frame.offset)
                expression = parse_binding(frame.parameters[0], location)
            siblings.append(SwitchBlockCase(expression=expression, children=frame.children))
            return

        if name in CONNECTED_BLOCKS:
            self._attach_connected_block(frame, siblings, location)
            return

        if name == "if":
            siblings.append(IfBlock(branches=[self._if_branch(frame, location)]))
        elif name == "for":
            siblings.append(self._for_block(frame, location))
        elif name == "switch":
            if len(frame.parameters) != 1:
                raise self.error("@switch block must have exactly one parameter", frame.offset)
            cases: list[SwitchBlockCase] = []
            for child in frame.children:
                if isinstance(child, SwitchBlockCase):
                    cases.append(child)
                elif not (isinstance(child, Text) and _is_whitespace_only(child.value)):
                    raise self.error(
                        "@switch block can only contain @case and @default blocks", frame.offset
                    )
            siblings.append(
                SwitchBlock(expression=parse_binding(frame.parameters[0], location), cases=cases)
            )
        elif name == "defer":
            siblings.append(DeferredBlock(triggers=frame.parameters, children=frame.children))
        else:
            raise self.error(f'Unrecognized block "@{name}"', frame.offset)

    def _if_branch(self, frame: _BlockFrame, location: str) -> IfBlockBranch:
        if frame.name == "else":
            if frame.parameters:
                raise self.error("@else block cannot have parameters", frame.offset)
            return IfBlockBranch(children=frame.children)
        if not frame.parameters:
            raise self.error(f"@{frame.name} block must have at least one parameter", frame.offset)
        alias: str | None = None
        for parameter in frame.parameters[1:]:
            alias_match = _IF_ALIAS.match(parameter)
            if alias_match is None:
                raise self.error(f'Unrecognized @{frame.name} parameter "{parameter}"', frame.offset)
            alias = alias_match.group(1)
        return IfBlockBranch(
            expression=parse_binding(frame.parameters[0], location),
            expression_alias=alias,
            children=frame.children,
        )

    def _for_block(self, frame: _BlockFrame, location: str) -> ForLoopBlock:
        if not frame.parameters:
            raise self.error("@for loop does not have an expression", frame.offset)
        loop = _FOR_LOOP_EXPRESSION.match(frame.parameters[0])
        if loop is None:
            raise self.error(
                '@for loop expression must match the pattern "<identifier> of <expression>"',
                frame.offset,
            )
        track_by = None
        for parameter in frame.parameters[1:]:
            track = _FOR_TRACK.match(parameter)
            if track is not None:
                if track_by is not None:
                    raise self.error('@for loop can only have one "track" expression', frame.offset)
                track_by = parse_binding(track.group(1), location)
            elif not parameter.startswith("let "):
                raise self.error(f'Unrecognized @for loop parameter "{parameter}"', frame.offset)
        if track_by is None:
            raise self.error('@for loop must have a "track" expression', frame.offset)
        return ForLoopBlock(
            item_name=loop.group(1),
            expression=parse_binding(loop.group(2), location),
            track_by=track_by,
            children=frame.children,
        )

    def _attach_connected_block(self, frame: _BlockFrame, siblings: list, location: str) -> None:
        name = frame.name
        primary = siblings[-1] if siblings else None

        if CONNECTED_BLOCKS[name] == "if":
            if not isinstance(primary, IfBlock) or primary.branches[-1].expression is None:
                raise self.error(
                    f"@{name} block can only be used after an @if or @else if block", frame.offset
                )
            branch = self._if_branch(frame, location)
            siblings[-1] = primary.model_copy(update={"branches": [*primary.branches, branch]})
            return

        if CONNECTED_BLOCKS[name] == "for":
            if not isinstance(primary, ForLoopBlock):
                raise self.error("@empty block can only be used after an @for block", frame.offset)
            if primary.empty is not None:
                raise self.error("@for loop can only have one @empty block", frame.offset)
            if frame.parameters:
                raise self.error("@empty block cannot have parameters", frame.offset)
            empty = ForLoopBlockEmpty(children=frame.children)
            siblings[-1] = primary.model_copy(update={"empty": empty})
            return

        if not isinstance(primary, DeferredBlock):
            raise self.error(f"@{name} block can only be used after an @defer block", frame.offset)
        if getattr(primary, name) is not None:
            raise self.error(f"@defer block can only have one @{name} block", frame.offset)
        sub_block_types = {
            "placeholder": DeferredBlockPlaceholder,
            "loading": DeferredBlockLoading,
            "error": DeferredBlockError,
        }
        sub_block = sub_block_types[name](children=frame.children)
        siblings[-1] = primary.model_copy(update={name: sub_block})


def parse_template(source: str, file_path: str = "") -> list[Node]:
    """Parse template source into its top-level nodes.

    Raises:
        TemplateParseError: if the markup, a block or an expression is malformed.
    """
    return _TemplateParser(source, file_path).parse()
