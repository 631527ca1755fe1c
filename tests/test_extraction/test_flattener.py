"""Tests for expression literal flattening."""

from translation_extract.extraction.flattener import (
    flatten_literals,
    flatten_pipe_operand,
    literal_strings,
    string_values,
)
from translation_extract.template.expression_parser import parse_binding, parse_interpolation
from translation_extract.template.expressions import (
    Binary,
    Conditional,
    LiteralPrimitive,
    PropertyRead,
)


def _strings(source: str) -> list[str]:
    return literal_strings(parse_binding(source))


class TestFlattenLiterals:
    """Full flattening used for bound marker attributes."""

    def test_primitive(self):
        assert _strings("'KEY1'") == ["KEY1"]

    def test_conditional_true_branch_first(self):
        assert _strings("condition ? 'KEY1' : 'KEY2'") == ["KEY1", "KEY2"]

    def test_nested_conditionals(self):
        assert _strings(
            "isSunny ? (isWarm ? 'Sunny and warm' : 'Sunny but cold') : 'Not sunny'"
        ) == ["Sunny and warm", "Sunny but cold", "Not sunny"]

    def test_condition_itself_not_flattened(self):
        assert _strings("'x' == mode ? 'A' : 'B'") == ["A", "B"]

    def test_binary_left_then_right(self):
        assert _strings("keyVar || 'KEY1'") == ["KEY1"]
        assert _strings("'KEY1' + key2 + 'KEY3'") == ["KEY1", "KEY3"]

    def test_map_values_only(self):
        assert _strings("{ key1: 'value1', key2: 'value2' }") == ["value1", "value2"]

    def test_array_elements(self):
        assert _strings("['value1', 'value2']") == ["value1", "value2"]

    def test_pipe_operand_not_arguments(self):
        assert _strings("'KEY1' | withPipe: 'arg'") == ["KEY1"]

    def test_nested_containers_and_pipes(self):
        assert _strings("{ a: ['x' | translate] }") == ["x"]

    def test_interpolation(self):
        result = parse_interpolation("{{ 'KEY1' + key2 + 'KEY3' }} and {{ 'KEY4' }}")
        assert literal_strings(result) == ["KEY1", "KEY3", "KEY4"]

    def test_other_kinds_contribute_nothing(self):
        assert _strings("user.name") == []
        assert _strings("fn('arg')") == []
        assert _strings("items['key']") == []
        assert _strings("!'x'") == []

    def test_non_string_literals_dropped(self):
        literals = flatten_literals(parse_binding("cond ? 1 : (other ? null : '')"))
        assert [lit.value for lit in literals] == [1, None, ""]
        assert string_values(literals) == []

    def test_none(self):
        assert flatten_literals(None) == []

    def test_deep_tree_without_recursion(self):
        node = LiteralPrimitive(value="deep")
        for i in range(5000):
            node = Conditional(
                condition=PropertyRead(name="c"),
                true_exp=node,
                false_exp=LiteralPrimitive(value=f"k{i}"),
            )
        result = literal_strings(node)
        assert result[0] == "deep"
        assert len(result) == 5001


class TestFlattenPipeOperand:
    """Operand resolution used for translate pipes."""

    def test_literal(self):
        assert string_values(flatten_pipe_operand(parse_binding("'World'"))) == ["World"]

    def test_conditional(self):
        literals = flatten_pipe_operand(parse_binding("cond ? 'Hello' : other ? 'Nested' : 'World'"))
        assert string_values(literals) == ["Hello", "Nested", "World"]

    def test_inner_pipe(self):
        assert string_values(flatten_pipe_operand(parse_binding("'World' | upper"))) == ["World"]

    def test_concatenation_is_dynamic(self):
        literals = flatten_pipe_operand(parse_binding("'SOURCES.' + source.name + '.NAME'"))
        assert literals == []

    def test_deep_binary_chain(self):
        node = LiteralPrimitive(value="a")
        for _ in range(5000):
            node = Binary(operation="+", left=node, right=LiteralPrimitive(value="b"))
        assert flatten_pipe_operand(node) == []
        assert len(literal_strings(node)) == 5001
