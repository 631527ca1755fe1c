"""Tests for marker attribute extraction."""

from translation_extract.extraction.directive import DirectiveParser, normalize_whitespace


class TestNormalizeWhitespace:
    def test_collapses_and_trims(self):
        assert normalize_whitespace("\n\t  this      is\n an example  ") == "this is an example"

    def test_blank(self):
        assert normalize_whitespace(" \n ") == ""


class TestBoundMarker:
    """``[translate]="expression"`` flattening."""

    def test_literal_map(self, directive_parser, template_filename):
        contents = "<div [translate]=\"{ key1: 'value1' | translate, key2: 'value2' | translate }\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["value1", "value2"]

    def test_literal_array(self, directive_parser, template_filename):
        contents = "<div [translate]=\"[ 'value1' | translate, 'value2' | translate ]\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["value1", "value2"]

    def test_binding_pipe(self, directive_parser, template_filename):
        contents = "<div [translate]=\"'KEY1' | withPipe\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["KEY1"]

    def test_binary_expression(self, directive_parser, template_filename):
        contents = "<div [translate]=\"keyVar || 'KEY1'\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["KEY1"]

    def test_literal_primitive(self, directive_parser, template_filename):
        contents = "<div [translate]=\"'KEY1'\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["KEY1"]

    def test_conditional(self, directive_parser, template_filename):
        contents = "<div [translate]=\"condition ? 'KEY1' : 'KEY2'\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["KEY1", "KEY2"]

    def test_nested_conditionals(self, directive_parser, template_filename):
        contents = (
            "<div [translate]=\"isSunny ? (isWarm ? 'Sunny and warm' : 'Sunny but cold')"
            " : 'Not sunny'\"></div>"
        )
        assert directive_parser.extract(contents, template_filename).keys() == [
            "Sunny and warm",
            "Sunny but cold",
            "Not sunny",
        ]

    def test_interpolation(self, directive_parser, template_filename):
        contents = "<div translate=\"{{ 'KEY1' + key2 + 'KEY3' }}\"></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["KEY1", "KEY3"]

    def test_empty_binding_falls_back_to_text(self, directive_parser, template_filename):
        contents = '<div [translate]="">Fallback text</div>'
        assert directive_parser.extract(contents, template_filename).keys() == ["Fallback text"]


class TestTextContent:
    """Keys taken from element text."""

    def test_keeps_proper_whitespace(self, directive_parser, template_filename):
        contents = """
            <div translate>
                Wubba
                Lubba
                Dub Dub
            </div>
        """
        assert directive_parser.extract(contents, template_filename).keys() == ["Wubba Lubba Dub Dub"]

    def test_element_contents_as_key(self, directive_parser, template_filename):
        contents = "<div translate>Hello World</div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["Hello World"]

    def test_child_elements_with_marker(self, directive_parser, template_filename):
        contents = "<div translate>Hello <strong translate>World</strong></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["Hello", "World"]

    def test_child_elements_without_marker(self, directive_parser, template_filename):
        contents = "<div translate>Hello <strong>World</strong></div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["Hello"]

    def test_custom_elements(self, directive_parser, template_filename):
        contents = "<custom-table><tbody><tr><td translate>Hello World</td></tr></tbody></custom-table>"
        assert directive_parser.extract(contents, template_filename).keys() == ["Hello World"]

    def test_structural_directive_and_long_text(self, directive_parser, template_filename):
        contents = """
            <div *ngIf="!isLoading && studentsToGrid && studentsToGrid.length == 0" class="no-students" mt-rtl translate>There
                are currently no students in this class. The good news is, adding students is really easy! Just use the options
                at the top.
            </div>
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "There are currently no students in this class. The good news is, adding students "
            "is really easy! Just use the options at the top."
        ]

    def test_multiple_elements(self, directive_parser, template_filename):
        contents = """
            <div translate>
                this is an example
                of a long label
            </div>

            <div>
                <p translate>
                    this is an example
                    of another a long label
                </p>
            </div>
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "this is an example of a long label",
            "this is an example of another a long label",
        ]

    def test_collapse_excessive_whitespace(self, directive_parser, template_filename):
        contents = "<p translate>this      is an example</p>"
        assert directive_parser.extract(contents, template_filename).keys() == ["this is an example"]

    def test_entities_decoded(self, directive_parser, template_filename):
        contents = "<p translate>Terms &amp; Conditions</p>"
        assert directive_parser.extract(contents, template_filename).keys() == ["Terms & Conditions"]


class TestStaticMarker:
    """``translate="KEY"`` values."""

    def test_value_wins_over_text(self, directive_parser, template_filename):
        contents = "<div translate=\"MY_KEY\">Hello World<div>"
        assert directive_parser.extract(contents, template_filename).keys() == ["MY_KEY"]

    def test_custom_directive_name(self, template_filename):
        contents = '<div myTranslate="MY_KEY">Hello World<div>'
        parser = DirectiveParser(["myTranslate"])
        assert parser.extract(contents, template_filename).keys() == ["MY_KEY"]

    def test_empty_name_list_defaults_to_translate(self, template_filename):
        parser = DirectiveParser([])
        assert parser.extract("<p translate>Hi</p>", template_filename).keys() == ["Hi"]

    def test_pipe_in_plain_element_ignored(self, directive_parser, template_filename):
        contents = "<p>{{ 'Audiobooks for personal development' | translate }}</p>"
        assert directive_parser.extract(contents, template_filename).values == {}

    def test_duplicates_keep_first_occurrence(self, directive_parser, template_filename):
        contents = "<p translate>B</p><p translate>A</p><p translate>B</p>"
        assert directive_parser.extract(contents, template_filename).keys() == ["B", "A"]


class TestInlineTemplates:
    """Component sources with an inline ``template:``."""

    def test_inline_template(self, directive_parser, component_filename):
        contents = """
            @Component({
                selector: 'test',
                template: '<p translate>Hello World</p>'
            })
            export class TestComponent { }
        """
        assert directive_parser.extract(contents, component_filename).keys() == ["Hello World"]

    def test_inline_template_custom_name(self, component_filename):
        contents = """
            @Component({
                selector: 'test',
                template: '<p myTranslate>Hello World</p>'
            })
            export class TestComponent { }
        """
        parser = DirectiveParser(["myTranslate"])
        assert parser.extract(contents, component_filename).keys() == ["Hello World"]

    def test_component_without_template(self, directive_parser, component_filename):
        contents = "@Component({ templateUrl: './x.html' }) export class X {}"
        assert directive_parser.extract(contents, component_filename).is_empty()


class TestControlFlow:
    """Built-in control-flow blocks."""

    def test_if_else(self, directive_parser, template_filename):
        contents = """
            @if (loggedIn) {
                <p translate>if.block</p>
            } @else if (condition) {
                <p translate>elseif.block</p>
            } @else {
                <p translate>else.block</p>
            }
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "if.block",
            "elseif.block",
            "else.block",
        ]

    def test_for_empty(self, directive_parser, template_filename):
        contents = """
            @for (user of users; track user.id) {
                <p translate>for.block</p>
            } @empty {
                <p translate>for.empty.block</p>
            }
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "for.block",
            "for.empty.block",
        ]

    def test_switch_case(self, directive_parser, template_filename):
        contents = """
            @switch (condition) {
                @case (caseA) {
                    <p translate>switch.caseA</p>
                }
                @case (caseB) {
                    <p translate>switch.caseB</p>
                }
                @default {
                    <p translate>switch.default</p>
                }
            }
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "switch.caseA",
            "switch.caseB",
            "switch.default",
        ]

    def test_defer(self, directive_parser, template_filename):
        contents = """
            @defer (on viewport) {
                <p translate>defer</p>
            } @loading {
                <p translate>defer.loading</p>
            } @error {
                <p translate>defer.error</p>
            } @placeholder {
                <p translate>defer.placeholder</p>
            }
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "defer",
            "defer.placeholder",
            "defer.loading",
            "defer.error",
        ]

    def test_nested_blocks(self, directive_parser, template_filename):
        contents = """
            @if (loggedIn) {
                <p translate>if.block</p>
                @if (nestedCondition) {
                    @if (nestedCondition) {
                        <p translate>nested.if.block</p>
                    }  @else {
                        <p translate>nested.else.block</p>
                    }
                } @else if (nestedElseIfCondition) {
                    <p translate>nested.elseif.block</p>
                }
            } @else if (condition) {
                <p translate>elseif.block</p>
            } @else {
                <p translate>else.block</p>
            }
        """
        assert directive_parser.extract(contents, template_filename).keys() == [
            "if.block",
            "elseif.block",
            "else.block",
            "nested.elseif.block",
            "nested.if.block",
            "nested.else.block",
        ]

    def test_deeply_nested_blocks(self, directive_parser, template_filename):
        depth = 600
        contents = "@if (a) {" * depth + "<p translate>deep</p>" + "}" * depth
        assert directive_parser.extract(contents, template_filename).keys() == ["deep"]

    def test_deeply_nested_elements(self, directive_parser, template_filename):
        depth = 600
        contents = "<i>" * depth + "<b translate>deep</b>" + "</i>" * depth
        assert directive_parser.extract(contents, template_filename).keys() == ["deep"]

    def test_deeply_nested_bound_arrays(self, directive_parser, template_filename):
        depth = 300
        value = "[" * depth + "'deep'" + "]" * depth
        contents = f"<p [translate]=\"{value}\"></p>"
        assert directive_parser.extract(contents, template_filename).keys() == ["deep"]
