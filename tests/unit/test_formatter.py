"""Tests for the normalization rules and the reindenter."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from jabuti.core.document import Position
from jabuti.core.formatter import (
    NORMALIZATION_RULES,
    break_after_operation,
    collapse_blank_lines_in_terms,
    collapse_tabs,
    format_document,
    format_text,
    line_depths,
    reindent,
    separate_sibling_blocks,
    space_braces,
    space_comments,
    space_equals,
    tighten_parentheses,
)


class TestNormalizationRules:
    def test_rule_order(self) -> None:
        assert [r.name for r in NORMALIZATION_RULES] == [
            "collapse-tabs",
            "space-equals",
            "tighten-parentheses",
            "space-comments",
            "space-braces",
            "break-after-operation",
            "collapse-terms-blank-lines",
            "separate-sibling-blocks",
        ]

    def test_collapse_tabs(self) -> None:
        assert collapse_tabs("a\t\t=\tb") == "a = b"

    def test_collapse_tabs_keeps_strings(self) -> None:
        assert collapse_tabs('x\t"a\tb"') == 'x "a\tb"'

    def test_space_equals(self) -> None:
        assert space_equals("a=b") == "a = b"
        assert space_equals("a  ==b") == "a == b"

    def test_space_equals_skips_literals(self) -> None:
        assert space_equals('x="a=b" // c=d') == 'x = "a=b" // c=d'

    def test_space_equals_keeps_comparisons_whole(self) -> None:
        assert space_equals("a>=5") == "a >= 5"
        assert space_equals("a<=5") == "a <= 5"
        assert space_equals("a!=5") == "a != 5"
        assert space_equals("a >= 5") == "a >= 5"

    def test_comparisons_survive_formatting(self) -> None:
        assert format_text("MessageContent(a >= 5)") == "MessageContent(a >= 5)"
        assert format_text("MessageContent(a <= 5)") == "MessageContent(a <= 5)"
        assert format_text("MessageContent(a != 5)") == "MessageContent(a != 5)"

    def test_tighten_parentheses(self) -> None:
        assert tighten_parentheses("Timeout ( 10 )") == "Timeout(10)"
        assert tighten_parentheses('log( "a ( b" )') == 'log("a ( b")'

    def test_tighten_parentheses_only_after_call_names(self) -> None:
        assert tighten_parentheses('onBreach (log ("x"))') == 'onBreach(log("x"))'
        assert tighten_parentheses("MessageContent(x and (y))") == "MessageContent(x and (y))"

    def test_space_comments(self) -> None:
        assert space_comments("//note") == "// note"
        assert space_comments("/*note*/") == "/* note */"
        assert space_comments("// fine") == "// fine"
        assert space_comments('"//x"') == '"//x"'

    def test_space_comments_leaves_urls_alone(self) -> None:
        assert space_comments("// see http://x") == "// see http://x"

    def test_space_braces(self) -> None:
        assert space_braces("terms{") == "terms {"
        assert space_braces("terms    {") == "terms {"
        assert space_braces("  {") == "  {"

    def test_break_after_operation(self) -> None:
        assert break_after_operation("operation = push terms {") == "operation = push\nterms {"
        assert break_after_operation("operation = push // c") == "operation = push // c"
        assert break_after_operation("operation = push\n") == "operation = push\n"

    def test_collapse_blank_lines_in_terms(self) -> None:
        text = "terms {\n  Timeout(1)\n\n  \n\n  Timeout(2)\n}"
        assert collapse_blank_lines_in_terms(text) == "terms {\n  Timeout(1)\n\n  Timeout(2)\n}"

    def test_separate_sibling_blocks(self) -> None:
        assert separate_sibling_blocks("}\nobligation B {") == "}\n\nobligation B {"
        assert separate_sibling_blocks("}\n}") == "}\n}"


class TestReindent:
    def test_nested_blocks(self) -> None:
        assert reindent("a {\nb {\nc\n}\n}") == "a {\n  b {\n    c\n  }\n}"

    def test_indent_size(self) -> None:
        assert reindent("a {\nb\n}", indent_size=4) == "a {\n    b\n}"

    def test_stray_closing_brace_floors_at_zero(self) -> None:
        assert reindent("}\nfoo {\nbar\n}") == "}\nfoo {\n  bar\n}"
        assert line_depths("}\n}\nx") == [0, 0, 0]

    def test_close_and_open_on_one_line(self) -> None:
        assert line_depths("a {\nb\n} c {\nd\n}") == [0, 1, 0, 1, 0]

    def test_trailing_closing_brace_applies_after_the_line(self) -> None:
        assert line_depths("terms {\nTimeout(1) }\nx") == [0, 1, 0]
        assert reindent("terms {\nTimeout(1) }\nx") == "terms {\n  Timeout(1) }\nx"

    def test_braces_in_strings_and_comments_are_ignored(self) -> None:
        assert line_depths('a = "{"\n// {\nb') == [0, 0, 0]

    def test_trailing_whitespace_and_blank_runs(self) -> None:
        assert reindent("a   \n\n\n\n  \nb") == "a\n\nb"


class TestFormatText:
    def test_canonical_document_is_unchanged(self, contract_text: str) -> None:
        assert format_text(contract_text) == contract_text

    def test_messy_parties(self) -> None:
        text = 'contract Sample{\n\tparties{\napplication="App"\n   process =  "Proc"\n}\n}\n'
        assert format_text(text) == (
            'contract Sample {\n  parties {\n    application = "App"\n    process = "Proc"\n  }\n}\n'
        )

    def test_operation_break_and_sibling_spacing(self) -> None:
        text = "right A {\noperation = push terms {\nTimeout(1)\n}\nonBreach(log(\"x\"))\n}"
        assert format_text(text) == (
            "right A {\n"
            "  operation = push\n"
            "  terms {\n"
            "    Timeout(1)\n"
            "  }\n"
            "\n"
            '  onBreach(log("x"))\n'
            "}"
        )


class TestFormatDocument:
    def test_no_edit_when_canonical(self, contract_text: str) -> None:
        assert format_document(contract_text) is None

    def test_full_document_edit(self) -> None:
        text = "a{\nb\n}"
        edit = format_document(text)
        assert edit is not None
        assert edit.start == Position(0, 0)
        assert edit.end == Position(2, 1)
        assert edit.new_text == "a {\n  b\n}"


FRAGMENTS = [
    "contract C {",
    "clauses {",
    "right A {",
    "terms {",
    "{",
    "}",
    "\n",
    "\n\n\n",
    " ",
    "\t",
    "=",
    "(",
    ")",
    "Timeout(1)",
    "operation = push",
    "a=b",
    ">=",
    "!=",
    '"x y"',
    '"{"',
    "// c",
    "/*d*/",
]

documents = st.lists(st.sampled_from(FRAGMENTS), max_size=40).map("".join)


class TestFormatterProperties:
    @given(documents)
    @settings(max_examples=300)
    def test_idempotent(self, text: str) -> None:
        once = format_text(text)
        assert format_text(once) == once

    @given(documents)
    @settings(max_examples=200)
    def test_indentation_is_whole_levels(self, text: str) -> None:
        for line in format_text(text).split("\n"):
            indent = len(line) - len(line.lstrip(" "))
            assert indent % 2 == 0

    @given(documents)
    @settings(max_examples=200)
    def test_depths_never_negative(self, text: str) -> None:
        assert all(depth >= 0 for depth in line_depths(text))
