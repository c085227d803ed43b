"""Unit tests for the assertion rewrite rules."""

import pytest

from splurge_xctest_to_swift_testing.swift_syntax import parse_source
from splurge_xctest_to_swift_testing.transformers.assertion_rules import (
    ASSERTION_RULES,
    needs_explicit_boolean_comparison,
    rewrite_assertion,
)


def _call(source: str):
    return parse_source(source).statements[0].item


def _rewrite(source: str) -> str | None:
    rewritten = rewrite_assertion(_call(source))
    return None if rewritten is None else rewritten.render()


class TestEqualityRule:
    """``XCTAssertEqual``."""

    def test_basic(self):
        assert _rewrite("XCTAssertEqual(a, b)") == "#expect(a == b)"

    def test_message_is_forwarded(self):
        assert _rewrite('XCTAssertEqual(a, b, "values differ")') == '#expect(a == b, "values differ")'

    def test_arithmetic_operands_are_not_parenthesized(self):
        assert _rewrite("XCTAssertEqual(a + b, c * 2)") == "#expect(a + b == c * 2)"

    def test_comparison_operand_is_parenthesized(self):
        assert _rewrite("XCTAssertEqual(flag, x > y)") == "#expect(flag == (x > y))"

    @pytest.mark.parametrize("source", ['XCTAssertEqual(name, "")', 'XCTAssertEqual("", name)'])
    def test_empty_string_becomes_is_empty(self, source):
        assert _rewrite(source) == "#expect(name.isEmpty == true)"

    def test_empty_string_with_operator_base_is_parenthesized(self):
        assert _rewrite('XCTAssertEqual(a + b, "")') == "#expect((a + b).isEmpty == true)"

    def test_multiline_call_keeps_layout(self):
        source = "XCTAssertEqual(\n    a,\n    b\n)"

        assert _rewrite(source) == "#expect(\n    a ==\n    b\n)"

    def test_accuracy_argument_is_left_unchanged(self):
        assert _rewrite("XCTAssertEqual(a, b, accuracy: 0.01)") is None

    def test_too_few_arguments_is_left_unchanged(self):
        assert _rewrite("XCTAssertEqual(a)") is None


class TestBooleanRules:
    """``XCTAssertTrue`` and ``XCTAssertFalse``."""

    def test_simple_value_gets_explicit_comparison(self):
        assert _rewrite("XCTAssertTrue(isReady)") == "#expect(isReady == true)"
        assert _rewrite("XCTAssertFalse(list.isEmpty)") == "#expect(list.isEmpty == false)"

    def test_operator_expression_is_used_directly(self):
        assert _rewrite("XCTAssertTrue(count > 0)") == "#expect(count > 0)"
        assert _rewrite("XCTAssertTrue(a && b)") == "#expect(a && b)"
        assert _rewrite("XCTAssertTrue(!done)") == "#expect(!done)"

    def test_empty_string_comparison_becomes_is_empty(self):
        assert _rewrite('XCTAssertTrue(name == "")') == "#expect(name.isEmpty == true)"

    def test_message_is_forwarded(self):
        assert _rewrite('XCTAssertTrue(ok, "not ok")') == '#expect(ok == true, "not ok")'

    def test_labeled_operand_is_left_unchanged(self):
        assert _rewrite("XCTAssertTrue(value: ok)") is None


class TestNilRules:
    def test_nil(self):
        assert _rewrite("XCTAssertNil(error)") == "#expect(error == nil)"

    def test_not_nil(self):
        assert _rewrite('XCTAssertNotNil(user?.name, "missing")') == '#expect(user?.name != nil, "missing")'

    def test_loose_operand_is_parenthesized(self):
        assert _rewrite("XCTAssertNil(a == b ? x : y)") == "#expect((a == b ? x : y) == nil)"


class TestFailAndThrowsRules:
    def test_fail_forwards_arguments(self):
        assert _rewrite('XCTFail("unreachable")') == 'Issue.record("unreachable")'
        assert _rewrite("XCTFail()") == "Issue.record()"

    def test_throws_error(self):
        assert _rewrite("XCTAssertThrowsError(try parse(text))") == (
            "#expect(throws: (any Error).self) { try parse(text) }"
        )

    def test_throws_error_with_message(self):
        assert _rewrite('XCTAssertThrowsError(try parse(text), "should throw")') == (
            '#expect(throws: (any Error).self, "should throw") { try parse(text) }'
        )

    def test_throws_error_with_handler_is_left_unchanged(self):
        assert _rewrite("XCTAssertThrowsError(try parse(text)) { error in print(error) }") is None


def test_unknown_assertion_is_left_unchanged():
    assert _rewrite("XCTAssertGreaterThan(a, b)") is None
    assert _rewrite("print(a)") is None


def test_rewrite_keeps_outer_trivia():
    tree = parse_source("func f() {\n    XCTAssertNil(x) // check\n}\n")
    call = tree.statements[0].item.body.statements[0].item

    rewritten = rewrite_assertion(call)

    assert rewritten.leading_trivia.render() == "\n    "
    assert rewritten.trailing_trivia.render() == " // check"


def test_rule_table_is_read_only():
    with pytest.raises(TypeError):
        ASSERTION_RULES["XCTAssertIdentical"] = None


class TestNeedsExplicitBooleanComparison:
    """The structural check with its textual fallback."""

    @pytest.mark.parametrize("source", ["flag", "user.isActive", "items.contains(x)", "values[0]", "(ready)"])
    def test_simple_expressions(self, source):
        assert needs_explicit_boolean_comparison(_call(source))

    @pytest.mark.parametrize("source", ["a < b", "!flag", "a || b", "x % 2 == 0"])
    def test_operator_expressions(self, source):
        assert not needs_explicit_boolean_comparison(_call(source))

    def test_spaced_operator_inside_call_counts(self):
        assert not needs_explicit_boolean_comparison(_call("check(a == b)"))
