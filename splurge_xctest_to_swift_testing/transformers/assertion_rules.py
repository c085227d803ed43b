"""Assertion rewrite rules.

Each rule converts one XCTest assertion call into its Swift Testing
counterpart. Builders return ``None`` when the call's shape is not one
they can rewrite precisely (too few operands, labeled operands, an
``accuracy:`` argument, a trailing closure); the caller then leaves the
call unchanged.

Operand trivia inside the original parentheses is kept, as is the
closing parenthesis, so a multi-line assertion stays multi-line::

    XCTAssertEqual(a, b)            ->  #expect(a == b)
    XCTAssertEqual(name, "")        ->  #expect(name.isEmpty == true)
    XCTAssertTrue(flag, "message")  ->  #expect(flag == true, "message")
    XCTFail("boom")                 ->  Issue.record("boom")

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType

from ..swift_syntax import Token, TokenKind, Trivia
from ..swift_syntax.nodes import (
    POSTFIX_LEVEL_EXPRESSIONS,
    ClosureExpr,
    CodeBlockItem,
    FunctionCallExpr,
    IdentifierExpr,
    InfixOperatorExpr,
    LabeledArgument,
    LiteralExpr,
    MacroExpansionExpr,
    MemberAccessExpr,
    Node,
    PrefixOperatorExpr,
    StringLiteralExpr,
    TernaryBranch,
    TrailingClosure,
    TupleExpr,
    TypeExpr,
    TypeSyntax,
)

AssertionBuilder = Callable[[FunctionCallExpr], "Node | None"]

EXPECT_MACRO = "#expect"
ISSUE_TYPE = "Issue"
ISSUE_RECORD = "record"
UNSUPPORTED_LABELS = frozenset({"accuracy"})

# Operators whose presence means a boolean expression is already a test.
BOOLEAN_TEST_OPERATORS = (">", "<", ">=", "<=", "==", "!=", "&&", "||", "+", "-", "*", "/", "%", "!")

# Infix operators that bind no tighter than ``==``; an operand using one
# is parenthesized before it is compared.
_LOOSE_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">=", "===", "!==", "~=", "&&", "||", "="})


def needs_explicit_boolean_comparison(expression: Node) -> bool:
    """Whether ``expression`` must be compared with a boolean literal.

    Operator expressions are used as they are. Everything else is
    checked textually for a whitespace-delimited operator, which catches
    forms the tree does not model as an operator expression.
    """
    if isinstance(expression, (InfixOperatorExpr, PrefixOperatorExpr)):
        return False
    text = expression.trimmed().strip(" \t")
    for operator in BOOLEAN_TEST_OPERATORS:
        if f" {operator} " in text or text.startswith(f"{operator} "):
            return False
    return True


def _is_empty_string(expression: Node | None) -> bool:
    return isinstance(expression, StringLiteralExpr) and expression.is_empty


def _bare(expression: Node) -> Node:
    return expression.with_leading_trivia(Trivia()).with_trailing_trivia(Trivia())


def _parenthesized(expression: Node) -> TupleExpr:
    return TupleExpr(
        left_paren=Token.make("("),
        elements=(LabeledArgument(expression=_bare(expression)),),
        right_paren=Token.make(")"),
    )


def _is_empty_expression(base: Node) -> MemberAccessExpr:
    """``base.isEmpty``, parenthesizing ``base`` unless it is postfix-level."""
    if isinstance(base, POSTFIX_LEVEL_EXPRESSIONS):
        receiver: Node = _bare(base)
    else:
        receiver = _parenthesized(base)
    return MemberAccessExpr(base=receiver, dot=Token.make("."), name=Token.make("isEmpty"))


def _empty_string_equality(lhs: Node, rhs: Node) -> MemberAccessExpr | None:
    if _is_empty_string(lhs):
        return _is_empty_expression(rhs)
    if _is_empty_string(rhs):
        return _is_empty_expression(lhs)
    return None


def _replace_empty_string_comparison(expression: Node) -> Node | None:
    """Turn ``value == ""`` into ``value.isEmpty``."""
    if not isinstance(expression, InfixOperatorExpr) or len(expression.elements) != 3:
        return None
    lhs, operator, rhs = expression.elements
    if not isinstance(operator, Token) or operator.text != "==":
        return None
    if not isinstance(lhs, Node) or not isinstance(rhs, Node):
        return None
    replacement = _empty_string_equality(lhs, rhs)
    if replacement is None:
        return None
    return replacement.with_leading_trivia(expression.leading_trivia).with_trailing_trivia(expression.trailing_trivia)


def _binds_loosely(expression: Node) -> bool:
    if not isinstance(expression, InfixOperatorExpr):
        return False
    for operator in expression.operators():
        if isinstance(operator, TernaryBranch):
            return True
        if isinstance(operator, Token) and operator.text in _LOOSE_OPERATORS:
            return True
    return False


def _operand(expression: Node) -> Node:
    if not _binds_loosely(expression):
        return expression
    return _parenthesized(expression).with_trivia_from(expression)


def _split(call: FunctionCallExpr, count: int) -> tuple[list[LabeledArgument], LabeledArgument | None] | None:
    """Separate ``count`` unlabeled operands from an optional message argument."""
    if call.trailing_closures or len(call.arguments) < count:
        return None
    if any(argument.label is not None and argument.label.text in UNSUPPORTED_LABELS for argument in call.arguments):
        return None
    operands = list(call.arguments[:count])
    if any(argument.label is not None or argument.expression is None for argument in operands):
        return None
    message = None
    if len(call.arguments) > count:
        candidate = call.arguments[count]
        if candidate.label is None and candidate.expression is not None:
            message = candidate
    return operands, message


def _literal(text: str) -> LiteralExpr:
    return LiteralExpr(token=Token.make(text))


def _comparison(lhs: Node, operator: str, rhs: Node, separator: Token | None = None) -> InfixOperatorExpr:
    """``lhs <operator> rhs``; ``separator`` is the comma that divided the operands."""
    if separator is not None and separator.trailing.has_comments:
        after = separator.trailing
    elif rhs.leading_trivia.has_newline:
        after = Trivia()
    else:
        after = Trivia.spaces(1)
    return InfixOperatorExpr(
        elements=(
            lhs.with_trailing_trivia(lhs.trailing_trivia.rstrip_blank()),
            Token(TokenKind.OPERATOR, operator, Trivia.spaces(1), after),
            rhs,
        )
    )


def _expect_call(
    original: FunctionCallExpr,
    condition: Node,
    operands: list[LabeledArgument],
    message: LabeledArgument | None,
) -> Node:
    condition = condition.with_leading_trivia(operands[0].leading_trivia)
    if message is None:
        arguments = (LabeledArgument(expression=condition),)
    else:
        arguments = (
            LabeledArgument(expression=condition, trailing_comma=operands[-1].trailing_comma),
            message.with_changes(trailing_comma=None),
        )
    call = FunctionCallExpr(
        callee=MacroExpansionExpr(pound=Token.make(EXPECT_MACRO, TokenKind.POUND)),
        left_paren=original.left_paren,
        arguments=arguments,
        right_paren=original.right_paren,
    )
    return call.with_trivia_from(original)


def convert_equal(call: FunctionCallExpr) -> Node | None:
    split = _split(call, 2)
    if split is None:
        return None
    operands, message = split
    lhs, rhs = operands[0].expression, operands[1].expression
    empty_check = _empty_string_equality(lhs, rhs)
    if empty_check is not None:
        condition = _comparison(empty_check, "==", _literal("true"))
    else:
        condition = _comparison(_operand(lhs), "==", _operand(rhs), operands[0].trailing_comma)
    return _expect_call(call, condition, operands, message)


def _convert_boolean(call: FunctionCallExpr, expected: bool) -> Node | None:
    split = _split(call, 1)
    if split is None:
        return None
    operands, message = split
    expression = operands[0].expression
    expression = _replace_empty_string_comparison(expression) or expression
    if needs_explicit_boolean_comparison(expression):
        condition: Node = _comparison(expression, "==", _literal("true" if expected else "false"))
    else:
        condition = expression
    return _expect_call(call, condition, operands, message)


def convert_true(call: FunctionCallExpr) -> Node | None:
    return _convert_boolean(call, True)


def convert_false(call: FunctionCallExpr) -> Node | None:
    return _convert_boolean(call, False)


def _convert_nil_check(call: FunctionCallExpr, operator: str) -> Node | None:
    split = _split(call, 1)
    if split is None:
        return None
    operands, message = split
    condition = _comparison(_operand(operands[0].expression), operator, _literal("nil"))
    return _expect_call(call, condition, operands, message)


def convert_nil(call: FunctionCallExpr) -> Node | None:
    return _convert_nil_check(call, "==")


def convert_not_nil(call: FunctionCallExpr) -> Node | None:
    return _convert_nil_check(call, "!=")


def convert_fail(call: FunctionCallExpr) -> Node | None:
    """``XCTFail(args)`` -> ``Issue.record(args)`` with the arguments untouched."""
    callee = MemberAccessExpr(
        base=IdentifierExpr(name=Token.make(ISSUE_TYPE)),
        dot=Token.make("."),
        name=Token.make(ISSUE_RECORD),
    )
    return call.with_changes(callee=callee.with_trivia_from(call.callee))


def convert_throws_error(call: FunctionCallExpr) -> Node | None:
    """``XCTAssertThrowsError(expr)`` -> ``#expect(throws: (any Error).self) { expr }``.

    A trailing error-handler closure has no direct counterpart, so such
    calls are left alone.
    """
    split = _split(call, 1)
    if split is None:
        return None
    operands, message = split
    expression = operands[0].expression
    error_type = MemberAccessExpr(
        base=TupleExpr(
            left_paren=Token.make("("),
            elements=(
                LabeledArgument(
                    expression=TypeExpr(type=TypeSyntax(items=(Token.make("any", trailing=" "), Token.make("Error"))))
                ),
            ),
            right_paren=Token.make(")"),
        ),
        dot=Token.make("."),
        name=Token.make("self"),
    )
    arguments: tuple[LabeledArgument, ...] = (
        LabeledArgument(
            label=Token.make("throws"),
            colon=Token.make(":", trailing=" "),
            expression=error_type,
            trailing_comma=Token.make(",", trailing=" ") if message is not None else None,
        ),
    )
    if message is not None:
        arguments += (message.with_changes(trailing_comma=None).with_leading_trivia(Trivia()),)

    multiline = expression.leading_trivia.has_newline
    body = expression.with_trailing_trivia(expression.trailing_trivia.rstrip_blank())
    if not multiline:
        body = body.with_leading_trivia(Trivia.spaces(1))
    closing_trivia = call.right_paren.leading if call.right_paren is not None and multiline else Trivia.spaces(1)
    closure = ClosureExpr(
        left_brace=Token.make("{", leading=" "),
        statements=(CodeBlockItem(item=body),),
        right_brace=Token(TokenKind.PUNCTUATION, "}", closing_trivia),
    )
    expect = FunctionCallExpr(
        callee=MacroExpansionExpr(pound=Token.make(EXPECT_MACRO, TokenKind.POUND)),
        left_paren=Token.make("("),
        arguments=arguments,
        right_paren=Token.make(")"),
        trailing_closures=(TrailingClosure(closure=closure),),
    )
    return expect.with_trivia_from(call)


ASSERTION_RULES: MappingProxyType[str, AssertionBuilder] = MappingProxyType(
    {
        "XCTAssertEqual": convert_equal,
        "XCTAssertTrue": convert_true,
        "XCTAssertFalse": convert_false,
        "XCTAssertNil": convert_nil,
        "XCTAssertNotNil": convert_not_nil,
        "XCTAssertThrowsError": convert_throws_error,
        "XCTFail": convert_fail,
    }
)


def assertion_name(call: FunctionCallExpr) -> str | None:
    callee = call.callee
    if isinstance(callee, IdentifierExpr) and callee.name is not None:
        return callee.name.text
    return None


def rewrite_assertion(call: FunctionCallExpr) -> Node | None:
    """Apply the matching rule to ``call``; ``None`` means leave it unchanged."""
    name = assertion_name(call)
    builder = ASSERTION_RULES.get(name) if name is not None else None
    if builder is None:
        return None
    return builder(call)
