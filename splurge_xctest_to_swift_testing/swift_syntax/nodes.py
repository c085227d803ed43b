"""Immutable, trivia-preserving Swift syntax tree.

Every node is a frozen dataclass whose fields are its child slots in
source order. A slot holds a :class:`Token`, another :class:`Node`, a
tuple of them, or ``None`` when an optional piece is absent. Rendering a
node concatenates its tokens (with their trivia) in order, so
``parse(text).render() == text`` for any text the parser accepts.

Nodes are never mutated. ``with_changes`` and the trivia helpers return
new nodes that share every untouched subtree with the original.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields, replace
from typing import Any, Union

from .tokens import Token
from .trivia import Trivia

Element = Union[Token, "Node"]


@dataclass(frozen=True)
class Node:
    """Base class of all syntax nodes."""

    def children(self) -> Iterator[Element]:
        """Yield direct child tokens and nodes in source order."""
        for slot in fields(self):
            value = getattr(self, slot.name)
            if value is None:
                continue
            if isinstance(value, tuple):
                for item in value:
                    if item is not None:
                        yield item
            else:
                yield value

    def tokens(self) -> Iterator[Token]:
        for child in self.children():
            if isinstance(child, Token):
                yield child
            else:
                yield from child.tokens()

    def render(self) -> str:
        return "".join(token.render() for token in self.tokens())

    def __str__(self) -> str:
        return self.render()

    def trimmed(self) -> str:
        """Source text without the outer leading and trailing trivia."""
        tokens = list(self.tokens())
        if not tokens:
            return ""
        parts: list[str] = []
        last = len(tokens) - 1
        for index, token in enumerate(tokens):
            if index:
                parts.append(token.leading.render())
            parts.append(token.text)
            if index != last:
                parts.append(token.trailing.render())
        return "".join(parts)

    def first_token(self) -> Token | None:
        return next(self.tokens(), None)

    def last_token(self) -> Token | None:
        last = None
        for token in self.tokens():
            last = token
        return last

    @property
    def leading_trivia(self) -> Trivia:
        token = self.first_token()
        return token.leading if token is not None else Trivia()

    @property
    def trailing_trivia(self) -> Trivia:
        token = self.last_token()
        return token.trailing if token is not None else Trivia()

    def with_changes(self, **changes: Any) -> "Node":
        return replace(self, **changes)

    def with_leading_trivia(self, trivia: Trivia) -> "Node":
        updated = self._map_edge_token(True, lambda token: token.with_leading(trivia))
        return self if updated is None else updated

    def with_trailing_trivia(self, trivia: Trivia) -> "Node":
        updated = self._map_edge_token(False, lambda token: token.with_trailing(trivia))
        return self if updated is None else updated

    def with_trivia_from(self, other: "Node") -> "Node":
        """Copy ``other``'s outer leading and trailing trivia onto this node."""
        return self.with_leading_trivia(other.leading_trivia).with_trailing_trivia(other.trailing_trivia)

    def _map_edge_token(self, first: bool, fn: Callable[[Token], Token]) -> "Node | None":
        slots = [slot.name for slot in fields(self)]
        if not first:
            slots.reverse()
        for name in slots:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, tuple):
                indices = range(len(value)) if first else range(len(value) - 1, -1, -1)
                for index in indices:
                    updated = _map_edge(value[index], first, fn)
                    if updated is not None:
                        return replace(self, **{name: value[:index] + (updated,) + value[index + 1 :]})
                continue
            updated = _map_edge(value, first, fn)
            if updated is not None:
                return replace(self, **{name: updated})
        return None


def _map_edge(element: Element | None, first: bool, fn: Callable[[Token], Token]) -> Element | None:
    if element is None:
        return None
    if isinstance(element, Token):
        return fn(element)
    return element._map_edge_token(first, fn)


def has_modifier(modifiers: tuple["Modifier", ...], name: str) -> bool:
    return any(modifier.name.text == name for modifier in modifiers)


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Unstructured(Node):
    """Lossless run of tokens (and nested nodes) the parser does not model."""

    items: tuple[Element, ...] = ()


@dataclass(frozen=True)
class CodeBlockItem(Node):
    """A statement or declaration in a statement list, with an optional ``;``."""

    item: Node | None = None
    semicolon: Token | None = None


@dataclass(frozen=True)
class SourceFile(Node):
    statements: tuple[CodeBlockItem, ...] = ()
    eof: Token | None = None


@dataclass(frozen=True)
class CodeBlock(Node):
    left_brace: Token | None = None
    statements: tuple[CodeBlockItem, ...] = ()
    right_brace: Token | None = None


@dataclass(frozen=True)
class Attribute(Node):
    at_sign: Token | None = None
    name: Token | None = None
    arguments: Unstructured | None = None


@dataclass(frozen=True)
class Modifier(Node):
    name: Token | None = None
    detail: Unstructured | None = None


@dataclass(frozen=True)
class TypeSyntax(Node):
    items: tuple[Element, ...] = ()


@dataclass(frozen=True)
class PoundDirective(Node):
    """``#if``/``#else``/``#endif``/``#warning`` and similar compiler directives."""

    keyword: Token | None = None
    rest: Unstructured | None = None


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportDecl(Node):
    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    import_keyword: Token | None = None
    kind_keyword: Token | None = None
    path: tuple[Token, ...] = ()

    @property
    def path_text(self) -> str:
        return "".join(token.text for token in self.path)


@dataclass(frozen=True)
class InheritedType(Node):
    type: TypeSyntax | None = None
    trailing_comma: Token | None = None


@dataclass(frozen=True)
class InheritanceClause(Node):
    colon: Token | None = None
    inherited_types: tuple[InheritedType, ...] = ()

    def type_names(self) -> list[str]:
        return [entry.type.trimmed() for entry in self.inherited_types if entry.type is not None]


@dataclass(frozen=True)
class MemberBlock(Node):
    left_brace: Token | None = None
    members: tuple[CodeBlockItem, ...] = ()
    right_brace: Token | None = None


@dataclass(frozen=True)
class TypeDecl(Node):
    """``class``/``struct``/``enum``/``actor``/``protocol``/``extension`` declarations."""

    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    keyword: Token | None = None
    name: Element | None = None
    generic_parameters: Unstructured | None = None
    inheritance: InheritanceClause | None = None
    where_clause: Unstructured | None = None
    members: MemberBlock | None = None

    @property
    def name_text(self) -> str:
        if isinstance(self.name, Token):
            return self.name.text
        return self.name.trimmed() if self.name is not None else ""

    @property
    def is_extension(self) -> bool:
        return self.keyword is not None and self.keyword.text == "extension"

    def inherits(self, type_name: str) -> bool:
        return self.inheritance is not None and type_name in self.inheritance.type_names()


@dataclass(frozen=True)
class ParameterClause(Node):
    left_paren: Token | None = None
    parameters: Unstructured | None = None
    right_paren: Token | None = None


@dataclass(frozen=True)
class ReturnClause(Node):
    arrow: Token | None = None
    type: TypeSyntax | None = None


@dataclass(frozen=True)
class FunctionSignature(Node):
    parameters: ParameterClause | None = None
    effects: tuple[Element, ...] = ()
    return_clause: ReturnClause | None = None

    def has_effect(self, name: str) -> bool:
        return any(isinstance(effect, Token) and effect.text == name for effect in self.effects)


@dataclass(frozen=True)
class FunctionDecl(Node):
    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    func_keyword: Token | None = None
    name: Token | None = None
    generic_parameters: Unstructured | None = None
    signature: FunctionSignature | None = None
    where_clause: Unstructured | None = None
    body: CodeBlock | None = None

    @property
    def name_text(self) -> str:
        return self.name.text if self.name is not None else ""

    def has_modifier(self, name: str) -> bool:
        return has_modifier(self.modifiers, name)

    @property
    def is_static(self) -> bool:
        return self.has_modifier("static") or self.has_modifier("class")


@dataclass(frozen=True)
class InitializerDecl(Node):
    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    init_keyword: Token | None = None
    optional_mark: Token | None = None
    generic_parameters: Unstructured | None = None
    signature: FunctionSignature | None = None
    where_clause: Unstructured | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class DeinitializerDecl(Node):
    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    deinit_keyword: Token | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class TypeAnnotation(Node):
    colon: Token | None = None
    type: TypeSyntax | None = None


@dataclass(frozen=True)
class InitializerClause(Node):
    equal: Token | None = None
    value: Node | None = None


@dataclass(frozen=True)
class AccessorDecl(Node):
    """``get``/``set``/``willSet``/``didSet`` and friends inside an accessor block."""

    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    keyword: Token | None = None
    parameter: Unstructured | None = None
    effects: tuple[Element, ...] = ()
    body: CodeBlock | None = None


@dataclass(frozen=True)
class AccessorBlock(Node):
    """Braced accessors, or the statements of an implicit getter."""

    left_brace: Token | None = None
    items: tuple[Node, ...] = ()
    right_brace: Token | None = None


@dataclass(frozen=True)
class PatternBinding(Node):
    pattern: Element | None = None
    type_annotation: TypeAnnotation | None = None
    initializer: InitializerClause | None = None
    accessor_block: AccessorBlock | None = None
    trailing_comma: Token | None = None

    @property
    def is_stored(self) -> bool:
        return self.initializer is not None and self.accessor_block is None

    @property
    def is_computed(self) -> bool:
        return self.accessor_block is not None


@dataclass(frozen=True)
class VariableDecl(Node):
    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    keyword: Token | None = None
    bindings: tuple[PatternBinding, ...] = ()


@dataclass(frozen=True)
class OtherDecl(Node):
    """Declarations kept as token runs: ``typealias``, enum ``case``, ``subscript``..."""

    attributes: tuple[Attribute, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    keyword: Token | None = None
    rest: Unstructured | None = None


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BindingCondition(Node):
    """``let x = y``, ``var x``, ``case .some(let x) = y`` in a condition list."""

    keyword: Token | None = None
    pattern: Unstructured | None = None
    type_annotation: TypeAnnotation | None = None
    initializer: InitializerClause | None = None


@dataclass(frozen=True)
class ConditionElement(Node):
    condition: Node | None = None
    trailing_comma: Token | None = None


@dataclass(frozen=True)
class IfStmt(Node):
    if_keyword: Token | None = None
    conditions: tuple[ConditionElement, ...] = ()
    body: CodeBlock | None = None
    else_keyword: Token | None = None
    else_body: Node | None = None


@dataclass(frozen=True)
class GuardStmt(Node):
    guard_keyword: Token | None = None
    conditions: tuple[ConditionElement, ...] = ()
    else_keyword: Token | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class WhileStmt(Node):
    while_keyword: Token | None = None
    conditions: tuple[ConditionElement, ...] = ()
    body: CodeBlock | None = None


@dataclass(frozen=True)
class RepeatStmt(Node):
    repeat_keyword: Token | None = None
    body: CodeBlock | None = None
    while_keyword: Token | None = None
    condition: Node | None = None


@dataclass(frozen=True)
class ForStmt(Node):
    for_keyword: Token | None = None
    pattern: Unstructured | None = None
    in_keyword: Token | None = None
    sequence: Node | None = None
    where_keyword: Token | None = None
    where_condition: Node | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class CatchClause(Node):
    catch_keyword: Token | None = None
    pattern: Unstructured | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class DoStmt(Node):
    do_keyword: Token | None = None
    effects: Unstructured | None = None
    body: CodeBlock | None = None
    catches: tuple[CatchClause, ...] = ()


@dataclass(frozen=True)
class SwitchCase(Node):
    """A ``case ...:`` or ``default:`` label followed by its statements."""

    label: Unstructured | None = None
    statements: tuple[CodeBlockItem, ...] = ()


@dataclass(frozen=True)
class SwitchStmt(Node):
    switch_keyword: Token | None = None
    subject: Node | None = None
    left_brace: Token | None = None
    cases: tuple[Node, ...] = ()
    right_brace: Token | None = None


@dataclass(frozen=True)
class ReturnStmt(Node):
    return_keyword: Token | None = None
    expression: Node | None = None


@dataclass(frozen=True)
class ThrowStmt(Node):
    throw_keyword: Token | None = None
    expression: Node | None = None


@dataclass(frozen=True)
class DeferStmt(Node):
    defer_keyword: Token | None = None
    body: CodeBlock | None = None


@dataclass(frozen=True)
class SimpleStmt(Node):
    """``break``, ``continue`` and ``fallthrough`` with an optional label."""

    keyword: Token | None = None
    label: Token | None = None


@dataclass(frozen=True)
class LabeledStmt(Node):
    label: Token | None = None
    colon: Token | None = None
    statement: Node | None = None


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IdentifierExpr(Node):
    name: Token | None = None


@dataclass(frozen=True)
class LiteralExpr(Node):
    """Numeric, boolean and ``nil`` literals."""

    token: Token | None = None


_STRING_LITERAL = re.compile(r'^(#*)("""|")(.*)\2\1$', re.DOTALL)


@dataclass(frozen=True)
class StringLiteralExpr(Node):
    token: Token | None = None

    @property
    def content(self) -> str:
        match = _STRING_LITERAL.match(self.token.text if self.token else "")
        if match is None:
            return ""
        body = match.group(3)
        if match.group(2) == '"""':
            # multi-line literal: the delimiters sit on their own lines
            if body.startswith("\r\n"):
                body = body[2:]
            elif body.startswith("\n"):
                body = body[1:]
            body = body.rstrip(" \t")
            if body.endswith("\r\n"):
                body = body[:-2]
            elif body.endswith("\n"):
                body = body[:-1]
        return body

    @property
    def is_empty(self) -> bool:
        return self.content == ""


@dataclass(frozen=True)
class MemberAccessExpr(Node):
    """``base.name``; ``base`` is ``None`` for implicit members such as ``.init``."""

    base: Node | None = None
    dot: Token | None = None
    name: Token | None = None


@dataclass(frozen=True)
class LabeledArgument(Node):
    label: Token | None = None
    colon: Token | None = None
    expression: Node | None = None
    trailing_comma: Token | None = None


@dataclass(frozen=True)
class ClosureSignature(Node):
    items: tuple[Element, ...] = ()
    in_keyword: Token | None = None


@dataclass(frozen=True)
class ClosureExpr(Node):
    left_brace: Token | None = None
    signature: ClosureSignature | None = None
    statements: tuple[CodeBlockItem, ...] = ()
    right_brace: Token | None = None


@dataclass(frozen=True)
class TrailingClosure(Node):
    label: Token | None = None
    colon: Token | None = None
    closure: ClosureExpr | None = None


@dataclass(frozen=True)
class FunctionCallExpr(Node):
    callee: Node | None = None
    left_paren: Token | None = None
    arguments: tuple[LabeledArgument, ...] = ()
    right_paren: Token | None = None
    trailing_closures: tuple[TrailingClosure, ...] = ()


@dataclass(frozen=True)
class SubscriptExpr(Node):
    base: Node | None = None
    left_bracket: Token | None = None
    arguments: tuple[LabeledArgument, ...] = ()
    right_bracket: Token | None = None


@dataclass(frozen=True)
class PostfixMarkExpr(Node):
    """Postfix ``?`` (optional chaining), ``!`` (force unwrap) or other postfix operator."""

    base: Node | None = None
    mark: Token | None = None

    @property
    def is_optional_chain(self) -> bool:
        return self.mark is not None and self.mark.text == "?"


@dataclass(frozen=True)
class PrefixOperatorExpr(Node):
    operator: Token | None = None
    operand: Node | None = None


@dataclass(frozen=True)
class TernaryBranch(Node):
    """``? then :`` part of a ternary inside an infix sequence."""

    question: Token | None = None
    then_expression: Node | None = None
    colon: Token | None = None


@dataclass(frozen=True)
class CastOperator(Node):
    """``as``, ``as?``, ``as!`` or ``is`` inside an infix sequence."""

    keyword: Token | None = None
    mark: Token | None = None


@dataclass(frozen=True)
class InfixOperatorExpr(Node):
    """Flat ``operand (operator operand)+`` sequence; precedence is not folded."""

    elements: tuple[Element, ...] = ()

    def operators(self) -> list[Element]:
        return list(self.elements[1::2])


@dataclass(frozen=True)
class TryExpr(Node):
    try_keyword: Token | None = None
    mark: Token | None = None
    expression: Node | None = None


@dataclass(frozen=True)
class AwaitExpr(Node):
    await_keyword: Token | None = None
    expression: Node | None = None


@dataclass(frozen=True)
class TupleExpr(Node):
    """Parenthesized expression or tuple literal."""

    left_paren: Token | None = None
    elements: tuple[LabeledArgument, ...] = ()
    right_paren: Token | None = None


@dataclass(frozen=True)
class ArrayElement(Node):
    expression: Node | None = None
    trailing_comma: Token | None = None


@dataclass(frozen=True)
class DictionaryElement(Node):
    key: Node | None = None
    colon: Token | None = None
    value: Node | None = None
    trailing_comma: Token | None = None


@dataclass(frozen=True)
class ArrayExpr(Node):
    """Array or dictionary literal (``[:]`` keeps its colon as a bare token)."""

    left_bracket: Token | None = None
    elements: tuple[Element, ...] = ()
    right_bracket: Token | None = None


@dataclass(frozen=True)
class MacroExpansionExpr(Node):
    """``#name``; a following argument list makes it the callee of a call."""

    pound: Token | None = None


@dataclass(frozen=True)
class KeyPathExpr(Node):
    backslash: Token | None = None
    components: tuple[Element, ...] = ()


@dataclass(frozen=True)
class GenericArgumentExpr(Node):
    """Explicit specialization such as ``Set<AnyCancellable>``."""

    base: Node | None = None
    arguments: Unstructured | None = None


@dataclass(frozen=True)
class TypeExpr(Node):
    """A type in expression position, for example ``any Error``."""

    type: TypeSyntax | None = None


POSTFIX_LEVEL_EXPRESSIONS: tuple[type, ...] = (
    IdentifierExpr,
    LiteralExpr,
    StringLiteralExpr,
    MemberAccessExpr,
    FunctionCallExpr,
    SubscriptExpr,
    PostfixMarkExpr,
    TupleExpr,
    ArrayExpr,
    MacroExpansionExpr,
    GenericArgumentExpr,
)
