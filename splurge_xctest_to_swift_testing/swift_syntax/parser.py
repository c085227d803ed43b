"""Recursive-descent parser building the trivia-preserving Swift tree.

The parser models the declarations, statements and expressions the
migration rules look at and keeps everything else as lossless token runs
(:class:`Unstructured`). A statement the structured grammar cannot
handle is re-read as an unstructured run, so valid Swift that uses
constructs this parser does not model still round-trips byte for byte.
Only lexically broken input or unbalanced brackets raise
:class:`InvalidSyntaxError`.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from ..exceptions import InvalidSyntaxError
from .lexer import Lexer
from .nodes import (
    AccessorBlock,
    AccessorDecl,
    ArrayElement,
    ArrayExpr,
    Attribute,
    AwaitExpr,
    BindingCondition,
    CastOperator,
    CatchClause,
    ClosureExpr,
    ClosureSignature,
    CodeBlock,
    CodeBlockItem,
    ConditionElement,
    DeferStmt,
    DeinitializerDecl,
    DictionaryElement,
    DoStmt,
    Element,
    ForStmt,
    FunctionCallExpr,
    FunctionDecl,
    FunctionSignature,
    GenericArgumentExpr,
    GuardStmt,
    IdentifierExpr,
    IfStmt,
    ImportDecl,
    InfixOperatorExpr,
    InheritanceClause,
    InheritedType,
    InitializerClause,
    InitializerDecl,
    KeyPathExpr,
    LabeledArgument,
    LabeledStmt,
    LiteralExpr,
    MacroExpansionExpr,
    MemberAccessExpr,
    MemberBlock,
    Modifier,
    Node,
    OtherDecl,
    ParameterClause,
    PatternBinding,
    PostfixMarkExpr,
    PoundDirective,
    PrefixOperatorExpr,
    RepeatStmt,
    ReturnClause,
    ReturnStmt,
    SimpleStmt,
    SourceFile,
    StringLiteralExpr,
    SubscriptExpr,
    SwitchCase,
    SwitchStmt,
    TernaryBranch,
    ThrowStmt,
    TrailingClosure,
    TryExpr,
    TupleExpr,
    TypeAnnotation,
    TypeDecl,
    TypeExpr,
    TypeSyntax,
    Unstructured,
    VariableDecl,
    WhileStmt,
)
from .tokens import STATEMENT_KEYWORDS, Token, TokenKind
from .trivia import Trivia

logger = logging.getLogger(__name__)

TYPE_DECL_KEYWORDS = frozenset({"class", "struct", "enum", "protocol", "extension", "actor"})
OTHER_DECL_KEYWORDS = frozenset(
    {"typealias", "subscript", "associatedtype", "operator", "precedencegroup", "macro", "case"}
)
DECL_KEYWORDS = TYPE_DECL_KEYWORDS | OTHER_DECL_KEYWORDS | {"import", "func", "init", "deinit", "var", "let"}
MODIFIER_WORDS = frozenset(
    {
        "public",
        "private",
        "fileprivate",
        "internal",
        "open",
        "package",
        "final",
        "static",
        "class",
        "override",
        "mutating",
        "nonmutating",
        "convenience",
        "required",
        "lazy",
        "weak",
        "unowned",
        "dynamic",
        "optional",
        "indirect",
        "nonisolated",
        "prefix",
        "postfix",
        "infix",
        "distributed",
        "consuming",
        "borrowing",
    }
)
IMPORT_KINDS = frozenset({"typealias", "struct", "class", "enum", "protocol", "let", "var", "func"})
ACCESSOR_KEYWORDS = frozenset(
    {"get", "set", "willSet", "didSet", "_read", "_modify", "read", "modify", "init", "unsafeAddress", "unsafeMutableAddress"}
)
TYPE_SPECIFIERS = frozenset(
    {"any", "some", "inout", "borrowing", "consuming", "__owned", "__shared", "sending", "isolated", "each", "repeat"}
)
EFFECT_WORDS = frozenset({"async", "throws", "rethrows", "reasync"})
DIRECTIVES = frozenset({"#if", "#elseif", "#else", "#endif", "#warning", "#error", "#sourceLocation"})
LOOP_KEYWORDS = frozenset({"for", "while", "repeat", "do", "if", "switch"})
CLOSURE_SIGNATURE_STOPS = (STATEMENT_KEYWORDS - {"in"}) | {"if", "switch", "try", "await", "guard"}
MATCHING_CLOSER = {"(": ")", "[": "]", "{": "}"}


class ParseFailure(Exception):
    """Structured parse did not match; the caller falls back to a token run."""

    def __init__(self, reason: str, token: Token):
        super().__init__(reason)
        self.reason = reason
        self.line, self.column = token.position or (None, None)


class Parser:
    """Parser over the token list produced by :class:`Lexer`."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self._allow_trailing_closure = True

    # ------------------------------------------------------------------
    # Token access
    # ------------------------------------------------------------------

    @property
    def cur(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        return self._token_at(self.pos + offset)

    def _token_at(self, index: int) -> Token:
        if index >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if not token.is_eof:
            self.pos += 1
        return token

    def expect_punct(self, text: str) -> Token:
        if self.cur.is_punct(text):
            return self.advance()
        raise self._failure(f"expected '{text}'")

    def expect_word(self, text: str) -> Token:
        if self.cur.is_word(text):
            return self.advance()
        raise self._failure(f"expected '{text}'")

    def _failure(self, reason: str) -> ParseFailure:
        return ParseFailure(f"{reason}, found '{self.cur.text or 'end of file'}'", self.cur)

    def _invalid(self, reason: str, token: Token | None = None) -> InvalidSyntaxError:
        token = token or self.cur
        line, column = token.position or (None, None)
        return InvalidSyntaxError(reason, line, column)

    def _left_bound(self, index: int) -> bool:
        token = self.tokens[index]
        if index == 0 or token.leading:
            return False
        previous = self.tokens[index - 1]
        if previous.trailing:
            return False
        return not previous.is_punct("(", "[", "{", ",", ";", ":")

    def _right_bound(self, index: int) -> bool:
        token = self.tokens[index]
        if token.trailing:
            return False
        following = self._token_at(index + 1)
        if following.is_eof or following.leading:
            return False
        return not following.is_punct(")", "]", "}", ",", ";", ":")

    @contextmanager
    def _trailing_closures(self, allowed: bool) -> Iterator[None]:
        saved = self._allow_trailing_closure
        self._allow_trailing_closure = allowed
        try:
            yield
        finally:
            self._allow_trailing_closure = saved

    # ------------------------------------------------------------------
    # Entry point and statement lists
    # ------------------------------------------------------------------

    def parse_source_file(self) -> SourceFile:
        statements = self._parse_statement_list()
        if not self.cur.is_eof:
            raise self._invalid(f"unexpected '{self.cur.text}'")
        return SourceFile(statements=statements, eof=self.cur)

    def _parse_statement_list(self, terminator: Callable[[], bool] | None = None) -> tuple[CodeBlockItem, ...]:
        items: list[CodeBlockItem] = []
        while True:
            token = self.cur
            if token.is_eof or token.is_punct("}"):
                break
            if terminator is not None and terminator():
                break
            if token.is_punct(")", "]"):
                raise self._failure("unbalanced bracket")
            if token.is_punct(";"):
                items.append(CodeBlockItem(semicolon=self.advance()))
                continue
            item = self._parse_statement()
            semicolon = self.advance() if self.cur.is_punct(";") else None
            items.append(CodeBlockItem(item=item, semicolon=semicolon))
        return tuple(items)

    def _parse_statement(self) -> Node:
        start = self.pos
        try:
            return self._parse_structured_statement()
        except ParseFailure as failure:
            logger.debug(f"Keeping statement at line {self.tokens[start].position} as tokens: {failure.reason}")
            self.pos = start
            return self._parse_unstructured_statement()

    def _parse_structured_statement(self) -> Node:
        token = self.cur
        if token.kind is TokenKind.POUND and token.text in DIRECTIVES:
            return self._parse_pound_directive()
        if self._scan_declaration_start() is not None:
            return self._parse_declaration()
        if token.is_identifier:
            text = token.text
            if text == "if":
                return self._parse_if()
            if text == "guard":
                return self._parse_guard()
            if text == "for":
                return self._parse_for()
            if text == "while":
                return self._parse_while()
            if text == "repeat":
                return self._parse_repeat()
            if text == "do" and (self.peek().is_punct("{") or self.peek().is_word("throws")):
                return self._parse_do()
            if text == "switch":
                return self._parse_switch()
            if text == "return":
                return self._parse_return()
            if text == "throw":
                return ThrowStmt(throw_keyword=self.advance(), expression=self._require_expression())
            if text == "defer":
                return DeferStmt(defer_keyword=self.advance(), body=self._parse_code_block())
            if text in ("break", "continue", "fallthrough"):
                keyword = self.advance()
                label = None
                if text != "fallthrough" and self.cur.is_identifier and not self.cur.starts_line:
                    label = self.advance()
                return SimpleStmt(keyword=keyword, label=label)
            if self.peek().is_punct(":") and self.peek(2).is_identifier and self.peek(2).text in LOOP_KEYWORDS:
                label = self.advance()
                colon = self.advance()
                return LabeledStmt(label=label, colon=colon, statement=self._parse_structured_statement())
        return self._require_expression()

    def _parse_unstructured_statement(self) -> Unstructured:
        items: list[Element] = []
        while True:
            token = self.cur
            if token.is_eof or token.is_punct(";", "}"):
                break
            if token.is_punct(")", "]"):
                if not items:
                    raise self._invalid(f"unexpected '{token.text}'")
                break
            if items and token.starts_line and not self._continues_line(items[-1]):
                break
            items.append(self._collect_raw_element())
        return Unstructured(items=tuple(items))

    def _continues_line(self, previous: Element) -> bool:
        last = previous if isinstance(previous, Token) else previous.last_token()
        if last is None:
            return False
        if last.is_punct(",", ".", ":", "@") or last.kind is TokenKind.OPERATOR:
            return True
        token = self.cur
        if token.is_punct("."):
            return True
        return token.kind is TokenKind.OPERATOR and not self._right_bound(self.pos)

    # ------------------------------------------------------------------
    # Raw token runs
    # ------------------------------------------------------------------

    def _collect_raw_element(self) -> Element:
        token = self.cur
        if token.is_punct("(", "[", "{"):
            return self._collect_group()
        if token.is_punct(")", "]", "}"):
            raise self._invalid(f"unexpected '{token.text}'")
        if token.is_eof:
            raise self._invalid("unexpected end of file")
        return self.advance()

    def _collect_group(self) -> Unstructured:
        opener = self.advance()
        closer = MATCHING_CLOSER[opener.text]
        items: list[Element] = [opener]
        while True:
            token = self.cur
            if token.is_eof:
                raise self._invalid(f"missing '{closer}' to match '{opener.text}'", opener)
            if token.is_punct(closer):
                items.append(self.advance())
                return Unstructured(items=tuple(items))
            if token.is_punct(")", "]", "}"):
                raise self._invalid(f"unexpected '{token.text}'")
            if token.is_punct("(", "[", "{"):
                items.append(self._collect_group())
            else:
                items.append(self.advance())

    def _collect_until(self, stop: Callable[[Token], bool]) -> Unstructured:
        """Collect a run up to a depth-0 token matching ``stop``."""
        items: list[Element] = []
        while True:
            token = self.cur
            if token.is_eof or stop(token):
                break
            if token.is_punct(")", "]", "}"):
                raise self._failure("unexpected closing bracket")
            items.append(self._collect_raw_element())
        return Unstructured(items=tuple(items))

    def _skip_group_index(self, index: int) -> int | None:
        depth = 0
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.is_eof:
                return None
            if token.is_punct("(", "[", "{"):
                depth += 1
            elif token.is_punct(")", "]", "}"):
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        return None

    def _split_token(self, index: int, size: int) -> None:
        token = self.tokens[index]
        line, column = token.position or (0, 0)
        head = Token(token.kind, token.text[:size], token.leading, Trivia(), token.position)
        tail = Token(TokenKind.OPERATOR, token.text[size:], Trivia(), token.trailing, (line, column + size))
        self.tokens[index : index + 1] = [head, tail]

    # ------------------------------------------------------------------
    # Generic angle brackets
    # ------------------------------------------------------------------

    def _scan_angle_group(self, index: int, check_follower: bool) -> int | None:
        """Return the index past the ``>`` matching the ``<`` at ``index``."""
        depth = 0
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.kind is TokenKind.OPERATOR:
                text = token.text
                if text == "<":
                    depth += 1
                elif text.startswith(">"):
                    rest = text.lstrip(">")
                    closers = len(text) - len(rest)
                    if rest.strip("?!") or closers > depth:
                        return None
                    depth -= closers
                    if depth == 0:
                        if rest or not check_follower:
                            return index + 1
                        return index + 1 if self._acceptable_after_generics(index + 1) else None
                elif text not in ("?", "!", "&", "->", "...", "=="):
                    return None
            elif token.kind is TokenKind.PUNCTUATION:
                if token.text in ("(", "["):
                    end = self._skip_group_index(index)
                    if end is None:
                        return None
                    index = end
                    continue
                if token.text not in (",", ".", ":", "@"):
                    return None
            elif token.kind is TokenKind.IDENTIFIER:
                if token.text in STATEMENT_KEYWORDS:
                    return None
            elif token.kind is not TokenKind.INTEGER:
                return None
            index += 1
        return None

    def _acceptable_after_generics(self, index: int) -> bool:
        token = self._token_at(index)
        if token.is_eof or token.starts_line:
            return True
        if token.is_punct("(", ".", ")", "]", ",", ":", ";", "}", "{"):
            return True
        return token.is_operator("?", "!", "==", "!=")

    def _collect_angle_group(self, end: int) -> Unstructured:
        closing = self.tokens[end - 1]
        rest = closing.text.lstrip(">")
        if rest:
            self._split_token(end - 1, len(closing.text) - len(rest))
        items = tuple(self.tokens[self.pos : end])
        self.pos = end
        return Unstructured(items=items)

    def _maybe_generic_parameters(self) -> Unstructured | None:
        if not self.cur.is_operator("<"):
            return None
        end = self._scan_angle_group(self.pos, check_follower=False)
        if end is None:
            raise self._failure("unbalanced generic parameter clause")
        return self._collect_angle_group(end)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _scan_declaration_start(self) -> int | None:
        """Index of the declaration keyword if a declaration starts here."""
        index = self.pos
        while self._token_at(index).is_punct("@") and self._token_at(index + 1).is_identifier:
            index += 2
            if self._token_at(index).is_punct("(") and self._left_bound(index):
                end = self._skip_group_index(index)
                if end is None:
                    return None
                index = end
        while True:
            token = self._token_at(index)
            if not (token.is_identifier and token.text in MODIFIER_WORDS):
                break
            if token.text == "class" and self._is_type_declaration_at(index):
                break
            following = self._token_at(index + 1)
            if following.is_punct("(") and not following.leading and not token.trailing:
                end = self._skip_group_index(index + 1)
                if end is None:
                    return None
                index = end
            elif following.is_identifier and (following.text in MODIFIER_WORDS or following.text in DECL_KEYWORDS):
                index += 1
            else:
                return None
        token = self._token_at(index)
        if not (token.is_identifier and token.text in DECL_KEYWORDS):
            return None
        text = token.text
        if text in ("actor", "macro"):
            if not self._is_type_declaration_at(index):
                return None
        elif text == "class":
            if not self._is_type_declaration_at(index):
                return None
        elif text == "init":
            following = self._token_at(index + 1)
            if not (following.is_punct("(") or following.is_operator("?", "!", "<")):
                return None
        elif text == "operator" and index == self.pos:
            return None
        return index

    def _is_type_declaration_at(self, index: int) -> bool:
        name = self._token_at(index + 1)
        if not name.is_identifier or name.starts_line:
            return False
        return name.text not in DECL_KEYWORDS and name.text not in MODIFIER_WORDS

    def _parse_attributes(self) -> tuple[Attribute, ...]:
        attributes: list[Attribute] = []
        while self.cur.is_punct("@") and self.peek().is_identifier:
            at_sign = self.advance()
            name = self.advance()
            arguments = None
            if self.cur.is_punct("(") and self._left_bound(self.pos):
                arguments = self._collect_group()
            attributes.append(Attribute(at_sign=at_sign, name=name, arguments=arguments))
        return tuple(attributes)

    def _parse_modifiers(self, keyword_index: int) -> tuple[Modifier, ...]:
        modifiers: list[Modifier] = []
        while self.pos < keyword_index:
            name = self.advance()
            detail = None
            if self.cur.is_punct("(") and self.pos < keyword_index:
                detail = self._collect_group()
            modifiers.append(Modifier(name=name, detail=detail))
        return tuple(modifiers)

    def _parse_declaration(self) -> Node:
        attributes = self._parse_attributes()
        keyword_index = self._scan_declaration_start()
        if keyword_index is None:
            raise self._failure("expected declaration")
        modifiers = self._parse_modifiers(keyword_index)
        keyword = self.cur.text
        if keyword == "import":
            return self._parse_import(attributes, modifiers)
        if keyword in TYPE_DECL_KEYWORDS:
            return self._parse_type_declaration(attributes, modifiers)
        if keyword == "func":
            return self._parse_function(attributes, modifiers)
        if keyword == "init":
            return self._parse_initializer(attributes, modifiers)
        if keyword == "deinit":
            deinit_keyword = self.advance()
            body = self._parse_code_block() if self.cur.is_punct("{") else None
            return DeinitializerDecl(attributes=attributes, modifiers=modifiers, deinit_keyword=deinit_keyword, body=body)
        if keyword in ("var", "let"):
            return self._parse_variable(attributes, modifiers)
        return self._parse_other_declaration(attributes, modifiers)

    def _parse_import(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> ImportDecl:
        import_keyword = self.advance()
        kind_keyword = None
        if self.cur.is_identifier and self.cur.text in IMPORT_KINDS and self.peek().is_identifier:
            kind_keyword = self.advance()
        if not self.cur.is_identifier or self.cur.starts_line:
            raise self._failure("expected module name")
        path = [self.advance()]
        while self.cur.is_punct(".") and not self.cur.starts_line:
            path.append(self.advance())
            if self.cur.kind not in (TokenKind.IDENTIFIER, TokenKind.OPERATOR):
                raise self._failure("expected import path component")
            path.append(self.advance())
        return ImportDecl(
            attributes=attributes,
            modifiers=modifiers,
            import_keyword=import_keyword,
            kind_keyword=kind_keyword,
            path=tuple(path),
        )

    def _parse_type_declaration(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> TypeDecl:
        keyword = self.advance()
        name: Element | None
        generic_parameters = None
        if keyword.text == "extension":
            name = self._parse_type()
            if name is None:
                raise self._failure("expected extended type")
        else:
            if not self.cur.is_identifier:
                raise self._failure("expected type name")
            name = self.advance()
            generic_parameters = self._maybe_generic_parameters()
        inheritance = self._parse_inheritance() if self.cur.is_punct(":") else None
        where_clause = None
        if self.cur.is_word("where"):
            where_clause = self._collect_until(lambda token: token.is_punct("{"))
        members = self._parse_member_block()
        return TypeDecl(
            attributes=attributes,
            modifiers=modifiers,
            keyword=keyword,
            name=name,
            generic_parameters=generic_parameters,
            inheritance=inheritance,
            where_clause=where_clause,
            members=members,
        )

    def _parse_inheritance(self) -> InheritanceClause:
        colon = self.advance()
        entries: list[InheritedType] = []
        while True:
            type_syntax = self._parse_type()
            if type_syntax is None:
                raise self._failure("expected inherited type")
            comma = self.advance() if self.cur.is_punct(",") else None
            entries.append(InheritedType(type=type_syntax, trailing_comma=comma))
            if comma is None:
                break
        return InheritanceClause(colon=colon, inherited_types=tuple(entries))

    def _parse_member_block(self) -> MemberBlock:
        left_brace = self.expect_punct("{")
        members = self._parse_statement_list()
        right_brace = self.expect_punct("}")
        return MemberBlock(left_brace=left_brace, members=members, right_brace=right_brace)

    def _parse_function(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> FunctionDecl:
        func_keyword = self.advance()
        if self.cur.kind not in (TokenKind.IDENTIFIER, TokenKind.OPERATOR) or self.cur.starts_line:
            raise self._failure("expected function name")
        name = self.advance()
        generic_parameters = self._maybe_generic_parameters()
        signature = self._parse_signature()
        where_clause = self._parse_where_before_body()
        body = self._parse_code_block() if self.cur.is_punct("{") else None
        return FunctionDecl(
            attributes=attributes,
            modifiers=modifiers,
            func_keyword=func_keyword,
            name=name,
            generic_parameters=generic_parameters,
            signature=signature,
            where_clause=where_clause,
            body=body,
        )

    def _parse_initializer(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> InitializerDecl:
        init_keyword = self.advance()
        optional_mark = None
        if self.cur.is_operator("?", "!") and self._left_bound(self.pos):
            optional_mark = self.advance()
        generic_parameters = self._maybe_generic_parameters()
        signature = self._parse_signature()
        where_clause = self._parse_where_before_body()
        body = self._parse_code_block() if self.cur.is_punct("{") else None
        return InitializerDecl(
            attributes=attributes,
            modifiers=modifiers,
            init_keyword=init_keyword,
            optional_mark=optional_mark,
            generic_parameters=generic_parameters,
            signature=signature,
            where_clause=where_clause,
            body=body,
        )

    def _parse_where_before_body(self) -> Unstructured | None:
        if not self.cur.is_word("where"):
            return None
        items: list[Element] = [self.advance()]
        while True:
            token = self.cur
            if token.is_eof or token.is_punct("{", "}", ";"):
                break
            if token.starts_line and not self._continues_line(items[-1]):
                break
            items.append(self._collect_raw_element())
        return Unstructured(items=tuple(items))

    def _parse_signature(self) -> FunctionSignature:
        if not self.cur.is_punct("("):
            raise self._failure("expected parameter clause")
        group = self._collect_group()
        inner = group.items[1:-1]
        parameters = ParameterClause(
            left_paren=group.items[0],
            parameters=Unstructured(items=inner) if inner else None,
            right_paren=group.items[-1],
        )
        effects = self._parse_effects()
        return_clause = None
        if self.cur.is_operator("->"):
            arrow = self.advance()
            return_type = self._parse_type()
            if return_type is None:
                raise self._failure("expected return type")
            return_clause = ReturnClause(arrow=arrow, type=return_type)
        return FunctionSignature(parameters=parameters, effects=effects, return_clause=return_clause)

    def _parse_effects(self) -> tuple[Element, ...]:
        effects: list[Element] = []
        while self.cur.is_identifier and self.cur.text in EFFECT_WORDS:
            keyword = self.advance()
            if keyword.text == "throws" and self.cur.is_punct("(") and self._left_bound(self.pos):
                effects.append(Unstructured(items=(keyword, self._collect_group())))
            else:
                effects.append(keyword)
        return tuple(effects)

    def _parse_variable(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> VariableDecl:
        keyword = self.advance()
        bindings: list[PatternBinding] = []
        while True:
            pattern: Element
            if self.cur.is_punct("("):
                pattern = self._collect_group()
            elif self.cur.is_identifier:
                pattern = self.advance()
            else:
                raise self._failure("expected binding pattern")
            type_annotation = None
            if self.cur.is_punct(":"):
                colon = self.advance()
                annotated = self._parse_type()
                if annotated is None:
                    raise self._failure("expected type annotation")
                type_annotation = TypeAnnotation(colon=colon, type=annotated)
            initializer = None
            if self.cur.is_operator("="):
                equal = self.advance()
                initializer = InitializerClause(equal=equal, value=self._require_expression())
            accessor_block = None
            if self.cur.is_punct("{") and (initializer is None or not self.cur.starts_line):
                accessor_block = self._parse_accessor_block()
            comma = self.advance() if self.cur.is_punct(",") else None
            bindings.append(
                PatternBinding(
                    pattern=pattern,
                    type_annotation=type_annotation,
                    initializer=initializer,
                    accessor_block=accessor_block,
                    trailing_comma=comma,
                )
            )
            if comma is None:
                break
        return VariableDecl(attributes=attributes, modifiers=modifiers, keyword=keyword, bindings=tuple(bindings))

    def _at_accessor(self) -> bool:
        index = self.pos
        while self._token_at(index).is_punct("@") and self._token_at(index + 1).is_identifier:
            index += 2
        while self._token_at(index).is_word("mutating", "nonmutating", "private", "fileprivate", "internal", "public"):
            index += 1
        token = self._token_at(index)
        if not (token.is_identifier and token.text in ACCESSOR_KEYWORDS):
            return False
        following = self._token_at(index + 1)
        if following.is_punct("{", "(", "}") or following.starts_line:
            return True
        return following.is_identifier and (following.text in EFFECT_WORDS or following.text in ACCESSOR_KEYWORDS)

    def _parse_accessor_block(self) -> AccessorBlock:
        left_brace = self.expect_punct("{")
        items: tuple[Node, ...]
        if self._at_accessor():
            accessors: list[Node] = []
            while not self.cur.is_punct("}"):
                if self.cur.is_eof:
                    raise self._failure("unterminated accessor block")
                if self.cur.kind is TokenKind.POUND and self.cur.text in DIRECTIVES:
                    accessors.append(self._parse_pound_directive())
                    continue
                accessors.append(self._parse_accessor())
            items = tuple(accessors)
        else:
            items = self._parse_statement_list()
        right_brace = self.expect_punct("}")
        return AccessorBlock(left_brace=left_brace, items=items, right_brace=right_brace)

    def _parse_accessor(self) -> AccessorDecl:
        attributes = self._parse_attributes()
        modifiers: list[Modifier] = []
        while self.cur.is_identifier and self.cur.text not in ACCESSOR_KEYWORDS:
            modifiers.append(Modifier(name=self.advance()))
        if not (self.cur.is_identifier and self.cur.text in ACCESSOR_KEYWORDS):
            raise self._failure("expected accessor")
        keyword = self.advance()
        parameter = self._collect_group() if self.cur.is_punct("(") else None
        effects = self._parse_effects()
        body = self._parse_code_block() if self.cur.is_punct("{") else None
        return AccessorDecl(
            attributes=attributes,
            modifiers=tuple(modifiers),
            keyword=keyword,
            parameter=parameter,
            effects=effects,
            body=body,
        )

    def _parse_other_declaration(self, attributes: tuple[Attribute, ...], modifiers: tuple[Modifier, ...]) -> OtherDecl:
        keyword = self.advance()
        items: list[Element] = []
        while True:
            token = self.cur
            if token.is_eof or token.is_punct("}", ";", ")", "]"):
                break
            if token.starts_line and (not items or not self._continues_line(items[-1])):
                break
            if token.is_punct("{"):
                items.append(self._parse_accessor_block())
                break
            items.append(self._collect_raw_element())
        return OtherDecl(
            attributes=attributes,
            modifiers=modifiers,
            keyword=keyword,
            rest=Unstructured(items=tuple(items)) if items else None,
        )

    def _parse_pound_directive(self) -> PoundDirective:
        keyword = self.advance()
        items: list[Element] = []
        if keyword.text in ("#if", "#elseif"):
            while not self.cur.is_eof and not self.cur.starts_line:
                if self.cur.is_punct(")", "]", "}", "{"):
                    break
                items.append(self._collect_raw_element())
        elif self.cur.is_punct("(") and not self.cur.starts_line:
            items.append(self._collect_group())
        return PoundDirective(keyword=keyword, rest=Unstructured(items=tuple(items)) if items else None)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _parse_type(self) -> TypeSyntax | None:
        items: list[Element] = []
        if not self._parse_type_into(items):
            return None
        return TypeSyntax(items=tuple(items))

    def _parse_type_into(self, items: list[Element]) -> bool:
        while self.cur.is_punct("@") and self.peek().is_identifier:
            items.append(self.advance())
            items.append(self.advance())
            if self.cur.is_punct("(") and self._left_bound(self.pos):
                items.append(self._collect_group())
        while (
            self.cur.is_identifier
            and self.cur.text in TYPE_SPECIFIERS
            and not self.peek().starts_line
            and (self.peek().is_identifier or self.peek().is_punct("(", "["))
        ):
            items.append(self.advance())
        token = self.cur
        if token.is_identifier and (token.text not in STATEMENT_KEYWORDS or token.text == "class"):
            items.append(self.advance())
            self._type_generic_suffix(items)
            while self.cur.is_punct(".") and self.peek().is_identifier and not self.cur.starts_line:
                items.append(self.advance())
                items.append(self.advance())
                self._type_generic_suffix(items)
        elif token.is_punct("(", "["):
            items.append(self._collect_group())
        else:
            return False
        while True:
            token = self.cur
            if token.is_operator("?", "!", "...") and self._left_bound(self.pos):
                items.append(self.advance())
            elif token.is_punct(".") and self.peek().is_identifier and not token.starts_line:
                items.append(self.advance())
                items.append(self.advance())
            elif token.is_operator("&"):
                items.append(self.advance())
                if not self._parse_type_into(items):
                    raise self._failure("expected type after '&'")
            else:
                break
        index = self.pos
        while self._token_at(index).is_identifier and self._token_at(index).text in EFFECT_WORDS:
            index += 1
            if self._token_at(index).is_punct("("):
                end = self._skip_group_index(index)
                if end is None:
                    return True
                index = end
        if self._token_at(index).is_operator("->"):
            while self.pos < index:
                items.append(self._collect_raw_element())
            items.append(self.advance())
            if not self._parse_type_into(items):
                raise self._failure("expected function result type")
        return True

    def _type_generic_suffix(self, items: list[Element]) -> None:
        if self.cur.is_operator("<") and self._left_bound(self.pos):
            end = self._scan_angle_group(self.pos, check_follower=False)
            if end is not None:
                items.append(self._collect_angle_group(end))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_code_block(self) -> CodeBlock:
        left_brace = self.expect_punct("{")
        with self._trailing_closures(True):
            statements = self._parse_statement_list()
        right_brace = self.expect_punct("}")
        return CodeBlock(left_brace=left_brace, statements=statements, right_brace=right_brace)

    def _parse_condition_list(self) -> tuple[ConditionElement, ...]:
        elements: list[ConditionElement] = []
        with self._trailing_closures(False):
            while True:
                condition = self._parse_condition()
                comma = self.advance() if self.cur.is_punct(",") else None
                elements.append(ConditionElement(condition=condition, trailing_comma=comma))
                if comma is None:
                    break
        return tuple(elements)

    def _parse_condition(self) -> Node:
        if self.cur.is_word("let", "var", "case"):
            keyword = self.advance()
            pattern = self._collect_until(lambda token: token.is_operator("=") or token.is_punct(",", "{", ":"))
            if not pattern.items:
                raise self._failure("expected pattern")
            type_annotation = None
            if self.cur.is_punct(":"):
                colon = self.advance()
                annotated = self._parse_type()
                if annotated is None:
                    raise self._failure("expected type annotation")
                type_annotation = TypeAnnotation(colon=colon, type=annotated)
            initializer = None
            if self.cur.is_operator("="):
                equal = self.advance()
                initializer = InitializerClause(equal=equal, value=self._require_expression())
            return BindingCondition(
                keyword=keyword, pattern=pattern, type_annotation=type_annotation, initializer=initializer
            )
        return self._require_expression()

    def _parse_if(self) -> IfStmt:
        if_keyword = self.advance()
        conditions = self._parse_condition_list()
        body = self._parse_code_block()
        else_keyword = None
        else_body: Node | None = None
        if self.cur.is_word("else"):
            else_keyword = self.advance()
            else_body = self._parse_if() if self.cur.is_word("if") else self._parse_code_block()
        return IfStmt(
            if_keyword=if_keyword, conditions=conditions, body=body, else_keyword=else_keyword, else_body=else_body
        )

    def _parse_guard(self) -> GuardStmt:
        guard_keyword = self.advance()
        conditions = self._parse_condition_list()
        else_keyword = self.expect_word("else")
        body = self._parse_code_block()
        return GuardStmt(guard_keyword=guard_keyword, conditions=conditions, else_keyword=else_keyword, body=body)

    def _parse_while(self) -> WhileStmt:
        while_keyword = self.advance()
        conditions = self._parse_condition_list()
        body = self._parse_code_block()
        return WhileStmt(while_keyword=while_keyword, conditions=conditions, body=body)

    def _parse_repeat(self) -> RepeatStmt:
        repeat_keyword = self.advance()
        body = self._parse_code_block()
        while_keyword = self.expect_word("while")
        with self._trailing_closures(False):
            condition = self._require_expression()
        return RepeatStmt(repeat_keyword=repeat_keyword, body=body, while_keyword=while_keyword, condition=condition)

    def _parse_for(self) -> ForStmt:
        for_keyword = self.advance()
        pattern = self._collect_until(lambda token: token.is_word("in") or token.is_punct("{"))
        in_keyword = self.expect_word("in")
        where_keyword = None
        where_condition = None
        with self._trailing_closures(False):
            sequence = self._require_expression()
            if self.cur.is_word("where"):
                where_keyword = self.advance()
                where_condition = self._require_expression()
        body = self._parse_code_block()
        return ForStmt(
            for_keyword=for_keyword,
            pattern=pattern,
            in_keyword=in_keyword,
            sequence=sequence,
            where_keyword=where_keyword,
            where_condition=where_condition,
            body=body,
        )

    def _parse_do(self) -> DoStmt:
        do_keyword = self.advance()
        effects = None
        if self.cur.is_word("throws"):
            effects = self._collect_until(lambda token: token.is_punct("{"))
        body = self._parse_code_block()
        catches: list[CatchClause] = []
        while self.cur.is_word("catch"):
            catch_keyword = self.advance()
            pattern = self._collect_until(lambda token: token.is_punct("{"))
            catches.append(
                CatchClause(
                    catch_keyword=catch_keyword,
                    pattern=pattern if pattern.items else None,
                    body=self._parse_code_block(),
                )
            )
        return DoStmt(do_keyword=do_keyword, effects=effects, body=body, catches=tuple(catches))

    def _at_case_label(self) -> bool:
        token = self.cur
        if token.is_word("case", "default"):
            return True
        return token.is_punct("@") and self.peek().is_word("unknown")

    def _at_case_boundary(self) -> bool:
        if self._at_case_label():
            return True
        return self.cur.kind is TokenKind.POUND and self.cur.text in ("#elseif", "#else", "#endif")

    def _parse_switch(self) -> SwitchStmt:
        switch_keyword = self.advance()
        with self._trailing_closures(False):
            subject = self._require_expression()
        left_brace = self.expect_punct("{")
        cases: list[Node] = []
        with self._trailing_closures(True):
            while not self.cur.is_punct("}"):
                if self.cur.is_eof:
                    raise self._failure("unterminated switch")
                if self.cur.kind is TokenKind.POUND and self.cur.text in DIRECTIVES:
                    cases.append(CodeBlockItem(item=self._parse_pound_directive()))
                elif self._at_case_label():
                    label = self._parse_case_label()
                    statements = self._parse_statement_list(self._at_case_boundary)
                    cases.append(SwitchCase(label=label, statements=statements))
                else:
                    cases.extend(self._parse_statement_list(self._at_case_boundary))
                    if not (self.cur.is_punct("}") or self._at_case_boundary() or self.cur.is_eof):
                        raise self._failure("unexpected token in switch")
        right_brace = self.expect_punct("}")
        return SwitchStmt(
            switch_keyword=switch_keyword,
            subject=subject,
            left_brace=left_brace,
            cases=tuple(cases),
            right_brace=right_brace,
        )

    def _parse_case_label(self) -> Unstructured:
        items: list[Element] = []
        if self.cur.is_punct("@"):
            items.append(self.advance())
            items.append(self.advance())
        items.append(self.advance())
        while not self.cur.is_punct(":"):
            token = self.cur
            if token.is_eof or token.is_punct(")", "]", "}"):
                raise self._failure("expected ':' after case label")
            items.append(self._collect_raw_element())
        items.append(self.advance())
        return Unstructured(items=tuple(items))

    def _parse_return(self) -> ReturnStmt:
        return_keyword = self.advance()
        expression = None
        token = self.cur
        if not (token.starts_line or token.is_eof or token.is_punct("}", ";", ")")):
            expression = self._require_expression()
        return ReturnStmt(return_keyword=return_keyword, expression=expression)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _require_expression(self) -> Node:
        expression = self._parse_expression()
        if expression is None:
            raise self._failure("expected expression")
        return expression

    def _parse_expression(self) -> Node | None:
        first = self._parse_prefixed()
        if first is None:
            return None
        elements: list[Element] = [first]
        while True:
            token = self.cur
            if token.kind is TokenKind.OPERATOR and token.text != "->" and self._is_binary(self.pos):
                operator = self.advance()
                if operator.text == "?":
                    then_expression = self._require_expression()
                    colon = self.expect_punct(":")
                    elements.append(TernaryBranch(question=operator, then_expression=then_expression, colon=colon))
                else:
                    elements.append(operator)
                operand = self._parse_prefixed()
                if operand is None:
                    raise self._failure("expected operand")
                elements.append(operand)
            elif token.is_word("as", "is"):
                keyword = self.advance()
                mark = None
                if keyword.text == "as" and self.cur.is_operator("?", "!") and self._left_bound(self.pos):
                    mark = self.advance()
                cast_type = self._parse_type()
                if cast_type is None:
                    raise self._failure("expected type after cast")
                elements.append(CastOperator(keyword=keyword, mark=mark))
                elements.append(TypeExpr(type=cast_type))
            else:
                break
        if len(elements) == 1:
            return first
        return InfixOperatorExpr(elements=tuple(elements))

    def _is_binary(self, index: int) -> bool:
        return self._left_bound(index) == self._right_bound(index)

    def _parse_prefixed(self) -> Node | None:
        token = self.cur
        if token.is_word("try"):
            try_keyword = self.advance()
            mark = None
            if self.cur.is_operator("?", "!") and self._left_bound(self.pos):
                mark = self.advance()
            return TryExpr(try_keyword=try_keyword, mark=mark, expression=self._require_expression())
        if token.is_word("await") and self._starts_operand(self.pos + 1):
            await_keyword = self.advance()
            return AwaitExpr(await_keyword=await_keyword, expression=self._require_expression())
        if token.kind is TokenKind.OPERATOR and token.text not in ("->", "=", "?"):
            following = self.peek()
            if following.is_eof or following.is_punct(")", ",", "]"):
                # operator passed as a function value, e.g. `reduce(0, +)`
                return IdentifierExpr(name=self.advance())
            operator = self.advance()
            operand = self._parse_prefixed()
            if operand is None:
                raise self._failure("expected operand")
            return PrefixOperatorExpr(operator=operator, operand=operand)
        return self._parse_postfix()

    def _starts_operand(self, index: int) -> bool:
        token = self._token_at(index)
        if token.is_eof or token.starts_line:
            return False
        return not token.is_punct(")", "]", "}", ",", ";", ":", ".") and not token.is_operator("=")

    def _parse_postfix(self) -> Node | None:
        expression = self._parse_primary()
        if expression is None:
            return None
        while True:
            token = self.cur
            index = self.pos
            if token.is_punct("."):
                name = self.peek()
                if name.kind not in (TokenKind.IDENTIFIER, TokenKind.INTEGER, TokenKind.FLOAT):
                    break
                dot = self.advance()
                expression = MemberAccessExpr(base=expression, dot=dot, name=self.advance())
            elif token.kind is TokenKind.OPERATOR and self._left_bound(index) and self._is_postfix_mark(index):
                expression = PostfixMarkExpr(base=expression, mark=self.advance())
            elif token.is_punct("(") and not token.starts_line:
                left_paren = self.advance()
                with self._trailing_closures(True):
                    arguments = self._parse_argument_list(")")
                right_paren = self.expect_punct(")")
                expression = FunctionCallExpr(
                    callee=expression, left_paren=left_paren, arguments=arguments, right_paren=right_paren
                )
            elif token.is_punct("[") and not token.starts_line:
                left_bracket = self.advance()
                with self._trailing_closures(True):
                    arguments = self._parse_argument_list("]")
                right_bracket = self.expect_punct("]")
                expression = SubscriptExpr(
                    base=expression, left_bracket=left_bracket, arguments=arguments, right_bracket=right_bracket
                )
            elif (
                token.is_punct("{")
                and not token.starts_line
                and self._allow_trailing_closure
                and not self._at_observer_block()
            ):
                expression = self._attach_trailing_closures(expression)
            elif (
                token.is_operator("<")
                and self._left_bound(index)
                and isinstance(expression, (IdentifierExpr, MemberAccessExpr))
            ):
                end = self._scan_angle_group(index, check_follower=True)
                if end is None:
                    break
                expression = GenericArgumentExpr(base=expression, arguments=self._collect_angle_group(end))
            else:
                break
        return expression

    def _is_postfix_mark(self, index: int) -> bool:
        text = self.tokens[index].text
        if text in ("?", "!"):
            return True
        return text == "..." and not self._right_bound(index)

    def _at_observer_block(self) -> bool:
        index = self.pos + 1
        while self._token_at(index).is_punct("@") and self._token_at(index + 1).is_identifier:
            index += 2
        token = self._token_at(index)
        return token.is_word("willSet", "didSet") and self._token_at(index + 1).is_punct("{", "(")

    def _attach_trailing_closures(self, expression: Node) -> FunctionCallExpr:
        closures = [TrailingClosure(closure=self._parse_closure())]
        while (
            self.cur.is_identifier
            and not self.cur.starts_line
            and self.peek().is_punct(":")
            and self.peek(2).is_punct("{")
        ):
            label = self.advance()
            colon = self.advance()
            closures.append(TrailingClosure(label=label, colon=colon, closure=self._parse_closure()))
        if isinstance(expression, FunctionCallExpr) and not expression.trailing_closures:
            return expression.with_changes(trailing_closures=tuple(closures))
        return FunctionCallExpr(callee=expression, trailing_closures=tuple(closures))

    def _parse_argument_list(self, closer: str) -> tuple[LabeledArgument, ...]:
        arguments: list[LabeledArgument] = []
        while not self.cur.is_punct(closer):
            if self.cur.is_eof:
                raise self._invalid(f"missing '{closer}'")
            label = None
            colon = None
            if self.cur.is_identifier and self.peek().is_punct(":"):
                label = self.advance()
                colon = self.advance()
            expression = self._parse_expression() if not self.cur.is_punct(",", closer) else None
            if not self.cur.is_punct(",", closer):
                expression = self._recover_element(expression, closer)
            comma = self.advance() if self.cur.is_punct(",") else None
            arguments.append(LabeledArgument(label=label, colon=colon, expression=expression, trailing_comma=comma))
            if comma is None:
                break
        return tuple(arguments)

    def _recover_element(self, parsed: Node | None, closer: str) -> Unstructured:
        items: list[Element] = [parsed] if parsed is not None else []
        while not self.cur.is_punct(",", closer):
            items.append(self._collect_raw_element())
        return Unstructured(items=tuple(items))

    def _parse_primary(self) -> Node | None:
        token = self.cur
        kind = token.kind
        if kind is TokenKind.IDENTIFIER:
            text = token.text
            if text in ("true", "false", "nil"):
                return LiteralExpr(token=self.advance())
            if text == "if":
                return self._parse_if()
            if text == "switch":
                return self._parse_switch()
            if text in ("any", "some") and self.peek().is_identifier and not self.peek().starts_line:
                return TypeExpr(type=self._parse_type())
            if text in STATEMENT_KEYWORDS:
                return None
            return IdentifierExpr(name=self.advance())
        if kind in (TokenKind.INTEGER, TokenKind.FLOAT):
            return LiteralExpr(token=self.advance())
        if kind is TokenKind.STRING:
            return StringLiteralExpr(token=self.advance())
        if kind is TokenKind.POUND:
            if token.text in DIRECTIVES:
                return None
            return MacroExpansionExpr(pound=self.advance())
        if token.is_punct("("):
            left_paren = self.advance()
            with self._trailing_closures(True):
                elements = self._parse_argument_list(")")
            right_paren = self.expect_punct(")")
            return TupleExpr(left_paren=left_paren, elements=elements, right_paren=right_paren)
        if token.is_punct("["):
            return self._parse_array()
        if token.is_punct("{"):
            return self._parse_closure()
        if token.is_punct("."):
            name = self.peek()
            if name.kind is not TokenKind.IDENTIFIER:
                return None
            dot = self.advance()
            return MemberAccessExpr(base=None, dot=dot, name=self.advance())
        if token.is_punct("\\"):
            return self._parse_key_path()
        return None

    def _parse_array(self) -> ArrayExpr:
        left_bracket = self.advance()
        elements: list[Element] = []
        with self._trailing_closures(True):
            if self.cur.is_punct(":") and self.peek().is_punct("]"):
                elements.append(self.advance())
            while not self.cur.is_punct("]"):
                if self.cur.is_eof:
                    raise self._invalid("missing ']'", left_bracket)
                key = self._parse_expression() if not self.cur.is_punct(",", "]", ":") else None
                if self.cur.is_punct(":"):
                    colon = self.advance()
                    value = self._parse_expression() if not self.cur.is_punct(",", "]") else None
                    if not self.cur.is_punct(",", "]"):
                        value = self._recover_element(value, "]")
                    comma = self.advance() if self.cur.is_punct(",") else None
                    elements.append(DictionaryElement(key=key, colon=colon, value=value, trailing_comma=comma))
                else:
                    if not self.cur.is_punct(",", "]"):
                        key = self._recover_element(key, "]")
                    comma = self.advance() if self.cur.is_punct(",") else None
                    elements.append(ArrayElement(expression=key, trailing_comma=comma))
                if comma is None:
                    break
        right_bracket = self.expect_punct("]")
        return ArrayExpr(left_bracket=left_bracket, elements=tuple(elements), right_bracket=right_bracket)

    def _parse_closure(self) -> ClosureExpr:
        left_brace = self.advance()
        signature = None
        in_index = self._scan_closure_signature()
        if in_index is not None:
            items: list[Element] = []
            while self.pos < in_index:
                items.append(self._collect_raw_element())
            signature = ClosureSignature(items=tuple(items), in_keyword=self.advance())
        with self._trailing_closures(True):
            statements = self._parse_statement_list()
        if not self.cur.is_punct("}"):
            raise self._failure("expected '}' to close closure")
        right_brace = self.advance()
        return ClosureExpr(left_brace=left_brace, signature=signature, statements=statements, right_brace=right_brace)

    def _scan_closure_signature(self) -> int | None:
        index = self.pos
        depth = 0
        while True:
            token = self._token_at(index)
            if token.is_eof:
                return None
            if token.kind is TokenKind.PUNCTUATION:
                if token.text in ("(", "["):
                    depth += 1
                elif token.text in (")", "]"):
                    depth -= 1
                    if depth < 0:
                        return None
                elif token.text in ("{", "}", ";"):
                    return None
            elif token.kind is TokenKind.IDENTIFIER:
                if depth == 0:
                    if token.text == "in":
                        return index if index > self.pos else None
                    if token.text in CLOSURE_SIGNATURE_STOPS:
                        return None
            elif token.kind is TokenKind.OPERATOR:
                if depth == 0 and token.text not in ("->", "?", "!", "<", ">", "...", "&"):
                    return None
            elif depth == 0:
                return None
            index += 1

    def _parse_key_path(self) -> KeyPathExpr:
        backslash = self.advance()
        components: list[Element] = []
        if self.cur.is_identifier and self._left_bound(self.pos):
            components.append(self.advance())
        while True:
            token = self.cur
            if token.is_punct(".") and not token.starts_line and self.peek().kind in (
                TokenKind.IDENTIFIER,
                TokenKind.INTEGER,
            ):
                components.append(self.advance())
                components.append(self.advance())
            elif token.is_operator("?", "!") and self._left_bound(self.pos):
                components.append(self.advance())
            elif token.is_punct("[") and self._left_bound(self.pos):
                components.append(self._collect_group())
            else:
                break
        return KeyPathExpr(backslash=backslash, components=tuple(components))


def parse_source(source: str) -> SourceFile:
    """Parse Swift source text into a :class:`SourceFile` tree.

    Raises:
        InvalidSyntaxError: if the text cannot be tokenized or has
            unbalanced brackets.
    """
    tokens = Lexer(source).tokenize()
    parser = Parser(tokens)
    try:
        return parser.parse_source_file()
    except ParseFailure as failure:
        raise InvalidSyntaxError(failure.reason, failure.line, failure.column) from failure
