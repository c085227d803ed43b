"""Tree rewriter that migrates XCTest suites to Swift Testing.

The rewriter works on the immutable tree from :mod:`..swift_syntax` and
is applied once per file, after detection and validation succeeded:

- ``import XCTest`` becomes ``import Testing``;
- every ``XCTestCase`` subclass (and any extension of one declared in
  the same file) has its members migrated: test methods are tagged with
  ``@Test`` and renamed, ``setUp``/``tearDown`` become ``init()`` and
  ``deinit``;
- the suite header loses ``XCTestCase`` and becomes a ``struct`` unless
  it keeps state or needs ``deinit``;
- XCTest assertions anywhere in the file are rewritten through
  :mod:`.assertion_rules`.

Members that none of these rules touch are returned as the very same
node objects, so their text is byte-identical in the output.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging

from ..detectors.xctest_detector import LEGACY_BASE_TYPE
from ..swift_syntax import RESERVED_WORDS, SyntaxRewriter, SyntaxVisitor, Token, Trivia
from ..swift_syntax.nodes import (
    Attribute,
    CodeBlock,
    CodeBlockItem,
    DeinitializerDecl,
    Element,
    FunctionCallExpr,
    FunctionDecl,
    FunctionSignature,
    ImportDecl,
    InheritanceClause,
    InitializerDecl,
    MemberBlock,
    Modifier,
    Node,
    SourceFile,
    TypeDecl,
)
from .assertion_rules import rewrite_assertion
from .import_transformer import rewrite_legacy_import
from .scope_classifier import (
    Representation,
    ScopeAnalysis,
    analyze_scope,
    is_setup_method,
    is_teardown_method,
    is_test_method,
)
from .validation import uses_expectation_primitives

logger = logging.getLogger(__name__)

TEST_ATTRIBUTE = "Test"
TEST_NAME_SEPARATOR_PREFIX = "test_"
TEST_NAME_PREFIX = "test"
TEST_DROPPED_MODIFIERS = frozenset({"override"})
VALUE_DROPPED_MODIFIERS = frozenset({"final"})
SETUP_FORWARDING = "super.setUp"
TEARDOWN_FORWARDING = "super.tearDown"


def is_test_suite(node: TypeDecl) -> bool:
    """A ``class`` declaration that names ``XCTestCase`` in its inheritance list."""
    return (
        not node.is_extension
        and node.keyword is not None
        and node.keyword.text == "class"
        and node.inherits(LEGACY_BASE_TYPE)
    )


class _SuiteNameCollector(SyntaxVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.names: set[str] = set()

    def visit_TypeDecl(self, node: TypeDecl) -> None:
        if is_test_suite(node):
            self.names.add(node.name_text)


def migrated_test_name(name: str) -> str:
    """Swift Testing name for the XCTest method ``name``.

    ``test_fooBar`` becomes ``fooBar`` and ``testFooBar`` becomes
    ``fooBar``. When nothing usable is left the original name is kept; a
    result that is a Swift keyword is escaped with backticks.
    """
    if name.startswith(TEST_NAME_SEPARATOR_PREFIX):
        candidate = name[len(TEST_NAME_SEPARATOR_PREFIX) :]
    else:
        remainder = name[len(TEST_NAME_PREFIX) :]
        candidate = remainder[:1].lower() + remainder[1:]
    if not candidate or not candidate.isidentifier():
        return name
    if candidate in RESERVED_WORDS:
        return f"`{candidate}`"
    return candidate


def drop_modifiers(
    modifiers: tuple[Modifier, ...], names: frozenset[str], following: Token
) -> tuple[tuple[Modifier, ...], Token]:
    """Remove the modifiers in ``names``.

    The leading trivia of a removed modifier is moved onto whatever
    comes next (the next kept modifier or ``following``), so line breaks
    and comments in front of it survive.
    """
    kept: list[Modifier] = []
    carried = Trivia()
    for modifier in modifiers:
        if modifier.name is not None and modifier.name.text in names:
            carried = carried + modifier.leading_trivia
            continue
        if carried:
            modifier = modifier.with_leading_trivia(carried + modifier.leading_trivia)
            carried = Trivia()
        kept.append(modifier)
    if carried:
        following = following.with_leading(carried + following.leading)
    return tuple(kept), following


def strip_forwarding_calls(body: CodeBlock | None, pattern: str) -> CodeBlock | None:
    """Remove the top-level statements of ``body`` whose text contains ``pattern``.

    A removed statement's leading comments move to the next surviving
    statement (or to the closing brace), and that statement takes over
    the removed statement's line spacing.
    """
    if body is None:
        return None
    kept: list[CodeBlockItem] = []
    carried: Trivia | None = None
    line_breaks = 0
    for statement in body.statements:
        if pattern in statement.trimmed():
            leading = statement.leading_trivia
            if carried is None:
                carried = Trivia()
                line_breaks = leading.newline_count_before_content
            carried = carried + leading.through_last_comment()
            continue
        if carried is not None:
            if carried:
                merged = carried + statement.leading_trivia
            elif line_breaks:
                merged = statement.leading_trivia.with_leading_newlines(line_breaks)
            else:
                merged = statement.leading_trivia
            statement = statement.with_leading_trivia(merged)
            carried = None
        kept.append(statement)
    changes: dict[str, object] = {"statements": tuple(kept)}
    if carried and body.right_brace is not None:
        changes["right_brace"] = body.right_brace.with_leading(carried + body.right_brace.leading)
    return body.with_changes(**changes)


def _without_base_type(clause: InheritanceClause) -> InheritanceClause | None:
    """``clause`` without ``XCTestCase``; ``None`` when nothing else is inherited."""
    entries = clause.inherited_types
    kept = [entry for entry in entries if entry.type is None or entry.type.trimmed() != LEGACY_BASE_TYPE]
    if len(kept) == len(entries):
        return clause
    if not kept:
        return None
    if kept[-1] is not entries[-1]:
        last = kept[-1].with_changes(trailing_comma=None)
        kept[-1] = last.with_trailing_trivia(clause.trailing_trivia)
    return clause.with_changes(inherited_types=tuple(kept))


class XCTestToSwiftTestingTransformer(SyntaxRewriter):
    """Rewrite one parsed Swift file from XCTest to Swift Testing.

    Use :meth:`transform`; it collects the names of the file's
    ``XCTestCase`` subclasses before rewriting so extensions of those
    classes are recognised wherever they appear. ``warnings`` collects
    migrations the user should review by hand.
    """

    def __init__(self) -> None:
        self.suite_names: set[str] = set()
        self.suites_migrated = 0
        self.tests_migrated = 0
        self.assertions_rewritten = 0
        self.warnings: list[str] = []

    def transform(self, tree: SourceFile) -> SourceFile:
        collector = _SuiteNameCollector()
        collector.walk(tree)
        self.suite_names = collector.names
        return self.rewrite(tree)

    def _is_migrated(self, node: TypeDecl) -> bool:
        if is_test_suite(node):
            return True
        return node.is_extension and node.name_text in self.suite_names

    # Hooks ------------------------------------------------------------

    def leave_ImportDecl(self, original_node: ImportDecl, updated_node: ImportDecl) -> ImportDecl:
        return rewrite_legacy_import(updated_node)

    def leave_FunctionCallExpr(self, original_node: FunctionCallExpr, updated_node: FunctionCallExpr) -> Node:
        replacement = rewrite_assertion(updated_node)
        if replacement is None:
            return updated_node
        self.assertions_rewritten += 1
        return replacement

    def visit_TypeDecl(self, node: TypeDecl) -> bool:
        # migrated declarations rewrite their members in leave_TypeDecl
        return not self._is_migrated(node)

    def leave_TypeDecl(self, original_node: TypeDecl, updated_node: TypeDecl) -> TypeDecl:
        if not self._is_migrated(original_node):
            return updated_node
        analysis = analyze_scope(original_node.members)
        result = original_node.with_changes(members=self._rewrite_members(original_node.members, analysis))
        if not original_node.is_extension:
            result = self._rewrite_header(result, analysis)
            self.suites_migrated += 1
            logger.debug(
                f"Migrated suite {original_node.name_text} as {analysis.representation.value} "
                f"({analysis.test_method_count} tests)"
            )
        return result

    # Members ----------------------------------------------------------

    def _rewrite_members(self, block: MemberBlock | None, analysis: ScopeAnalysis) -> MemberBlock | None:
        if block is None:
            return None
        members: list[CodeBlockItem] = []
        ordinal = 0
        for entry in block.members:
            member = entry.item
            if is_test_method(member):
                ordinal += 1
                members.append(entry.with_changes(item=self._convert_test_method(member, analysis, ordinal)))
            elif is_setup_method(member):
                members.append(entry.with_changes(item=self._convert_setup(member)))
            elif is_teardown_method(member):
                members.append(entry.with_changes(item=self._convert_teardown(member)))
            else:
                members.append(self.rewrite(entry))
        return block.with_changes(members=tuple(members))

    def _convert_test_method(self, original: FunctionDecl, analysis: ScopeAnalysis, ordinal: int) -> FunctionDecl:
        node = self.rewrite(original)
        modifiers, func_keyword = drop_modifiers(node.modifiers, TEST_DROPPED_MODIFIERS, node.func_keyword)
        node = node.with_changes(
            modifiers=modifiers,
            func_keyword=func_keyword,
            name=node.name.with_text(migrated_test_name(node.name.text)),
        )
        if uses_expectation_primitives(original):
            node = node.with_changes(signature=_with_async(node.signature))
        self.tests_migrated += 1
        if any(attribute.name is not None and attribute.name.text == TEST_ATTRIBUTE for attribute in node.attributes):
            return node

        line_breaks = 2 if analysis.needs_blank_line_before_test(ordinal) else 1
        leading = node.leading_trivia.with_leading_newlines(line_breaks)
        if leading.has_newline:
            separator = Trivia.newlines(1, leading.newline_text) + _indentation(leading)
        else:
            separator = Trivia.spaces(1)
        attribute = Attribute(at_sign=Token.make("@").with_leading(leading), name=Token.make(TEST_ATTRIBUTE))
        node = node.with_leading_trivia(separator)
        return node.with_changes(attributes=(attribute,) + node.attributes)

    def _convert_setup(self, original: FunctionDecl) -> InitializerDecl:
        node = self.rewrite(original)
        signature = node.signature or FunctionSignature()
        parameters = signature.parameters.with_changes(parameters=None) if signature.parameters else None
        effects = signature.effects
        if signature.return_clause is not None:
            # keep the spacing in front of the body
            gap = signature.return_clause.trailing_trivia
            if effects:
                effects = effects[:-1] + (_with_trailing(effects[-1], gap),)
            elif parameters is not None:
                parameters = parameters.with_trailing_trivia(gap)
        init_keyword = Token.make("init").with_trailing(node.name.trailing)
        if node.attributes:
            init_keyword = init_keyword.with_leading(_token_after_attributes(node).leading)
        initializer = InitializerDecl(
            attributes=node.attributes,
            init_keyword=init_keyword,
            signature=FunctionSignature(parameters=parameters, effects=effects),
            body=strip_forwarding_calls(node.body, SETUP_FORWARDING),
        )
        return initializer.with_leading_trivia(node.leading_trivia.with_leading_newlines(2))

    def _convert_teardown(self, original: FunctionDecl) -> DeinitializerDecl:
        node = self.rewrite(original)
        if node.signature is not None and node.signature.effects:
            effects = " ".join(_element_text(effect) for effect in node.signature.effects)
            self.warnings.append(f"{node.name_text}() was declared '{effects}' but deinit cannot be; review its body")
        header_end = node.with_changes(body=None).last_token()
        deinit_keyword = Token.make("deinit").with_trailing(header_end.trailing if header_end else Trivia.spaces(1))
        if node.attributes:
            deinit_keyword = deinit_keyword.with_leading(_token_after_attributes(node).leading)
        deinitializer = DeinitializerDecl(
            attributes=node.attributes,
            deinit_keyword=deinit_keyword,
            body=strip_forwarding_calls(node.body, TEARDOWN_FORWARDING),
        )
        return deinitializer.with_leading_trivia(node.leading_trivia.with_leading_newlines(2))

    # Header -----------------------------------------------------------

    def _rewrite_header(self, node: TypeDecl, analysis: ScopeAnalysis) -> TypeDecl:
        changes: dict[str, object] = {}
        if node.inheritance is not None:
            inheritance = _without_base_type(node.inheritance)
            changes["inheritance"] = inheritance
            if inheritance is None:
                gap = node.inheritance.trailing_trivia
                if node.generic_parameters is not None:
                    changes["generic_parameters"] = node.generic_parameters.with_trailing_trivia(gap)
                elif isinstance(node.name, Token):
                    changes["name"] = node.name.with_trailing(gap)
                elif node.name is not None:
                    changes["name"] = node.name.with_trailing_trivia(gap)
        if analysis.representation is Representation.VALUE and node.keyword is not None:
            modifiers, keyword = drop_modifiers(node.modifiers, VALUE_DROPPED_MODIFIERS, node.keyword)
            changes["modifiers"] = modifiers
            changes["keyword"] = keyword.with_text(Representation.VALUE.value)
        return node.with_changes(**changes)


def _element_text(element: Element) -> str:
    return element.text if isinstance(element, Token) else element.trimmed()


def _with_trailing(element: Element, trivia: Trivia) -> Element:
    if isinstance(element, Token):
        return element.with_trailing(trivia)
    return element.with_trailing_trivia(trivia)


def _indentation(trivia: Trivia) -> Trivia:
    indentation = trivia.indentation
    return Trivia.from_text(indentation) if indentation else Trivia()


def _token_after_attributes(node: FunctionDecl) -> Token:
    if node.modifiers:
        return node.modifiers[0].first_token()
    return node.func_keyword


def _with_async(signature: FunctionSignature | None) -> FunctionSignature | None:
    if signature is None or signature.has_effect("async"):
        return signature
    before = signature.parameters.last_token() if signature.parameters is not None else None
    if before is not None and before.trailing:
        token = Token.make("async", trailing=" ")
    else:
        token = Token.make("async", leading=" ")
    return signature.with_changes(effects=(token,) + signature.effects)


def transform_xctest(tree: SourceFile) -> SourceFile:
    """Run :class:`XCTestToSwiftTestingTransformer` over ``tree``."""
    return XCTestToSwiftTestingTransformer().transform(tree)
