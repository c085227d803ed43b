"""Per-declaration scope analysis.

``analyze_scope`` looks at the direct members of one type declaration
and records what the rewrite needs to know: how many test methods there
are, which lifecycle methods exist, and whether the type holds state.
The record is computed once and passed explicitly to the member rewrite.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..swift_syntax.nodes import FunctionDecl, MemberBlock, Node, VariableDecl

TEST_PREFIX = "test"
EXCLUDED_TEST_PREFIX = "testable"
SETUP_NAMES = frozenset({"setUp", "setUpWithError"})
TEARDOWN_NAMES = frozenset({"tearDown", "tearDownWithError"})


class Representation(Enum):
    """Type keyword a migrated test suite is emitted with."""

    VALUE = "struct"
    REFERENCE = "class"


def is_test_method(node: Node) -> bool:
    """Instance method whose name starts with ``test`` but not ``testable``."""
    if not isinstance(node, FunctionDecl) or node.is_static:
        return False
    name = node.name_text
    return name.startswith(TEST_PREFIX) and not name.startswith(EXCLUDED_TEST_PREFIX)


def is_setup_method(node: Node) -> bool:
    return isinstance(node, FunctionDecl) and not node.is_static and node.name_text in SETUP_NAMES


def is_teardown_method(node: Node) -> bool:
    return isinstance(node, FunctionDecl) and not node.is_static and node.name_text in TEARDOWN_NAMES


@dataclass(frozen=True)
class ScopeAnalysis:
    """What one declaration's members look like."""

    test_method_count: int = 0
    has_setup: bool = False
    has_teardown: bool = False
    has_stored_properties: bool = False
    has_computed_properties: bool = False
    has_helper_functions: bool = False

    @property
    def representation(self) -> Representation:
        # deinit and stored state both require a reference type
        if self.has_teardown or self.has_stored_properties:
            return Representation.REFERENCE
        return Representation.VALUE

    @property
    def has_special_members(self) -> bool:
        return self.has_setup or self.has_teardown or self.has_computed_properties or self.has_helper_functions

    def needs_blank_line_before_test(self, ordinal: int) -> bool:
        """Whether the ``ordinal``-th (1-based) test method gets a blank line before it."""
        return self.has_special_members or (self.test_method_count > 1 and ordinal > 1)


def analyze_scope(members: MemberBlock | None) -> ScopeAnalysis:
    """Classify the direct members of a declaration body."""
    test_count = 0
    has_setup = has_teardown = has_stored = has_computed = has_helpers = False
    if members is not None:
        for entry in members.members:
            member = entry.item
            if member is None:
                continue
            if is_test_method(member):
                test_count += 1
            elif is_setup_method(member):
                has_setup = True
            elif is_teardown_method(member):
                has_teardown = True
            elif isinstance(member, FunctionDecl):
                has_helpers = True
            elif isinstance(member, VariableDecl):
                for binding in member.bindings:
                    if binding.is_stored:
                        has_stored = True
                    elif binding.is_computed:
                        has_computed = True
    return ScopeAnalysis(
        test_method_count=test_count,
        has_setup=has_setup,
        has_teardown=has_teardown,
        has_stored_properties=has_stored,
        has_computed_properties=has_computed,
        has_helper_functions=has_helpers,
    )
