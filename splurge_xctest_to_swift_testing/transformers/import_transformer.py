"""Import rewriting helpers.

``import XCTest`` becomes ``import Testing``. Attributes such as
``@testable``, access modifiers and all trivia stay where they were; the
ordering of the resulting imports is left to the formatting pass.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from ..swift_syntax.nodes import ImportDecl

LEGACY_MODULE = "XCTest"
MODERN_MODULE = "Testing"


def is_legacy_import(node: ImportDecl) -> bool:
    return node.kind_keyword is None and node.path_text == LEGACY_MODULE


def rewrite_legacy_import(node: ImportDecl) -> ImportDecl:
    """Return ``node`` importing ``Testing`` instead of ``XCTest``.

    Imports of any other module, and kind-qualified imports such as
    ``import class XCTest.XCTestCase``, are returned unchanged.
    """
    if not is_legacy_import(node):
        return node
    module = node.path[0]
    return node.with_changes(path=(module.with_text(MODERN_MODULE),))
