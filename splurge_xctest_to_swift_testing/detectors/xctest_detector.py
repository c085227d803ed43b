"""Tree-based XCTest file detection.

A file needs migration when it imports ``XCTest``, declares a type that
inherits from ``XCTestCase``, or calls an ``XCTAssert*``, ``XCTFail`` or
``XCTUnwrap`` function. The walk stops at the first indicator.
"""

from __future__ import annotations

from ..swift_syntax import SyntaxVisitor
from ..swift_syntax.nodes import FunctionCallExpr, ImportDecl, Node, TypeDecl

LEGACY_MODULE = "XCTest"
LEGACY_BASE_TYPE = "XCTestCase"
ASSERTION_PREFIXES = ("XCTAssert", "XCTFail", "XCTUnwrap")


class XCTestDetector(SyntaxVisitor):
    """Visitor that answers "does this tree use XCTest?".

    ``reason`` names the first indicator found, for log messages.
    """

    def __init__(self) -> None:
        super().__init__()
        self.reason: str | None = None

    def detect(self, tree: Node) -> bool:
        """Return True if ``tree`` contains any XCTest indicator."""
        self.stop_walk = False
        self.reason = None
        self.walk(tree)
        return self.reason is not None

    def _found(self, reason: str) -> None:
        self.reason = reason
        self.stop_walk = True

    def visit_ImportDecl(self, node: ImportDecl) -> bool:
        if node.path_text == LEGACY_MODULE:
            self._found(f"import {LEGACY_MODULE}")
        return False

    def visit_TypeDecl(self, node: TypeDecl) -> None:
        if node.inherits(LEGACY_BASE_TYPE):
            self._found(f"{node.name_text} inherits {LEGACY_BASE_TYPE}")

    def visit_FunctionCallExpr(self, node: FunctionCallExpr) -> None:
        if node.callee is None:
            return
        callee = node.callee.trimmed()
        if callee.startswith(ASSERTION_PREFIXES):
            self._found(f"call to {callee}")


def contains_xctest(tree: Node) -> bool:
    """Convenience wrapper around :class:`XCTestDetector`."""
    return XCTestDetector().detect(tree)
