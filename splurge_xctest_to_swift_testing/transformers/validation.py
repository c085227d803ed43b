"""Validation pass: reject files that use constructs the engine will not migrate.

XCTest's asynchronous expectations (``expectation(description:)`` and
``waitForExpectations(timeout:)``) have no mechanical Swift Testing
equivalent, so a file that calls either is refused as a whole rather
than half-migrated.
"""

from __future__ import annotations

import logging

from ..exceptions import UnsupportedPatternError
from ..swift_syntax import SyntaxVisitor
from ..swift_syntax.nodes import FunctionCallExpr, IdentifierExpr, MemberAccessExpr, Node

logger = logging.getLogger(__name__)

EXPECTATION_PRIMITIVES = frozenset({"expectation", "waitForExpectations"})
EXPECTATIONS_PATTERN = "XCTest expectations (expectation/waitForExpectations) are not supported"


def expectation_primitive_name(call: FunctionCallExpr) -> str | None:
    """Name of the expectation primitive ``call`` invokes, if any.

    Matches ``expectation(...)`` and ``self.expectation(...)`` (and the
    same for ``waitForExpectations``).
    """
    callee = call.callee
    if isinstance(callee, IdentifierExpr) and callee.name is not None:
        name = callee.name.text
    elif (
        isinstance(callee, MemberAccessExpr)
        and isinstance(callee.base, IdentifierExpr)
        and callee.base.name is not None
        and callee.base.name.text == "self"
        and callee.name is not None
    ):
        name = callee.name.text
    else:
        return None
    return name if name in EXPECTATION_PRIMITIVES else None


class ExpectationCallFinder(SyntaxVisitor):
    """Collect the positions of every expectation primitive call."""

    def __init__(self, stop_at_first: bool = False) -> None:
        super().__init__()
        self.stop_at_first = stop_at_first
        self.locations: list[tuple[int, int]] = []

    def visit_FunctionCallExpr(self, node: FunctionCallExpr) -> None:
        if expectation_primitive_name(node) is None:
            return
        token = node.first_token()
        position = token.position if token is not None else None
        self.locations.append(position or (0, 0))
        if self.stop_at_first:
            self.stop_walk = True


def uses_expectation_primitives(node: Node) -> bool:
    finder = ExpectationCallFinder(stop_at_first=True)
    finder.walk(node)
    return bool(finder.locations)


def validate_supported_patterns(tree: Node) -> None:
    """Raise if ``tree`` uses an unsupported construct.

    Raises:
        UnsupportedPatternError: When any expectation primitive is called;
            ``details["locations"]`` lists each ``(line, column)``.
    """
    finder = ExpectationCallFinder()
    finder.walk(tree)
    if finder.locations:
        logger.debug(f"Found {len(finder.locations)} expectation call(s) at {finder.locations}")
        raise UnsupportedPatternError(EXPECTATIONS_PATTERN, finder.locations)
