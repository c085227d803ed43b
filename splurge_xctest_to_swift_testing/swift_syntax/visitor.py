"""Visitor and rewriter base classes for the Swift syntax tree.

Dispatch is by node class name, in the style of ``libcst``: a subclass
defines ``visit_<NodeClass>(node)`` (return ``False`` to skip the
node's children) and ``leave_<NodeClass>(...)``. Node classes without a
handler fall through to the default arm, which walks or rebuilds the
children and otherwise leaves the node unchanged.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from dataclasses import fields, replace
from typing import Any

from .nodes import Node


class SyntaxVisitor:
    """Read-only depth-first walk.

    Set ``self.stop_walk = True`` from any hook to end the walk early.
    """

    def __init__(self) -> None:
        self.stop_walk = False

    def walk(self, node: Node) -> None:
        if self.stop_walk:
            return
        name = type(node).__name__
        visit = getattr(self, f"visit_{name}", None)
        descend = True
        if visit is not None:
            descend = visit(node) is not False
        if descend:
            for child in node.children():
                if isinstance(child, Node):
                    self.walk(child)
                    if self.stop_walk:
                        return
        leave = getattr(self, f"leave_{name}", None)
        if leave is not None and not self.stop_walk:
            leave(node)


class SyntaxRewriter:
    """Bottom-up tree rebuild.

    ``leave_<NodeClass>(original_node, updated_node)`` receives the node
    before and after its children were rewritten and returns the
    replacement. Inside tuple slots a hook may return ``None`` to remove
    the node. A node whose children all come back unchanged is returned
    as the very same object.
    """

    def rewrite(self, node: Node) -> Any:
        name = type(node).__name__
        visit = getattr(self, f"visit_{name}", None)
        descend = True
        if visit is not None:
            descend = visit(node) is not False
        updated = self._rewrite_children(node) if descend else node
        leave = getattr(self, f"leave_{name}", None)
        if leave is not None:
            return leave(node, updated)
        return updated

    def _rewrite_children(self, node: Node) -> Node:
        changes: dict[str, Any] = {}
        for slot in fields(node):
            value = getattr(node, slot.name)
            if isinstance(value, Node):
                rewritten = self.rewrite(value)
                if rewritten is not value:
                    changes[slot.name] = rewritten
            elif isinstance(value, tuple):
                items: list[Any] = []
                changed = False
                for item in value:
                    if isinstance(item, Node):
                        rewritten = self.rewrite(item)
                        if rewritten is not item:
                            changed = True
                        if rewritten is not None:
                            items.append(rewritten)
                    else:
                        items.append(item)
                if changed:
                    changes[slot.name] = tuple(items)
        if not changes:
            return node
        return replace(node, **changes)
