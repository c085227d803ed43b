"""Formatting reconciliation applied after the structural rewrite.

Two passes:

1. ``sort_imports`` sorts each contiguous run of top-level imports by
   module path. A blank line before an import starts a new run, so
   deliberately separated groups stay separate.
2. ``fix_optional_subscripts`` removes stray spacing between an
   optional-chaining ``?`` and a following ``[``.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import locale
import logging

from ..swift_syntax import SyntaxRewriter, Trivia
from ..swift_syntax.nodes import CodeBlockItem, ImportDecl, PostfixMarkExpr, SourceFile, SubscriptExpr

logger = logging.getLogger(__name__)


def import_sort_key(node: ImportDecl) -> tuple[str, str]:
    """Locale-aware, case-insensitive ordering key with the raw path as tie breaker."""
    path = node.path_text
    return locale.strxfrm(path.casefold()), path


def _is_import(item: CodeBlockItem) -> bool:
    return isinstance(item.item, ImportDecl)


def _import_runs(statements: tuple[CodeBlockItem, ...]) -> list[list[CodeBlockItem] | CodeBlockItem]:
    """Group ``statements`` into import runs (lists) and single other statements."""
    groups: list[list[CodeBlockItem] | CodeBlockItem] = []
    run: list[CodeBlockItem] = []
    for item in statements:
        if not _is_import(item):
            if run:
                groups.append(run)
                run = []
            groups.append(item)
            continue
        if run and item.leading_trivia.has_blank_line:
            groups.append(run)
            run = []
        run.append(item)
    if run:
        groups.append(run)
    return groups


def _sort_run(run: list[CodeBlockItem], newline: str) -> list[CodeBlockItem]:
    ordered = sorted(run, key=lambda item: import_sort_key(item.item))
    if [id(item) for item in ordered] == [id(item) for item in run]:
        return run
    first = run[0]
    group_leading = first.leading_trivia
    result: list[CodeBlockItem] = []
    for index, item in enumerate(ordered):
        # comments attached to an import travel with it
        own = Trivia() if item is first else item.leading_trivia.without_leading_newlines()
        if index == 0:
            leading = group_leading + own
        else:
            leading = Trivia.newlines(1, newline) + own
        result.append(item.with_leading_trivia(leading))
    return result


def sort_imports(tree: SourceFile) -> SourceFile:
    """Sort each run of top-level imports in ``tree``."""
    newline = "\r\n" if "\r\n" in tree.render() else "\n"
    statements: list[CodeBlockItem] = []
    changed = False
    for group in _import_runs(tree.statements):
        if isinstance(group, CodeBlockItem):
            statements.append(group)
            continue
        sorted_run = _sort_run(group, newline)
        changed = changed or sorted_run is not group
        statements.extend(sorted_run)
    if not changed:
        return tree
    logger.debug("Reordered top-level imports")
    return tree.with_changes(statements=tuple(statements))


class OptionalSubscriptSpacingFixer(SyntaxRewriter):
    """Clear trivia between an optional-chaining ``?`` and ``[``."""

    def leave_SubscriptExpr(self, original_node: SubscriptExpr, updated_node: SubscriptExpr) -> SubscriptExpr:
        base = updated_node.base
        if not isinstance(base, PostfixMarkExpr) or not base.is_optional_chain:
            return updated_node
        bracket = updated_node.left_bracket
        if not base.trailing_trivia and (bracket is None or not bracket.leading):
            return updated_node
        return updated_node.with_changes(
            base=base.with_trailing_trivia(Trivia()),
            left_bracket=bracket.with_leading(Trivia()) if bracket is not None else None,
        )


def fix_optional_subscripts(tree: SourceFile) -> SourceFile:
    return OptionalSubscriptSpacingFixer().rewrite(tree)


def reconcile_formatting(tree: SourceFile) -> SourceFile:
    """Run both formatting passes over a rewritten tree."""
    return fix_optional_subscripts(sort_imports(tree))
