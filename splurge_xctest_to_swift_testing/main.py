"""Programmatic API for splurge_xctest_to_swift_testing.

``migrate`` is the engine entry point: Swift source text in, migrated
Swift source text out, with no file I/O. ``migrate_source`` is the same
operation returning a ``Result`` instead of raising; the CLI and the
``MigrationOrchestrator`` build on it.

The pipeline is Parse -> Detect -> Validate -> Rewrite -> Reconcile ->
Render. A file without XCTest usage leaves the pipeline at detection and
is returned unchanged.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from .context import PipelineContext
from .events import EventBus
from .pipeline import Task
from .result import Result
from .steps import (
    DetectXCTestStep,
    ParseSourceStep,
    ReconcileFormattingStep,
    RenderSourceStep,
    RewriteXCTestStep,
    ValidateSupportedPatternsStep,
)

MIGRATION_TASK = "xctest_migration"


def create_migration_task(event_bus: EventBus) -> Task[str, str]:
    """Build the task that migrates one file's source text."""
    steps = [
        ParseSourceStep("parse", event_bus),
        DetectXCTestStep("detect", event_bus),
        ValidateSupportedPatternsStep("validate", event_bus),
        RewriteXCTestStep("rewrite", event_bus),
        ReconcileFormattingStep("reconcile", event_bus),
        RenderSourceStep("render", event_bus),
    ]
    return Task(MIGRATION_TASK, steps, event_bus)


def migrate_source(
    source: str, context: PipelineContext | None = None, event_bus: EventBus | None = None
) -> Result[str]:
    """Migrate Swift source text without raising.

    Args:
        source: Swift source text.
        context: Optional pipeline context (carries the source path for
            log messages).
        event_bus: Optional event bus that receives the pipeline events.

    Returns:
        A success ``Result`` with the migrated text (the input itself
        when it does not use XCTest, with ``metadata["skipped"]`` set), a
        warning ``Result`` when parts of the migration need a manual
        review, or a failure ``Result`` holding the ``MigrationError``.
    """
    if context is None:
        context = PipelineContext.create()
    task = create_migration_task(event_bus or EventBus())
    result = task.execute(context, source)
    if result.is_skipped():
        return Result.success(source, {"skipped": result.skip_reason})
    return result


def migrate(source: str) -> str:
    """Migrate Swift source text from XCTest to Swift Testing.

    Args:
        source: Swift source text.

    Returns:
        The migrated source text, or ``source`` unchanged when it does not
        use XCTest.

    Raises:
        InvalidSyntaxError: When the text cannot be parsed.
        UnsupportedPatternError: When the file uses XCTest expectations.
    """
    return migrate_source(source).unwrap()
