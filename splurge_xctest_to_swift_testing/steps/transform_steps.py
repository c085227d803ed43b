"""Tree transformation steps for the migration pipeline."""

from ..context import PipelineContext
from ..pipeline import Step
from ..result import Result
from ..swift_syntax.nodes import SourceFile
from ..transformers import XCTestToSwiftTestingTransformer, reconcile_formatting


class RewriteXCTestStep(Step[SourceFile, SourceFile]):
    """Apply the XCTest to Swift Testing rewrite rules.

    Counts of migrated suites, tests and assertions are reported in the
    result metadata. Migrations that need a manual review (for example a
    throwing ``tearDownWithError`` turned into ``deinit``) produce a
    warning result.
    """

    def execute(self, context: PipelineContext, tree: SourceFile) -> Result[SourceFile]:
        transformer = XCTestToSwiftTestingTransformer()
        rewritten = transformer.transform(tree)
        metadata = {
            "suites": transformer.suites_migrated,
            "tests": transformer.tests_migrated,
            "assertions": transformer.assertions_rewritten,
        }
        self._logger.debug(
            f"Rewrote {metadata['suites']} suite(s), {metadata['tests']} test(s), "
            f"{metadata['assertions']} assertion(s)"
        )
        if transformer.warnings:
            return Result.warning(rewritten, transformer.warnings, metadata)
        return Result.success(rewritten, metadata)


class ReconcileFormattingStep(Step[SourceFile, SourceFile]):
    """Sort import runs and fix optional-subscript spacing."""

    def execute(self, context: PipelineContext, tree: SourceFile) -> Result[SourceFile]:
        return Result.success(reconcile_formatting(tree))
