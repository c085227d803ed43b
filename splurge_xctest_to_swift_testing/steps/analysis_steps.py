"""Read-only analysis steps: detection and validation.

Neither step changes the tree. Detection ends the pipeline early with a
skipped result for files that do not use XCTest; validation fails the
pipeline for files that use constructs the engine refuses to migrate.
"""

from ..context import PipelineContext
from ..detectors import XCTestDetector
from ..exceptions import UnsupportedPatternError
from ..pipeline import Step
from ..result import Result
from ..swift_syntax.nodes import SourceFile
from ..transformers.validation import validate_supported_patterns

NOT_XCTEST_REASON = "no XCTest usage found"


class DetectXCTestStep(Step[SourceFile, SourceFile]):
    """Pass the tree through when it uses XCTest, otherwise skip the rest of the task."""

    def execute(self, context: PipelineContext, tree: SourceFile) -> Result[SourceFile]:
        detector = XCTestDetector()
        if not detector.detect(tree):
            return Result.skipped(NOT_XCTEST_REASON)
        self._logger.debug(f"XCTest usage detected: {detector.reason}")
        return Result.success(tree, {"detected": detector.reason})


class ValidateSupportedPatternsStep(Step[SourceFile, SourceFile]):
    """Reject files that call ``expectation`` or ``waitForExpectations``."""

    def execute(self, context: PipelineContext, tree: SourceFile) -> Result[SourceFile]:
        try:
            validate_supported_patterns(tree)
        except UnsupportedPatternError as e:
            return Result.failure(e, {"locations": e.details.get("locations", [])})
        return Result.success(tree)
