"""Parsing and rendering steps for the migration pipeline.

``ParseSourceStep`` turns Swift source text into the trivia-preserving
tree every later step works on; ``RenderSourceStep`` turns the final
tree back into text.
"""

from ..context import PipelineContext
from ..exceptions import InvalidSyntaxError
from ..pipeline import Step
from ..result import Result
from ..swift_syntax import parse_source
from ..swift_syntax.nodes import SourceFile


class ParseSourceStep(Step[str, SourceFile]):
    """Parse Swift source code into a :class:`SourceFile` tree."""

    def execute(self, context: PipelineContext, source_code: str) -> Result[SourceFile]:
        """Parse source code into a tree.

        Args:
            context: Pipeline execution context (unused by the parser but kept
                for API consistency).
            source_code: Raw Swift source text to parse.

        Returns:
            A success :class:`Result` containing the parsed tree or a
            failure result carrying the :class:`InvalidSyntaxError`.
        """
        try:
            tree = parse_source(source_code)
            return Result.success(tree, {"statements": len(tree.statements)})
        except InvalidSyntaxError as e:
            return Result.failure(e)


class RenderSourceStep(Step[SourceFile, str]):
    """Render a tree back into Swift source text.

    Rendering is a plain concatenation of tokens and trivia and cannot
    fail; the step exists for pipeline consistency.
    """

    def execute(self, context: PipelineContext, tree: SourceFile) -> Result[str]:
        return Result.success(tree.render())
