"""Property-based tests for the lossless Swift syntax tree.

This module checks that parsing and rendering reproduce any generated
source byte for byte, and that the trivia attribution rule holds for
every token.
"""

from hypothesis import given

from splurge_xctest_to_swift_testing.context import PipelineContext
from splurge_xctest_to_swift_testing.events import EventBus
from splurge_xctest_to_swift_testing.steps.parse_steps import ParseSourceStep, RenderSourceStep
from splurge_xctest_to_swift_testing.swift_syntax import parse_source, tokenize
from tests.hypothesis_config import DEFAULT_SETTINGS
from tests.property.strategies import swift_sources, xctest_sources


class TestParsingProperties:
    """Property-based tests for parsing and rendering."""

    @DEFAULT_SETTINGS
    @given(source=swift_sources())
    def test_render_reproduces_source(self, source: str) -> None:
        """Rendering a parsed tree gives back the exact input text."""
        assert parse_source(source).render() == source

    @DEFAULT_SETTINGS
    @given(source=xctest_sources())
    def test_render_reproduces_xctest_source(self, source: str) -> None:
        assert parse_source(source).render() == source

    @DEFAULT_SETTINGS
    @given(source=swift_sources())
    def test_token_concatenation_is_lossless(self, source: str) -> None:
        """The lexer alone is lossless too."""
        assert "".join(token.render() for token in tokenize(source)) == source

    @DEFAULT_SETTINGS
    @given(source=swift_sources())
    def test_trailing_trivia_never_contains_line_break(self, source: str) -> None:
        for token in tokenize(source):
            assert not token.trailing.has_newline

    @DEFAULT_SETTINGS
    @given(source=swift_sources())
    def test_parse_and_render_steps_round_trip(self, source: str) -> None:
        event_bus = EventBus()
        context = PipelineContext.create()

        parsed = ParseSourceStep("parse", event_bus).execute(context, source)
        assert parsed.is_success()
        rendered = RenderSourceStep("render", event_bus).execute(context, parsed.data)

        assert rendered.is_success()
        assert rendered.data == source
