"""Tests for the programmatic ``migrate`` and ``migrate_source`` API."""

import pytest

from splurge_xctest_to_swift_testing.context import PipelineContext
from splurge_xctest_to_swift_testing.events import EventBus, StepStartedEvent
from splurge_xctest_to_swift_testing.exceptions import InvalidSyntaxError, UnsupportedPatternError
from splurge_xctest_to_swift_testing.main import create_migration_task, migrate, migrate_source

XCTEST_SOURCE = """import XCTest

class ExampleTests: XCTestCase {
    func test_example() {
        XCTAssertTrue(true)
    }
}
"""

EXPECTED = """import Testing

struct ExampleTests {
    @Test
    func example() {
        #expect(true == true)
    }
}
"""


def test_migrate_returns_migrated_text():
    assert migrate(XCTEST_SOURCE) == EXPECTED


def test_migrate_returns_non_xctest_text_unchanged():
    source = "import Foundation\n\nstruct Point { var x = 0 }\n"

    assert migrate(source) is source


def test_migrate_raises_for_invalid_syntax():
    with pytest.raises(InvalidSyntaxError):
        migrate('import XCTest\nlet s = "unterminated\n')


def test_migrate_raises_for_expectations():
    source = XCTEST_SOURCE.replace("XCTAssertTrue(true)", "waitForExpectations(timeout: 1)")

    with pytest.raises(UnsupportedPatternError):
        migrate(source)


class TestMigrateSource:
    """The non-raising variant."""

    def test_success_metadata(self):
        result = migrate_source(XCTEST_SOURCE)

        assert result.is_success()
        assert result.data == EXPECTED
        assert "skipped" not in result.metadata

    def test_skipped_file_is_success_with_marker(self):
        result = migrate_source("let x = 1\n")

        assert result.is_success()
        assert result.data == "let x = 1\n"
        assert result.metadata["skipped"] == "no XCTest usage found"

    def test_failure_names_the_failed_step(self):
        result = migrate_source(XCTEST_SOURCE.replace("XCTAssertTrue(true)", "let e = expectation(description: \"x\")"))

        assert result.is_error()
        assert isinstance(result.error, UnsupportedPatternError)
        assert result.metadata["failed_step"] == "validate"

    def test_syntax_failure_names_parse_step(self):
        result = migrate_source("import XCTest\nfunc f() {\n")

        assert result.is_error()
        assert result.metadata["failed_step"] == "parse"

    def test_throwing_teardown_gives_warning(self):
        source = (
            "import XCTest\n\nclass A: XCTestCase {\n"
            "    override func tearDownWithError() throws {\n        reset()\n    }\n}\n"
        )

        result = migrate_source(source)

        assert result.is_warning()
        assert "deinit {" in result.data
        assert result.warnings == ["tearDownWithError() was declared 'throws' but deinit cannot be; review its body"]

    def test_events_are_published_to_given_bus(self):
        bus = EventBus()
        steps = []
        bus.subscribe(StepStartedEvent, lambda event: steps.append(event.step_name))

        migrate_source(XCTEST_SOURCE, PipelineContext.create(source_file="ExampleTests.swift"), bus)

        assert steps == ["parse", "detect", "validate", "rewrite", "reconcile", "render"]


def test_migration_task_steps():
    task = create_migration_task(EventBus())

    assert [step.name for step in task.steps] == ["parse", "detect", "validate", "rewrite", "reconcile", "render"]
