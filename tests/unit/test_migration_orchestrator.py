"""Tests for MigrationOrchestrator file and folder runs."""

import time

import pytest

from splurge_xctest_to_swift_testing.context import MigrationConfig
from splurge_xctest_to_swift_testing.events import EventBus, FileProcessedEvent
from splurge_xctest_to_swift_testing.exceptions import ConfigurationError, FileReadError, UnsupportedPatternError
from splurge_xctest_to_swift_testing.helpers.path_utils import read_source
from splurge_xctest_to_swift_testing.migration_orchestrator import (
    BatchSummary,
    FileOutcome,
    MigrationOrchestrator,
    MigrationStatus,
)

XCTEST_SOURCE = """import XCTest

class ExampleTests: XCTestCase {
    func test_example() {
        XCTAssertTrue(true)
    }
}
"""

MIGRATED_SOURCE = """import Testing

struct ExampleTests {
    @Test
    func example() {
        #expect(true == true)
    }
}
"""

EXPECTATION_SOURCE = """import XCTest

class AsyncTests: XCTestCase {
    func testLoad() {
        let done = expectation(description: "load")
        waitForExpectations(timeout: 1)
    }
}
"""


@pytest.fixture
def orchestrator():
    return MigrationOrchestrator(EventBus())


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


class TestMigrateFile:
    def test_converts_in_place(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        result = orchestrator.migrate_file(str(path))

        assert result.is_success()
        outcome = result.data
        assert outcome.status is MigrationStatus.CONVERTED
        assert outcome.output_path == str(path)
        assert outcome.backup_path is None
        assert path.read_text() == MIGRATED_SOURCE
        assert not (tmp_path / "ExampleTests.swift.backup").exists()

    def test_already_migrated_file_is_not_rewritten(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", MIGRATED_SOURCE)
        before = path.stat().st_mtime_ns

        result = orchestrator.migrate_file(str(path))

        assert result.data.status is MigrationStatus.ALREADY_MIGRATED
        assert path.stat().st_mtime_ns == before

    def test_non_xctest_file_counts_as_already_migrated(self, orchestrator, tmp_path):
        path = _write(tmp_path / "Model.swift", "struct Model {}\n")

        assert orchestrator.migrate_file(str(path)).data.status is MigrationStatus.ALREADY_MIGRATED

    def test_unsupported_file_is_left_alone(self, orchestrator, tmp_path):
        path = _write(tmp_path / "AsyncTests.swift", EXPECTATION_SOURCE)

        result = orchestrator.migrate_file(str(path))

        assert result.is_error()
        assert isinstance(result.error, UnsupportedPatternError)
        outcome = result.metadata["outcome"]
        assert outcome.status is MigrationStatus.UNSUPPORTED
        assert "expectations" in outcome.message
        assert path.read_text() == EXPECTATION_SOURCE

    def test_invalid_syntax_is_unsupported(self, orchestrator, tmp_path):
        path = _write(tmp_path / "Broken.swift", "import XCTest\nclass A: XCTestCase {\n")

        result = orchestrator.migrate_file(str(path))

        assert result.metadata["outcome"].message.startswith("Invalid Swift syntax")

    def test_missing_file(self, orchestrator, tmp_path):
        result = orchestrator.migrate_file(str(tmp_path / "Missing.swift"))

        assert isinstance(result.error, FileReadError)
        assert result.metadata["outcome"].status is MigrationStatus.UNSUPPORTED

    def test_backup_keeps_the_original(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        result = orchestrator.migrate_file(str(path), MigrationConfig(backup_originals=True))

        backup = tmp_path / "ExampleTests.swift.backup"
        assert result.data.backup_path == str(backup)
        assert backup.read_text() == XCTEST_SOURCE
        assert path.read_text() == MIGRATED_SOURCE

    def test_output_path_leaves_source_untouched(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)
        target = tmp_path / "out" / "ExampleTests.swift"

        result = orchestrator.migrate_file(
            str(path), MigrationConfig(output_path=str(target), backup_originals=True)
        )

        assert result.data.output_path == str(target)
        assert result.data.backup_path is None
        assert target.read_text() == MIGRATED_SOURCE
        assert path.read_text() == XCTEST_SOURCE
        assert not (tmp_path / "ExampleTests.swift.backup").exists()

    def test_dry_run_writes_nothing(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        result = orchestrator.migrate_file(str(path), MigrationConfig(dry_run=True))

        assert result.data.status is MigrationStatus.CONVERTED
        assert result.data.migrated_source == MIGRATED_SOURCE
        assert path.read_text() == XCTEST_SOURCE

    def test_conflicting_config_is_rejected_before_reading(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        result = orchestrator.migrate_file(str(path), MigrationConfig(dry_run=True, backup_originals=True))

        assert isinstance(result.error, ConfigurationError)
        assert "outcome" not in result.metadata
        assert path.read_text() == XCTEST_SOURCE

    def test_crlf_is_preserved(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE.replace("\n", "\r\n"))

        orchestrator.migrate_file(str(path))

        assert path.read_bytes() == MIGRATED_SOURCE.replace("\n", "\r\n").encode("utf-8")

    def test_warnings_are_returned(self, orchestrator, tmp_path):
        source = (
            "import XCTest\n\nclass A: XCTestCase {\n"
            "    override func tearDownWithError() throws {\n        reset()\n    }\n}\n"
        )
        path = _write(tmp_path / "ATests.swift", source)

        result = orchestrator.migrate_file(str(path))

        assert result.is_warning()
        assert result.data.warnings == tuple(result.warnings)

    def test_file_processed_events(self, tmp_path):
        bus = EventBus()
        statuses = []
        bus.subscribe(FileProcessedEvent, lambda event: statuses.append(event.status))
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        MigrationOrchestrator(bus).migrate_file(str(path))

        assert statuses == ["converted"]


class TestMigrateDirectory:
    """Folder runs classify every file and never fail on a single file."""

    def _populate(self, root):
        _write(root / "ExampleTests.swift", XCTEST_SOURCE)
        _write(root / "Done" / "MigratedTests.swift", MIGRATED_SOURCE)
        _write(root / "AsyncTests.swift", EXPECTATION_SOURCE)
        _write(root / "README.md", "XCTAssertTrue(true)\n")

    def test_summary(self, orchestrator, tmp_path):
        self._populate(tmp_path)

        result = orchestrator.migrate_directory(str(tmp_path))

        assert result.is_success()
        summary = result.data
        assert [outcome.path for outcome in summary.outcomes] == sorted(outcome.path for outcome in summary.outcomes)
        assert [o.path for o in summary.converted] == [str(tmp_path / "ExampleTests.swift")]
        assert [o.path for o in summary.already_migrated] == [str(tmp_path / "Done" / "MigratedTests.swift")]
        assert [o.path for o in summary.unsupported] == [str(tmp_path / "AsyncTests.swift")]
        assert result.metadata == {"source_dir": str(tmp_path), "files": 3}
        assert (tmp_path / "ExampleTests.swift").read_text() == MIGRATED_SOURCE
        assert (tmp_path / "AsyncTests.swift").read_text() == EXPECTATION_SOURCE

    def test_non_recursive(self, orchestrator, tmp_path):
        self._populate(tmp_path)

        result = orchestrator.migrate_directory(str(tmp_path), MigrationConfig(recurse_directories=False))

        assert result.metadata["files"] == 2
        assert result.data.already_migrated == []

    def test_concurrent_run_matches_serial(self, tmp_path):
        serial_root = tmp_path / "serial"
        parallel_root = tmp_path / "parallel"
        for root in (serial_root, parallel_root):
            for index in range(6):
                _write(root / f"Case{index}Tests.swift", XCTEST_SOURCE.replace("ExampleTests", f"Case{index}Tests"))

        serial = MigrationOrchestrator().migrate_directory(str(serial_root), MigrationConfig(max_concurrent_files=1))
        parallel = MigrationOrchestrator().migrate_directory(
            str(parallel_root), MigrationConfig(max_concurrent_files=4)
        )

        assert len(serial.data.converted) == len(parallel.data.converted) == 6
        for index in range(6):
            name = f"Case{index}Tests.swift"
            assert (serial_root / name).read_bytes() == (parallel_root / name).read_bytes()

    def test_fail_fast_stops_after_unsupported(self, orchestrator, tmp_path):
        _write(tmp_path / "AsyncTests.swift", EXPECTATION_SOURCE)

        result = orchestrator.migrate_directory(str(tmp_path), MigrationConfig(fail_fast=True))

        assert result.is_success()
        assert len(result.data.unsupported) == 1

    def test_fail_fast_still_reports_files_already_running(self, orchestrator, tmp_path, mocker):
        bad = _write(tmp_path / "a_bad.swift", EXPECTATION_SOURCE)
        good = _write(tmp_path / "b_good.swift", XCTEST_SOURCE)

        def slow_read(path):
            if str(path) == str(good):
                time.sleep(0.5)
            return read_source(path)

        mocker.patch("splurge_xctest_to_swift_testing.migration_orchestrator.read_source", side_effect=slow_read)

        result = orchestrator.migrate_directory(
            str(tmp_path), MigrationConfig(max_concurrent_files=2, fail_fast=True)
        )

        summary = result.data
        assert good.read_text() == MIGRATED_SOURCE
        assert [o.path for o in summary.unsupported] == [str(bad)]
        assert [o.path for o in summary.converted] == [str(good)]
        assert summary.summary_line() == "Summary: 1 converted, 0 already migrated, 1 unsupported"

    def test_not_a_directory(self, orchestrator, tmp_path):
        path = _write(tmp_path / "ExampleTests.swift", XCTEST_SOURCE)

        result = orchestrator.migrate_directory(str(path))

        assert isinstance(result.error, FileReadError)
        assert result.error.details["reason"] == "path is not a directory"

    def test_invalid_config(self, orchestrator, tmp_path):
        result = orchestrator.migrate_directory(str(tmp_path), MigrationConfig(max_concurrent_files=0))

        assert isinstance(result.error, ConfigurationError)
        assert result.error.details["config_key"] == "max_concurrent_files"

    def test_missing_directory(self, orchestrator, tmp_path):
        assert orchestrator.migrate_directory(str(tmp_path / "missing")).is_error()

    def test_empty_directory(self, orchestrator, tmp_path):
        result = orchestrator.migrate_directory(str(tmp_path))

        assert result.data.outcomes == ()
        assert result.data.summary_line() == "Summary: 0 converted, 0 already migrated, 0 unsupported"


def test_batch_summary_report():
    summary = BatchSummary(
        (
            FileOutcome("A.swift", MigrationStatus.CONVERTED),
            FileOutcome("B.swift", MigrationStatus.ALREADY_MIGRATED),
            FileOutcome("C.swift", MigrationStatus.UNSUPPORTED, message="unsupported XCTest pattern"),
        )
    )

    assert summary.format_report().splitlines() == [
        "Migration results:",
        "  ✅ Converted: A.swift",
        "  ⏭️ Already migrated: B.swift",
        "  ❌ Unsupported: C.swift (unsupported XCTest pattern)",
        "",
        "Summary: 1 converted, 1 already migrated, 1 unsupported",
    ]
