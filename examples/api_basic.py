#!/usr/bin/env python3
"""Small API examples for splurge-xctest-to-swift-testing.

These examples exercise the public programmatic API in a minimal way.
They are intended for documentation and quick manual testing.
"""

import tempfile
from pathlib import Path

from splurge_xctest_to_swift_testing import migrate
from splurge_xctest_to_swift_testing.context import MigrationConfig
from splurge_xctest_to_swift_testing.migration_orchestrator import MigrationOrchestrator, MigrationStatus

XCTEST_CONTENT = """import XCTest

class MathTests: XCTestCase {
    func testAddition() {
        XCTAssertEqual(5 + 3, 8)
    }

    func testMultiplication() {
        XCTAssertEqual(4 * 2, 8)
    }
}
"""


def text_migration_example() -> None:
    """Migrate source text directly, no files involved."""
    print("=== migrate(source) ===")
    print(migrate(XCTEST_CONTENT))


def file_migration_example() -> None:
    """Write a tiny XCTest file, run the orchestrator in dry-run mode, and print the result."""
    with tempfile.TemporaryDirectory() as tmp:
        example_file = Path(tmp) / "MathTests.swift"
        example_file.write_text(XCTEST_CONTENT, encoding="utf-8")

        orchestrator = MigrationOrchestrator()
        result = orchestrator.migrate_file(str(example_file), MigrationConfig(dry_run=True))

        if result.is_error():
            print(f"Migration failed: {result.error}")
            return
        outcome = result.data
        print(f"=== {outcome.path}: {outcome.status.value} ===")
        if outcome.status is MigrationStatus.CONVERTED:
            print(outcome.migrated_source)


def configuration_example() -> None:
    """Show a couple of MigrationConfig defaults."""
    cfg = MigrationConfig()
    print("MigrationConfig defaults:")
    print(f"  file_extensions: {cfg.file_extensions}")
    print(f"  backup_originals: {cfg.backup_originals}")
    print(f"  dry_run: {cfg.dry_run}")


if __name__ == "__main__":
    text_migration_example()
    file_migration_example()
    configuration_example()
