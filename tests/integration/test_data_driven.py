"""Data-driven integration tests for XCTest to Swift Testing migration.

Each ``xctest_given_NN.swift`` under tests/data/given_and_expected/ is
migrated and compared byte for byte with ``swift_testing_expected_NN.swift``.
"""

from pathlib import Path

import pytest

from splurge_xctest_to_swift_testing.main import migrate

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "given_and_expected"


def get_test_pairs() -> list[tuple[Path, Path]]:
    pairs = []
    for given in sorted(DATA_DIR.glob("xctest_given_*.swift")):
        number = given.stem.rsplit("_", 1)[-1]
        expected = DATA_DIR / f"swift_testing_expected_{number}.swift"
        if expected.exists():
            pairs.append((given, expected))
    return pairs


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def test_test_data_exists():
    assert len(get_test_pairs()) >= 4


@pytest.mark.parametrize("given, expected", get_test_pairs(), ids=lambda path: path.name)
def test_migration_matches_expected(given, expected):
    assert migrate(_read(given)) == _read(expected)


@pytest.mark.parametrize("given, expected", get_test_pairs(), ids=lambda path: path.name)
def test_expected_output_is_stable(given, expected):
    """Migrating already migrated output changes nothing."""
    migrated = _read(expected)

    assert migrate(migrated) == migrated
