"""Folder migrations through the CLI, using the data-driven fixtures."""

import shutil
from pathlib import Path

from typer.testing import CliRunner

from splurge_xctest_to_swift_testing.cli import app

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "given_and_expected"

runner = CliRunner()


def _copy_fixtures(target: Path) -> list[str]:
    names = []
    for given in sorted(DATA_DIR.glob("xctest_given_*.swift")):
        name = given.name.replace("xctest_given_", "Case")
        shutil.copyfile(given, target / name)
        names.append(name)
    return names


def _expected(name: str) -> bytes:
    number = name.removeprefix("Case").removesuffix(".swift")
    return (DATA_DIR / f"swift_testing_expected_{number}.swift").read_bytes()


def test_folder_migration_matches_fixtures(tmp_path):
    names = _copy_fixtures(tmp_path)

    result = runner.invoke(app, ["migrate", "--folder", str(tmp_path), "--max-concurrent", "2"])

    assert result.exit_code == 0
    assert f"Summary: {len(names)} converted, 0 already migrated, 0 unsupported" in result.output
    for name in names:
        assert (tmp_path / name).read_bytes() == _expected(name)


def test_second_run_reports_already_migrated(tmp_path):
    names = _copy_fixtures(tmp_path)
    runner.invoke(app, ["migrate", "--folder", str(tmp_path)])

    result = runner.invoke(app, ["migrate", "--folder", str(tmp_path)])

    assert result.exit_code == 0
    assert f"Summary: 0 converted, {len(names)} already migrated, 0 unsupported" in result.output


def test_folder_dry_run_leaves_files(tmp_path):
    names = _copy_fixtures(tmp_path)
    before = {name: (tmp_path / name).read_bytes() for name in names}

    result = runner.invoke(app, ["migrate", "--folder", str(tmp_path), "--dry-run"])

    assert result.exit_code == 0
    assert f"Summary: {len(names)} converted" in result.output
    assert {name: (tmp_path / name).read_bytes() for name in names} == before


def test_folder_backup(tmp_path):
    names = _copy_fixtures(tmp_path)

    runner.invoke(app, ["migrate", "--folder", str(tmp_path), "--backup"])

    for name in names:
        assert (tmp_path / f"{name}.backup").exists()
