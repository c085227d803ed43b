"""Command-line interface for splurge-xctest-to-swift-testing.

This module provides the CLI commands and argument parsing using
typer. It is a thin layer over ``MigrationOrchestrator``: it builds a
``MigrationConfig`` from an optional YAML file plus the command-line
flags, runs a single file or a folder, and maps the outcome to an exit
code (0 success, 1 single-file failure, 2 usage error).

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from pathlib import Path

import typer

from .context import ContextManager, MigrationConfig
from .events import EventBus
from .exceptions import ConfigurationError
from .helpers.path_utils import normalize_path_for_display
from .migration_orchestrator import FileOutcome, MigrationOrchestrator, MigrationStatus

USAGE_ERROR_EXIT_CODE = 2

# Create Typer app
app = typer.Typer(
    name="splurge-xctest-to-swift-testing",
    help="Migrate Swift XCTest suites to the Swift Testing framework",
    add_completion=False,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_level: str = "WARNING") -> None:
    """Set up logging configuration for the application."""
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(level)


def _usage_error(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=USAGE_ERROR_EXIT_CODE)


def build_config(
    config_file: str | None,
    *,
    output: str | None,
    backup: bool,
    dry_run: bool,
    verbose: bool,
    max_concurrent: int | None,
) -> MigrationConfig:
    """Merge a YAML config file (if any) with command-line flags.

    Flags only override the file when they are given; the merged values
    are validated again so conflicting combinations are reported.

    Raises:
        ConfigurationError: If the file cannot be loaded or the merged
            configuration is invalid.
    """
    base = MigrationConfig()
    if config_file:
        loaded = ContextManager.load_config_from_file(config_file)
        if loaded.is_error() or loaded.data is None:
            raise loaded.error or ConfigurationError(f"Could not load configuration from {config_file}")
        base = loaded.data

    overrides = base.to_dict()
    if output is not None:
        overrides["output_path"] = output
    if backup:
        overrides["backup_originals"] = True
    if dry_run:
        overrides["dry_run"] = True
    if verbose:
        overrides["verbose"] = True
    if max_concurrent is not None:
        overrides["max_concurrent_files"] = max_concurrent
    return MigrationConfig.from_dict(overrides)


def _print_warnings(outcome: FileOutcome) -> None:
    for warning in outcome.warnings:
        typer.echo(f"⚠️  {warning}")


def _run_single_file(orchestrator: MigrationOrchestrator, file: str, config: MigrationConfig) -> None:
    if config.verbose:
        typer.echo(f"🔍 Reading file: {file}")

    result = orchestrator.migrate_file(file, config)
    if result.is_error():
        outcome = result.metadata.get("outcome") if result.metadata else None
        message = outcome.message if outcome is not None else str(result.error)
        typer.echo(f"❌ Migration failed: {message}")
        raise typer.Exit(code=1)

    outcome = result.data
    assert outcome is not None
    if outcome.status is MigrationStatus.ALREADY_MIGRATED:
        typer.echo(f"⏭️  Already migrated: {file}")
        return

    _print_warnings(outcome)
    if config.dry_run:
        if config.verbose:
            typer.echo(f"📝 Dry run, would write: {normalize_path_for_display(outcome.output_path)}")
        typer.echo(outcome.migrated_source or "", nl=False)
        return

    if config.verbose:
        typer.echo(f"📝 Wrote: {normalize_path_for_display(outcome.output_path)}")
        if outcome.backup_path:
            typer.echo(f"💾 Backup: {normalize_path_for_display(outcome.backup_path)}")
    typer.echo(f"✅ Successfully migrated {file}")


def _run_folder(orchestrator: MigrationOrchestrator, folder: str, config: MigrationConfig) -> None:
    result = orchestrator.migrate_directory(folder, config)
    if result.is_error() or result.data is None:
        raise _usage_error(str(result.error))

    summary = result.data
    if config.verbose:
        for outcome in summary.converted:
            _print_warnings(outcome)
    typer.echo(summary.format_report())


@app.command("migrate")
def migrate(
    file: str | None = typer.Option(None, "--file", "-f", help="Swift file to migrate"),
    folder: str | None = typer.Option(None, "--folder", help="Folder whose Swift files should be migrated"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write the migrated file here instead of in place (single file only)"
    ),
    backup: bool = typer.Option(False, "--backup", help="Keep a .backup copy of every converted file", is_flag=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without writing", is_flag=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output", is_flag=True),
    config_file: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    max_concurrent: int | None = typer.Option(
        None, "--max-concurrent", help="Maximum number of files migrated concurrently in folder mode"
    ),
) -> None:
    """Migrate XCTest suites in a Swift file or folder to Swift Testing."""
    if file is None and folder is None:
        raise _usage_error("pass --file or --folder")
    if file is not None and folder is not None:
        raise _usage_error("--file and --folder cannot be used together")
    if folder is not None and output is not None:
        raise _usage_error("--output can only be used with --file")

    try:
        config = build_config(
            config_file,
            output=output,
            backup=backup,
            dry_run=dry_run,
            verbose=verbose,
            max_concurrent=max_concurrent,
        )
    except ConfigurationError as e:
        typer.echo(f"Error loading configuration file: {e.message}", err=True)
        raise typer.Exit(code=1) from None

    setup_logging(config.verbose, config.log_level)

    orchestrator = MigrationOrchestrator(EventBus())
    if file is not None:
        if not Path(file).is_file():
            raise _usage_error(f"file not found: {file}")
        _run_single_file(orchestrator, file, config)
    else:
        assert folder is not None
        if not Path(folder).is_dir():
            raise _usage_error(f"folder not found: {folder}")
        _run_folder(orchestrator, folder, config)


@app.command("version")
def version() -> None:
    """Show the version of splurge-xctest-to-swift-testing."""
    from . import __version__

    typer.echo(f"splurge-xctest-to-swift-testing {__version__}")


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
