"""Main migration orchestrator for files and folders.

The engine in :mod:`.main` only transforms text. This module adds the
file surface around it: reading sources, classifying each file as
converted, already migrated or unsupported, writing results (with an
optional ``.backup`` copy) and aggregating folder runs into a
:class:`BatchSummary`.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum

from .context import MigrationConfig, PipelineContext
from .events import EventBus, FileProcessedEvent, LoggingSubscriber
from .exceptions import ConfigurationError, FileReadError, MigrationError
from .helpers.path_utils import (
    create_backup,
    find_source_files,
    read_source,
    validate_source_path,
    validate_target_path,
    write_source,
)
from .main import migrate_source
from .result import Result


class MigrationStatus(Enum):
    """Classification of one file after a migration attempt."""

    CONVERTED = "converted"
    ALREADY_MIGRATED = "already_migrated"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class FileOutcome:
    """What happened to one file.

    ``migrated_source`` holds the new text for converted files so a
    dry run can show it; ``output_path`` is where it was (or, in a dry
    run, would have been) written.
    """

    path: str
    status: MigrationStatus
    message: str | None = None
    output_path: str | None = None
    backup_path: str | None = None
    migrated_source: str | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class BatchSummary:
    """Outcomes of a folder run, sorted by path."""

    outcomes: tuple[FileOutcome, ...] = ()

    def with_status(self, status: MigrationStatus) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is status]

    @property
    def converted(self) -> list[FileOutcome]:
        return self.with_status(MigrationStatus.CONVERTED)

    @property
    def already_migrated(self) -> list[FileOutcome]:
        return self.with_status(MigrationStatus.ALREADY_MIGRATED)

    @property
    def unsupported(self) -> list[FileOutcome]:
        return self.with_status(MigrationStatus.UNSUPPORTED)

    def summary_line(self) -> str:
        return (
            f"Summary: {len(self.converted)} converted, {len(self.already_migrated)} already migrated, "
            f"{len(self.unsupported)} unsupported"
        )

    def format_report(self) -> str:
        """Human-readable report: one line per file, then the summary line."""
        lines = ["Migration results:"]
        lines.extend(f"  ✅ Converted: {outcome.path}" for outcome in self.converted)
        lines.extend(f"  ⏭️ Already migrated: {outcome.path}" for outcome in self.already_migrated)
        lines.extend(f"  ❌ Unsupported: {outcome.path} ({outcome.message})" for outcome in self.unsupported)
        lines.append("")
        lines.append(self.summary_line())
        return "\n".join(lines)


@dataclass
class _BatchAccumulator:
    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    def summary(self) -> BatchSummary:
        return BatchSummary(tuple(sorted(self.outcomes, key=lambda outcome: outcome.path)))


class MigrationOrchestrator:
    """Coordinates file reads, engine runs, writes and reporting.

    Each file is migrated independently; ``migrate_directory`` runs
    files on a bounded thread pool and merges the per-file outcomes on
    the calling thread.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialize the migration orchestrator.

        Args:
            event_bus: Optional external event bus to use. If None, creates a new one.
        """
        self.event_bus = event_bus or EventBus()
        self.logger_subscriber = LoggingSubscriber(self.event_bus)
        self._logger = logging.getLogger(__name__)

    def migrate_file(self, source_file: str, config: MigrationConfig | None = None) -> Result[FileOutcome]:
        """Migrate a single Swift file.

        Args:
            source_file: Path to the Swift file.
            config: Optional ``MigrationConfig``; ``output_path``,
                ``backup_originals`` and ``dry_run`` are honoured.

        Returns:
            A success (or warning) ``Result`` with the :class:`FileOutcome`
            for converted and already-migrated files; a failure ``Result``
            when the configuration is invalid or the file could not be read,
            migrated or written. File failures carry the unsupported outcome
            in ``metadata["outcome"]``.
        """
        if config is None:
            config = MigrationConfig()
        try:
            config.validate()
        except ConfigurationError as e:
            return Result.failure(e)
        return self._migrate_one(source_file, config, config.output_path)

    def migrate_directory(self, source_dir: str, config: MigrationConfig | None = None) -> Result[BatchSummary]:
        """Migrate every Swift file under a folder.

        Unsupported files never fail the batch; they are reported in the
        summary. With ``fail_fast`` the first unsupported file stops
        files that have not started yet; files already running finish and
        are still reported.

        Returns:
            ``Result`` holding the :class:`BatchSummary`, or a failure when
            the configuration or the folder itself is invalid.
        """
        if config is None:
            config = MigrationConfig()
        try:
            config.validate()
        except ConfigurationError as e:
            return Result.failure(e)

        try:
            source_path = validate_source_path(source_dir)
        except FileReadError as e:
            return Result.failure(e)
        if not source_path.is_dir():
            return Result.failure(FileReadError(source_dir, "path is not a directory"))

        files = find_source_files(source_path, config.file_extensions, config.recurse_directories)
        self._logger.info(f"Found {len(files)} Swift file(s) in {source_dir}")

        accumulator = _BatchAccumulator()
        counted: set[Future[Result[FileOutcome]]] = set()
        workers = max(1, config.max_concurrent_files)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="migrate") as executor:
            futures: list[Future[Result[FileOutcome]]] = [
                executor.submit(self._migrate_one, str(path), config, None) for path in files
            ]
            for future in as_completed(futures):
                outcome = _outcome_of(future.result())
                accumulator.add(outcome)
                counted.add(future)
                if config.fail_fast and outcome.status is MigrationStatus.UNSUPPORTED:
                    self._logger.info(f"Stopping after unsupported file {outcome.path} (fail_fast)")
                    for pending in futures:
                        pending.cancel()
                    break

        # files already running when fail_fast triggered still finished and wrote output
        for future in futures:
            if future not in counted and not future.cancelled():
                accumulator.add(_outcome_of(future.result()))

        summary = accumulator.summary()
        self._logger.info(summary.summary_line())
        return Result.success(summary, {"source_dir": source_dir, "files": len(files)})

    def _migrate_one(self, source_file: str, config: MigrationConfig, output_path: str | None) -> Result[FileOutcome]:
        context = PipelineContext.create(source_file=source_file, config=config)
        try:
            validate_source_path(source_file)
            source = read_source(source_file)
        except FileReadError as e:
            return self._unsupported(context, source_file, e)
        self._logger.debug(f"Read {len(source)} characters from {source_file}")

        result = migrate_source(source, context, self.event_bus)
        if result.is_error():
            error = result.error or MigrationError(f"Migration failed for {source_file}")
            return self._unsupported(context, source_file, error)

        migrated = result.unwrap_or(source)
        if migrated == source:
            outcome = FileOutcome(source_file, MigrationStatus.ALREADY_MIGRATED)
            self._publish(context, outcome)
            return Result.success(outcome)

        target = output_path or source_file
        backup_path = None
        if not context.is_dry_run():
            try:
                validate_target_path(target)
                # a separate output file leaves the original in place
                if config.backup_originals and output_path is None:
                    backup_path = str(create_backup(source_file))
                write_source(target, migrated)
            except MigrationError as e:
                return self._unsupported(context, source_file, e)

        outcome = FileOutcome(
            source_file,
            MigrationStatus.CONVERTED,
            output_path=target,
            backup_path=backup_path,
            migrated_source=migrated,
            warnings=tuple(result.warnings or ()),
        )
        self._publish(context, outcome)
        if outcome.warnings:
            return Result.warning(outcome, list(outcome.warnings))
        return Result.success(outcome)

    def _unsupported(self, context: PipelineContext, source_file: str, error: Exception) -> Result[FileOutcome]:
        message = error.message if isinstance(error, MigrationError) else str(error)
        self._logger.error(f"Migration failed for {source_file}: {message}")
        outcome = FileOutcome(source_file, MigrationStatus.UNSUPPORTED, message=message)
        self._publish(context, outcome)
        return Result.failure(error, {"outcome": outcome})

    def _publish(self, context: PipelineContext, outcome: FileOutcome) -> None:
        self.event_bus.publish(
            FileProcessedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                path=outcome.path,
                status=outcome.status.value,
                message=outcome.message,
            )
        )


def _outcome_of(result: Result[FileOutcome]) -> FileOutcome:
    # failures carry their unsupported outcome in the metadata
    if result.data is not None:
        return result.data
    return result.metadata["outcome"]
