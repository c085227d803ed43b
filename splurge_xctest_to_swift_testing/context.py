"""Pipeline context and migration configuration helpers.

``MigrationConfig`` holds the options of the file and folder surfaces;
``PipelineContext`` carries the per-run information (source path, run
id, metadata) that pipeline steps may need. ``ContextManager`` loads
configuration from YAML files.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

import yaml

from .config_validation import validate_migration_config
from .exceptions import ConfigurationError
from .result import Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationConfig:
    """Migration behavior configuration.

    The engine itself takes no options; these settings only steer file
    discovery, writing and reporting.
    """

    # Output settings
    backup_originals: bool = False
    dry_run: bool = False
    output_path: str | None = None
    """Alternate output file; only honoured for single-file migrations"""

    # Discovery settings
    file_extensions: list[str] = field(default_factory=lambda: [".swift"])
    recurse_directories: bool = True

    # Processing options
    max_concurrent_files: int = 1
    """Maximum number of files to process concurrently (1 = sequential)"""
    fail_fast: bool = False

    # Logging and reporting settings
    verbose: bool = False
    log_level: str = "WARNING"

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        validate_migration_config(self.to_dict())

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "MigrationConfig":
        """Create and validate a config from a dictionary.

        Unknown keys are ignored so configuration files may carry settings
        for other tools.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        validated = validate_migration_config(config_dict)
        values = validated.model_dump()
        filtered = {k: v for k, v in values.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class PipelineContext:
    """Immutable context object passed through the migration pipeline.

    ``source_file`` is ``None`` when the engine runs on in-memory text.
    """

    config: MigrationConfig
    run_id: str
    source_file: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        source_file: str | None = None,
        config: MigrationConfig | None = None,
        run_id: str | None = None,
    ) -> "PipelineContext":
        """Construct a ``PipelineContext`` with a default config and a fresh run id."""
        return cls(
            config=config or MigrationConfig(),
            run_id=run_id or str(uuid.uuid4()),
            source_file=source_file,
            metadata={},
        )

    def is_dry_run(self) -> bool:
        return self.config.dry_run

    def __str__(self) -> str:
        source = self.source_file or "<memory>"
        return f"PipelineContext(source={source}, run_id={self.run_id[:8]}...)"


class ContextManager:
    """Helper utilities for loading pipeline configuration.

    Methods return ``Result`` instances so callers can react to failures
    in a structured way.
    """

    @staticmethod
    def load_config_from_file(config_file: str) -> Result[MigrationConfig]:
        """Load a ``MigrationConfig`` from a YAML file.

        Args:
            config_file: Path to the YAML configuration file.

        Returns:
            A ``Result`` holding the configuration, or a
            ``ConfigurationError`` describing the problem.
        """
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except FileNotFoundError:
            return Result.failure(
                ConfigurationError(f"Configuration file not found: {config_file}"), {"config_file": config_file}
            )
        except (OSError, yaml.YAMLError) as e:
            return Result.failure(
                ConfigurationError(f"Error loading configuration: {e}"), {"config_file": config_file}
            )

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            return Result.failure(
                ConfigurationError("Configuration file must contain a mapping"), {"config_file": config_file}
            )

        try:
            config = MigrationConfig.from_dict(config_data)
        except ConfigurationError as e:
            return Result.failure(e, {"config_file": config_file})

        logger.debug(f"Loaded configuration from {config_file}")
        return Result.success(config)
