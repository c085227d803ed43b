"""Configuration validation using pydantic schemas.

Values loaded from YAML files or CLI flags are checked here before a
``MigrationConfig`` is built from them.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ValidatedMigrationConfig(BaseModel):
    """Validated version of MigrationConfig with runtime validation."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    backup_originals: bool = Field(default=False, description="Copy each converted file to <name>.backup first")
    dry_run: bool = Field(default=False, description="Report what would change without writing files")
    verbose: bool = Field(default=False, description="Enable debug logging")
    max_concurrent_files: int = Field(default=1, ge=1, le=50, description="Maximum concurrent file processing")
    file_extensions: list[str] = Field(default_factory=lambda: [".swift"], description="Extensions to migrate")
    recurse_directories: bool = Field(default=True, description="Whether to recurse into subdirectories")
    fail_fast: bool = Field(default=False, description="Stop a folder run at the first unsupported file")
    log_level: str = Field(default="WARNING", description="Logging level when --verbose is not given")
    output_path: str | None = Field(default=None, description="Output file for single-file migrations")

    @field_validator("file_extensions")
    @classmethod
    def validate_file_extensions(cls, v):
        if not v:
            raise ValueError("At least one file extension must be specified, for example '.swift'.")

        for i, extension in enumerate(v):
            if not isinstance(extension, str) or not extension.strip():
                raise ValueError(f"File extension at index {i} cannot be empty or whitespace-only.")
            if not extension.startswith("."):
                raise ValueError(f"File extension '{extension}' at index {i} must start with a dot, e.g. '.swift'.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        if not isinstance(v, str):
            raise ValueError(f"log_level must be a string ({', '.join(VALID_LOG_LEVELS)})")

        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}, got '{v}'. "
                "Choose DEBUG for detailed troubleshooting or INFO for normal operation."
            )
        return upper_v

    @model_validator(mode="after")
    def validate_cross_field_compatibility(self) -> ValidatedMigrationConfig:
        """Reject option combinations that cannot both be honoured."""
        errors = []

        if self.dry_run and self.backup_originals:
            errors.append(
                {
                    "field": "backup_originals",
                    "message": "dry_run mode never writes files, so no backup would be made",
                    "suggestion": "Remove backup_originals or set dry_run=False",
                }
            )

        if errors:
            error_messages = [f"{error['field']}: {error['message']} - {error['suggestion']}" for error in errors]
            raise ValueError(f"Configuration conflicts detected: {'; '.join(error_messages)}")

        return self


def validate_migration_config(config_dict: dict[str, Any]) -> ValidatedMigrationConfig:
    """Validate a migration configuration dictionary.

    Args:
        config_dict: Configuration dictionary to validate

    Returns:
        Validated configuration object

    Raises:
        ConfigurationError: If configuration is invalid
    """
    try:
        return ValidatedMigrationConfig(**config_dict)
    except PydanticValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        location = first.get("loc") or ()
        key = str(location[0]) if location else None
        raise ConfigurationError(f"Invalid migration configuration: {e}", config_key=key) from e
