"""Custom exception classes for the XCTest-to-Swift-Testing migration tool.

This module defines the closed hierarchy of errors the migration engine
and its file/CLI surfaces can raise. Each exception carries a ``details``
mapping with structured context (source location, offending pattern,
path) and a ``recovery_suggestion`` telling the user what to do next.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from typing import Any


class MigrationError(Exception):
    """Base exception for migration-related errors.

    Args:
        message: Human-readable error message.
        details: Optional mapping with structured diagnostic data.
    """

    recovery_suggestion: str = "Review the input and try again"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidSyntaxError(MigrationError):
    """Raised when Swift source text cannot be turned into a syntax tree.

    Args:
        reason: Description of what the parser could not handle.
        line: Optional 1-based line of the problem.
        column: Optional 1-based column of the problem.
    """

    recovery_suggestion = "Ensure the Swift file has valid syntax before migration"

    def __init__(self, reason: str, line: int | None = None, column: int | None = None):
        details: dict[str, Any] = {"reason": reason}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Invalid Swift syntax: {reason}{location}", details)
        self.reason = reason
        self.line = line
        self.column = column


class UnsupportedPatternError(MigrationError):
    """Raised when a file uses a construct the engine refuses to migrate.

    Args:
        pattern: Description of the unsupported construct.
        locations: Optional list of ``(line, column)`` pairs where it occurs.
    """

    recovery_suggestion = "This pattern requires manual migration"

    def __init__(self, pattern: str, locations: list[tuple[int, int]] | None = None):
        details: dict[str, Any] = {"pattern": pattern}
        if locations:
            details["locations"] = list(locations)
        super().__init__(f"Unsupported pattern that cannot be migrated: {pattern}", details)
        self.pattern = pattern


class FileReadError(MigrationError):
    """Raised when a source file cannot be read."""

    recovery_suggestion = "Check file path and permissions"

    def __init__(self, path: str, reason: str | None = None):
        details: dict[str, Any] = {"path": path}
        if reason:
            details["reason"] = reason
        super().__init__(f"Could not read file: {path}", details)
        self.path = path


class FileWriteError(MigrationError):
    """Raised when migrated output cannot be written."""

    recovery_suggestion = "Check output path and write permissions"

    def __init__(self, path: str, reason: str | None = None):
        details: dict[str, Any] = {"path": path}
        if reason:
            details["reason"] = reason
        super().__init__(f"Could not write file: {path}", details)
        self.path = path


class ConfigurationError(MigrationError):
    """Raised when an application configuration is invalid.

    Args:
        message: Human readable description of the configuration problem.
        config_key: Optional configuration key that caused the error.
    """

    recovery_suggestion = "Fix the configuration value or file and retry"

    def __init__(self, message: str, config_key: str | None = None):
        details: dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
