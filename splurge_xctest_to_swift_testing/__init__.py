"""splurge_xctest_to_swift_testing package.

This initializer is intentionally lightweight; submodules are imported
on first access (for example ``from splurge_xctest_to_swift_testing
import migrate`` imports ``splurge_xctest_to_swift_testing.main``).

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

__version__ = "2025.0.1"
__author__ = "Jim Schilling"
__description__ = "Automated XCTest to Swift Testing migration tool"

# Public API names. Submodules are imported lazily when accessed.
__all__ = [
    "migrate",
    "migrate_source",
    "MigrationOrchestrator",
    "MigrationStatus",
    "FileOutcome",
    "BatchSummary",
    "PipelineContext",
    "MigrationConfig",
    "Result",
    "ResultStatus",
    "EventBus",
    "LoggingSubscriber",
    "Step",
    "Task",
    # Exceptions
    "MigrationError",
    "InvalidSyntaxError",
    "UnsupportedPatternError",
    "FileReadError",
    "FileWriteError",
    "ConfigurationError",
]


def __getattr__(name: str):
    """Lazily import the submodule that defines ``name``."""
    import importlib

    mapping = {
        "main": "splurge_xctest_to_swift_testing.main",
        "cli": "splurge_xctest_to_swift_testing.cli",
        "migrate": "splurge_xctest_to_swift_testing.main",
        "migrate_source": "splurge_xctest_to_swift_testing.main",
        "MigrationOrchestrator": "splurge_xctest_to_swift_testing.migration_orchestrator",
        "MigrationStatus": "splurge_xctest_to_swift_testing.migration_orchestrator",
        "FileOutcome": "splurge_xctest_to_swift_testing.migration_orchestrator",
        "BatchSummary": "splurge_xctest_to_swift_testing.migration_orchestrator",
        "PipelineContext": "splurge_xctest_to_swift_testing.context",
        "MigrationConfig": "splurge_xctest_to_swift_testing.context",
        "EventBus": "splurge_xctest_to_swift_testing.events",
        "LoggingSubscriber": "splurge_xctest_to_swift_testing.events",
        "Result": "splurge_xctest_to_swift_testing.result",
        "ResultStatus": "splurge_xctest_to_swift_testing.result",
        "Task": "splurge_xctest_to_swift_testing.pipeline",
        "Step": "splurge_xctest_to_swift_testing.pipeline",
        # Exceptions
        "MigrationError": "splurge_xctest_to_swift_testing.exceptions",
        "InvalidSyntaxError": "splurge_xctest_to_swift_testing.exceptions",
        "UnsupportedPatternError": "splurge_xctest_to_swift_testing.exceptions",
        "FileReadError": "splurge_xctest_to_swift_testing.exceptions",
        "FileWriteError": "splurge_xctest_to_swift_testing.exceptions",
        "ConfigurationError": "splurge_xctest_to_swift_testing.exceptions",
    }

    if name not in mapping:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = importlib.import_module(mapping[name])

    # 'main' and 'cli' name the modules themselves
    if name in {"main", "cli"}:
        return module
    return getattr(module, name)


def __dir__():
    return sorted(list(globals().keys()) + __all__)
