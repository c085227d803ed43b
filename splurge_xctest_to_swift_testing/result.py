"""Result type for functional error handling.

``Result[T]`` is the value every pipeline step, the orchestrator and the
non-raising engine entry point hand back. It carries either data, an
exception, or a skip reason, plus warnings and free-form metadata.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ResultStatus(Enum):
    """Possible outcomes: ``SUCCESS``, ``WARNING``, ``ERROR`` and ``SKIPPED``."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Immutable outcome of an operation.

    Use the ``success``, ``failure``, ``warning`` and ``skipped``
    constructors rather than building instances directly.
    """

    status: ResultStatus
    data: T | None = None
    error: Exception | None = None
    warnings: list[str] | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.status == ResultStatus.SUCCESS and self.error is not None:
            raise ValueError("Success results cannot have errors")
        if self.status == ResultStatus.ERROR and self.data is not None:
            raise ValueError("Error results cannot have data")
        if self.warnings is None:
            object.__setattr__(self, "warnings", [])
        if self.metadata is None:
            object.__setattr__(self, "metadata", {})

    @classmethod
    def success(cls, data: T, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a successful result.

        Args:
            data: Successful value.
            metadata: Optional metadata mapping.
        """
        return cls(status=ResultStatus.SUCCESS, data=data, error=None, metadata=metadata or {})

    @classmethod
    def failure(cls, error: Exception, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create an error result.

        Args:
            error: Exception describing the failure.
            metadata: Optional metadata mapping.
        """
        return cls(status=ResultStatus.ERROR, error=error, metadata=metadata or {})

    @classmethod
    def warning(cls, data: T, warnings: list[str], metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a result that succeeded with warnings."""
        return cls(status=ResultStatus.WARNING, data=data, warnings=warnings, metadata=metadata or {})

    @classmethod
    def skipped(cls, reason: str, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Create a skipped result; ``reason`` is kept under ``metadata["reason"]``."""
        return cls(status=ResultStatus.SKIPPED, metadata={**(metadata or {}), "reason": reason})

    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def is_error(self) -> bool:
        return self.status == ResultStatus.ERROR

    def is_warning(self) -> bool:
        return self.status == ResultStatus.WARNING

    def is_skipped(self) -> bool:
        return self.status == ResultStatus.SKIPPED

    @property
    def skip_reason(self) -> str | None:
        if not self.is_skipped() or self.metadata is None:
            return None
        return self.metadata.get("reason")

    def map(self, func: Callable[[T], R]) -> "Result[R]":
        """Apply ``func`` to the data of a successful result.

        Errors and skips pass through untouched; an exception raised by
        ``func`` becomes an error result.
        """
        if self.is_error():
            return Result[R](status=ResultStatus.ERROR, error=self.error, warnings=self.warnings, metadata=self.metadata)

        if self.is_skipped():
            return Result[R](status=ResultStatus.SKIPPED, metadata=self.metadata)

        if self.data is None:
            return Result.failure(ValueError("Cannot map over None data"), self.metadata)

        try:
            new_data = func(self.data)
            status = ResultStatus.WARNING if self.warnings else ResultStatus.SUCCESS
            return Result[R](status=status, data=new_data, error=None, warnings=self.warnings, metadata=self.metadata)
        except Exception as e:
            return Result.failure(e, self.metadata)

    def bind(self, func: Callable[[T], "Result[R]"]) -> "Result[R]":
        """Chain a function that itself returns a ``Result``."""
        if self.is_error():
            return Result[R](status=ResultStatus.ERROR, error=self.error, warnings=self.warnings, metadata=self.metadata)

        if self.is_skipped():
            return Result[R](status=ResultStatus.SKIPPED, metadata=self.metadata)

        if self.data is None:
            return Result.failure(ValueError("Cannot bind over None data"), self.metadata)

        try:
            return func(self.data)
        except Exception as e:
            return Result.failure(e, self.metadata)

    def unwrap(self) -> T:
        """Return the data or raise.

        Raises:
            Exception: The stored error for error results, ``RuntimeError``
                for skipped results or results without data.
        """
        if self.is_error():
            raise self.error or RuntimeError("Result contains error")
        if self.is_skipped():
            raise RuntimeError(f"Result was skipped: {self.skip_reason}")
        if self.data is None:
            raise RuntimeError("Result contains no data")
        return self.data

    def unwrap_or(self, default_value: T) -> T:
        if (self.is_success() or self.is_warning()) and self.data is not None:
            return self.data
        return default_value

    def __str__(self) -> str:
        if self.is_success():
            return f"Result(success, data={self.data!r})"
        elif self.is_error():
            return f"Result(error, error={self.error})"
        elif self.is_warning():
            return f"Result(warning, data={self.data!r}, warnings={self.warnings})"
        else:
            return f"Result(skipped, reason={self.skip_reason})"
