"""Pipeline architecture for functional composition.

A ``Step`` is one stage of the migration (parse, detect, validate,
rewrite, reconcile, render); a ``Task`` threads data through a list of
steps and stops at the first error or skip.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .context import PipelineContext
from .events import (
    ErrorEvent,
    EventBus,
    StepCompletedEvent,
    StepStartedEvent,
    TaskCompletedEvent,
    TaskStartedEvent,
)
from .result import Result

T = TypeVar("T")
R = TypeVar("R")


class Step(ABC, Generic[T, R]):
    """Atomic operation with a single responsibility.

    Concrete steps implement ``execute``; callers use ``run``, which
    publishes start/completion events and turns exceptions into error
    results.
    """

    def __init__(self, name: str, event_bus: EventBus) -> None:
        """Initialize step.

        Args:
            name: Unique name for this step.
            event_bus: Event bus for publishing events.
        """
        self.name = name
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    def execute(self, context: PipelineContext, input_data: T) -> Result[R]:
        """Transform ``input_data``; implemented by subclasses."""

    def run(self, context: PipelineContext, input_data: T) -> Result[R]:
        """Execute the step with event publishing and error handling.

        Args:
            context: Pipeline execution context.
            input_data: Input data for transformation.

        Returns:
            ``Result`` containing transformed data or an error.
        """
        self.event_bus.publish(
            StepStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
            )
        )

        start_time = time.time()

        try:
            self._logger.debug(f"Starting step: {self.name}")
            result = self.execute(context, input_data)
            self._logger.debug(f"Completed step: {self.name} ({result.status.value})")
        except Exception as e:
            self._logger.debug(f"Exception in step {self.name}: {e}")
            result = Result.failure(e, {"step": self.name, "context": context.run_id})

        duration_ms = (time.time() - start_time) * 1000

        self.event_bus.publish(
            StepCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
                result=result,
                duration_ms=duration_ms,
            )
        )

        return result


class Task(Generic[T, R]):
    """Collection of related steps executed sequentially.

    Data returned by one step is the input of the next. The first error
    aborts the task; a skipped step ends it early with the skipped result.
    """

    def __init__(self, name: str, steps: list[Step], event_bus: EventBus) -> None:
        """Initialize task.

        Args:
            name: Unique name for this task
            steps: List of steps to execute in order
            event_bus: Event bus for publishing events
        """
        self.name = name
        self.steps = steps
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def execute(self, context: PipelineContext, input_data: T) -> Result[R]:
        """Execute the configured steps in sequence.

        Returns:
            The last step's result with the warnings of all steps, the
            first error, or the first skipped result.
        """
        self.event_bus.publish(
            TaskStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                task_name=self.name,
                step_count=len(self.steps),
            )
        )
        start_time = time.time()
        result = self._run_steps(context, input_data)
        self.event_bus.publish(
            TaskCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                task_name=self.name,
                final_result=result,
                duration_ms=(time.time() - start_time) * 1000,
            )
        )
        return result

    def _run_steps(self, context: PipelineContext, input_data: T) -> Result[R]:
        current_data = input_data
        all_warnings: list[str] = []
        last_result: Result = Result.success(input_data)

        for i, step in enumerate(self.steps):
            self._logger.debug(f"Executing step {i + 1}/{len(self.steps)}: {step.name}")

            result = step.run(context, current_data)

            if result.is_error():
                self._logger.debug(f"Step {step.name} failed, aborting task {self.name}")
                error = result.error or RuntimeError(f"Task {self.name} failed at step {step.name}")
                self.event_bus.publish(
                    ErrorEvent(
                        timestamp=time.time(),
                        run_id=context.run_id,
                        context=context,
                        error=error,
                        error_type=type(error).__name__,
                        component=step.name,
                    )
                )
                return Result.failure(error, {"task": self.name, "failed_step": step.name, "step_index": i})

            if result.is_skipped():
                self._logger.debug(f"Step {step.name} skipped the rest of task {self.name}: {result.skip_reason}")
                return result

            if result.warnings:
                all_warnings.extend(result.warnings)
            if result.data is not None:
                current_data = result.data
            last_result = result

        if all_warnings:
            return Result.warning(current_data, all_warnings, last_result.metadata)  # type: ignore[arg-type]
        return Result.success(current_data, last_result.metadata)  # type: ignore[arg-type]
