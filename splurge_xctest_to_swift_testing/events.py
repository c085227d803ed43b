"""Event system for pipeline observability.

A small thread-safe publish/subscribe bus plus the event dataclasses the
pipeline and the orchestrator publish. ``LoggingSubscriber`` turns the
core events into log records.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .context import PipelineContext
from .result import Result

T = TypeVar("T")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True)
class BaseEvent:
    """Common event metadata."""

    timestamp: float
    run_id: str

    def __post_init__(self) -> None:
        if self.timestamp < 0:
            raise ValueError("Timestamp cannot be negative")


@dataclass(frozen=True)
class StepStartedEvent(BaseEvent):
    """Event fired when a step starts execution."""

    context: PipelineContext
    step_name: str
    step_type: str


@dataclass(frozen=True)
class StepCompletedEvent(BaseEvent):
    """Event fired when a step completes execution."""

    context: PipelineContext
    step_name: str
    step_type: str
    result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class TaskStartedEvent(BaseEvent):
    """Event fired when a task starts execution."""

    context: PipelineContext
    task_name: str
    step_count: int


@dataclass(frozen=True)
class TaskCompletedEvent(BaseEvent):
    """Event fired when a task completes execution."""

    context: PipelineContext
    task_name: str
    final_result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class FileProcessedEvent(BaseEvent):
    """Event fired by the orchestrator once a file has been classified."""

    path: str
    status: str
    message: str | None = None


@dataclass(frozen=True)
class ErrorEvent(BaseEvent):
    """Event fired when an error occurs."""

    context: PipelineContext
    error: Exception
    error_type: str
    component: str


class EventBus:
    """Thread-safe event publication and subscription system.

    Handlers are looked up under the lock and invoked outside it, so a
    slow handler never blocks other publishers.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for events of a specific type.

        Args:
            event_type: The event dataclass/type to subscribe to.
            handler: Callable that accepts a single event instance.
        """
        with self._lock:
            self._subscribers[event_type].append(handler)
            self._logger.debug(f"Subscribed handler {handler} to {event_type.__name__}")

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            if event_type in self._subscribers and handler in self._subscribers[event_type]:
                self._subscribers[event_type].remove(handler)
                self._logger.debug(f"Unsubscribed handler {handler} from {event_type.__name__}")

    def publish(self, event: Any) -> None:
        """Publish an event to the subscribers of its concrete type.

        Errors raised by handlers are logged and do not interrupt delivery
        to other handlers.
        """
        event_type = type(event)

        with self._lock:
            handlers = self._subscribers.get(event_type, []).copy()

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"Event handler error for {event_type.__name__}: {e}", exc_info=True)


class EventSubscriber(ABC):
    """Base class for event subscribers."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._setup_subscriptions()

    @abstractmethod
    def _setup_subscriptions(self) -> None:
        """Call ``event_bus.subscribe`` for the events of interest."""

    @abstractmethod
    def unsubscribe_all(self) -> None:
        """Remove every handler registered in ``_setup_subscriptions``."""


class LoggingSubscriber(EventSubscriber):
    """Event subscriber that logs pipeline events using the logging module."""

    def _setup_subscriptions(self) -> None:
        self.event_bus.subscribe(TaskStartedEvent, self._on_task_started)
        self.event_bus.subscribe(TaskCompletedEvent, self._on_task_completed)
        self.event_bus.subscribe(StepStartedEvent, self._on_step_started)
        self.event_bus.subscribe(StepCompletedEvent, self._on_step_completed)
        self.event_bus.subscribe(FileProcessedEvent, self._on_file_processed)
        self.event_bus.subscribe(ErrorEvent, self._on_error)

    def unsubscribe_all(self) -> None:
        self.event_bus.unsubscribe(TaskStartedEvent, self._on_task_started)
        self.event_bus.unsubscribe(TaskCompletedEvent, self._on_task_completed)
        self.event_bus.unsubscribe(StepStartedEvent, self._on_step_started)
        self.event_bus.unsubscribe(StepCompletedEvent, self._on_step_completed)
        self.event_bus.unsubscribe(FileProcessedEvent, self._on_file_processed)
        self.event_bus.unsubscribe(ErrorEvent, self._on_error)

    def _on_task_started(self, event: TaskStartedEvent) -> None:
        source = event.context.source_file or "<memory>"
        self.event_bus._logger.debug(f"Task started: {event.task_name} for {source} (run_id: {event.run_id})")

    def _on_task_completed(self, event: TaskCompletedEvent) -> None:
        status = event.final_result.status.value.upper()
        self.event_bus._logger.debug(f"Task completed in {event.duration_ms:.2f}ms: {event.task_name} ({status})")

    def _on_step_started(self, event: StepStartedEvent) -> None:
        self.event_bus._logger.debug(f"Step started: {event.step_name} ({event.step_type})")

    def _on_step_completed(self, event: StepCompletedEvent) -> None:
        status = event.result.status.value.upper()
        self.event_bus._logger.debug(f"Step completed in {event.duration_ms:.2f}ms: {event.step_name} ({status})")

    def _on_file_processed(self, event: FileProcessedEvent) -> None:
        suffix = f": {event.message}" if event.message else ""
        self.event_bus._logger.info(f"{event.status}: {event.path}{suffix}")

    def _on_error(self, event: ErrorEvent) -> None:
        self.event_bus._logger.error(f"Error in {event.component}: {event.error}")
