import logging
import time

import pytest

from splurge_xctest_to_swift_testing.context import PipelineContext
from splurge_xctest_to_swift_testing.events import (
    ErrorEvent,
    EventBus,
    FileProcessedEvent,
    LoggingSubscriber,
    StepCompletedEvent,
    StepStartedEvent,
    TaskCompletedEvent,
)
from splurge_xctest_to_swift_testing.result import Result


def _context() -> PipelineContext:
    return PipelineContext.create(source_file="ATests.swift", run_id="run-1")


def _step_started() -> StepStartedEvent:
    return StepStartedEvent(
        timestamp=time.time(), run_id="run-1", context=_context(), step_name="parse", step_type="ParseSourceStep"
    )


def test_eventbus_subscribe_and_publish():
    bus = EventBus()
    received = []

    bus.subscribe(StepStartedEvent, received.append)
    event = _step_started()
    bus.publish(event)

    assert received == [event]


def test_publish_dispatches_on_exact_type():
    bus = EventBus()
    received = []
    bus.subscribe(StepCompletedEvent, received.append)

    bus.publish(_step_started())

    assert received == []


def test_eventbus_publish_handler_raises_but_others_receive(caplog):
    bus = EventBus()
    calls = []

    def a(evt):
        calls.append("a")

    def b(evt):
        calls.append("b")
        raise RuntimeError("boom")

    def c(evt):
        calls.append("c")

    for handler in (a, b, c):
        bus.subscribe(StepStartedEvent, handler)

    with caplog.at_level(logging.ERROR):
        bus.publish(_step_started())

    assert calls == ["a", "b", "c"]
    assert "Event handler error for StepStartedEvent: boom" in caplog.text


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []

    bus.subscribe(StepStartedEvent, received.append)
    bus.unsubscribe(StepStartedEvent, received.append)
    bus.unsubscribe(StepStartedEvent, received.append)
    bus.publish(_step_started())

    assert received == []


def test_negative_timestamp_is_rejected():
    with pytest.raises(ValueError, match="Timestamp cannot be negative"):
        FileProcessedEvent(timestamp=-1.0, run_id="r", path="A.swift", status="converted")


class TestLoggingSubscriber:
    """Core events become log records."""

    def test_logs_events(self, caplog):
        bus = EventBus()
        LoggingSubscriber(bus)
        context = _context()

        with caplog.at_level(logging.DEBUG, logger="splurge_xctest_to_swift_testing.events"):
            bus.publish(_step_started())
            bus.publish(
                TaskCompletedEvent(
                    timestamp=time.time(),
                    run_id="run-1",
                    context=context,
                    task_name="xctest_migration",
                    final_result=Result.success("x"),
                    duration_ms=1.5,
                )
            )
            bus.publish(FileProcessedEvent(timestamp=time.time(), run_id="run-1", path="A.swift", status="converted"))
            bus.publish(
                ErrorEvent(
                    timestamp=time.time(),
                    run_id="run-1",
                    context=context,
                    error=ValueError("bad"),
                    error_type="ValueError",
                    component="parse",
                )
            )

        assert "Step started: parse (ParseSourceStep)" in caplog.text
        assert "Task completed in 1.50ms: xctest_migration (SUCCESS)" in caplog.text
        assert "converted: A.swift" in caplog.text
        assert "Error in parse: bad" in caplog.text

    def test_unsubscribe_all(self, caplog):
        bus = EventBus()
        subscriber = LoggingSubscriber(bus)

        subscriber.unsubscribe_all()
        with caplog.at_level(logging.DEBUG, logger="splurge_xctest_to_swift_testing.events"):
            bus.publish(_step_started())

        assert "Step started" not in caplog.text
