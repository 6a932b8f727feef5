"""Tests for the event bus."""

import logging

import pytest

from frame_stopwatch.events import ALARM, UPDATE, EventBus


def test_on_rejects_unknown_channel():
    bus = EventBus()
    assert bus.on("tick", lambda t: None) is False
    assert bus.on(UPDATE, "not callable") is False


def test_dispatch_in_registration_order_with_same_args():
    bus = EventBus()
    calls = []
    bus.on(UPDATE, lambda t: calls.append(("a", t)))
    bus.on(UPDATE, lambda t: calls.append(("b", t)))
    bus.dispatch(UPDATE, 16.0)
    assert calls == [("a", 16.0), ("b", 16.0)]


def test_same_callback_can_be_registered_twice():
    bus = EventBus()
    calls = []
    listener = calls.append
    bus.on(ALARM, listener)
    bus.on(ALARM, listener)
    bus.dispatch(ALARM, 1.0)
    assert calls == [1.0, 1.0]


def test_off_with_callback_removes_first_match_only():
    bus = EventBus()
    calls = []
    listener = calls.append
    bus.on(ALARM, listener)
    bus.on(ALARM, listener)
    assert bus.off(ALARM, listener) is True
    assert bus.listeners(ALARM) == [listener]


def test_off_unregistered_callback_is_noop():
    bus = EventBus()
    kept = lambda t: None  # noqa: E731
    bus.on(ALARM, kept)
    assert bus.off(ALARM, lambda t: None) is True
    assert bus.listeners(ALARM) == [kept]


def test_off_channel_and_off_all():
    bus = EventBus()
    bus.on(UPDATE, lambda t: None)
    bus.on(ALARM, lambda t: None)
    bus.on(ALARM, lambda t: None)

    assert bus.off(ALARM) is True
    assert bus.listeners(ALARM) == []
    assert len(bus.listeners(UPDATE)) == 1

    assert bus.off() is True
    assert bus.listeners(UPDATE) == []


def test_off_unknown_channel_returns_false():
    assert EventBus().off("tick") is False


def test_listener_exception_propagates_and_aborts_remaining():
    bus = EventBus()
    calls = []

    def boom(t):
        raise RuntimeError("listener failed")

    bus.on(UPDATE, boom)
    bus.on(UPDATE, calls.append)
    with pytest.raises(RuntimeError):
        bus.dispatch(UPDATE, 1.0)
    assert calls == []


def test_isolated_listener_errors_are_logged(caplog):
    bus = EventBus(isolate_errors=True)
    calls = []

    def boom(t):
        raise RuntimeError("listener failed")

    bus.on(UPDATE, boom)
    bus.on(UPDATE, calls.append)
    with caplog.at_level(logging.ERROR, logger="frame_stopwatch.events"):
        bus.dispatch(UPDATE, 1.0)
    assert calls == [1.0]
    assert "failed" in caplog.text


def test_listener_may_unregister_during_dispatch():
    bus = EventBus()
    calls = []

    def once(t):
        calls.append(t)
        bus.off(UPDATE, once)

    bus.on(UPDATE, once)
    bus.on(UPDATE, calls.append)
    bus.dispatch(UPDATE, 1.0)
    bus.dispatch(UPDATE, 2.0)
    assert calls == [1.0, 1.0, 2.0]
