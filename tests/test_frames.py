"""Tests for the frame schedulers."""

import threading
import time

import pytest

from frame_stopwatch.clock import ClockEngine
from frame_stopwatch.frames import ManualFrameScheduler, ThreadedFrameScheduler


def test_manual_advance_runs_registered_callbacks_once():
    frames = ManualFrameScheduler()
    seen = []
    frames.request_frame(seen.append)
    assert frames.advance(10.0) == 1
    assert frames.advance(20.0) == 0
    assert seen == [10.0]


def test_callback_registered_during_frame_runs_next_frame():
    frames = ManualFrameScheduler()
    seen = []

    def loop(t):
        seen.append(t)
        frames.request_frame(loop)

    frames.request_frame(loop)
    assert frames.run([0.0, 16.0, 32.0]) == 3
    assert seen == [0.0, 16.0, 32.0]
    assert frames.pending == 1


def test_cancelled_handle_never_runs():
    frames = ManualFrameScheduler()
    seen = []
    handle = frames.request_frame(seen.append)
    frames.cancel_frame(handle)
    frames.cancel_frame(handle)
    frames.advance(1.0)
    assert seen == []


def test_manual_rejects_time_going_backwards():
    frames = ManualFrameScheduler()
    frames.advance(100.0)
    with pytest.raises(ValueError):
        frames.advance(50.0)


def test_threaded_rejects_non_positive_fps():
    with pytest.raises(ValueError):
        ThreadedFrameScheduler(fps=0)


def test_threaded_delivers_increasing_timestamps():
    frames = ThreadedFrameScheduler(fps=200)
    seen = []
    done = threading.Event()

    def loop(t):
        seen.append(t)
        if len(seen) < 3:
            frames.request_frame(loop)
        else:
            done.set()

    try:
        frames.request_frame(loop)
        assert done.wait(timeout=5)
    finally:
        frames.close()
    assert len(seen) == 3
    assert seen == sorted(seen)


def test_clock_engine_on_threaded_frames():
    """Start, alarm, pause and stop an engine driven by the frame thread."""
    frames = ThreadedFrameScheduler(fps=200)
    engine = ClockEngine(frames)
    alarmed = threading.Event()
    engine.on("alarm", lambda elapsed: alarmed.set())

    try:
        assert engine.start() is True
        assert engine.set_alarm(20) is True
        assert alarmed.wait(timeout=5)

        assert engine.pause() is True
        frozen = engine.get()
        time.sleep(0.05)
        assert engine.get() == pytest.approx(frozen)

        assert engine.stop() is True
        assert engine.stop() is False
    finally:
        frames.close()
    assert engine.running is False
    assert engine.get() == pytest.approx(frozen)
