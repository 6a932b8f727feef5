"""Tests for the command log and state snapshots."""

from frame_stopwatch.clock import ClockEngine
from frame_stopwatch.frames import ManualFrameScheduler
from frame_stopwatch.telemetry import CommandLog, engine_state_to_dict


def test_command_log_is_bounded():
    log = CommandLog(maxlen=3)
    for i in range(5):
        log.record(float(i), "start")
    assert len(log) == 3
    assert [e["timestamp"] for e in log.get_all()] == [2.0, 3.0, 4.0]


def test_command_log_records_result_and_params():
    log = CommandLog()
    log.record(None, "set_alarm", {"value": -1}, ok=False)
    (entry,) = log.get_last_n(1)
    assert entry == {
        "timestamp": 0.0,
        "command": "set_alarm",
        "params": {"value": -1},
        "result": "rejected",
    }
    log.clear()
    assert log.get_all() == []


def test_engine_state_to_dict():
    frames = ManualFrameScheduler()
    engine = ClockEngine(frames)
    engine.start()
    frames.run([0.0, 1500.0])
    engine.set_alarm(1000)
    engine.pause()

    state = engine_state_to_dict(engine)
    assert state == {
        "elapsed": 1500.0,
        "elapsed_human_readable": "00:00:01.500",
        "running": True,
        "paused": True,
        "tick_count": 2,
        "alarms": [2500.0],
    }
