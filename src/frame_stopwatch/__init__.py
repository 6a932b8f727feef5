"""Frame-synchronised stopwatch: clock engine, alarms, events and frame schedulers."""

from frame_stopwatch.alarms import AlarmKind, AlarmScheduler
from frame_stopwatch.clock import ClockEngine, format_elapsed
from frame_stopwatch.config import StopwatchConfig
from frame_stopwatch.events import ALARM, EVENT_NAMES, UPDATE, EventBus
from frame_stopwatch.frames import FrameScheduler, ManualFrameScheduler, ThreadedFrameScheduler

__all__ = [
    "ALARM",
    "AlarmKind",
    "AlarmScheduler",
    "ClockEngine",
    "EVENT_NAMES",
    "EventBus",
    "FrameScheduler",
    "ManualFrameScheduler",
    "StopwatchConfig",
    "ThreadedFrameScheduler",
    "UPDATE",
    "format_elapsed",
]
