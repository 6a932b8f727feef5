"""Frame-driven stopwatch clock with pause compensation and one-shot alarms."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from frame_stopwatch.alarms import AlarmKind, AlarmScheduler
from frame_stopwatch.config import StopwatchConfig
from frame_stopwatch.events import ALARM, UPDATE, EventBus
from frame_stopwatch.frames import FrameScheduler

logger = logging.getLogger(__name__)


def format_elapsed(elapsed_ms: float | None) -> str:
    """Format elapsed milliseconds as HH:MM:SS.mmm."""
    total_ms = int(elapsed_ms or 0)
    hours = total_ms // 3_600_000
    minutes = (total_ms % 3_600_000) // 60_000
    seconds = (total_ms % 60_000) // 1000
    millis = total_ms % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


class ClockEngine:
    """Stopwatch driven by a frame scheduler.

    Elapsed time is ``frame timestamp - start_reference``. While paused the
    frames keep arriving and each one pushes ``start_reference`` forward by
    the gap since the previous frame, so paused time never shows up in the
    elapsed value and resuming needs no extra bookkeeping.

    Commands and ticks share one re-entrant lock: listeners may issue
    commands from inside a dispatch and the change is seen on the next tick.
    """

    def __init__(self, scheduler: FrameScheduler, config: StopwatchConfig | None = None):
        self.config = config or StopwatchConfig()
        self.scheduler = scheduler
        self.events = EventBus(isolate_errors=self.config.events.isolate_listener_errors)
        self.alarms = AlarmScheduler(evict_fired=self.config.alarms.evict_fired)

        self.start_reference: float | None = None
        self.last_frame_timestamp: float | None = None
        self.elapsed: float | None = None
        self.tick_count: int = 0
        self._paused = False
        self._tick_handle: int | None = None
        self._lock = threading.RLock()

    # ── Lifecycle ───────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._tick_handle is not None

    @property
    def paused(self) -> bool:
        return self._paused

    def start(self) -> bool:
        """Start or resume. Returns False if already running."""
        with self._lock:
            if self._paused:
                self._paused = False
                logger.debug("Resumed at elapsed %s", self.elapsed)
                return True

            if self._tick_handle is not None:
                return False

            self.elapsed = None
            self.tick_count = 0
            self._tick_handle = self.scheduler.request_frame(self.tick)
            logger.info("Stopwatch started")
            return True

    def pause(self) -> bool:
        """Freeze elapsed time. Returns False if not running or already paused."""
        with self._lock:
            if self._tick_handle is None or self._paused:
                return False
            self._paused = True
            logger.debug("Paused at elapsed %s", self.elapsed)
            return True

    def stop(self) -> bool:
        """Stop and release the frame registration. Returns False if never started.

        The last elapsed value stays readable through get() until the next start().
        """
        with self._lock:
            if self.start_reference is None and self._tick_handle is None:
                return False

            if self._tick_handle is not None:
                self.scheduler.cancel_frame(self._tick_handle)
            self._tick_handle = None
            self.start_reference = None
            self.last_frame_timestamp = None
            self._paused = False
            self.alarms.reset_fired()
            logger.info("Stopwatch stopped at elapsed %s", self.elapsed)
            return True

    def get(self) -> float | None:
        return self.elapsed

    @property
    def elapsed_human_readable(self) -> str:
        return format_elapsed(self.elapsed)

    # ── Frame tick ──────────────────────────────────────────────

    def tick(self, timestamp: float) -> None:
        """Recompute elapsed time for one frame and dispatch events.

        A pause() issued by an ``update`` listener takes effect from the next
        frame, so alarms due on this frame still fire. A stop() issued by any
        listener ends the frame at once: no further alarms are dispatched or
        marked fired.
        """
        with self._lock:
            if self._tick_handle is None:
                # Frame delivered after stop().
                return
            handle = self.scheduler.request_frame(self.tick)
            self._tick_handle = handle
            self.tick_count += 1

            if self.start_reference is None:
                self.start_reference = timestamp

            paused = self._paused
            if paused and self.last_frame_timestamp is not None:
                self.start_reference += timestamp - self.last_frame_timestamp

            self.last_frame_timestamp = timestamp
            self.elapsed = timestamp - self.start_reference
            elapsed = self.elapsed

            self.events.dispatch(UPDATE, elapsed)

            if paused:
                return

            for deadline in self.alarms.due_at(elapsed):
                if self._tick_handle != handle:
                    return
                logger.info("Alarm at %s fired (elapsed %s)", deadline, elapsed)
                self.events.dispatch(ALARM, elapsed)
                if self._tick_handle != handle:
                    return
                self.alarms.mark_fired(deadline)

    # ── Alarms ──────────────────────────────────────────────────

    def set_alarm(self, value: float, kind: AlarmKind | None = None) -> bool:
        """Schedule an alarm. Returns False for invalid requests.

        RELATIVE values are offsets from now; ABSOLUTE values are positions on
        the elapsed timeline. Before the first frame of a run "now" is 0.
        """
        with self._lock:
            if kind is None:
                kind = self.config.alarms.default_kind
            return self.alarms.schedule(kind, value, self._timeline_position())

    def get_alarms(self) -> list[float]:
        with self._lock:
            return self.alarms.list()

    def clear_alarms(self) -> bool:
        with self._lock:
            self.alarms.clear()
            return True

    def _timeline_position(self) -> float:
        if self.start_reference is None or self.elapsed is None:
            return 0.0
        return self.elapsed

    # ── Events ──────────────────────────────────────────────────

    def on(self, event_name: str, callback: Callable[..., Any]) -> bool:
        with self._lock:
            return self.events.on(event_name, callback)

    def off(self, event_name: str | None = None, callback: Callable[..., Any] | None = None) -> bool:
        with self._lock:
            return self.events.off(event_name, callback)
