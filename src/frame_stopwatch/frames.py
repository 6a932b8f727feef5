"""Frame schedulers: the "call me on the next frame" dependency of the clock.

A callback registered while a frame is being delivered runs on the
following frame, never the current one, and a cancelled handle never runs.
Timestamps are monotonic milliseconds.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from typing import Callable, Iterable, Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class ManualFrameScheduler:
    """Deterministic scheduler whose frames are delivered by the caller.

    Example::

        frames = ManualFrameScheduler()
        engine = ClockEngine(frames)
        engine.start()
        frames.run([0.0, 16.7, 33.4])
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._callbacks: dict[int, FrameCallback] = {}
        self.last_timestamp: float | None = None

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, timestamp: float) -> int:
        """Deliver one frame at *timestamp*. Returns the number of callbacks run."""
        if self.last_timestamp is not None and timestamp < self.last_timestamp:
            raise ValueError(
                f"Frame timestamp {timestamp} is before previous frame {self.last_timestamp}"
            )
        self.last_timestamp = timestamp

        ran = 0
        for handle in list(self._callbacks):
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue
            callback(timestamp)
            ran += 1
        return ran

    def run(self, timestamps: Iterable[float]) -> int:
        """Deliver a frame for each timestamp in order."""
        return sum(self.advance(t) for t in timestamps)


class ThreadedFrameScheduler:
    """Delivers frames from a background thread at a fixed rate.

    The thread starts when the first callback is requested and exits once
    no callbacks are left waiting.
    """

    def __init__(self, fps: float = 60.0):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.frame_interval_s = 1.0 / fps
        self._ids = itertools.count(1)
        self._callbacks: dict[int, FrameCallback] = {}
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self._thread: threading.Thread | None = None

    @staticmethod
    def now() -> float:
        return time.perf_counter() * 1000.0

    def request_frame(self, callback: FrameCallback) -> int:
        with self._lock:
            handle = next(self._ids)
            self._callbacks[handle] = callback
            if self._thread is None and not self._closed.is_set():
                self._thread = threading.Thread(
                    target=self._run_loop, name="frame-scheduler", daemon=True
                )
                self._thread.start()
                logger.debug("Frame thread started at %.1f fps", 1.0 / self.frame_interval_s)
        return handle

    def cancel_frame(self, handle: int) -> None:
        with self._lock:
            self._callbacks.pop(handle, None)

    def _run_loop(self) -> None:
        """Background thread: deliver frames while callbacks are waiting."""
        while not self._closed.wait(self.frame_interval_s):
            with self._lock:
                if not self._callbacks:
                    self._thread = None
                    logger.debug("Frame thread idle, exiting")
                    return
                handles = list(self._callbacks)

            timestamp = self.now()
            for handle in handles:
                with self._lock:
                    callback = self._callbacks.pop(handle, None)
                if callback is None:
                    continue
                try:
                    callback(timestamp)
                except Exception:
                    logger.exception("Frame callback %r failed", callback)

        with self._lock:
            self._thread = None

    def close(self, timeout: float = 2.0) -> None:
        """Stop delivering frames and join the background thread."""
        self._closed.set()
        with self._lock:
            thread = self._thread
            self._callbacks.clear()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
