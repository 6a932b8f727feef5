"""Command audit log and engine state snapshots."""

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from frame_stopwatch.clock import ClockEngine


def engine_state_to_dict(engine: ClockEngine) -> dict[str, Any]:
    """Serialize the engine state to a JSON-serialisable dict."""
    return {
        "elapsed": engine.get(),
        "elapsed_human_readable": engine.elapsed_human_readable,
        "running": engine.running,
        "paused": engine.paused,
        "tick_count": engine.tick_count,
        "alarms": engine.get_alarms(),
    }


@dataclass
class CommandEntry:
    """Record of a command issued against the stopwatch."""

    timestamp: float  # elapsed time when the command was issued
    command: str  # e.g. "start", "set_alarm"
    params: dict[str, Any] = field(default_factory=dict)
    result: str = "ok"  # "ok" or "rejected"


class CommandLog:
    """Append-only, bounded log of commands issued through the API."""

    def __init__(self, maxlen: int = 5000):
        self._entries: deque[CommandEntry] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._entries)

    def record(
        self,
        timestamp: float | None,
        command: str,
        params: dict[str, Any] | None = None,
        ok: bool = True,
    ) -> CommandEntry:
        entry = CommandEntry(
            timestamp=timestamp or 0.0,
            command=command,
            params=params or {},
            result="ok" if ok else "rejected",
        )
        self._entries.append(entry)
        return entry

    def get_last_n(self, n: int = 50) -> list[dict[str, Any]]:
        entries = list(self._entries)[-n:] if n > 0 else []
        return [
            {
                "timestamp": e.timestamp,
                "command": e.command,
                "params": e.params,
                "result": e.result,
            }
            for e in entries
        ]

    def get_all(self) -> list[dict[str, Any]]:
        return self.get_last_n(len(self._entries))

    def clear(self) -> None:
        self._entries.clear()
