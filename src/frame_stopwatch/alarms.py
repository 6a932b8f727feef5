"""Alarm kinds and the per-engine alarm scheduler."""

from __future__ import annotations

import logging
import math
from enum import Enum
from numbers import Real

logger = logging.getLogger(__name__)


class AlarmKind(str, Enum):
    """How a requested alarm value maps onto the elapsed-time timeline."""

    RELATIVE = "relative"
    ABSOLUTE = "absolute"

    def compute_deadline(self, current_elapsed: float, requested_value: float) -> float:
        """Return the absolute deadline for a request made at *current_elapsed*."""
        if self is AlarmKind.RELATIVE:
            return current_elapsed + requested_value
        return float(requested_value)


def _is_valid_value(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


class AlarmScheduler:
    """Holds pending and fired deadlines for one clock engine.

    Deadlines stay in ``pending`` after they fire and are shadowed by the
    ``fired`` set, so ``list()`` keeps reporting them until ``clear()``.
    """

    def __init__(self, evict_fired: bool = False):
        self.evict_fired = evict_fired
        self._pending: list[float] = []
        self._fired: set[float] = set()

    def schedule(self, kind: AlarmKind, requested_value: float, current_elapsed: float) -> bool:
        """Register an alarm. Returns False for invalid input, never raises."""
        if not _is_valid_value(requested_value):
            logger.debug("Rejected alarm value %r", requested_value)
            return False
        if not isinstance(kind, AlarmKind):
            logger.debug("Rejected alarm kind %r", kind)
            return False
        if kind is AlarmKind.ABSOLUTE and requested_value <= current_elapsed:
            logger.debug(
                "Rejected absolute alarm %s at or before elapsed %s",
                requested_value,
                current_elapsed,
            )
            return False

        deadline = kind.compute_deadline(current_elapsed, requested_value)
        self._pending.append(deadline)
        logger.debug("Scheduled %s alarm at %s", kind.value, deadline)
        return True

    def due_at(self, elapsed: float) -> list[float]:
        """Pending deadlines reached by *elapsed* that have not fired, in insertion order."""
        return [d for d in self._pending if d not in self._fired and d <= elapsed]

    def mark_fired(self, deadline: float) -> None:
        self._fired.add(deadline)
        if self.evict_fired and deadline in self._pending:
            self._pending.remove(deadline)

    def reset_fired(self) -> None:
        self._fired.clear()

    def list(self) -> list[float]:
        """Snapshot of pending deadlines."""
        return list(self._pending)

    def clear(self) -> None:
        self._pending.clear()
        self._fired.clear()
