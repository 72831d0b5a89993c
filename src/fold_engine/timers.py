"""Cancellable delayed callbacks polled by the host loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

Clock = Callable[[], float]


@dataclass
class PendingDeadline:
    deadline: float
    delay_ms: int
    generation: int


class DebounceTimer:
    """Single-shot timer where every ``arm`` supersedes the previous one.

    Nothing runs on its own: the host calls ``process`` periodically (or the
    owner calls ``flush`` on teardown) and the callback fires at most once per
    arming.
    """

    def __init__(self, callback: Callable[[], None], *, clock: Clock = time.monotonic) -> None:
        self._callback = callback
        self._clock = clock
        self._pending: Optional[PendingDeadline] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        return self._pending is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._pending.deadline if self._pending else None

    def arm(self, delay_ms: int) -> None:
        self._generation += 1
        self._pending = PendingDeadline(
            deadline=self._clock() + delay_ms / 1000.0,
            delay_ms=delay_ms,
            generation=self._generation,
        )

    def cancel(self) -> None:
        self._pending = None

    def process(self, now: Optional[float] = None) -> bool:
        """Fire the callback if its deadline passed; returns whether it fired."""

        pending = self._pending
        if pending is None:
            return False
        current = self._clock() if now is None else now
        if current < pending.deadline:
            return False
        return self._fire(pending.generation)

    def flush(self) -> bool:
        pending = self._pending
        if pending is None:
            return False
        return self._fire(pending.generation)

    def _fire(self, generation: int) -> bool:
        if self._pending is None or self._pending.generation != generation:
            return False
        self._pending = None
        self._callback()
        return True


__all__ = ["Clock", "DebounceTimer", "PendingDeadline"]
