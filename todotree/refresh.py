"""Debounced refresh scheduling.

``Scheduler`` is a polled timer queue driven by an injectable monotonic
clock; the host loop calls ``run_due`` on every idle tick. Tests drive it
with a fake clock instead of sleeping.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)

REFRESH_DEBOUNCE_SECONDS = 0.3

STATE_IDLE = "idle"
STATE_PENDING = "pending"


@dataclass(order=True)
class TimerHandle:
    """Scheduled callback; ordering is by due time, then creation order."""

    due: float
    seq: int
    callback: Callable[[], object] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """Single-threaded fire-after timer queue."""

    def __init__(self, monotonic: Callable[[], float] = time.monotonic) -> None:
        self.monotonic = monotonic
        self._queue: list[TimerHandle] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle:
        handle = TimerHandle(self.monotonic() + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None:
            handle.cancelled = True

    def cancel_all(self) -> None:
        for handle in self._queue:
            handle.cancelled = True
        self._queue.clear()

    def pending(self) -> int:
        return sum(1 for handle in self._queue if not handle.cancelled)

    def next_delay(self) -> float | None:
        """Seconds until the next live timer, or ``None`` when nothing is queued."""
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        if not self._queue:
            return None
        return max(0.0, self._queue[0].due - self.monotonic())

    def run_due(self) -> int:
        """Run every timer due at the current time and return how many ran.

        Timers scheduled by a callback are not run in the same pass even if
        already due, so a callback that reschedules itself cannot spin.
        """
        now = self.monotonic()
        due: list[TimerHandle] = []
        while self._queue and self._queue[0].due <= now:
            handle = heapq.heappop(self._queue)
            if not handle.cancelled:
                due.append(handle)
        ran = 0
        for handle in due:
            if handle.cancelled:
                continue
            handle.cancelled = True
            handle.callback()
            ran += 1
        return ran


class Refreshable(Protocol):
    def refresh(self) -> None: ...


class RefreshCoordinator:
    """Collapse bursts of corpus-change notifications into one refresh.

    Every notification restarts the delay window; when it elapses each view
    returned by ``targets`` is refreshed once.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        targets: Callable[[], Iterable[Refreshable]],
        delay: float = REFRESH_DEBOUNCE_SECONDS,
    ) -> None:
        self.scheduler = scheduler
        self.targets = targets
        self.delay = delay
        self.refresh_count = 0
        self._timer: TimerHandle | None = None

    @property
    def state(self) -> str:
        return STATE_IDLE if self._timer is None else STATE_PENDING

    def on_corpus_changed(self, *_change: object) -> None:
        """Entry point for every change notification, whatever its kind."""
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
        self._timer = self.scheduler.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        self.refresh_count += 1
        for view in list(self.targets()):
            try:
                view.refresh()
            except Exception:
                logger.exception("refresh failed for %r", view)

    def flush(self) -> bool:
        """Run a pending refresh immediately. Returns whether one was pending."""
        if self._timer is None:
            return False
        self.scheduler.cancel(self._timer)
        self._fire()
        return True

    def teardown(self) -> None:
        """Cancel any pending refresh without running it."""
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
            self._timer = None
