"""Tests for the polled scheduler and debounced refresh coordinator."""

from __future__ import annotations

import unittest

from todotree.refresh import (
    REFRESH_DEBOUNCE_SECONDS,
    STATE_IDLE,
    STATE_PENDING,
    RefreshCoordinator,
    Scheduler,
)


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _CountingView:
    def __init__(self) -> None:
        self.refreshes = 0

    def refresh(self) -> None:
        self.refreshes += 1


class SchedulerTests(unittest.TestCase):
    def test_runs_callbacks_once_when_due_in_due_order(self) -> None:
        clock = _FakeClock()
        scheduler = Scheduler(monotonic=clock)
        calls: list[str] = []
        scheduler.call_later(0.2, lambda: calls.append("late"))
        scheduler.call_later(0.1, lambda: calls.append("early"))

        self.assertEqual(scheduler.run_due(), 0)
        clock.advance(0.25)
        self.assertEqual(scheduler.run_due(), 2)
        self.assertEqual(calls, ["early", "late"])
        self.assertEqual(scheduler.run_due(), 0)

    def test_cancelled_callback_never_runs(self) -> None:
        clock = _FakeClock()
        scheduler = Scheduler(monotonic=clock)
        calls: list[int] = []
        handle = scheduler.call_later(0.1, lambda: calls.append(1))
        scheduler.cancel(handle)
        clock.advance(1.0)
        scheduler.run_due()
        self.assertEqual(calls, [])
        self.assertIsNone(scheduler.next_delay())

    def test_next_delay_reports_time_to_earliest_timer(self) -> None:
        clock = _FakeClock()
        scheduler = Scheduler(monotonic=clock)
        scheduler.call_later(0.5, lambda: None)
        clock.advance(0.2)
        self.assertAlmostEqual(scheduler.next_delay(), 0.3)


class RefreshCoordinatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _FakeClock()
        self.scheduler = Scheduler(monotonic=self.clock)
        self.view = _CountingView()
        self.coordinator = RefreshCoordinator(self.scheduler, lambda: [self.view])

    def test_debounce_delay_is_three_hundred_milliseconds(self) -> None:
        self.assertEqual(REFRESH_DEBOUNCE_SECONDS, 0.3)

    def test_burst_of_notifications_produces_one_refresh_after_the_last(self) -> None:
        for _ in range(5):
            self.coordinator.on_corpus_changed()
            self.clock.advance(0.1)
            self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 0)
        self.assertEqual(self.coordinator.state, STATE_PENDING)

        # Last notification was 0.1s ago; the window closes 0.3s after it.
        self.clock.advance(0.15)
        self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 0)

        self.clock.advance(0.06)
        self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 1)
        self.assertEqual(self.coordinator.refresh_count, 1)
        self.assertEqual(self.coordinator.state, STATE_IDLE)

    def test_change_kind_arguments_are_ignored(self) -> None:
        self.coordinator.on_corpus_changed("renamed", "a.md")
        self.clock.advance(0.3)
        self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 1)

    def test_every_active_view_is_refreshed(self) -> None:
        other = _CountingView()
        coordinator = RefreshCoordinator(self.scheduler, lambda: [self.view, other])
        coordinator.on_corpus_changed()
        self.clock.advance(0.3)
        self.scheduler.run_due()
        self.assertEqual((self.view.refreshes, other.refreshes), (1, 1))

    def test_teardown_cancels_pending_refresh(self) -> None:
        self.coordinator.on_corpus_changed()
        self.coordinator.teardown()
        self.assertEqual(self.coordinator.state, STATE_IDLE)
        self.clock.advance(1.0)
        self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 0)

    def test_failing_view_does_not_stop_other_views(self) -> None:
        class _Broken:
            def refresh(self) -> None:
                raise RuntimeError("boom")

        coordinator = RefreshCoordinator(self.scheduler, lambda: [_Broken(), self.view])
        coordinator.on_corpus_changed()
        self.clock.advance(0.3)
        with self.assertLogs("todotree.refresh", level="ERROR"):
            self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 1)
        self.assertEqual(coordinator.state, STATE_IDLE)

    def test_flush_runs_pending_refresh_immediately(self) -> None:
        self.assertFalse(self.coordinator.flush())
        self.coordinator.on_corpus_changed()
        self.assertTrue(self.coordinator.flush())
        self.assertEqual(self.view.refreshes, 1)
        self.clock.advance(1.0)
        self.scheduler.run_due()
        self.assertEqual(self.view.refreshes, 1)


if __name__ == "__main__":
    unittest.main()
