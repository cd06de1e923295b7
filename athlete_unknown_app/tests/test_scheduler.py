from django.test import SimpleTestCase

from athlete_unknown_core.scheduler import TaskScheduler


class TestTaskScheduler(SimpleTestCase):
    def test_runs_when_due(self):
        scheduler = TaskScheduler()
        calls = []
        scheduler.call_later(100, lambda: calls.append("a"))

        self.assertEqual(scheduler.advance(99), 0)
        self.assertEqual(calls, [])
        self.assertEqual(scheduler.advance(1), 1)
        self.assertEqual(calls, ["a"])

    def test_runs_in_due_order(self):
        scheduler = TaskScheduler()
        calls = []
        scheduler.call_later(300, lambda: calls.append("late"))
        scheduler.call_later(100, lambda: calls.append("early"))
        scheduler.call_later(100, lambda: calls.append("early-second"))

        scheduler.advance(1000)
        self.assertEqual(calls, ["early", "early-second", "late"])

    def test_cancelled_task_does_not_run(self):
        scheduler = TaskScheduler()
        calls = []
        task = scheduler.call_later(100, lambda: calls.append("a"))
        task.cancel()

        self.assertFalse(task.pending)
        self.assertEqual(scheduler.advance(200), 0)
        self.assertEqual(calls, [])

    def test_cancel_all(self):
        scheduler = TaskScheduler()
        scheduler.call_later(10, lambda: None)
        scheduler.call_later(20, lambda: None)
        self.assertEqual(scheduler.pending_count, 2)

        scheduler.cancel_all()
        self.assertEqual(scheduler.pending_count, 0)

    def test_real_clock(self):
        now = [1000.0]
        scheduler = TaskScheduler(clock=lambda: now[0])
        calls = []
        scheduler.call_later(650, lambda: calls.append("done"))

        self.assertEqual(scheduler.run_pending(), 0)
        now[0] = 1650.0
        self.assertEqual(scheduler.run_pending(), 1)
        self.assertEqual(calls, ["done"])

    def test_advance_needs_virtual_time(self):
        scheduler = TaskScheduler(clock=lambda: 0.0)
        with self.assertRaises(RuntimeError):
            scheduler.advance(10)
