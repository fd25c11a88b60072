import unittest
from datetime import datetime, time

from stockwatch.core.errors import StorageError
from stockwatch.core.scheduler import Scheduler, next_daily_run, parse_time


class SchedulerTest(unittest.TestCase):
    def test_run_pending_executes_due_job(self):
        hits = {"count": 0}

        def job():
            hits["count"] += 1

        scheduler = Scheduler()
        scheduler.add_daily_job("test", "00:00", job)
        scheduler.jobs[0].next_run = datetime.now()

        self.assertEqual(scheduler.run_pending(), 1)
        self.assertEqual(hits["count"], 1)
        self.assertGreater(scheduler.jobs[0].next_run, datetime.now())

    def test_failing_job_does_not_escape(self):
        def job():
            raise StorageError("database is locked")

        scheduler = Scheduler()
        scheduler.add_daily_job("broken", "00:00", job)
        scheduler.jobs[0].next_run = datetime.now()
        self.assertEqual(scheduler.run_pending(), 1)

    def test_parse_time(self):
        self.assertEqual(parse_time("08:30"), time(8, 30))
        self.assertEqual(parse_time("23:59:10"), time(23, 59, 10))
        with self.assertRaises(ValueError):
            parse_time("8")

    def test_next_daily_run_rolls_to_tomorrow(self):
        now = datetime(2024, 5, 1, 9, 0)
        self.assertEqual(next_daily_run(time(8, 0), now), datetime(2024, 5, 2, 8, 0))
        self.assertEqual(next_daily_run(time(10, 0), now), datetime(2024, 5, 1, 10, 0))


if __name__ == "__main__":
    unittest.main()
