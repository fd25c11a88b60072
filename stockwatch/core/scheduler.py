from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Callable, Optional

from stockwatch.core.errors import InventoryError

logger = logging.getLogger(__name__)

_JOB_EXCEPTIONS = (InventoryError, OSError, RuntimeError, ValueError)


def parse_time(value: str) -> time:
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError("LOW_STOCK_DIGEST_TIME must be in HH:MM format")
    hour = int(parts[0])
    minute = int(parts[1])
    second = int(parts[2]) if len(parts) > 2 else 0
    return time(hour=hour, minute=minute, second=second)


def next_daily_run(run_time: time, now: datetime) -> datetime:
    candidate = now.replace(
        hour=run_time.hour,
        minute=run_time.minute,
        second=run_time.second,
        microsecond=0,
    )
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


@dataclass
class DailyJob:
    name: str
    run_time: time
    func: Callable[[], object]
    next_run: Optional[datetime] = None


class Scheduler:
    """Runs registered jobs once a day on a background thread."""

    def __init__(self, *, timezone_mode: str = "local", poll_seconds: int = 30):
        self._jobs: list[DailyJob] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._poll_seconds = max(1, int(poll_seconds))
        self._tz = timezone.utc if timezone_mode.lower() == "utc" else None

    @property
    def jobs(self) -> list[DailyJob]:
        with self._lock:
            return list(self._jobs)

    def _now(self) -> datetime:
        return datetime.now(tz=self._tz)

    def add_daily_job(self, name: str, run_time: str, func: Callable[[], object]) -> DailyJob:
        run_at = parse_time(run_time)
        job = DailyJob(name=name, run_time=run_at, func=func)
        job.next_run = next_daily_run(run_at, self._now())
        with self._lock:
            self._jobs.append(job)
        return job

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="scheduler", daemon=True)
        self._thread.start()
        logger.info("Scheduler started with %d job(s).", len(self.jobs))

    def stop(self) -> None:
        if not self._thread:
            return
        self._stop_event.set()
        self._thread.join(timeout=self._poll_seconds + 1)
        self._thread = None
        logger.info("Scheduler stopped.")

    def run_pending(self) -> int:
        now = self._now()
        ran = 0
        for job in self.jobs:
            if job.next_run and now >= job.next_run:
                self._run_job(job)
                job.next_run = next_daily_run(job.run_time, now)
                ran += 1
        return ran

    @staticmethod
    def _run_job(job: DailyJob) -> None:
        logger.info("Running scheduled job: %s", job.name)
        try:
            job.func()
        except _JOB_EXCEPTIONS:
            logger.exception("Scheduled job failed: %s", job.name)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_pending()
            self._stop_event.wait(self._poll_seconds)
