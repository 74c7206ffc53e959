"""
SLA External Service Integrations
==================================

APScheduler wrapper driving the watchdog on a fixed interval.
"""

from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

JOB_ID = "sla_watchdog"


class SLAScheduler:
    """
    Wrapper for APScheduler for the background SLA sweep.

    Manages the lifecycle of the scheduler and its single job. The job
    fires on wall-clock time whatever the request load, and never overlaps
    with itself.
    """

    def __init__(self, interval_seconds: int = 300):
        self.interval_seconds = interval_seconds
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._running = False

    async def start(self, job_func: Callable[[], Awaitable[None]]) -> None:
        """Start the scheduler with the given job function."""
        if self._running:
            logger.warning("SLA scheduler already running")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")

        self._scheduler.add_job(
            job_func,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            name="SLA Watchdog",
            misfire_grace_time=60,
            coalesce=True,
            max_instances=1,
            replace_existing=True
        )

        self._scheduler.start()
        self._running = True

        logger.info(
            "SLA scheduler started",
            extra={"interval_seconds": self.interval_seconds}
        )

    async def stop(self) -> None:
        """Stop the scheduler without waiting for a running sweep."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)

        self._running = False
        logger.info("SLA scheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def job(self):
        """The scheduled watchdog job, if any."""
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(JOB_ID)
