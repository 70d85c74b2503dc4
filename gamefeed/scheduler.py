"""
gamefeed/scheduler.py

APScheduler wiring for periodic feed regeneration.

Lifecycle
----------
Call ``build_scheduler()`` to get a configured ``BlockingScheduler`` and call
``.start()`` on it; the call blocks until the process is interrupted. The
first run fires immediately, later runs every ``interval_minutes``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from apscheduler.schedulers.blocking import BlockingScheduler

logger = logging.getLogger(__name__)

FEED_JOB_ID = "refresh_game_feed"


def build_scheduler(
    job: Callable[[], object],
    *,
    interval_minutes: float,
) -> BlockingScheduler:
    """
    Build a scheduler running ``job`` on a fixed interval.

    Overlapping runs are not allowed; a run that starts late is coalesced.
    """

    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}.")

    def _guarded_job() -> None:
        logger.info("Scheduler: %s starting", FEED_JOB_ID)
        try:
            job()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Scheduler: %s failed: %s", FEED_JOB_ID, exc)
            return
        logger.info("Scheduler: %s complete", FEED_JOB_ID)

    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(
        _guarded_job,
        trigger="interval",
        minutes=interval_minutes,
        next_run_time=datetime.now(timezone.utc),
        id=FEED_JOB_ID,
        name="Game feed refresh",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=max(1, int(interval_minutes * 60)),
    )
    return scheduler
