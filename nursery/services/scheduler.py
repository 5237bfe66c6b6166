"""APScheduler setup for the periodic reminder refresh."""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from nursery.core.config import get_settings
from nursery.core.database import session_scope
from nursery.services.clock import SystemClock
from nursery.services.engine import ReminderEngine
from nursery.services.notifications import DatabaseNotificationSink

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: AsyncIOScheduler | None = None


def build_engine() -> ReminderEngine:
    """Reminder engine wired to the configured zone and analysis window."""
    settings = get_settings()
    return ReminderEngine(
        SystemClock(),
        tz=settings.tz,
        window_days=settings.analysis_window_days,
        minimum_sample_size=settings.minimum_sample_size,
    )


async def run_scheduled_refresh():
    """Recompute reminders from the activity log and resync pending notifications."""
    logger.info("Starting scheduled reminder refresh")

    engine = build_engine()
    async with session_scope() as session:
        sink = DatabaseNotificationSink(session)
        try:
            await engine.refresh(session, sink, trigger="scheduled")
        except Exception as e:
            # Already recorded in the refresh log; keep the scheduler alive
            logger.error(f"Scheduled reminder refresh failed: {e}")


def start_scheduler():
    """Start the APScheduler."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already started")
        return

    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        run_scheduled_refresh,
        IntervalTrigger(minutes=settings.refresh_interval_minutes),
        id="reminder_refresh",
        name="Learn activity patterns and reschedule reminders",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(f"Scheduler started - reminder refresh every {settings.refresh_interval_minutes} minutes")


def stop_scheduler():
    """Stop the APScheduler."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")
