"""Reminder engine: analyze -> predict -> schedule over the activity log."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Mapping
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nursery.models.database import ActivityEntry, ReminderSettingsRecord
from nursery.models.refresh_log import RefreshLog
from nursery.services.clock import Clock
from nursery.services.notifications import NotificationSink
from nursery.services.patterns import DEFAULT_WINDOW_DAYS, MINIMUM_SAMPLE_SIZE, analyze_patterns
from nursery.services.predictor import predict_all
from nursery.services.reminder_settings import ReminderSettings
from nursery.services.reminders import schedule
from nursery.services.types import ActivityKind, ActivityRecord, Pattern, Prediction, Reminder

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Outcome of one refresh pass."""

    patterns: dict[ActivityKind, Pattern] = field(default_factory=dict)
    predictions: list[Prediction] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)
    activities_analyzed: int = 0

    def summary(self) -> dict:
        return {
            "activities": self.activities_analyzed,
            "patterns": sorted(k.value for k in self.patterns),
            "predictions": len(self.predictions),
            "reminders": len(self.reminders),
        }


async def load_reminder_settings(session: AsyncSession) -> ReminderSettings:
    """Stored reminder settings, or the defaults if none were saved."""
    result = await session.execute(select(ReminderSettingsRecord).where(ReminderSettingsRecord.id == 1))
    record = result.scalar_one_or_none()
    return record.to_settings() if record else ReminderSettings()


async def load_activity_records(session: AsyncSession, since: datetime) -> list[ActivityRecord]:
    """Activity log entries starting at or after `since` (naive UTC, as stored)."""
    result = await session.execute(
        select(ActivityEntry)
        .where(ActivityEntry.start_time >= since)
        .order_by(ActivityEntry.start_time)
    )
    return [entry.to_record() for entry in result.scalars().all()]


class ReminderEngine:
    """
    Stateless pattern-learning and reminder pipeline.

    Every call recomputes from the snapshot it is given; "now" comes from the
    injected clock so passes are reproducible in tests. Times are naive UTC;
    `tz` only decides the local hour of day for distributions and quiet hours.
    """

    def __init__(
        self,
        clock: Clock,
        tz: str = "Europe/London",
        window_days: int = DEFAULT_WINDOW_DAYS,
        minimum_sample_size: int = MINIMUM_SAMPLE_SIZE,
    ):
        self.clock = clock
        self.tz = ZoneInfo(tz)
        self.window_days = window_days
        self.minimum_sample_size = minimum_sample_size

    def analyze(
        self,
        activities: Iterable[ActivityRecord],
        reference_time: datetime | None = None,
    ) -> dict[ActivityKind, Pattern]:
        if reference_time is None:
            reference_time = self.clock.now()
        return analyze_patterns(
            activities,
            reference_time,
            window_days=self.window_days,
            minimum_sample_size=self.minimum_sample_size,
            tz=self.tz,
        )

    def predict(
        self,
        activities: Iterable[ActivityRecord],
        patterns: Mapping[ActivityKind, Pattern],
        settings: ReminderSettings,
    ) -> list[Prediction]:
        return predict_all(activities, patterns, settings, self.clock.now(), self.tz)

    def schedule(
        self,
        predictions: Iterable[Prediction],
        settings: ReminderSettings,
        now: datetime | None = None,
    ) -> list[Reminder]:
        return schedule(predictions, settings, now if now is not None else self.clock.now())

    def run(self, activities: Iterable[ActivityRecord], settings: ReminderSettings) -> RefreshResult:
        """Full pipeline over an in-memory snapshot, using a single "now"."""
        activities = list(activities)
        now = self.clock.now()
        patterns = self.analyze(activities, now)
        predictions = predict_all(activities, patterns, settings, now, self.tz)
        reminders = schedule(predictions, settings, now)
        return RefreshResult(
            patterns=patterns,
            predictions=predictions,
            reminders=reminders,
            activities_analyzed=len(activities),
        )

    async def load_activities(self, session: AsyncSession) -> list[ActivityRecord]:
        """Stored activities inside the analysis window."""
        since = self.clock.now() - timedelta(days=self.window_days)
        return await load_activity_records(session, since)

    async def compute(self, session: AsyncSession) -> RefreshResult:
        """Run the pipeline over the stored log without delivering anything."""
        settings = await load_reminder_settings(session)
        activities = await self.load_activities(session)
        return self.run(activities, settings)

    async def refresh(
        self,
        session: AsyncSession,
        sink: NotificationSink,
        trigger: str = "manual",
    ) -> RefreshResult:
        """
        Recompute reminders from the stored log and resync the sink.

        The sink receives the whole batch, replacing whatever was pending.
        Each pass is recorded in the refresh log.
        """
        started_at = datetime.utcnow()
        try:
            result = await self.compute(session)
            await sink.replace_all(result.reminders)
        except Exception as e:
            logger.error(f"Reminder refresh failed: {e}")
            await session.rollback()
            session.add(RefreshLog(
                trigger=trigger,
                started_at=started_at,
                completed_at=datetime.utcnow(),
                status="failed",
                error_message=str(e),
            ))
            await session.commit()
            raise

        session.add(RefreshLog(
            trigger=trigger,
            started_at=started_at,
            completed_at=datetime.utcnow(),
            status="success",
            details=result.summary(),
        ))
        await session.commit()

        logger.info(f"Reminder refresh completed: {result.summary()}")
        return result
