"""Pattern, prediction and reminder API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nursery.core.config import get_settings
from nursery.core.database import get_db
from nursery.models.database import ReminderSettingsRecord
from nursery.schemas.responses import (
    PatternResult,
    PatternSummaryResponse,
    PredictionResult,
    RefreshResponse,
    ReminderResult,
    ReminderSettingsBody,
)
from nursery.services.engine import ReminderEngine, load_reminder_settings
from nursery.services.notifications import DatabaseNotificationSink
from nursery.services.patterns import pattern_summary, typical_sleep_duration_minutes
from nursery.services.reminders import snooze
from nursery.services.scheduler import build_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reminders"])


def get_engine() -> ReminderEngine:
    """Dependency for the reminder engine."""
    return build_engine()


def get_sink(db: AsyncSession = Depends(get_db)) -> DatabaseNotificationSink:
    """Dependency for the notification sink bound to the request session."""
    return DatabaseNotificationSink(db)


@router.get("/patterns", response_model=list[PatternResult])
async def get_patterns(
    db: AsyncSession = Depends(get_db),
    engine: ReminderEngine = Depends(get_engine),
):
    """Get the patterns learned from the recent activity log."""
    result = await engine.compute(db)
    return [
        PatternResult.from_pattern(result.patterns[kind])
        for kind in sorted(result.patterns, key=lambda k: k.value)
    ]


@router.get("/patterns/summary", response_model=PatternSummaryResponse)
async def get_pattern_summary(
    db: AsyncSession = Depends(get_db),
    engine: ReminderEngine = Depends(get_engine),
):
    """Get a plain-English summary of the learned patterns."""
    activities = await engine.load_activities(db)
    patterns = engine.analyze(activities)

    return PatternSummaryResponse(
        has_learned_patterns=bool(patterns),
        summary=pattern_summary(patterns),
        typical_sleep_duration_minutes=typical_sleep_duration_minutes(activities),
    )


@router.get("/predictions", response_model=list[PredictionResult])
async def get_predictions(
    db: AsyncSession = Depends(get_db),
    engine: ReminderEngine = Depends(get_engine),
):
    """Get the predicted next occurrence of each activity kind."""
    result = await engine.compute(db)
    now = engine.clock.now()
    return [PredictionResult.from_prediction(p, now) for p in result.predictions]


@router.get("/reminders", response_model=list[ReminderResult])
async def get_reminders(
    db: AsyncSession = Depends(get_db),
    engine: ReminderEngine = Depends(get_engine),
):
    """Get the reminders a refresh would schedule right now (nothing is stored)."""
    result = await engine.compute(db)
    return [ReminderResult.from_reminder(r) for r in result.reminders]


@router.post("/reminders/refresh", response_model=RefreshResponse)
async def refresh_reminders(
    db: AsyncSession = Depends(get_db),
    engine: ReminderEngine = Depends(get_engine),
    sink: DatabaseNotificationSink = Depends(get_sink),
):
    """Recompute reminders and replace all pending notifications."""
    result = await engine.refresh(db, sink, trigger="manual")
    return RefreshResponse(
        patterns=sorted(result.patterns, key=lambda k: k.value),
        predictions=len(result.predictions),
        reminders=[ReminderResult.from_reminder(r) for r in result.reminders],
    )


@router.get("/reminders/pending", response_model=list[ReminderResult])
async def get_pending_reminders(sink: DatabaseNotificationSink = Depends(get_sink)):
    """Get reminders currently handed to the notification channel."""
    return [ReminderResult.from_reminder(r) for r in await sink.pending()]


@router.delete("/reminders/pending", status_code=204)
async def cancel_all_reminders(sink: DatabaseNotificationSink = Depends(get_sink)):
    """Cancel every pending reminder."""
    await sink.replace_all([])
    logger.info("Cancelled all pending reminders")


@router.delete("/reminders/{reminder_id}", status_code=204)
async def cancel_reminder(reminder_id: str, sink: DatabaseNotificationSink = Depends(get_sink)):
    """Cancel one pending reminder."""
    if not await sink.cancel(reminder_id):
        raise HTTPException(status_code=404, detail=f"Reminder {reminder_id} is not pending")


@router.post("/reminders/{reminder_id}/snooze", response_model=ReminderResult)
async def snooze_reminder(
    reminder_id: str,
    engine: ReminderEngine = Depends(get_engine),
    sink: DatabaseNotificationSink = Depends(get_sink),
):
    """Replace a pending reminder with a copy due a few minutes from now."""
    original = await sink.get(reminder_id)
    if original is None:
        raise HTTPException(status_code=404, detail=f"Reminder {reminder_id} is not pending")

    snoozed = snooze(original, engine.clock.now(), minutes=get_settings().snooze_minutes)
    if not await sink.replace(reminder_id, snoozed):
        raise HTTPException(status_code=404, detail=f"Reminder {reminder_id} is not pending")

    logger.info(f"Snoozed {original.kind.value} reminder until {snoozed.scheduled_time}")
    return ReminderResult.from_reminder(snoozed)


@router.get("/settings/reminders", response_model=ReminderSettingsBody)
async def get_reminder_settings(db: AsyncSession = Depends(get_db)):
    """Get the stored reminder settings (defaults if never saved)."""
    settings = await load_reminder_settings(db)
    return ReminderSettingsBody.from_settings(settings)


@router.put("/settings/reminders", response_model=ReminderSettingsBody)
async def update_reminder_settings(body: ReminderSettingsBody, db: AsyncSession = Depends(get_db)):
    """Create or replace the reminder settings."""
    settings = body.to_settings()

    result = await db.execute(select(ReminderSettingsRecord).where(ReminderSettingsRecord.id == 1))
    record = result.scalar_one_or_none()
    if record is None:
        record = ReminderSettingsRecord(id=1)
        db.add(record)

    record.apply(settings)
    await db.commit()

    logger.info(f"Updated reminder settings: sensitivity={settings.sensitivity.value}, enabled={settings.enabled}")
    return ReminderSettingsBody.from_settings(settings)
