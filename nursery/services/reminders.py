"""Turns predictions into deliverable reminders."""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from nursery.services.reminder_settings import ReminderSettings
from nursery.services.types import Prediction, Reminder, ReminderPriority

logger = logging.getLogger(__name__)


def priority_for(confidence: float) -> ReminderPriority:
    if confidence >= 0.8:
        return ReminderPriority.HIGH
    if confidence >= 0.5:
        return ReminderPriority.MEDIUM
    return ReminderPriority.LOW


def schedule(
    predictions: Iterable[Prediction],
    settings: ReminderSettings,
    now: datetime,
) -> list[Reminder]:
    """
    Filter predictions into one-shot reminders.

    A prediction is dropped when its kind is disabled, its confidence is below
    settings.minimum_confidence, or its predicted time is not after `now`.
    """
    reminders = []
    for prediction in predictions:
        if not settings.is_enabled_for(prediction.kind):
            continue
        if prediction.confidence < settings.minimum_confidence:
            continue
        if prediction.predicted_time <= now:
            continue

        reminders.append(Reminder(
            kind=prediction.kind,
            scheduled_time=prediction.predicted_time,
            message=prediction.message,
            repeating=False,
            priority=priority_for(prediction.confidence),
        ))

    logger.info(f"Scheduled {len(reminders)} reminders")
    return reminders


def snooze(reminder: Reminder, now: datetime, minutes: int = 15) -> Reminder:
    """A fresh one-shot copy of the reminder, due `minutes` from now."""
    return Reminder(
        kind=reminder.kind,
        scheduled_time=now + timedelta(minutes=minutes),
        message=reminder.message,
        repeating=False,
        priority=reminder.priority,
    )
