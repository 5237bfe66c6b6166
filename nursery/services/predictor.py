"""Next-occurrence prediction from learned patterns."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Mapping
from zoneinfo import ZoneInfo

from nursery.services.clock import UTC, local_to_utc, utc_to_local
from nursery.services.reminder_settings import ReminderSettings
from nursery.services.types import ActivityKind, ActivityRecord, Pattern, Prediction

logger = logging.getLogger(__name__)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_elapsed(elapsed: timedelta) -> str:
    """Human-readable elapsed time: "3h 20m", "2 hours", "1 minute"."""
    total_seconds = max(0, int(elapsed.total_seconds()))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60

    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return _plural(hours, "hour")
    return _plural(minutes, "minute")


def generate_message(kind: ActivityKind, time_since_last: timedelta) -> str:
    """Reminder text for a kind, mentioning time since the last activity where it helps."""
    elapsed = format_elapsed(time_since_last)

    if kind == ActivityKind.SLEEP:
        return f"Baby might be getting sleepy. Last sleep ended {elapsed} ago."
    if kind == ActivityKind.MILK:
        return f"It's been {elapsed} since the last feeding."
    if kind in (ActivityKind.WET_DIAPER, ActivityKind.DIRTY_DIAPER):
        return f"Time to check the diaper. Last change was {elapsed} ago."
    if kind == ActivityKind.SOLID_FOOD:
        return "Baby usually eats around this time."
    if kind == ActivityKind.TUMMY_TIME:
        return f"Good time for tummy time! Last session was {elapsed} ago."
    if kind == ActivityKind.BATH_TIME:
        return "Time for baby's bath."
    return "Time for baby's medicine."


def latest_activity(records: Iterable[ActivityRecord], kind: ActivityKind) -> ActivityRecord | None:
    """Most recent activity of a kind by start time."""
    kind_records = [r for r in records if r.kind == kind]
    if not kind_records:
        return None
    return max(kind_records, key=lambda r: r.start_time)


def predict_next(
    kind: ActivityKind,
    records: Iterable[ActivityRecord],
    pattern: Pattern,
    settings: ReminderSettings,
    now: datetime,
    tz: ZoneInfo = UTC,
) -> Prediction | None:
    """
    Project when the next activity of a kind is due.

    Args:
        kind: Activity kind to predict
        records: Activity log snapshot
        pattern: Learned pattern for the kind
        settings: Reminder settings (sensitivity and quiet hours)
        now: Current UTC time, used for the message
        tz: Zone whose wall clock defines quiet hours

    Returns:
        The prediction, or None if the kind has never been logged.
    """
    last = latest_activity(records, kind)
    if last is None:
        return None

    last_end = last.effective_end()
    adjusted_minutes = pattern.typical_interval_minutes * settings.sensitivity.interval_multiplier
    predicted_time = last_end + timedelta(minutes=adjusted_minutes)

    # Interval arithmetic is in UTC; quiet hours are read on the local clock
    local_time = utc_to_local(predicted_time, tz)
    if settings.is_quiet_hours(local_time):
        deferred = local_to_utc(settings.next_non_quiet_time(local_time), tz)
        logger.debug(f"Deferred {kind.value} prediction from {predicted_time} to {deferred} (quiet hours)")
        predicted_time = deferred

    return Prediction(
        kind=kind,
        predicted_time=predicted_time,
        confidence=pattern.confidence,
        based_on_pattern=pattern,
        message=generate_message(kind, now - last_end),
    )


def predict_all(
    records: Iterable[ActivityRecord],
    patterns: Mapping[ActivityKind, Pattern],
    settings: ReminderSettings,
    now: datetime,
    tz: ZoneInfo = UTC,
) -> list[Prediction]:
    """
    Predict the next occurrence for every kind with a usable pattern.

    Kinds that are disabled, or whose pattern confidence is below the
    sensitivity floor, are skipped.

    Returns:
        Predictions sorted by predicted time, earliest first.
    """
    records = list(records)
    predictions = []

    for kind, pattern in patterns.items():
        if not settings.is_enabled_for(kind):
            continue
        if pattern.confidence < settings.sensitivity.minimum_confidence:
            logger.debug(
                f"Skipping {kind.value}: confidence {pattern.confidence:.2f} below "
                f"{settings.sensitivity.value} floor {settings.sensitivity.minimum_confidence}"
            )
            continue

        prediction = predict_next(kind, records, pattern, settings, now, tz)
        if prediction is not None:
            predictions.append(prediction)

    predictions.sort(key=lambda p: (p.predicted_time, p.kind.value))
    return predictions
