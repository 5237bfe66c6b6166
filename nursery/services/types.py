"""Value types shared by the pattern learning and reminder engine."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class ActivityKind(str, Enum):
    """Fixed categories of logged infant care activities."""

    SLEEP = "sleep"
    MILK = "milk"
    WET_DIAPER = "wetDiaper"
    DIRTY_DIAPER = "dirtyDiaper"
    SOLID_FOOD = "solidFood"
    TUMMY_TIME = "tummyTime"
    BATH_TIME = "bathTime"
    MEDICINE = "medicine"

    @property
    def description(self) -> str:
        return _KIND_DESCRIPTIONS[self]


_KIND_DESCRIPTIONS = {
    ActivityKind.SLEEP: "sleep",
    ActivityKind.MILK: "milk",
    ActivityKind.WET_DIAPER: "wet diaper",
    ActivityKind.DIRTY_DIAPER: "dirty diaper",
    ActivityKind.SOLID_FOOD: "solid food",
    ActivityKind.TUMMY_TIME: "tummy time",
    ActivityKind.BATH_TIME: "bath time",
    ActivityKind.MEDICINE: "medicine",
}


@dataclass(frozen=True)
class ActivityRecord:
    """A single logged activity. Instantaneous when end_time is None."""

    kind: ActivityKind
    start_time: datetime
    end_time: datetime | None = None
    amount: float | None = None

    def effective_end(self) -> datetime:
        """End of the activity for interval purposes."""
        return self.end_time if self.end_time is not None else self.start_time


def _format_hours_minutes(total_minutes: float) -> str:
    """Compact "2h 30m" / "3h" / "45m" form."""
    hours = int(total_minutes) // 60
    minutes = int(total_minutes) % 60
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


@dataclass(frozen=True)
class Pattern:
    """Learned timing summary for one activity kind."""

    kind: ActivityKind
    typical_interval_minutes: float
    confidence: float
    hour_distribution: dict[int, float]
    sample_size: int
    computed_at: datetime

    @property
    def peak_hours(self) -> list[int]:
        """The three most likely hours of the day, earliest hour first on ties."""
        ranked = sorted(self.hour_distribution.items(), key=lambda item: (-item[1], item[0]))
        return [hour for hour, _ in ranked[:3]]

    @property
    def interval_description(self) -> str:
        return _format_hours_minutes(self.typical_interval_minutes)

    @property
    def confidence_description(self) -> str:
        if self.confidence >= 0.8:
            return "High"
        if self.confidence >= 0.5:
            return "Medium"
        return "Low"


@dataclass(frozen=True)
class Prediction:
    """Projected next occurrence of an activity kind."""

    kind: ActivityKind
    predicted_time: datetime
    confidence: float
    based_on_pattern: Pattern
    message: str

    def time_until(self, now: datetime) -> timedelta:
        return self.predicted_time - now

    def is_overdue(self, now: datetime) -> bool:
        return self.time_until(now) < timedelta(0)

    def time_until_description(self, now: datetime) -> str:
        minutes = int(self.time_until(now).total_seconds() // 60)
        if minutes <= 0:
            return "now"
        return f"in {_format_hours_minutes(minutes)}"


class ReminderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def notification_sound(self) -> bool:
        return self is not ReminderPriority.LOW


@dataclass(frozen=True)
class Reminder:
    """One-shot scheduling instruction for the notification collaborator."""

    kind: ActivityKind
    scheduled_time: datetime
    message: str
    repeating: bool
    priority: ReminderPriority
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
