"""Pydantic request and response models for API endpoints."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator

from nursery.services.reminder_settings import ReminderSettings, Sensitivity
from nursery.services.types import ActivityKind, Pattern, Prediction, Reminder, ReminderPriority


def _naive_utc(dt: datetime | None) -> datetime | None:
    """Strip tzinfo, keeping the UTC value, for storage in SQLite."""
    if dt is not None and dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


class ActivityCreate(BaseModel):
    """New activity log entry. Naive times are taken as UTC."""
    kind: ActivityKind
    start_time: datetime
    end_time: datetime | None = None
    amount: float | None = Field(default=None, ge=0)
    notes: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, v):
        return _naive_utc(v)

    @model_validator(mode="after")
    def check_end_after_start(self):
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class ActivityResponse(BaseModel):
    """Stored activity log entry."""
    id: int
    kind: ActivityKind
    start_time: datetime
    end_time: datetime | None
    amount: float | None
    notes: str | None

    class Config:
        from_attributes = True


class PatternResult(BaseModel):
    """Learned pattern for one activity kind."""
    kind: ActivityKind
    typical_interval_minutes: float
    interval_description: str
    confidence: float
    confidence_description: str
    hour_distribution: dict[int, float]
    peak_hours: list[int]
    sample_size: int
    computed_at: datetime

    @classmethod
    def from_pattern(cls, pattern: Pattern) -> "PatternResult":
        return cls(
            kind=pattern.kind,
            typical_interval_minutes=pattern.typical_interval_minutes,
            interval_description=pattern.interval_description,
            confidence=pattern.confidence,
            confidence_description=pattern.confidence_description,
            hour_distribution=pattern.hour_distribution,
            peak_hours=pattern.peak_hours,
            sample_size=pattern.sample_size,
            computed_at=pattern.computed_at,
        )


class PatternSummaryResponse(BaseModel):
    """Plain-English overview of what has been learned."""
    has_learned_patterns: bool
    summary: str
    typical_sleep_duration_minutes: float | None = None


class PredictionResult(BaseModel):
    """Predicted next occurrence (UTC)."""
    kind: ActivityKind
    predicted_time: datetime
    time_until: str
    is_overdue: bool
    confidence: float
    message: str

    @classmethod
    def from_prediction(cls, prediction: Prediction, now: datetime) -> "PredictionResult":
        return cls(
            kind=prediction.kind,
            predicted_time=prediction.predicted_time,
            time_until=prediction.time_until_description(now),
            is_overdue=prediction.is_overdue(now),
            confidence=prediction.confidence,
            message=prediction.message,
        )


class ReminderResult(BaseModel):
    """Reminder ready for delivery (UTC)."""
    id: str
    kind: ActivityKind
    scheduled_time: datetime
    message: str
    repeating: bool
    priority: ReminderPriority

    @classmethod
    def from_reminder(cls, reminder: Reminder) -> "ReminderResult":
        return cls(
            id=reminder.id,
            kind=reminder.kind,
            scheduled_time=reminder.scheduled_time,
            message=reminder.message,
            repeating=reminder.repeating,
            priority=reminder.priority,
        )


class RefreshResponse(BaseModel):
    """Result of a manual reminder refresh."""
    patterns: list[ActivityKind]
    predictions: int
    reminders: list[ReminderResult]


class ReminderSettingsBody(BaseModel):
    """Reminder preferences as exchanged with the client."""
    enabled: bool = True
    enabled_kinds: list[ActivityKind] = Field(default_factory=lambda: list(ActivityKind))
    sensitivity: Sensitivity = Sensitivity.BALANCED
    quiet_hours_enabled: bool = True
    quiet_hours_start: int = Field(default=22, ge=0, le=23)
    quiet_hours_end: int = Field(default=7, ge=0, le=23)
    minimum_confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("enabled_kinds")
    @classmethod
    def dedupe_kinds(cls, v):
        return sorted(set(v), key=lambda k: k.value)

    @classmethod
    def from_settings(cls, settings: ReminderSettings) -> "ReminderSettingsBody":
        return cls(
            enabled=settings.enabled,
            enabled_kinds=list(settings.enabled_kinds),
            sensitivity=settings.sensitivity,
            quiet_hours_enabled=settings.quiet_hours_enabled,
            quiet_hours_start=settings.quiet_hours_start,
            quiet_hours_end=settings.quiet_hours_end,
            minimum_confidence=settings.minimum_confidence,
        )

    def to_settings(self) -> ReminderSettings:
        return ReminderSettings(
            enabled=self.enabled,
            enabled_kinds=frozenset(self.enabled_kinds),
            sensitivity=self.sensitivity,
            quiet_hours_enabled=self.quiet_hours_enabled,
            quiet_hours_start=self.quiet_hours_start,
            quiet_hours_end=self.quiet_hours_end,
            minimum_confidence=self.minimum_confidence,
        )
