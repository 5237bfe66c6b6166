from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Float,
    JSON,
)
from nursery.core.database import Base
from nursery.services.reminder_settings import ReminderSettings, Sensitivity
from nursery.services.types import ActivityKind, ActivityRecord


class ActivityEntry(Base):
    """Logged infant care activity. Timestamps are naive UTC."""

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)  # null for instantaneous activities
    amount = Column(Float, nullable=True)  # ml for milk, dose for medicine
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(
            kind=ActivityKind(self.kind),
            start_time=self.start_time,
            end_time=self.end_time,
            amount=self.amount,
        )


class ReminderSettingsRecord(Base):
    """Stored reminder preferences (single row)."""

    __tablename__ = "reminder_settings"

    id = Column(Integer, primary_key=True, default=1)
    enabled = Column(Boolean, nullable=False, default=True)
    enabled_kinds = Column(JSON, nullable=False, default=lambda: [k.value for k in ActivityKind])
    sensitivity = Column(String, nullable=False, default=Sensitivity.BALANCED.value)
    quiet_hours_enabled = Column(Boolean, nullable=False, default=True)
    quiet_hours_start = Column(Integer, nullable=False, default=22)
    quiet_hours_end = Column(Integer, nullable=False, default=7)
    minimum_confidence = Column(Float, nullable=False, default=0.5)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_settings(self) -> ReminderSettings:
        return ReminderSettings(
            enabled=self.enabled,
            enabled_kinds=frozenset(ActivityKind(k) for k in self.enabled_kinds),
            sensitivity=Sensitivity(self.sensitivity),
            quiet_hours_enabled=self.quiet_hours_enabled,
            quiet_hours_start=self.quiet_hours_start,
            quiet_hours_end=self.quiet_hours_end,
            minimum_confidence=self.minimum_confidence,
        )

    def apply(self, settings: ReminderSettings) -> None:
        """Copy a settings value onto this row."""
        self.enabled = settings.enabled
        self.enabled_kinds = sorted(k.value for k in settings.enabled_kinds)
        self.sensitivity = settings.sensitivity.value
        self.quiet_hours_enabled = settings.quiet_hours_enabled
        self.quiet_hours_start = settings.quiet_hours_start
        self.quiet_hours_end = settings.quiet_hours_end
        self.minimum_confidence = settings.minimum_confidence


class ScheduledNotification(Base):
    """Pending reminder handed to the notification channel. Times are naive UTC."""

    __tablename__ = "scheduled_notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reminder_id = Column(String, nullable=False, unique=True, index=True)
    kind = Column(String, nullable=False)
    scheduled_time = Column(DateTime, nullable=False, index=True)
    title = Column(String, nullable=False)
    subtitle = Column(String, nullable=True)
    body = Column(Text, nullable=False)
    priority = Column(String, nullable=False)
    sound = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
