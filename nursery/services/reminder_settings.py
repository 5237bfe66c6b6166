"""User reminder configuration and quiet-hours arithmetic."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from nursery.services.types import ActivityKind


class Sensitivity(str, Enum):
    """How eagerly reminders fire relative to the learned interval."""

    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"

    @property
    def description(self) -> str:
        return self.value.capitalize()

    @property
    def detailed_description(self) -> str:
        return {
            Sensitivity.CONSERVATIVE: "Fewer reminders, only when highly confident",
            Sensitivity.BALANCED: "Balanced reminder frequency",
            Sensitivity.AGGRESSIVE: "More frequent reminders to help you stay on track",
        }[self]

    @property
    def interval_multiplier(self) -> float:
        """Scale applied to the typical interval before reminding."""
        return {
            Sensitivity.CONSERVATIVE: 1.2,
            Sensitivity.BALANCED: 1.0,
            Sensitivity.AGGRESSIVE: 0.8,
        }[self]

    @property
    def minimum_confidence(self) -> float:
        """Pattern confidence required before a prediction is made."""
        return {
            Sensitivity.CONSERVATIVE: 0.7,
            Sensitivity.BALANCED: 0.5,
            Sensitivity.AGGRESSIVE: 0.3,
        }[self]


@dataclass(frozen=True)
class ReminderSettings:
    """Reminder preferences, treated as an immutable input per engine call."""

    enabled: bool = True
    enabled_kinds: frozenset[ActivityKind] = field(default_factory=lambda: frozenset(ActivityKind))
    sensitivity: Sensitivity = Sensitivity.BALANCED
    quiet_hours_enabled: bool = True
    quiet_hours_start: int = 22
    quiet_hours_end: int = 7
    minimum_confidence: float = 0.5

    def __post_init__(self):
        for name in ("quiet_hours_start", "quiet_hours_end"):
            hour = getattr(self, name)
            if not 0 <= hour <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {hour}")
        if not 0.0 <= self.minimum_confidence <= 1.0:
            raise ValueError(f"minimum_confidence must be between 0 and 1, got {self.minimum_confidence}")
        # Accept any iterable of kinds from callers
        object.__setattr__(self, "enabled_kinds", frozenset(ActivityKind(k) for k in self.enabled_kinds))

    @property
    def quiet_hours_wrap_midnight(self) -> bool:
        return self.quiet_hours_start > self.quiet_hours_end

    def is_enabled_for(self, kind: ActivityKind) -> bool:
        return self.enabled and kind in self.enabled_kinds

    def effective_confidence_floor(self) -> float:
        """Strictest of the sensitivity floor and the user's minimum confidence."""
        return max(self.sensitivity.minimum_confidence, self.minimum_confidence)

    def is_quiet_hours(self, at: datetime) -> bool:
        """Whether the wall-clock hour of `at` falls in the [start, end) window."""
        if not self.quiet_hours_enabled:
            return False

        hour = at.hour
        if self.quiet_hours_wrap_midnight:
            # e.g. 22:00 to 07:00
            return hour >= self.quiet_hours_start or hour < self.quiet_hours_end
        return self.quiet_hours_start <= hour < self.quiet_hours_end

    def next_non_quiet_time(self, at: datetime) -> datetime:
        """
        First moment at or after `at` that is outside quiet hours.

        Inside the window this is the end boundary on the hour; for a window
        that wraps midnight, a time before midnight resolves to the next day.
        """
        if not self.is_quiet_hours(at):
            return at

        boundary = at.replace(hour=self.quiet_hours_end, minute=0, second=0, microsecond=0)
        if self.quiet_hours_wrap_midnight and at.hour >= self.quiet_hours_start:
            boundary += timedelta(days=1)
        return boundary
