"""Tests for turning predictions into reminders."""

from datetime import timedelta

import pytest

from conftest import NOW
from nursery.services.predictor import predict_all
from nursery.services.reminder_settings import ReminderSettings, Sensitivity
from nursery.services.reminders import priority_for, schedule, snooze
from nursery.services.types import (
    ActivityKind,
    ActivityRecord,
    Pattern,
    Prediction,
    Reminder,
    ReminderPriority,
)


def _pattern(kind=ActivityKind.MILK, confidence=0.9):
    return Pattern(
        kind=kind,
        typical_interval_minutes=180.0,
        confidence=confidence,
        hour_distribution={h: 1 / 24 for h in range(24)},
        sample_size=10,
        computed_at=NOW,
    )


def _prediction(kind=ActivityKind.MILK, confidence=0.9, offset=timedelta(hours=1)):
    return Prediction(
        kind=kind,
        predicted_time=NOW + offset,
        confidence=confidence,
        based_on_pattern=_pattern(kind, confidence),
        message="It's been 2 hours since the last feeding.",
    )


class TestPriorityFor:

    @pytest.mark.parametrize("confidence,expected", [
        (1.0, ReminderPriority.HIGH),
        (0.8, ReminderPriority.HIGH),
        (0.79, ReminderPriority.MEDIUM),
        (0.5, ReminderPriority.MEDIUM),
        (0.49, ReminderPriority.LOW),
        (0.0, ReminderPriority.LOW),
    ])
    def test_thresholds(self, confidence, expected):
        assert priority_for(confidence) == expected

    def test_low_priority_is_silent(self):
        assert not ReminderPriority.LOW.notification_sound
        assert ReminderPriority.MEDIUM.notification_sound
        assert ReminderPriority.HIGH.notification_sound


class TestSchedule:

    def test_future_prediction_becomes_reminder(self):
        reminders = schedule([_prediction()], ReminderSettings(), NOW)

        assert len(reminders) == 1
        reminder = reminders[0]
        assert reminder.kind == ActivityKind.MILK
        assert reminder.scheduled_time == NOW + timedelta(hours=1)
        assert reminder.message == "It's been 2 hours since the last feeding."
        assert reminder.repeating is False
        assert reminder.priority == ReminderPriority.HIGH

    def test_disabled_reminders_give_nothing(self):
        assert schedule([_prediction()], ReminderSettings(enabled=False), NOW) == []

    def test_disabled_kind_dropped(self):
        settings = ReminderSettings(enabled_kinds={ActivityKind.SLEEP})
        assert schedule([_prediction(ActivityKind.MILK)], settings, NOW) == []

    def test_below_minimum_confidence_dropped(self):
        settings = ReminderSettings(minimum_confidence=0.7)
        assert schedule([_prediction(confidence=0.69)], settings, NOW) == []

    def test_past_and_present_predictions_dropped(self):
        predictions = [
            _prediction(offset=timedelta(minutes=-10)),
            _prediction(offset=timedelta(0)),
        ]
        assert schedule(predictions, ReminderSettings(), NOW) == []

    def test_keeps_prediction_order(self):
        predictions = [
            _prediction(ActivityKind.SLEEP, offset=timedelta(minutes=30)),
            _prediction(ActivityKind.MILK, offset=timedelta(hours=2)),
        ]
        reminders = schedule(predictions, ReminderSettings(), NOW)
        assert [r.kind for r in reminders] == [ActivityKind.SLEEP, ActivityKind.MILK]

    def test_each_reminder_has_unique_id(self):
        predictions = [_prediction(ActivityKind.SLEEP), _prediction(ActivityKind.MILK)]
        reminders = schedule(predictions, ReminderSettings(), NOW)
        assert reminders[0].id != reminders[1].id


class TestThresholdComposition:
    """The sensitivity floor applies at prediction time, minimum_confidence at scheduling."""

    def _run(self, minimum_confidence):
        settings = ReminderSettings(
            sensitivity=Sensitivity.AGGRESSIVE,
            minimum_confidence=minimum_confidence,
            quiet_hours_enabled=False,
        )
        log = [ActivityRecord(kind=ActivityKind.MILK, start_time=NOW - timedelta(hours=1))]
        predictions = predict_all(log, {ActivityKind.MILK: _pattern(confidence=0.6)}, settings, NOW)
        return predictions, schedule(predictions, settings, NOW)

    def test_survives_prediction_but_dropped_by_minimum_confidence(self):
        predictions, reminders = self._run(0.7)
        assert len(predictions) == 1
        assert reminders == []

    def test_survives_both_thresholds(self):
        predictions, reminders = self._run(0.5)
        assert len(reminders) == 1
        assert reminders[0].priority == ReminderPriority.MEDIUM


class TestSnooze:

    def test_snoozed_copy_due_later(self):
        original = Reminder(
            kind=ActivityKind.MILK,
            scheduled_time=NOW,
            message="It's been 3 hours since the last feeding.",
            repeating=False,
            priority=ReminderPriority.MEDIUM,
        )
        snoozed = snooze(original, NOW, minutes=15)

        assert snoozed.scheduled_time == NOW + timedelta(minutes=15)
        assert snoozed.kind == original.kind
        assert snoozed.message == original.message
        assert snoozed.priority == original.priority
        assert snoozed.id != original.id
