"""Tests for reminder settings and quiet-hours arithmetic."""

from datetime import datetime

import pytest

from nursery.services.reminder_settings import ReminderSettings, Sensitivity
from nursery.services.types import ActivityKind

OVERNIGHT = ReminderSettings(quiet_hours_start=22, quiet_hours_end=7)
AFTERNOON = ReminderSettings(quiet_hours_start=13, quiet_hours_end=15)


class TestSensitivity:

    @pytest.mark.parametrize("sensitivity,multiplier,floor", [
        (Sensitivity.CONSERVATIVE, 1.2, 0.7),
        (Sensitivity.BALANCED, 1.0, 0.5),
        (Sensitivity.AGGRESSIVE, 0.8, 0.3),
    ])
    def test_multiplier_and_floor(self, sensitivity, multiplier, floor):
        assert sensitivity.interval_multiplier == multiplier
        assert sensitivity.minimum_confidence == floor

    def test_descriptions(self):
        assert Sensitivity.CONSERVATIVE.description == "Conservative"
        assert "stay on track" in Sensitivity.AGGRESSIVE.detailed_description


class TestReminderSettingsDefaults:

    def test_defaults(self):
        settings = ReminderSettings()
        assert settings.enabled is True
        assert settings.enabled_kinds == frozenset(ActivityKind)
        assert settings.sensitivity == Sensitivity.BALANCED
        assert (settings.quiet_hours_start, settings.quiet_hours_end) == (22, 7)
        assert settings.minimum_confidence == 0.5

    def test_enabled_kinds_accepts_strings(self):
        settings = ReminderSettings(enabled_kinds={"milk", "sleep"})
        assert settings.enabled_kinds == {ActivityKind.MILK, ActivityKind.SLEEP}

    def test_is_enabled_for(self):
        settings = ReminderSettings(enabled_kinds={ActivityKind.MILK})
        assert settings.is_enabled_for(ActivityKind.MILK)
        assert not settings.is_enabled_for(ActivityKind.SLEEP)

    def test_master_switch_disables_all(self):
        settings = ReminderSettings(enabled=False)
        assert not any(settings.is_enabled_for(kind) for kind in ActivityKind)

    def test_effective_floor_is_strictest(self):
        assert ReminderSettings(sensitivity=Sensitivity.AGGRESSIVE, minimum_confidence=0.7).effective_confidence_floor() == 0.7
        assert ReminderSettings(sensitivity=Sensitivity.CONSERVATIVE, minimum_confidence=0.2).effective_confidence_floor() == 0.7

    @pytest.mark.parametrize("kwargs", [
        {"quiet_hours_start": 24},
        {"quiet_hours_end": -1},
        {"minimum_confidence": 1.5},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ReminderSettings(**kwargs)


class TestIsQuietHours:

    @pytest.mark.parametrize("hour,expected", [
        (21, False), (22, True), (23, True), (0, True), (6, True), (7, False), (12, False),
    ])
    def test_window_wrapping_midnight(self, hour, expected):
        assert OVERNIGHT.is_quiet_hours(datetime(2025, 1, 28, hour, 30)) is expected

    @pytest.mark.parametrize("hour,expected", [(12, False), (13, True), (14, True), (15, False)])
    def test_same_day_window(self, hour, expected):
        assert AFTERNOON.is_quiet_hours(datetime(2025, 1, 28, hour, 0)) is expected

    def test_disabled_quiet_hours(self):
        settings = ReminderSettings(quiet_hours_enabled=False)
        assert not settings.is_quiet_hours(datetime(2025, 1, 28, 23, 0))

    def test_equal_start_and_end_is_empty_window(self):
        settings = ReminderSettings(quiet_hours_start=9, quiet_hours_end=9)
        assert not any(settings.is_quiet_hours(datetime(2025, 1, 28, h)) for h in range(24))


class TestNextNonQuietTime:

    def test_late_evening_defers_to_next_morning(self):
        assert OVERNIGHT.next_non_quiet_time(datetime(2025, 1, 28, 23, 30)) == datetime(2025, 1, 29, 7, 0)

    def test_early_morning_defers_to_same_morning(self):
        assert OVERNIGHT.next_non_quiet_time(datetime(2025, 1, 29, 3, 15)) == datetime(2025, 1, 29, 7, 0)

    def test_outside_window_unchanged(self):
        at = datetime(2025, 1, 28, 10, 0)
        assert OVERNIGHT.next_non_quiet_time(at) == at

    def test_same_day_window_defers_to_end(self):
        assert AFTERNOON.next_non_quiet_time(datetime(2025, 1, 28, 14, 0)) == datetime(2025, 1, 28, 15, 0)

    def test_crosses_month_boundary(self):
        assert OVERNIGHT.next_non_quiet_time(datetime(2025, 1, 31, 22, 5)) == datetime(2025, 2, 1, 7, 0)
