# Database models
from nursery.models.database import (
    ActivityEntry,
    ReminderSettingsRecord,
    ScheduledNotification,
)
from nursery.models.refresh_log import RefreshLog

__all__ = [
    "ActivityEntry",
    "ReminderSettingsRecord",
    "ScheduledNotification",
    "RefreshLog",
]
