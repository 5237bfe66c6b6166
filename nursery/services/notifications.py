"""Hand-off of reminders to the notification channel."""

import logging
from typing import Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from nursery.models.database import ScheduledNotification
from nursery.services.types import ActivityKind, Reminder, ReminderPriority

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Baby Activity Reminder"


class NotificationSink(Protocol):
    """Destination for scheduled reminders."""

    async def replace_all(self, reminders: Sequence[Reminder]) -> int:
        """Clear every pending reminder and schedule the new batch."""
        ...

    async def cancel(self, reminder_id: str) -> bool:
        """Drop a pending reminder. Returns False if it was not pending."""
        ...

    async def replace(self, reminder_id: str, reminder: Reminder) -> bool:
        """Swap a pending reminder for another in one step. Returns False if it was not pending."""
        ...

    async def pending(self) -> list[Reminder]:
        """Pending reminders, earliest first."""
        ...


class DatabaseNotificationSink:
    """
    Stores pending reminders as ScheduledNotification rows.

    A delivery worker (or the mobile client polling the API) turns each row
    into a platform notification. Reminder times are naive UTC throughout.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_row(self, reminder: Reminder) -> ScheduledNotification:
        return ScheduledNotification(
            reminder_id=reminder.id,
            kind=reminder.kind.value,
            scheduled_time=reminder.scheduled_time,
            title=NOTIFICATION_TITLE,
            subtitle=reminder.kind.description.title(),
            body=reminder.message,
            priority=reminder.priority.value,
            sound=reminder.priority.notification_sound,
        )

    def _to_reminder(self, row: ScheduledNotification) -> Reminder:
        return Reminder(
            id=row.reminder_id,
            kind=ActivityKind(row.kind),
            scheduled_time=row.scheduled_time,
            message=row.body,
            repeating=False,
            priority=ReminderPriority(row.priority),
        )

    async def replace_all(self, reminders: Sequence[Reminder]) -> int:
        await self.session.execute(delete(ScheduledNotification))
        for reminder in reminders:
            self.session.add(self._to_row(reminder))
        await self.session.commit()

        logger.info(f"Replaced pending notifications with {len(reminders)} reminders")
        return len(reminders)

    async def get(self, reminder_id: str) -> Reminder | None:
        result = await self.session.execute(
            select(ScheduledNotification).where(ScheduledNotification.reminder_id == reminder_id)
        )
        row = result.scalar_one_or_none()
        return self._to_reminder(row) if row else None

    async def cancel(self, reminder_id: str) -> bool:
        result = await self.session.execute(
            delete(ScheduledNotification).where(ScheduledNotification.reminder_id == reminder_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def replace(self, reminder_id: str, reminder: Reminder) -> bool:
        result = await self.session.execute(
            delete(ScheduledNotification).where(ScheduledNotification.reminder_id == reminder_id)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            return False

        self.session.add(self._to_row(reminder))
        await self.session.commit()
        return True

    async def pending(self) -> list[Reminder]:
        result = await self.session.execute(
            select(ScheduledNotification).order_by(ScheduledNotification.scheduled_time)
        )
        return [self._to_reminder(row) for row in result.scalars().all()]
