"""Shared test fixtures for the nursery test suite."""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from nursery.core.database import Base
# Import all models so their metadata is registered on Base
import nursery.models.database  # noqa: F401
import nursery.models.refresh_log  # noqa: F401
from nursery.services.types import ActivityKind, ActivityRecord

# Europe/London is UTC+0 in January, so UTC hours match the local clock
NOW = datetime(2025, 1, 28, 12, 0)


def series(kind: ActivityKind, start: datetime, gaps_minutes: list[float], duration_minutes: float | None = None):
    """
    Build activities of one kind separated by the given gaps.

    Each gap is measured from the end of the previous activity to the start
    of the next one.
    """
    records = []
    current = start
    for i in range(len(gaps_minutes) + 1):
        end = current + timedelta(minutes=duration_minutes) if duration_minutes is not None else None
        records.append(ActivityRecord(kind=kind, start_time=current, end_time=end))
        if i < len(gaps_minutes):
            current = (end or current) + timedelta(minutes=gaps_minutes[i])
    return records


class MemoryNotificationSink:
    """In-memory NotificationSink for engine tests."""

    def __init__(self):
        self.reminders = []
        self.batches = 0

    async def replace_all(self, reminders):
        self.reminders = list(reminders)
        self.batches += 1
        return len(self.reminders)

    async def cancel(self, reminder_id):
        before = len(self.reminders)
        self.reminders = [r for r in self.reminders if r.id != reminder_id]
        return len(self.reminders) < before

    async def replace(self, reminder_id, reminder):
        if not await self.cancel(reminder_id):
            return False
        self.reminders.append(reminder)
        return True

    async def pending(self):
        return sorted(self.reminders, key=lambda r: r.scheduled_time)


@pytest.fixture
def memory_sink():
    return MemoryNotificationSink()


@pytest_asyncio.fixture
async def async_session():
    """
    Provide an in-memory SQLite async session for tests.

    Creates all tables before the test, drops them after. Each test gets
    a clean database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
