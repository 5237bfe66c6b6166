"""Activity log API endpoints."""

import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nursery.core.database import get_db
from nursery.models.database import ActivityEntry
from nursery.schemas.responses import ActivityCreate, ActivityResponse
from nursery.services.types import ActivityKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.post("", response_model=ActivityResponse, status_code=201)
async def log_activity(body: ActivityCreate, db: AsyncSession = Depends(get_db)):
    """Append an activity to the log."""
    entry = ActivityEntry(
        kind=body.kind.value,
        start_time=body.start_time,
        end_time=body.end_time,
        amount=body.amount,
        notes=body.notes,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info(f"Logged {entry.kind} activity at {entry.start_time}")
    return entry


@router.get("", response_model=list[ActivityResponse])
async def list_activities(
    days: int = Query(default=14, ge=1, le=365),
    kind: ActivityKind | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Get activities from the last N days, newest first."""
    cutoff = datetime.utcnow() - timedelta(days=days)

    query = select(ActivityEntry).where(ActivityEntry.start_time >= cutoff)
    if kind is not None:
        query = query.where(ActivityEntry.kind == kind.value)

    result = await db.execute(query.order_by(ActivityEntry.start_time.desc()))
    return result.scalars().all()


@router.delete("/{activity_id}", status_code=204)
async def delete_activity(activity_id: int, db: AsyncSession = Depends(get_db)):
    """Remove an activity logged by mistake."""
    entry = await db.get(ActivityEntry, activity_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Activity {activity_id} not found")

    await db.delete(entry)
    await db.commit()
