"""Log of reminder refresh passes."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON

from nursery.core.database import Base


class RefreshLog(Base):
    """One analyze -> predict -> schedule pass."""

    __tablename__ = "refresh_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    trigger = Column(String, nullable=False)  # "scheduled", "manual"
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    status = Column(String, nullable=False)  # "success", "failed"
    details = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
