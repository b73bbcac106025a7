"""Event model."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Text, Uuid
from sqlalchemy.orm import relationship

from incident_timeline.database import Base


class Event(Base):
    """A dated incident entry on the timeline."""

    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False)  # naive UTC
    description = Column(Text)
    status = Column(Text, nullable=False, default="pending")  # 'pending', 'verified', 'rejected'
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    evidence = relationship("Evidence", back_populates="event")

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'verified', 'rejected')", name="ck_events_status"),
        Index("idx_events_status", "status"),
        {"schema": None},
    )
