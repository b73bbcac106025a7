"""Evidence model."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import relationship

from incident_timeline.database import Base


class Evidence(Base):
    """A single citable source attached to an event."""

    __tablename__ = "evidence"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False)
    title = Column(Text, nullable=False)
    type = Column(Text, nullable=False)  # 'link', 'youtube', 'iframe', 'blob'
    side = Column(Text, nullable=False, default="neutral")  # 'neutral', 'pro', 'against'
    content_url = Column(Text, nullable=False)  # URL, or raw embed markup for 'iframe'
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="evidence")

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'verified', 'rejected')", name="ck_evidence_status"),
        CheckConstraint("type IN ('link', 'youtube', 'iframe', 'blob')", name="ck_evidence_type"),
        CheckConstraint("side IN ('neutral', 'pro', 'against')", name="ck_evidence_side"),
        Index("idx_evidence_status", "status"),
        Index("idx_evidence_event_id", "event_id"),
        {"schema": None},
    )
