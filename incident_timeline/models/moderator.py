"""Moderator account and session models."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid

from incident_timeline.database import Base


class Moderator(Base):
    """Operator allowed to change status and edit rows."""

    __tablename__ = "moderators"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class AuthSession(Base):
    """Server-side record of a signed-in moderator session."""

    __tablename__ = "auth_sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    moderator_id = Column(Uuid, ForeignKey("moderators.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime)

    __table_args__ = (Index("idx_auth_sessions_moderator_id", "moderator_id"), {"schema": None})
