"""SQLAlchemy ORM models."""

from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.models.moderator import AuthSession, Moderator

__all__ = [
    "Event",
    "Evidence",
    "Moderator",
    "AuthSession",
]
