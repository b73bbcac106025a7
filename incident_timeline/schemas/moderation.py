"""Moderation console schemas."""

from typing import List, Literal

from pydantic import BaseModel

from incident_timeline.schemas.event import EventResponse
from incident_timeline.schemas.evidence import EvidenceResponse


class StatusUpdate(BaseModel):
    """Target status for a moderation decision."""

    status: Literal["verified", "rejected"]


class ModerationQueue(BaseModel):
    """Everything the console shows, fetched in one go."""

    pending_events: List[EventResponse]
    pending_evidence: List[EvidenceResponse]
    verified_events: List[EventResponse]
    verified_evidence: List[EvidenceResponse]
