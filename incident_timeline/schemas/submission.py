"""Submission form schemas."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from incident_timeline.schemas.event import UtcDatetime
from incident_timeline.schemas.evidence import EvidenceSide, EvidenceType

NEW_EVENT = "new"


class SubmissionForm(BaseModel):
    """Fields posted by the submission form."""

    event_id: str = NEW_EVENT  # 'new' or the id of a verified event
    event_title: Optional[str] = None
    event_date: Optional[UtcDatetime] = None
    event_description: Optional[str] = None
    evidence_title: Optional[str] = None
    evidence_type: EvidenceType = "link"
    evidence_side: EvidenceSide = "neutral"
    evidence_content: Optional[str] = None

    @property
    def creates_event(self) -> bool:
        return self.event_id == NEW_EVENT


class SubmissionResponse(BaseModel):
    """Response after a successful submission."""

    event_id: UUID
    evidence_id: UUID
    event_created: bool
    content_url: str
