"""Evidence-related Pydantic schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

EvidenceType = Literal["link", "youtube", "iframe", "blob"]
EvidenceSide = Literal["neutral", "pro", "against"]


class EvidenceResponse(BaseModel):
    """Evidence row with its owning event's title."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    event_id: UUID
    event_title: Optional[str] = None
    title: str
    type: str
    side: str
    content_url: str
    status: str
    created_at: Optional[datetime] = None


class EvidenceUpdate(BaseModel):
    """Partial edit of an evidence item. Status is not editable here."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    type: Optional[EvidenceType] = None
    side: Optional[EvidenceSide] = None
    content_url: Optional[str] = None
