"""Public timeline schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class TimelineContent(BaseModel):
    """Classified evidence content, ready to render."""

    kind: str  # 'embed', 'video', 'link'
    markup: Optional[str] = None
    video_id: Optional[str] = None
    embed_url: Optional[str] = None
    url: Optional[str] = None
    display: Optional[str] = None


class TimelineEvidence(BaseModel):
    id: UUID
    title: str
    type: str
    side: str
    content_url: str
    content: TimelineContent


class TimelineEvent(BaseModel):
    """Verified event with its verified evidence grouped by side."""

    id: UUID
    title: str
    date: datetime
    description: Optional[str] = None
    pro: List[TimelineEvidence]
    against: List[TimelineEvidence]
    neutral: List[TimelineEvidence]
