"""Public timeline routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from incident_timeline.database import get_db
from incident_timeline.schemas.event import SelectableEvent
from incident_timeline.schemas.timeline import TimelineEvent
from incident_timeline.services.submission import list_selectable_events
from incident_timeline.services.timeline import build_timeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["timeline"])


@router.get("/timeline", response_model=List[TimelineEvent])
def get_timeline(db: Session = Depends(get_db)):
    """Verified events with their verified evidence grouped by side."""
    return build_timeline(db)


@router.get("/events/selectable", response_model=List[SelectableEvent])
def get_selectable_events(db: Session = Depends(get_db)):
    """Verified events that new evidence can be attached to."""
    return [SelectableEvent.model_validate(e) for e in list_selectable_events(db)]
