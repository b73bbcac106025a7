"""Public timeline assembly from verified rows."""

import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.schemas.timeline import TimelineContent, TimelineEvent, TimelineEvidence
from incident_timeline.services.content import Embed, Video, classify
from incident_timeline.services.status import ModerationStatus

logger = logging.getLogger(__name__)

SIDES = ("pro", "against", "neutral")


def render_content(item: Evidence) -> TimelineContent:
    """Classify an evidence item's content into a renderable shape."""
    content = classify(item.content_url, item.type)
    if isinstance(content, Embed):
        return TimelineContent(kind="embed", markup=content.markup)
    if isinstance(content, Video):
        return TimelineContent(kind="video", video_id=content.video_id, embed_url=content.embed_url)
    return TimelineContent(kind="link", url=content.url, display=content.display)


def _side_of(item: Evidence) -> str:
    # Items without a side are shown with the neutral reporting
    return item.side if item.side in SIDES else "neutral"


def build_timeline(db: Session) -> List[TimelineEvent]:
    """
    Build the public timeline.

    Only verified events and verified evidence are read, so stored embed
    markup shown here has always passed moderation. Events are ordered by
    date ascending; read failures give an empty timeline.
    """
    verified = ModerationStatus.VERIFIED.value
    try:
        events = (
            db.query(Event)
            .filter(Event.status == verified)
            .order_by(Event.date.asc())
            .all()
        )
        evidence = (
            db.query(Evidence)
            .filter(Evidence.status == verified)
            .order_by(Evidence.created_at.asc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to load timeline: {e}")
        return []

    by_event: Dict = defaultdict(lambda: {side: [] for side in SIDES})
    for item in evidence:
        by_event[item.event_id][_side_of(item)].append(
            TimelineEvidence(
                id=item.id,
                title=item.title,
                type=item.type,
                side=item.side,
                content_url=item.content_url,
                content=render_content(item),
            )
        )

    timeline = []
    for event in events:
        groups = by_event.get(event.id) or {side: [] for side in SIDES}
        timeline.append(
            TimelineEvent(
                id=event.id,
                title=event.title,
                date=event.date,
                description=event.description,
                pro=groups["pro"],
                against=groups["against"],
                neutral=groups["neutral"],
            )
        )

    return timeline
