"""Moderation operations: status decisions, field edits and console listings."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from incident_timeline.config import settings
from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.schemas.event import EventResponse
from incident_timeline.schemas.evidence import EvidenceResponse
from incident_timeline.schemas.moderation import ModerationQueue
from incident_timeline.services.auth import SessionContext
from incident_timeline.services.errors import (
    AuthorizationError,
    FieldNotEditableError,
    RowNotFoundError,
    StoreWriteError,
)
from incident_timeline.services.status import ModerationStatus, transition

logger = logging.getLogger(__name__)

MODELS = {
    "event": Event,
    "evidence": Evidence,
}

EDITABLE_FIELDS = {
    "event": frozenset({"title", "date", "description"}),
    "evidence": frozenset({"title", "type", "side", "content_url"}),
}


def store_error_message(exc: SQLAlchemyError) -> str:
    """Raw message from the database driver, without SQLAlchemy's wrapping."""
    return str(getattr(exc, "orig", None) or exc)


def _model_for(kind: str):
    try:
        return MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown row kind: {kind!r}")


def _require_session(session: Optional[SessionContext]) -> SessionContext:
    if session is None:
        raise AuthorizationError("Not authenticated")
    return session


def _get_row(db: Session, kind: str, row_id: uuid.UUID):
    model = _model_for(kind)
    try:
        row = db.get(model, row_id)
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreWriteError(store_error_message(e))
    if row is None:
        raise RowNotFoundError(f"{kind} {row_id} not found")
    return row


def set_status(
    db: Session,
    session: Optional[SessionContext],
    kind: str,
    row_id: uuid.UUID,
    new_status: str,
    strict: Optional[bool] = None,
) -> ModerationStatus:
    """
    Record a moderation decision on a single event or evidence row.

    The status is overwritten as-is; nothing cascades between an event and
    its evidence. Two moderators deciding the same row concurrently both
    succeed and the last write wins.

    Args:
        db: Database session
        session: Signed-in moderator session
        kind: 'event' or 'evidence'
        row_id: Row id
        new_status: 'verified' or 'rejected'
        strict: Require the row to be pending (defaults to STRICT_TRANSITIONS)

    Returns:
        The stored status

    Raises:
        AuthorizationError: Without a session
        RowNotFoundError: If the row does not exist
        InvalidTransitionError: If the decision is not allowed
        StoreWriteError: If the database rejects the update
    """
    session = _require_session(session)
    if strict is None:
        strict = settings.STRICT_TRANSITIONS

    row = _get_row(db, kind, row_id)
    status = transition(row.status, new_status, strict=strict)

    previous = row.status
    row.status = status.value
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating status of {kind} {row_id}: {e}")
        raise StoreWriteError(store_error_message(e))

    logger.info(f"{session.email} set {kind} {row_id} status {previous} -> {status.value}")
    return status


def update_fields(
    db: Session,
    session: Optional[SessionContext],
    kind: str,
    row_id: uuid.UUID,
    fields: Dict[str, Any],
):
    """
    Overwrite editable fields on a row, leaving its status untouched.

    Only the store's own constraints are enforced (e.g. a null title is
    rejected by the NOT NULL column).

    Raises:
        AuthorizationError: Without a session
        FieldNotEditableError: If a field is not editable for this kind
        RowNotFoundError: If the row does not exist
        StoreWriteError: If the database rejects the update
    """
    session = _require_session(session)

    _model_for(kind)
    not_editable = set(fields) - EDITABLE_FIELDS[kind]
    if not_editable:
        raise FieldNotEditableError(f"Cannot edit {', '.join(sorted(not_editable))} on {kind}")

    row = _get_row(db, kind, row_id)
    for name, value in fields.items():
        setattr(row, name, value)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating {kind} {row_id}: {e}")
        raise StoreWriteError(store_error_message(e))

    logger.info(f"{session.email} edited {kind} {row_id}: {sorted(fields)}")
    return row


def _ordering(kind: str, status: str):
    if kind == "event" and status == ModerationStatus.VERIFIED.value:
        return Event.date.desc()
    return MODELS[kind].created_at.desc()


def list_rows(db: Session, kind: str, status: str) -> List:
    """
    List rows of one kind in one status, in console order.

    Read failures are logged and give an empty list.
    """
    model = _model_for(kind)
    query = db.query(model).filter(model.status == status)
    if model is Evidence:
        query = query.options(joinedload(Evidence.event))

    try:
        return query.order_by(_ordering(kind, status)).all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to list {status} {kind} rows: {e}")
        return []


def to_event_response(event: Event) -> EventResponse:
    return EventResponse.model_validate(event)


def to_evidence_response(item: Evidence) -> EvidenceResponse:
    return EvidenceResponse(
        id=item.id,
        event_id=item.event_id,
        event_title=item.event.title if item.event is not None else None,
        title=item.title,
        type=item.type,
        side=item.side,
        content_url=item.content_url,
        status=item.status,
        created_at=item.created_at,
    )


def moderation_queue(db: Session) -> ModerationQueue:
    """Fetch pending and verified rows of both kinds for the console."""
    pending = ModerationStatus.PENDING.value
    verified = ModerationStatus.VERIFIED.value

    return ModerationQueue(
        pending_events=[to_event_response(e) for e in list_rows(db, "event", pending)],
        pending_evidence=[to_evidence_response(e) for e in list_rows(db, "evidence", pending)],
        verified_events=[to_event_response(e) for e in list_rows(db, "event", verified)],
        verified_evidence=[to_evidence_response(e) for e in list_rows(db, "evidence", verified)],
    )
