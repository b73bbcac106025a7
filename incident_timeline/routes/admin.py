"""Moderation console API routes."""

import logging
import uuid
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from incident_timeline.database import get_db
from incident_timeline.routes.deps import SERVICE_ERRORS, get_current_session, to_http_error
from incident_timeline.schemas.event import EventUpdate
from incident_timeline.schemas.evidence import EvidenceUpdate
from incident_timeline.schemas.moderation import ModerationQueue, StatusUpdate
from incident_timeline.services import moderation
from incident_timeline.services.auth import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

RowKind = Literal["event", "evidence"]


def _require(session: Optional[SessionContext]) -> SessionContext:
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


@router.get("/queue", response_model=ModerationQueue)
def get_queue(
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Pending and verified events and evidence."""
    _require(session)
    return moderation.moderation_queue(db)


@router.post("/{kind}/{row_id}/status")
def update_status(
    kind: RowKind,
    row_id: uuid.UUID,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Approve or reject a row."""
    try:
        status = moderation.set_status(db, session, kind, row_id, data.status)
    except SERVICE_ERRORS as e:
        raise to_http_error(e)

    return {"id": str(row_id), "kind": kind, "status": status.value}


@router.patch("/{kind}/{row_id}")
def update_row(
    kind: RowKind,
    row_id: uuid.UUID,
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Edit fields of a row. Only the fields present in the body change."""
    schema = EventUpdate if kind == "event" else EvidenceUpdate
    try:
        data = schema.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    fields = data.model_dump(exclude_unset=True)
    try:
        row = moderation.update_fields(db, session, kind, row_id, fields)
    except SERVICE_ERRORS as e:
        raise to_http_error(e)

    if kind == "event":
        return moderation.to_event_response(row)
    return moderation.to_evidence_response(row)
