"""Submission intake: one event (new or existing) plus one evidence item."""

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from incident_timeline.config import settings
from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.schemas.submission import SubmissionForm
from incident_timeline.services.errors import (
    StorageError,
    StoreWriteError,
    SubmissionValidationError,
)
from incident_timeline.services.moderation import store_error_message
from incident_timeline.services.status import ModerationStatus
from incident_timeline.services.storage import ObjectStorage, random_object_name

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """File attached to a blob submission."""

    filename: Optional[str]
    data: bytes
    content_type: Optional[str] = None


@dataclass
class SubmissionResult:
    event_id: uuid.UUID
    evidence_id: uuid.UUID
    event_created: bool
    content_url: str


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate(form: SubmissionForm, file: Optional[UploadedFile] = None) -> None:
    """
    Check required fields before anything is written.

    Raises:
        SubmissionValidationError: On the first missing or invalid field
    """
    if form.creates_event:
        if _blank(form.event_title):
            raise SubmissionValidationError("Event title is required")
        if form.event_date is None:
            raise SubmissionValidationError("Event date is required")
    else:
        try:
            uuid.UUID(form.event_id)
        except ValueError:
            raise SubmissionValidationError(f"Invalid event id: {form.event_id!r}")

    if _blank(form.evidence_title):
        raise SubmissionValidationError("Evidence title is required")

    if form.evidence_type == "blob":
        if file is None or not file.data:
            raise SubmissionValidationError("A file is required for uploaded evidence")
        if len(file.data) > settings.MAX_UPLOAD_BYTES:
            raise SubmissionValidationError(
                f"File is larger than {settings.MAX_UPLOAD_BYTES} bytes"
            )
    elif _blank(form.evidence_content):
        raise SubmissionValidationError("Evidence content is required")


def list_selectable_events(db: Session) -> List[Event]:
    """Verified events a submission may attach evidence to, newest first."""
    try:
        return (
            db.query(Event)
            .filter(Event.status == ModerationStatus.VERIFIED.value)
            .order_by(Event.date.desc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to list selectable events: {e}")
        return []


def _insert(db: Session, row, what: str):
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error inserting {what}: {e}")
        raise StoreWriteError(store_error_message(e))
    return row


def _resolve_event(db: Session, form: SubmissionForm) -> uuid.UUID:
    event_id = uuid.UUID(form.event_id)
    try:
        event = db.get(Event, event_id)
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreWriteError(store_error_message(e))
    if event is None or event.status != ModerationStatus.VERIFIED.value:
        raise SubmissionValidationError("Selected event is not available")
    return event.id


def _compensate(db: Session, event_id: uuid.UUID) -> None:
    """Delete an event created earlier in a submission that later failed."""
    try:
        db.query(Event).filter(Event.id == event_id).delete()
        db.commit()
        logger.info(f"Removed orphaned event {event_id}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to remove orphaned event {event_id}: {e}")


def submit(
    db: Session,
    storage: ObjectStorage,
    form: SubmissionForm,
    file: Optional[UploadedFile] = None,
    compensate: Optional[bool] = None,
) -> SubmissionResult:
    """
    Run the three-step submission.

    1. Insert a pending event, or reuse the selected verified event.
    2. For blob evidence, upload the file and use its public URL.
    3. Insert the pending evidence row pointing at the event.

    Steps commit one at a time. If step 2 or 3 fails after step 1 created an
    event, that event is deleted again when compensation is on; otherwise it
    is left pending without evidence.

    Raises:
        SubmissionValidationError: If the form is incomplete
        StorageError: If the upload fails
        StoreWriteError: If the database rejects a write
    """
    validate(form, file)
    if compensate is None:
        compensate = settings.SUBMISSION_COMPENSATE

    created_event_id = None
    uploaded_name = None

    try:
        # Step 1: event
        if form.creates_event:
            event = _insert(
                db,
                Event(
                    title=form.event_title,
                    date=form.event_date,
                    description=form.event_description or None,
                    status=ModerationStatus.PENDING.value,
                ),
                "event",
            )
            created_event_id = event.id
            event_id = event.id
            logger.info(f"Created pending event {event_id}")
        else:
            event_id = _resolve_event(db, form)

        # Step 2: content
        if form.evidence_type == "blob":
            uploaded_name = storage.upload(
                random_object_name(file.filename), file.data, file.content_type
            )
            content_url = storage.get_public_url(uploaded_name)
        else:
            content_url = form.evidence_content

        # Step 3: evidence
        evidence = _insert(
            db,
            Evidence(
                event_id=event_id,
                title=form.evidence_title,
                type=form.evidence_type,
                side=form.evidence_side,
                content_url=content_url,
                status=ModerationStatus.PENDING.value,
            ),
            "evidence",
        )
        logger.info(f"Created pending evidence {evidence.id} for event {event_id}")

    except (StoreWriteError, StorageError):
        if compensate:
            if created_event_id is not None:
                _compensate(db, created_event_id)
            if uploaded_name is not None:
                try:
                    storage.delete(uploaded_name)
                except StorageError as e:
                    logger.error(f"Failed to remove uploaded file {uploaded_name}: {e}")
        elif created_event_id is not None:
            logger.warning(f"Submission failed after creating event {created_event_id}; left pending")
        raise

    return SubmissionResult(
        event_id=event_id,
        evidence_id=evidence.id,
        event_created=created_event_id is not None,
        content_url=content_url,
    )
