"""Submission routes."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from incident_timeline.config import settings
from incident_timeline.database import get_db
from incident_timeline.routes.deps import SERVICE_ERRORS, to_http_error
from incident_timeline.schemas.evidence import EvidenceSide, EvidenceType
from incident_timeline.schemas.submission import NEW_EVENT, SubmissionForm, SubmissionResponse
from incident_timeline.services import submission
from incident_timeline.services.errors import SubmissionValidationError
from incident_timeline.services.storage import ObjectStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


async def read_upload(
    file: Optional[UploadFile], evidence_type: str
) -> Optional[submission.UploadedFile]:
    """
    Read an attached file; only blob evidence uses one.

    At most MAX_UPLOAD_BYTES + 1 bytes are read, so an oversized upload is
    rejected without being held in memory.

    Raises:
        SubmissionValidationError: If the file is larger than MAX_UPLOAD_BYTES
    """
    if file is None or evidence_type != "blob":
        return None

    limit = settings.MAX_UPLOAD_BYTES
    if file.size is not None and file.size > limit:
        raise SubmissionValidationError(f"File is larger than {limit} bytes")
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise SubmissionValidationError(f"File is larger than {limit} bytes")

    return submission.UploadedFile(
        filename=file.filename,
        data=data,
        content_type=file.content_type,
    )


@router.post("", response_model=SubmissionResponse)
async def create_submission(
    event_id: str = Form(NEW_EVENT),
    event_title: Optional[str] = Form(None),
    event_date: Optional[datetime] = Form(None),
    event_description: Optional[str] = Form(None),
    evidence_title: Optional[str] = Form(None),
    evidence_type: EvidenceType = Form("link"),
    evidence_side: EvidenceSide = Form("neutral"),
    evidence_content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    """
    Submit one evidence item, creating a pending event first if requested.

    Args:
        event_id: 'new' or the id of a verified event
        file: Uploaded file for blob evidence

    Returns:
        SubmissionResponse with the event and evidence ids
    """
    form = SubmissionForm(
        event_id=event_id,
        event_title=event_title,
        event_date=event_date,
        event_description=event_description,
        evidence_title=evidence_title,
        evidence_type=evidence_type,
        evidence_side=evidence_side,
        evidence_content=evidence_content,
    )
    try:
        upload = await read_upload(file, evidence_type)
        result = submission.submit(db, storage, form, upload)
    except SERVICE_ERRORS as e:
        logger.warning(f"Submission rejected: {e}")
        raise to_http_error(e)

    return SubmissionResponse(
        event_id=result.event_id,
        evidence_id=result.evidence_id,
        event_created=result.event_created,
        content_url=result.content_url,
    )
