"""Server-rendered pages: public timeline, submission form, moderation console."""

import logging
import uuid
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from incident_timeline.config import settings
from incident_timeline.database import get_db
from incident_timeline.routes.auth import set_session_cookie
from incident_timeline.routes.deps import SERVICE_ERRORS, TOKEN_COOKIE, get_current_session
from incident_timeline.routes.submissions import read_upload
from incident_timeline.schemas.event import EventUpdate, SelectableEvent
from incident_timeline.schemas.evidence import EvidenceUpdate
from incident_timeline.schemas.submission import NEW_EVENT, SubmissionForm
from incident_timeline.services import auth, moderation, submission
from incident_timeline.services.auth import SessionContext
from incident_timeline.services.errors import AuthenticationError, SubmissionValidationError
from incident_timeline.services.storage import ObjectStorage, get_storage
from incident_timeline.services.timeline import build_timeline
from incident_timeline.views import html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


def _back_to_console(error: Optional[str] = None, tab: Optional[str] = None) -> RedirectResponse:
    """Redirect to the console, which re-fetches every list."""
    params = {}
    if tab:
        params["tab"] = tab
    if error:
        params["error"] = error
    url = "/admin" + (f"?{urlencode(params)}" if params else "")
    return RedirectResponse(url=url, status_code=303)


def _form_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a datetime-local input value (seconds optional)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise SubmissionValidationError(f"Invalid date: {value!r}")


def _selectable(db: Session):
    return [SelectableEvent.model_validate(e) for e in submission.list_selectable_events(db)]


@router.get("/", response_class=HTMLResponse)
def timeline_page(db: Session = Depends(get_db)):
    """Public timeline."""
    return HTMLResponse(html.render_timeline_page(settings.SITE_TITLE, build_timeline(db)))


@router.get("/submit", response_class=HTMLResponse)
def submit_page(db: Session = Depends(get_db)):
    """Submission form."""
    return HTMLResponse(html.render_submit_page(settings.SITE_TITLE, _selectable(db)))


@router.post("/submit", response_class=HTMLResponse)
async def submit_form(
    event_id: str = Form(NEW_EVENT),
    event_title: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None),
    event_description: Optional[str] = Form(None),
    evidence_title: Optional[str] = Form(None),
    evidence_type: str = Form("link"),
    evidence_side: str = Form("neutral"),
    evidence_content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    """Handle the submission form and re-render it with the outcome."""
    values = {
        "event_id": event_id,
        "event_title": event_title,
        "event_date": event_date,
        "event_description": event_description,
        "evidence_title": evidence_title,
        "evidence_type": evidence_type,
        "evidence_side": evidence_side,
        "evidence_content": evidence_content,
    }
    try:
        form = SubmissionForm(**dict(values, event_date=_form_datetime(event_date)))
        upload = await read_upload(file, evidence_type)
        submission.submit(db, storage, form, upload)
    except ValidationError as e:
        message = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        return HTMLResponse(
            html.render_submit_page(settings.SITE_TITLE, _selectable(db), error=message, values=values),
            status_code=400,
        )
    except SERVICE_ERRORS as e:
        logger.warning(f"Submission rejected: {e}")
        return HTMLResponse(
            html.render_submit_page(
                settings.SITE_TITLE,
                _selectable(db),
                error=f"Error submitting: {e}",
                values=values,
            ),
            status_code=400,
        )

    return HTMLResponse(
        html.render_submit_page(
            settings.SITE_TITLE,
            _selectable(db),
            success="Thank you. Your submission is waiting for review.",
        )
    )


@router.get("/admin", response_class=HTMLResponse)
def admin_page(
    tab: str = "pending",
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Login form, or the console when signed in."""
    if session is None:
        return HTMLResponse(html.render_login_page())
    queue = moderation.moderation_queue(db)
    return HTMLResponse(html.render_console_page(queue, session.email, tab=tab, error=error))


@router.post("/admin/login", response_class=HTMLResponse)
def admin_login(
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    try:
        session = auth.sign_in(db, email, password)
    except AuthenticationError as e:
        return HTMLResponse(html.render_login_page(error=str(e)), status_code=401)

    response = _back_to_console()
    set_session_cookie(response, session)
    return response


@router.post("/admin/logout")
def admin_logout(
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    if session is not None:
        auth.sign_out(db, session)
    response = RedirectResponse(url="/admin", status_code=303)
    response.delete_cookie(TOKEN_COOKIE)
    return response


@router.post("/admin/{kind}/{row_id}/status")
def admin_set_status(
    kind: str,
    row_id: uuid.UUID,
    status: str = Form(...),
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Approve or reject, then go back to the re-fetched console."""
    try:
        moderation.set_status(db, session, kind, row_id, status)
    except (ValueError,) + SERVICE_ERRORS as e:
        return _back_to_console(error=f"Error updating status: {e}")
    return _back_to_console()


@router.post("/admin/{kind}/{row_id}/edit")
async def admin_edit(
    kind: str,
    row_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Save an edit form, then go back to the re-fetched console."""
    form = await request.form()
    schema = EventUpdate if kind == "event" else EvidenceUpdate
    values = {name: value for name, value in form.items() if name in schema.model_fields}
    try:
        if kind == "event" and "date" in values:
            values["date"] = _form_datetime(values["date"])
            if values["date"] is None:
                values.pop("date")
        fields = schema.model_validate(values).model_dump(exclude_unset=True)
        moderation.update_fields(db, session, kind, row_id, fields)
    except ValidationError as e:
        return _back_to_console(error=f"Error updating data: {e.errors()[0]['msg']}")
    except (ValueError,) + SERVICE_ERRORS as e:
        return _back_to_console(error=f"Error updating data: {e}")
    return _back_to_console()
