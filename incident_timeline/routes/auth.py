"""Moderator authentication routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from incident_timeline.database import get_db
from incident_timeline.routes.deps import TOKEN_COOKIE, get_current_session, to_http_error
from incident_timeline.schemas.auth import LoginRequest, SessionResponse
from incident_timeline.services import auth
from incident_timeline.services.auth import SessionContext
from incident_timeline.services.errors import AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def session_response(session: SessionContext) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        moderator_id=session.moderator_id,
        email=session.email,
        expires_at=session.expires_at,
    )


def set_session_cookie(response: Response, session: SessionContext) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        session.access_token,
        httponly=True,
        samesite="lax",
        expires=session.expires_at.strftime("%a, %d %b %Y %H:%M:%S GMT"),
    )


@router.post("/login", response_model=SessionResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Sign in with email and password."""
    try:
        session = auth.sign_in(db, data.email, data.password)
    except AuthenticationError as e:
        raise to_http_error(e)

    set_session_cookie(response, session)
    return session_response(session)


@router.post("/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    session: Optional[SessionContext] = Depends(get_current_session),
):
    """Sign out the current session."""
    if session is not None:
        auth.sign_out(db, session)
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Signed out"}


@router.get("/session", response_model=SessionResponse)
def current_session(session: Optional[SessionContext] = Depends(get_current_session)):
    """Return the current session."""
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session_response(session)
