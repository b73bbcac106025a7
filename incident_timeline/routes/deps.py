"""Shared route dependencies and error mapping."""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from incident_timeline.database import get_db
from incident_timeline.services.auth import SessionContext, resolve_session
from incident_timeline.services.errors import (
    AuthenticationError,
    AuthorizationError,
    FieldNotEditableError,
    InvalidTransitionError,
    RowNotFoundError,
    StorageError,
    StoreWriteError,
    SubmissionValidationError,
)

TOKEN_COOKIE = "access_token"

ERROR_STATUS = {
    AuthorizationError: 401,
    AuthenticationError: 401,
    RowNotFoundError: 404,
    InvalidTransitionError: 422,
    FieldNotEditableError: 422,
    SubmissionValidationError: 400,
    StoreWriteError: 400,
    StorageError: 400,
}

SERVICE_ERRORS = tuple(ERROR_STATUS)


def request_token(request: Request) -> Optional[str]:
    """Session token from the cookie or an ``Authorization: Bearer`` header."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return request.cookies.get(TOKEN_COOKIE)


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[SessionContext]:
    """Signed-in moderator session, or None."""
    return resolve_session(db, request_token(request))


def to_http_error(exc: Exception) -> HTTPException:
    """Map a service exception to an HTTP error carrying its message."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal error")
