"""Moderator authentication: password hashing, sessions and session-change events."""

import hashlib
import hmac
import logging
import secrets
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from incident_timeline.config import settings
from incident_timeline.models.moderator import AuthSession, Moderator
from incident_timeline.services.errors import AuthenticationError

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 260_000

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionContext:
    """An authenticated moderator session, passed explicitly to moderation operations."""

    session_id: uuid.UUID
    moderator_id: uuid.UUID
    email: str
    expires_at: datetime
    access_token: str


AuthListener = Callable[[str, SessionContext], None]


class AuthEvents:
    """Registry of callbacks notified when a session starts or ends."""

    def __init__(self):
        self._listeners: List[AuthListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: str, session: SessionContext) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, session)
            except Exception as e:
                logger.error(f"Auth listener failed on {event}: {e}", exc_info=True)

    def __len__(self) -> int:
        return len(self._listeners)


auth_events = AuthEvents()


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash a password as ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash."""
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


def ensure_moderator(db: Session, email: str, password: str) -> Moderator:
    """Create a moderator account unless one already exists for the email."""
    email = email.strip().lower()
    moderator = db.query(Moderator).filter(Moderator.email == email).first()
    if moderator:
        return moderator

    moderator = Moderator(email=email, password_hash=hash_password(password))
    db.add(moderator)
    db.commit()

    logger.info(f"Created moderator {email}")
    return moderator


def _encode_token(session_row: AuthSession, moderator: Moderator) -> str:
    payload = {
        "sub": str(moderator.id),
        "email": moderator.email,
        "sid": str(session_row.id),
        "exp": session_row.expires_at,
        "iat": session_row.created_at,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def sign_in(db: Session, email: str, password: str, events: AuthEvents = auth_events) -> SessionContext:
    """
    Sign a moderator in with email and password.

    Raises:
        AuthenticationError: If the credentials do not match an account
    """
    email = (email or "").strip().lower()
    moderator = db.query(Moderator).filter(Moderator.email == email).first()
    if not moderator or not verify_password(password or "", moderator.password_hash):
        logger.warning(f"Failed sign-in for {email}")
        raise AuthenticationError("Invalid login credentials")

    now = datetime.utcnow()
    session_row = AuthSession(
        moderator_id=moderator.id,
        created_at=now,
        expires_at=now + timedelta(minutes=settings.SESSION_TTL_MINUTES),
    )
    db.add(session_row)
    db.commit()

    session = SessionContext(
        session_id=session_row.id,
        moderator_id=moderator.id,
        email=moderator.email,
        expires_at=session_row.expires_at,
        access_token=_encode_token(session_row, moderator),
    )

    logger.info(f"Moderator {moderator.email} signed in, session {session_row.id}")
    events.emit(SIGNED_IN, session)
    return session


def resolve_session(db: Session, token: Optional[str]) -> Optional[SessionContext]:
    """Return the live session behind a token, or None."""
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        session_id = uuid.UUID(payload["sid"])
    except (JWTError, KeyError, ValueError):
        return None

    session_row = db.query(AuthSession).filter(AuthSession.id == session_id).first()
    if session_row is None or session_row.revoked_at is not None:
        return None
    if session_row.expires_at <= datetime.utcnow():
        return None

    moderator = db.query(Moderator).filter(Moderator.id == session_row.moderator_id).first()
    if moderator is None:
        return None

    return SessionContext(
        session_id=session_row.id,
        moderator_id=moderator.id,
        email=moderator.email,
        expires_at=session_row.expires_at,
        access_token=token,
    )


def sign_out(db: Session, session: SessionContext, events: AuthEvents = auth_events) -> None:
    """Revoke a session."""
    session_row = db.query(AuthSession).filter(AuthSession.id == session.session_id).first()
    if session_row is not None and session_row.revoked_at is None:
        session_row.revoked_at = datetime.utcnow()
        db.commit()

    logger.info(f"Moderator {session.email} signed out, session {session.session_id}")
    events.emit(SIGNED_OUT, session)
