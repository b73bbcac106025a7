"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    """Signed-in moderator session."""

    access_token: str
    token_type: str = "bearer"
    moderator_id: UUID
    email: str
    expires_at: datetime
