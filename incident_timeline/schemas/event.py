"""Event-related Pydantic schemas."""

from datetime import datetime, timezone
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC, the form event dates are stored in."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class EventResponse(BaseModel):
    """Event row as returned to the console."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    date: datetime
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class EventUpdate(BaseModel):
    """Partial edit of an event. Status is not editable here."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    date: Optional[UtcDatetime] = None
    description: Optional[str] = None


class SelectableEvent(BaseModel):
    """Verified event offered in the submission form's event selector."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
