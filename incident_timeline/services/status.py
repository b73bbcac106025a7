"""Moderation status state machine.

Every event and evidence row moves independently through::

    pending -> verified
    pending -> rejected

New rows are always created as ``pending``; moderators only ever write
``verified`` or ``rejected``. The overwrite is unconditional unless strict
mode is on, in which case the prior state must be ``pending``.
"""

from enum import Enum

from incident_timeline.services.errors import InvalidTransitionError


class ModerationStatus(str, Enum):
    """Moderation state of a row."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


DECISIONS = frozenset({ModerationStatus.VERIFIED, ModerationStatus.REJECTED})


def parse_status(value: str) -> ModerationStatus:
    """Parse a stored or requested status value."""
    try:
        return ModerationStatus(value)
    except ValueError:
        raise InvalidTransitionError(f"Unknown status: {value!r}")


def transition(current, target, strict: bool = False) -> ModerationStatus:
    """
    Validate a moderation decision and return the status to store.

    Args:
        current: Status currently stored on the row
        target: Requested status
        strict: Require the row to still be pending

    Returns:
        The new status

    Raises:
        InvalidTransitionError: If the target is not a decision, or strict
            mode is on and the row has already been decided
    """
    current = parse_status(current)
    target = parse_status(target)

    if target not in DECISIONS:
        raise InvalidTransitionError(f"Cannot set status to {target.value!r}")

    if strict and current is not ModerationStatus.PENDING:
        raise InvalidTransitionError(
            f"Row is already {current.value!r}; only pending rows can be moderated"
        )

    return target
