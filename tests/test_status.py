"""Tests for the moderation status state machine."""

import pytest

from incident_timeline.services.errors import InvalidTransitionError
from incident_timeline.services.status import ModerationStatus, transition


@pytest.mark.parametrize("target", ["verified", "rejected"])
def test_pending_can_be_decided(target):
    """Test that pending rows can be verified or rejected."""
    assert transition("pending", target) is ModerationStatus(target)


def test_decided_rows_can_be_overwritten_by_default():
    """Test that the overwrite is unconditional outside strict mode."""
    assert transition("verified", "rejected") is ModerationStatus.REJECTED
    assert transition("rejected", "verified") is ModerationStatus.VERIFIED


def test_strict_mode_requires_pending():
    """Test that strict mode only decides pending rows."""
    assert transition("pending", "verified", strict=True) is ModerationStatus.VERIFIED
    with pytest.raises(InvalidTransitionError):
        transition("verified", "rejected", strict=True)


def test_cannot_move_back_to_pending():
    """Test that pending is never a moderation decision."""
    with pytest.raises(InvalidTransitionError):
        transition("verified", "pending")


def test_unknown_status_rejected():
    """Test that values outside the enumeration are rejected."""
    with pytest.raises(InvalidTransitionError):
        transition("pending", "approved")
    with pytest.raises(InvalidTransitionError):
        transition("archived", "verified")


def test_status_values():
    """Test the enumeration values."""
    assert {s.value for s in ModerationStatus} == {"pending", "verified", "rejected"}
