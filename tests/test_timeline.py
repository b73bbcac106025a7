"""Tests for the public timeline."""

from datetime import datetime

from sqlalchemy.exc import OperationalError

from incident_timeline.services.timeline import build_timeline

FB_EMBED = '<iframe src="https://www.facebook.com/plugins/post.php?href=x" width="500"></iframe>'


def test_only_verified_rows_are_public(test_db, make_event, make_evidence):
    """Test that pending and rejected rows never reach the timeline."""
    verified = make_event(title="Verified", status="verified")
    make_event(title="Pending", status="pending")
    make_event(title="Rejected", status="rejected")
    shown = make_evidence(verified, title="Shown", status="verified")
    make_evidence(verified, title="Waiting", status="pending")
    make_evidence(verified, title="Refused", status="rejected", type="iframe", content_url=FB_EMBED)

    timeline = build_timeline(test_db)

    assert [e.title for e in timeline] == ["Verified"]
    assert [item.id for item in timeline[0].neutral] == [shown.id]
    assert timeline[0].pro == [] and timeline[0].against == []


def test_verified_evidence_of_unverified_event_is_hidden(test_db, make_event, make_evidence):
    """Test that evidence is only shown under a verified event."""
    pending = make_event(status="pending")
    make_evidence(pending, status="verified")

    assert build_timeline(test_db) == []


def test_events_in_chronological_order(test_db, make_event):
    """Test that events are ordered by date ascending."""
    make_event(title="second", status="verified", date=datetime(2025, 11, 26))
    make_event(title="first", status="verified", date=datetime(2024, 7, 31, 11, 58))

    assert [e.title for e in build_timeline(test_db)] == ["first", "second"]


def test_evidence_grouped_by_side(test_db, make_event, make_evidence):
    """Test grouping into pro, against and neutral."""
    event = make_event(status="verified")
    pro = make_evidence(event, side="pro", status="verified")
    against = make_evidence(event, side="against", status="verified")
    neutral = make_evidence(event, side="neutral", status="verified")

    entry = build_timeline(test_db)[0]

    assert [i.id for i in entry.pro] == [pro.id]
    assert [i.id for i in entry.against] == [against.id]
    assert [i.id for i in entry.neutral] == [neutral.id]


def test_content_is_classified(test_db, make_event, make_evidence):
    """Test that each evidence item carries its render shape."""
    event = make_event(status="verified")
    make_evidence(event, side="pro", type="iframe", content_url=FB_EMBED, status="verified")
    make_evidence(event, side="against", type="link", content_url="https://youtu.be/dQw4w9WgXcQ", status="verified")
    make_evidence(event, side="neutral", type="link", content_url="https://example.com/x", status="verified")

    entry = build_timeline(test_db)[0]

    assert entry.pro[0].content.kind == "embed"
    assert entry.pro[0].content.markup == FB_EMBED
    assert entry.against[0].content.kind == "video"
    assert entry.against[0].content.embed_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
    assert entry.neutral[0].content.kind == "link"
    assert entry.neutral[0].content.display == "https://example.com/x"


def test_read_failure_gives_empty_timeline(test_db, make_event, monkeypatch):
    """Test that read failures render an empty timeline."""
    make_event(status="verified")

    def failing_query(*args):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(test_db, "query", failing_query)

    assert build_timeline(test_db) == []
