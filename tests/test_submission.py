"""Tests for submission intake."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from incident_timeline.models.event import Event
from incident_timeline.models.evidence import Evidence
from incident_timeline.schemas.submission import SubmissionForm
from incident_timeline.services import submission
from incident_timeline.services.errors import (
    StorageError,
    StoreWriteError,
    SubmissionValidationError,
)
from incident_timeline.services.storage import random_object_name


def _new_event_form(**overrides):
    values = {
        "event_id": "new",
        "event_title": "Scaffolding fire",
        "event_date": datetime(2025, 11, 26, 14, 51),
        "event_description": "Fire spread along the scaffolding nets",
        "evidence_title": "Live news report",
        "evidence_type": "link",
        "evidence_side": "neutral",
        "evidence_content": "https://example.com/news/1",
    }
    values.update(overrides)
    return SubmissionForm(**values)


def test_new_event_and_evidence(test_db, storage):
    """Test that a new-event submission creates exactly one pending event and evidence."""
    result = submission.submit(test_db, storage, _new_event_form())

    events = test_db.query(Event).all()
    evidence = test_db.query(Evidence).all()

    assert len(events) == 1
    assert len(evidence) == 1
    assert events[0].status == "pending"
    assert evidence[0].status == "pending"
    assert evidence[0].event_id == events[0].id == result.event_id
    assert evidence[0].content_url == "https://example.com/news/1"
    assert result.event_created


def test_existing_verified_event(test_db, storage, make_event):
    """Test attaching evidence to an existing verified event."""
    event = make_event(status="verified")

    result = submission.submit(
        test_db, storage,
        _new_event_form(event_id=str(event.id), event_title=None, event_date=None),
    )

    assert not result.event_created
    assert result.event_id == event.id
    assert test_db.query(Event).count() == 1
    assert test_db.query(Evidence).one().event_id == event.id


def test_existing_event_must_be_verified(test_db, storage, make_event):
    """Test that pending events cannot be selected."""
    event = make_event(status="pending")

    with pytest.raises(SubmissionValidationError):
        submission.submit(test_db, storage, _new_event_form(event_id=str(event.id)))

    assert test_db.query(Evidence).count() == 0


def test_blob_without_file_rejected_before_any_write(test_db, storage):
    """Test that blob evidence requires a file and nothing is written without one."""
    form = _new_event_form(evidence_type="blob", evidence_content=None)

    with pytest.raises(SubmissionValidationError, match="file is required"):
        submission.submit(test_db, storage, form)

    with pytest.raises(SubmissionValidationError):
        submission.submit(
            test_db, storage, form, submission.UploadedFile(filename="empty.pdf", data=b"")
        )

    assert test_db.query(Event).count() == 0
    assert test_db.query(Evidence).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"event_title": "  "},
        {"event_date": None},
        {"evidence_title": None},
        {"evidence_content": ""},
        {"event_id": "not-a-uuid"},
    ],
)
def test_required_fields(test_db, storage, overrides):
    """Test that missing required fields are rejected before writing."""
    with pytest.raises(SubmissionValidationError):
        submission.submit(test_db, storage, _new_event_form(**overrides))

    assert test_db.query(Event).count() == 0


def test_blob_upload_resolves_public_url(test_db, storage):
    """Test that uploaded files are stored and linked by public URL."""
    form = _new_event_form(evidence_type="blob", evidence_content=None)
    upload = submission.UploadedFile(filename="minutes.PDF", data=b"%PDF-1.4", content_type="application/pdf")

    result = submission.submit(test_db, storage, form, upload)

    assert result.content_url.startswith("/files/evidence-files/")
    assert result.content_url.endswith(".pdf")
    name = result.content_url.rsplit("/", 1)[-1]
    with open(os.path.join(storage.bucket_dir, name), "rb") as f:
        assert f.read() == b"%PDF-1.4"
    assert test_db.query(Evidence).one().content_url == result.content_url


def test_failed_upload_removes_new_event(test_db, storage, monkeypatch):
    """Test that a failed upload deletes the event created in step one."""

    def failing_upload(*args, **kwargs):
        raise StorageError("Bucket not found")

    monkeypatch.setattr(storage, "upload", failing_upload)
    form = _new_event_form(evidence_type="blob", evidence_content=None)
    upload = submission.UploadedFile(filename="photo.jpg", data=b"jpeg")

    with pytest.raises(StorageError, match="Bucket not found"):
        submission.submit(test_db, storage, form, upload, compensate=True)

    assert test_db.query(Event).count() == 0
    assert test_db.query(Evidence).count() == 0


def test_failed_upload_leaves_orphan_without_compensation(test_db, storage, monkeypatch):
    """Test that the orphaned event stays pending when compensation is off."""

    def failing_upload(*args, **kwargs):
        raise StorageError("Bucket not found")

    monkeypatch.setattr(storage, "upload", failing_upload)
    form = _new_event_form(evidence_type="blob", evidence_content=None)
    upload = submission.UploadedFile(filename="photo.jpg", data=b"jpeg")

    with pytest.raises(StorageError):
        submission.submit(test_db, storage, form, upload, compensate=False)

    orphan = test_db.query(Event).one()
    assert orphan.status == "pending"
    assert test_db.query(Evidence).count() == 0


def test_failed_evidence_insert_removes_event_and_file(test_db, storage, monkeypatch):
    """Test compensation when the final insert fails after an upload."""
    real_insert = submission._insert

    def insert(db, row, what):
        if what == "evidence":
            raise StoreWriteError("permission denied for table evidence")
        return real_insert(db, row, what)

    monkeypatch.setattr(submission, "_insert", insert)
    form = _new_event_form(evidence_type="blob", evidence_content=None)
    upload = submission.UploadedFile(filename="photo.jpg", data=b"jpeg")

    with pytest.raises(StoreWriteError, match="permission denied"):
        submission.submit(test_db, storage, form, upload, compensate=True)

    assert test_db.query(Event).count() == 0
    assert list(storage.bucket_dir.iterdir()) == []


def test_store_error_message_is_raw(test_db, storage, monkeypatch):
    """Test that a rejected insert reports the store's own message."""

    def failing_commit():
        raise OperationalError("INSERT INTO events", {}, Exception("new row violates row-level security policy"))

    monkeypatch.setattr(test_db, "commit", failing_commit)

    with pytest.raises(StoreWriteError, match="row-level security"):
        submission.submit(test_db, storage, _new_event_form(), compensate=False)


def test_list_selectable_events(test_db, make_event):
    """Test that only verified events are offered, latest first."""
    make_event(title="pending", status="pending")
    early = make_event(title="early", status="verified", date=datetime(2024, 7, 31))
    late = make_event(title="late", status="verified", date=datetime(2025, 11, 26))

    assert [e.id for e in submission.list_selectable_events(test_db)] == [late.id, early.id]


def test_random_object_name_keeps_extension():
    """Test randomized object names."""
    first = random_object_name("Report.PDF")
    second = random_object_name("Report.PDF")

    assert first.endswith(".pdf")
    assert first != second
    assert "." not in random_object_name("no_extension")
    assert "." not in random_object_name(None)


def test_event_date_offset_is_normalized_to_utc():
    """Test that aware dates become naive UTC and naive dates are kept."""
    aware = _new_event_form(event_date=datetime(2025, 11, 26, 14, 51, tzinfo=timezone(timedelta(hours=8))))
    naive = _new_event_form()

    assert aware.event_date == datetime(2025, 11, 26, 6, 51)
    assert aware.event_date.tzinfo is None
    assert naive.event_date == datetime(2025, 11, 26, 14, 51)
