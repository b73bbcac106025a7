"""Tests for object storage."""

import pytest

from incident_timeline.services.errors import StorageError
from incident_timeline.services.storage import serving_type


def test_upload_and_public_url(storage):
    """Test storing an object and resolving its URL."""
    name = storage.upload("abc.png", b"png-bytes", "image/png")

    assert (storage.bucket_dir / name).read_bytes() == b"png-bytes"
    assert storage.get_public_url(name) == "/files/evidence-files/abc.png"


def test_upload_refuses_overwrite(storage):
    """Test that existing objects are not replaced."""
    storage.upload("abc.png", b"one")

    with pytest.raises(StorageError, match="already exists"):
        storage.upload("abc.png", b"two")

    assert (storage.bucket_dir / "abc.png").read_bytes() == b"one"


@pytest.mark.parametrize("name", ["../escape.txt", "a/b.txt", "", ".."])
def test_upload_rejects_path_names(storage, name):
    """Test that object names cannot leave the bucket."""
    with pytest.raises(StorageError):
        storage.upload(name, b"data")


def test_delete(storage):
    """Test deleting objects, including missing ones."""
    storage.upload("abc.png", b"data")
    storage.delete("abc.png")
    storage.delete("abc.png")

    assert not (storage.bucket_dir / "abc.png").exists()


@pytest.mark.parametrize(
    "name,expected",
    [
        ("a.png", ("image/png", True)),
        ("a.JPG", ("image/jpeg", True)),
        ("a.pdf", ("application/pdf", True)),
        ("a.html", ("application/octet-stream", False)),
        ("a.svg", ("application/octet-stream", False)),
        ("a.xml", ("application/octet-stream", False)),
        ("noextension", ("application/octet-stream", False)),
    ],
)
def test_serving_type(name, expected):
    """Test that only allowlisted extensions are served inline."""
    assert serving_type(name) == expected


def test_locate(storage):
    """Test resolving stored objects to paths."""
    storage.upload("here.pdf", b"pdf")

    assert storage.locate("here.pdf") == storage.bucket_dir / "here.pdf"
    assert storage.locate("gone.pdf") is None
    with pytest.raises(StorageError):
        storage.locate("../here.pdf")
