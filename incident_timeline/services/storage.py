"""Object storage for uploaded evidence files."""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

from incident_timeline.config import settings
from incident_timeline.services.errors import StorageError

logger = logging.getLogger(__name__)

# Extensions a browser may render inline. Anything else (html, svg, xml, ...)
# is served as an opaque download.
INLINE_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "pdf": "application/pdf",
    "mp4": "video/mp4",
}
DOWNLOAD_TYPE = "application/octet-stream"


def serving_type(name: str) -> Tuple[str, bool]:
    """
    Media type to serve an object with, and whether it may be shown inline.

    The type comes from a fixed allowlist, never from the uploader.
    """
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if ext in INLINE_TYPES:
        return INLINE_TYPES[ext], True
    return DOWNLOAD_TYPE, False


def random_object_name(filename: Optional[str]) -> str:
    """Build a randomized object name that keeps the original extension."""
    name = uuid.uuid4().hex
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext.isalnum():
            return f"{name}.{ext}"
    return name


class ObjectStorage:
    """Bucket-style file store on the local filesystem, served under a public URL."""

    def __init__(self, root: str, bucket: str, public_base_url: str):
        """Initialize the storage bucket."""
        self.root = Path(root)
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self.root / self.bucket

    def _object_path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise StorageError(f"Invalid object name: {name!r}")
        return self.bucket_dir / name

    def upload(self, name: str, data: bytes, content_type: Optional[str] = None) -> str:
        """
        Store an object under the given name.

        Args:
            name: Object name within the bucket
            data: File content
            content_type: Declared MIME type, logged only

        Returns:
            The object name

        Raises:
            StorageError: If the name is invalid, taken, or the write fails
        """
        path = self._object_path(name)
        try:
            self.bucket_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "xb") as f:
                f.write(data)
        except FileExistsError:
            raise StorageError(f"The resource already exists: {name}")
        except OSError as e:
            raise StorageError(f"Upload failed: {e}")

        logger.info(f"Uploaded {name} ({len(data)} bytes, {content_type or 'unknown type'})")
        return name

    def get_public_url(self, name: str) -> str:
        """Public URL of an object."""
        return f"{self.public_base_url}/{self.bucket}/{name}"

    def locate(self, name: str) -> Optional[Path]:
        """Filesystem path of a stored object, or None if it does not exist."""
        path = self._object_path(name)
        return path if path.is_file() else None

    def delete(self, name: str) -> None:
        """Remove an object; missing objects are ignored."""
        path = self._object_path(name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Delete failed: {e}")
        logger.info(f"Deleted {name}")


def get_storage() -> ObjectStorage:
    """FastAPI dependency returning the configured bucket."""
    return ObjectStorage(
        root=settings.STORAGE_ROOT,
        bucket=settings.STORAGE_BUCKET,
        public_base_url=settings.PUBLIC_BASE_URL,
    )
