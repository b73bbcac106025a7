"""Uploaded evidence files."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from incident_timeline.config import settings
from incident_timeline.services.errors import StorageError
from incident_timeline.services.storage import ObjectStorage, get_storage, serving_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.PUBLIC_BASE_URL.rstrip("/"), tags=["files"])

# Uploads share the app's origin, so they must never run as a page.
FILE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Content-Security-Policy": "sandbox; default-src 'none'",
}


@router.get("/{bucket}/{name}")
def get_file(bucket: str, name: str, storage: ObjectStorage = Depends(get_storage)):
    """
    Serve a stored object.

    Only allowlisted image, PDF and video types are shown inline; everything
    else is sent as an octet-stream attachment.
    """
    try:
        path = storage.locate(name) if bucket == storage.bucket else None
    except StorageError:
        path = None
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")

    media_type, inline = serving_type(name)
    return FileResponse(
        path,
        media_type=media_type,
        filename=name,
        content_disposition_type="inline" if inline else "attachment",
        headers=FILE_HEADERS,
    )
