"""Presigned upload URLs for listing images."""

import time
import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_profile
from app.core.exceptions import Forbidden, InvalidInput
from app.database.errors import store_failure
from app.database.session import get_db
from app.models.listing import Listing
from app.models.profile import Profile
from app.services.blob_service import BlobService, get_blob_service

router = APIRouter(prefix="/images", tags=["images"])


class UploadUrlRequest(BaseModel):
    # Checked in the handler so that wrong JSON types are a 400, not a 422.
    listing_id: Any = None
    filename: Any = None


class UploadUrlResponse(BaseModel):
    upload_url: str
    public_url: str
    file_path: str
    expires_in: int


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1] or "jpg"


@router.post("/upload-url", response_model=UploadUrlResponse)
def get_upload_url(
    body: UploadUrlRequest,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
    blobs: BlobService = Depends(get_blob_service),
):
    """Generate a presigned PUT URL for an image of one of the caller's listings."""
    if not (isinstance(body.listing_id, str) and body.listing_id and isinstance(body.filename, str) and body.filename):
        raise InvalidInput("listing_id and filename are required")

    try:
        listing_id = uuid.UUID(body.listing_id)
    except ValueError:
        raise Forbidden("Listing not found or access denied")

    try:
        listing = (
            db.query(Listing)
            .filter(Listing.id == listing_id, Listing.seller_id == profile.id)
            .first()
        )
    except SQLAlchemyError as e:
        raise store_failure("load listing", e) from e
    if listing is None:
        raise Forbidden("Listing not found or access denied")

    file_path = f"{profile.id}/{listing.id}/{int(time.time() * 1000)}.{_extension(body.filename)}"
    return UploadUrlResponse(
        upload_url=blobs.presign_upload(file_path, content_type="application/octet-stream"),
        public_url=blobs.public_url(file_path),
        file_path=file_path,
        expires_in=blobs.expiry_seconds,
    )
