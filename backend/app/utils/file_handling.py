from __future__ import annotations

import os
import uuid

from fastapi import UploadFile

from app.config import settings
from app.models.listing import ListingImage
from app.utils.exceptions import UserInputError

ALLOWED_EXTENSIONS = {
    ext.strip().lower() for ext in settings.allowed_image_extensions.split(",")
}


def validate_image(file: UploadFile) -> None:
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise UserInputError(
            f"File type '{ext}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )


def build_image_url(filename: str) -> str:
    return f"{settings.media_url_prefix.rstrip('/')}/{filename}"


def preview_image_url(url: str, transform: str | None = None) -> str:
    """Splice a resize transform after the first ``/upload`` segment."""
    transform = transform or settings.preview_transform
    return url.replace("/upload", f"/upload/{transform}", 1)


async def save_listing_image(file: UploadFile) -> ListingImage:
    validate_image(file)
    content = await file.read()
    if len(content) > settings.max_image_size_mb * 1024 * 1024:
        raise UserInputError(f"Image exceeds {settings.max_image_size_mb} MB")

    ext = os.path.splitext(file.filename or "")[1].lower()
    filename = f"listing_{uuid.uuid4().hex}{ext}"
    os.makedirs(settings.upload_dir, exist_ok=True)
    with open(os.path.join(settings.upload_dir, filename), "wb") as f:
        f.write(content)

    await file.seek(0)
    return ListingImage(url=build_image_url(filename), filename=filename)


def remove_listing_image(filename: str) -> None:
    """Best-effort removal of a stored image that never got attached to a listing."""
    path = os.path.join(settings.upload_dir, os.path.basename(filename))
    if os.path.exists(path):
        os.remove(path)
