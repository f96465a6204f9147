from __future__ import annotations

from pathlib import Path

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile

from app.utils.base import ValidationError
from app.utils.config import settings
from app.utils.logger import logger


PROFILE_FOLDER = "perfiles"
POST_FOLDER = "publicaciones"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}


def _configure() -> None:
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )


def upload_image(file: UploadFile | None, folder: str) -> str | None:
    """Upload an image to the CDN and return its secure URL.

    Returns None when no file was sent with the request.
    """
    if file is None or not file.filename:
        return None

    if Path(file.filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only image files are allowed (jpg, jpeg, png, gif)")

    content = file.file.read()
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(f"Image exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB limit")

    _configure()
    result = cloudinary.uploader.upload(content, folder=folder, resource_type="auto")
    logger.info("Image uploaded", extra={"folder": folder, "public_id": result.get("public_id")})
    return result["secure_url"]
