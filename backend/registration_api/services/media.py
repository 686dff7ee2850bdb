import io
import time
from pathlib import PurePath
from typing import Protocol
from uuid import uuid4

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from registration_api.core.errors import MediaStoreError
from registration_api.core.logging import get_logger
from registration_api.core.settings import Settings

logger = get_logger(__name__)


class MediaStore(Protocol):
    def store(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        """Persist a blob and return a URL it can be fetched from."""
        ...


class PlaceholderMediaStore:
    """Local dev without Cloudinary: nothing is stored, a stock image URL is returned."""

    def store(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        return f"https://picsum.photos/seed/{uuid4().hex}/400/400"


class CloudinaryMediaStore:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str | None, folder: str):
        self.folder = folder
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def store(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        stem = PurePath(filename or "upload").stem or "upload"
        public_id = f"{int(time.time() * 1000)}-{stem}"
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                folder=self.folder,
                public_id=public_id,
                resource_type="auto",
            )
        except CloudinaryError as e:
            logger.error("cloudinary upload failed for %s: %s", public_id, e)
            raise MediaStoreError() from e
        return result["secure_url"]


def build_media_store(settings: Settings) -> MediaStore:
    if settings.cloudinary_configured:
        return CloudinaryMediaStore(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
        )
    return PlaceholderMediaStore()
