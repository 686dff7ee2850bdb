from fastapi import APIRouter, Depends, File, UploadFile

from registration_api.api.deps import get_media_store
from registration_api.core.errors import ValidationError
from registration_api.core.settings import Settings, get_settings
from registration_api.schemas.player import UploadOut
from registration_api.services.media import MediaStore

router = APIRouter()

# Player photos, identity documents and payment screenshots.
ALLOWED_CONTENT_TYPES = ("image/", "application/pdf")


@router.post("/uploads", response_model=UploadOut)
def upload_file(
    file: UploadFile | None = File(default=None),
    store: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_settings),
):
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    content_type = file.content_type or ""
    if not content_type.startswith(ALLOWED_CONTENT_TYPES):
        raise ValidationError(f"Unsupported file type: {content_type or 'unknown'}")

    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ValidationError("No file uploaded")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes")

    return UploadOut(url=store.store(data, file.filename, content_type))
