"""
Image upload and storage diagnostics (admin only).
"""
from fastapi import APIRouter, Depends, File, Request, UploadFile
import logging

from portfolio.config import settings
from portfolio.exceptions import ValidationError
from portfolio.schemas import UploadResponse
from portfolio.services import content_service
from portfolio.utils.rate_limit import limiter, RATE_LIMITS
from portfolio.utils.session_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload", response_model=UploadResponse)
@limiter.limit(RATE_LIMITS["upload"])
async def upload_image(
    request: Request,
    image: UploadFile = File(None, description="Image file (max 5 MiB)"),
    admin: dict = Depends(require_admin)
):
    """
    Upload one image and return its public URL.
    JPEG and PNG files are re-encoded to reduce their size; other formats are stored as-is.
    """
    if image is None:
        raise ValidationError("No file received", reason="no_file")

    url = await content_service.upload_single_image(image)
    return UploadResponse(image_url=url)


@router.get("/storage/diagnostics")
async def storage_diagnostics(admin: dict = Depends(require_admin)):
    """Report which object-storage settings are present, without their values."""
    return {
        "storageConfigured": bool(
            settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET
        ),
        "hasStorageEnv": {
            "CLOUDINARY_CLOUD_NAME": bool(settings.CLOUDINARY_CLOUD_NAME),
            "CLOUDINARY_API_KEY": bool(settings.CLOUDINARY_API_KEY),
            "CLOUDINARY_API_SECRET": bool(settings.CLOUDINARY_API_SECRET),
        },
        "folder": settings.CLOUDINARY_FOLDER,
        "maxUploadBytes": settings.MAX_UPLOAD_BYTES,
        "uploadStrategy": "cloudinary",
    }
