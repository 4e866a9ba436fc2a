"""
Image re-encoding applied before blobs are sent to object storage.
Reduces storage and bandwidth without changing the image format.
"""
import io
import logging
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Single uploads (POST /api/upload)
UPLOAD_JPEG_QUALITY = 80
UPLOAD_PNG_COMPRESS_LEVEL = 8  # zlib level 0-9

# Supplementary artwork images
ADDITIONAL_MAX_SIZE = (1200, 1200)
ADDITIONAL_JPEG_QUALITY = 85


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def _open(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        return image
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot identify image format: {str(e)}") from e


def _log_reduction(label: str, original_size: int, converted_size: int) -> None:
    reduction = ((original_size - converted_size) / original_size) * 100 if original_size else 0
    logger.info(
        f"Re-encoded {label}: {original_size:,} bytes -> {converted_size:,} bytes "
        f"({reduction:.1f}% reduction)"
    )


def reencode_for_upload(image_bytes: bytes) -> Tuple[bytes, Optional[str]]:
    """
    Re-encode a JPEG or PNG at the upload quality settings.
    Other formats, and bytes Pillow cannot identify, pass through unmodified.

    Returns:
        Tuple[bytes, Optional[str]]: (image bytes, detected Pillow format or None)
    """
    try:
        image = _open(image_bytes)
    except ImageDecodeError as e:
        logger.warning(f"{str(e)}, uploading original bytes")
        return image_bytes, None

    image_format = image.format
    buffer = io.BytesIO()

    if image_format == "JPEG":
        if image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=UPLOAD_JPEG_QUALITY)
    elif image_format == "PNG":
        image.save(buffer, format="PNG", compress_level=UPLOAD_PNG_COMPRESS_LEVEL)
    else:
        logger.debug(f"Format {image_format} is uploaded as-is")
        return image_bytes, image_format

    converted = buffer.getvalue()
    _log_reduction(image_format, len(image_bytes), len(converted))
    return converted, image_format


def prepare_additional_image(image_bytes: bytes) -> bytes:
    """
    Fit an image inside 1200x1200 (aspect ratio kept, never upscaled)
    and encode it as JPEG quality 85.

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    image = _open(image_bytes)

    # thumbnail() only ever shrinks
    image.thumbnail(ADDITIONAL_MAX_SIZE, Image.Resampling.LANCZOS)

    if image.mode in ("RGBA", "LA", "P"):
        # JPEG has no alpha channel: flatten onto white
        image = image.convert("RGBA")
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        image = background
    elif image.mode != "RGB":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=ADDITIONAL_JPEG_QUALITY)
    converted = buffer.getvalue()
    _log_reduction(f"additional image {image.size[0]}x{image.size[1]}", len(image_bytes), len(converted))
    return converted
