"""
Cloudinary object storage gateway.
Uploads image blobs, returns their public URLs, and deletes blobs by URL.
The SDK is synchronous, so every call runs in a worker thread.
"""
import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from portfolio.config import settings
import logging
import asyncio
import re
import time
import uuid
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

# Blobs left behind by a failed best-effort delete, for later garbage collection
orphan_logger = logging.getLogger("portfolio.orphaned_blobs")

# Configure Cloudinary with credentials from settings
cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True  # Always use HTTPS for secure URLs
)

# https://res.cloudinary.com/{cloud}/image/upload[/v{version}]/{public_id}.{ext}
_PUBLIC_ID_PATTERN = re.compile(r'/image/upload(?:/v\d+)?/(.+)$')


def generate_public_id() -> str:
    """Unique blob name: millisecond timestamp plus a random suffix."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


async def upload_image(
    file: Any,
    folder: Optional[str] = None,
    public_id: Optional[str] = None,
    max_retries: Optional[int] = None
) -> Dict[str, Any]:
    """
    Upload an image blob to Cloudinary.

    Args:
        file: Bytes, file object or path to upload
        folder: Cloudinary folder (default: CLOUDINARY_FOLDER)
        public_id: Blob name inside the folder (default: generated)
        max_retries: Attempts for transient failures (default: CLOUDINARY_MAX_RETRIES)

    Returns:
        dict: url, public_id, format, width, height, bytes

    Raises:
        CloudinaryError: If upload fails after all attempts
    """
    folder = folder or settings.CLOUDINARY_FOLDER
    public_id = public_id or generate_public_id()
    attempts = max(1, max_retries or settings.CLOUDINARY_MAX_RETRIES)

    for attempt in range(attempts):
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                file,
                folder=folder,
                public_id=public_id,
                overwrite=False,
                resource_type="image",
            )

            logger.info(f"Successfully uploaded image: {result['public_id']}")

            return {
                "url": result["secure_url"],
                "public_id": result["public_id"],
                "format": result.get("format"),
                "width": result.get("width"),
                "height": result.get("height"),
                "bytes": result.get("bytes")
            }

        except CloudinaryError as e:
            logger.warning(f"Cloudinary upload error (attempt {attempt + 1}/{attempts}): {str(e)}")

            if attempt < attempts - 1:
                await asyncio.sleep(2 ** attempt)  # 1s, 2s, 4s backoff
                continue

            logger.error(f"Cloudinary upload failed after {attempts} attempts: {str(e)}")
            raise


async def delete_image(public_id: str) -> Dict[str, Any]:
    """
    Delete a blob from Cloudinary and invalidate its CDN copies.

    Returns:
        dict: Deletion result from Cloudinary ("ok" or "not found")

    Raises:
        CloudinaryError: If the API call fails
    """
    result = await asyncio.to_thread(
        cloudinary.uploader.destroy,
        public_id,
        invalidate=True,
        resource_type="image"
    )

    if result.get("result") in ("ok", "not found"):
        logger.info(f"Deleted image from Cloudinary: {public_id} (result: {result.get('result')})")
    else:
        logger.warning(f"Unexpected Cloudinary delete result for {public_id}: {result}")
    return result


def extract_public_id_from_url(cloudinary_url: str) -> str:
    """
    Extract the Cloudinary public_id (folder path included, extension removed) from a URL.

    Raises:
        ValueError: If the URL is not a Cloudinary delivery URL
    """
    match = _PUBLIC_ID_PATTERN.search(cloudinary_url or "")
    if not match:
        raise ValueError(f"Invalid Cloudinary URL format: {cloudinary_url}")

    parts = match.group(1).split('/')
    if '.' in parts[-1]:
        parts[-1] = parts[-1].rsplit('.', 1)[0]
    return '/'.join(parts)


def is_managed_url(url: Optional[str]) -> bool:
    """True when the URL points at a blob in our Cloudinary account."""
    if not url or not url.startswith("http"):
        return False
    if settings.CLOUDINARY_CLOUD_NAME and f"/{settings.CLOUDINARY_CLOUD_NAME}/" not in url:
        return False
    return _PUBLIC_ID_PATTERN.search(url) is not None


async def delete_image_by_url(url: str) -> Optional[Dict[str, Any]]:
    """
    Delete the blob behind a public URL. URLs outside the managed store are ignored.

    Raises:
        CloudinaryError: If the API call fails
    """
    if not is_managed_url(url):
        logger.debug(f"Skipping deletion of unmanaged URL: {url}")
        return None
    return await delete_image(extract_public_id_from_url(url))


async def delete_image_best_effort(url: str, owner: str) -> bool:
    """
    Delete a blob without letting a failure escape.
    Failures are recorded on the orphaned-blob channel.

    Args:
        url: Public URL of the blob
        owner: Description of the record that referenced it (for the log)

    Returns:
        bool: True if no error occurred
    """
    try:
        await delete_image_by_url(url)
        return True
    except Exception as e:
        logger.error(f"Failed to delete blob for {owner}: {str(e)}", exc_info=True)
        orphan_logger.warning(f"orphaned blob url={url} owner={owner} error={type(e).__name__}")
        return False


def validate_cloudinary_config() -> bool:
    """
    Validate that Cloudinary is properly configured.

    Returns:
        bool: True if Cloudinary is configured, False otherwise
    """
    if not settings.CLOUDINARY_CLOUD_NAME:
        logger.warning("CLOUDINARY_CLOUD_NAME not configured")
        return False
    if not settings.CLOUDINARY_API_KEY:
        logger.warning("CLOUDINARY_API_KEY not configured")
        return False
    if not settings.CLOUDINARY_API_SECRET:
        logger.warning("CLOUDINARY_API_SECRET not configured")
        return False

    logger.info("Cloudinary configuration validated successfully")
    return True
