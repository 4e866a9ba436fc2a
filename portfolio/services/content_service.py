"""
Admin content operations: create/delete artworks and exhibitions, image
attachment, gallery updates and collection reordering.

Records own the blobs they reference. Deleting a record best-effort deletes
its blobs first; a failed blob delete is logged and never blocks the record
deletion.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from fastapi import UploadFile

from portfolio.config import settings
from portfolio.exceptions import NotFoundError, UpstreamError, ValidationError
from portfolio.models import Artwork, Exhibition
from portfolio.repository import PortfolioRepository
from portfolio.schemas import ArtworkCreate, ExhibitionCreate, GalleryImageItem, OrderEntry
from portfolio.services import cloudinary_service, ordering
from portfolio.utils.image_converter import ImageDecodeError, prepare_additional_image, reencode_for_upload

logger = logging.getLogger(__name__)

MAX_ADDITIONAL_IMAGES = 3


async def read_image_file(file: UploadFile) -> bytes:
    """
    Read an uploaded file after checking its MIME type and size.

    Raises:
        ValidationError: Not an image, empty, or larger than MAX_UPLOAD_BYTES
    """
    filename = getattr(file, "filename", None) or "file"
    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationError(f"File '{filename}' is not a valid image file", reason="invalid_file_type")

    content = await file.read()
    if not content:
        raise ValidationError(f"File '{filename}' is empty", reason="empty_file")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File '{filename}' exceeds {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MiB",
            reason="file_too_large"
        )
    return content


async def _store_blob(content: bytes) -> str:
    try:
        result = await cloudinary_service.upload_image(content)
    except Exception as e:
        logger.error(f"Image upload failed: {str(e)}", exc_info=True)
        raise UpstreamError("Image upload failed", reason="upload_failed") from e
    return result["url"]


async def _discard_blobs(urls: List[str], owner: str) -> None:
    for url in urls:
        await cloudinary_service.delete_image_best_effort(url, owner)


# Uploads

async def upload_single_image(file: UploadFile) -> str:
    """
    Validate, re-encode (JPEG q80, PNG level 8) and store one image.
    Returns the public URL; the image is not attached to any record yet.
    """
    content = await read_image_file(file)
    processed, image_format = await asyncio.to_thread(reencode_for_upload, content)
    url = await _store_blob(processed)
    logger.info(f"Uploaded {file.filename} ({image_format or 'unknown format'}) to {url}")
    return url


# Artworks

async def create_artwork(repo: PortfolioRepository, data: ArtworkCreate) -> Artwork:
    category = (data.category or "").strip() or settings.DEFAULT_CATEGORY

    artwork = await repo.create_artwork(
        title=data.title,
        technique=data.technique,
        year=data.year,
        image_url=data.image_url,
        dimensions=(data.dimensions or "").strip(),
        description=(data.description or "").strip(),
        category=category,
        additional_images=[],
        is_visible=True if data.is_visible is None else data.is_visible,
        show_in_slider=True if data.show_in_slider is None else data.show_in_slider,
        order=data.order if data.order is not None else 0,
    )
    logger.info(f"Artwork created: ID {artwork.id}")
    return artwork


async def get_artwork_or_404(repo: PortfolioRepository, artwork_id: int) -> Artwork:
    artwork = await repo.get_artwork(artwork_id)
    if artwork is None:
        raise NotFoundError(f"Artwork ID {artwork_id} does not exist")
    return artwork


async def delete_artwork(repo: PortfolioRepository, artwork_id: int) -> None:
    artwork = await get_artwork_or_404(repo, artwork_id)
    owner = f"artwork {artwork_id}"

    if cloudinary_service.is_managed_url(artwork.image_url):
        await cloudinary_service.delete_image_best_effort(artwork.image_url, owner)
    for url in artwork.additional_images or []:
        if cloudinary_service.is_managed_url(url):
            await cloudinary_service.delete_image_best_effort(url, owner)

    await repo.delete_artwork(artwork_id)
    logger.info(f"Artwork deleted: ID {artwork_id}")


async def add_additional_images(
    repo: PortfolioRepository,
    artwork_id: int,
    files: List[UploadFile]
) -> Tuple[Artwork, List[str]]:
    """
    Resize, store and append 1-3 supplementary images to an artwork.

    The call is all-or-nothing: every file is validated and re-encoded
    before the first upload, and if any upload fails the blobs already
    stored by this call are removed and the record is left unchanged.

    Returns:
        (updated artwork, URLs appended by this call)
    """
    if not files:
        raise ValidationError("No images provided", reason="no_images")
    if len(files) > MAX_ADDITIONAL_IMAGES:
        raise ValidationError(
            f"Maximum {MAX_ADDITIONAL_IMAGES} additional images allowed",
            reason="too_many_images"
        )

    artwork = await get_artwork_or_404(repo, artwork_id)
    existing = list(artwork.additional_images or [])
    if len(existing) + len(files) > MAX_ADDITIONAL_IMAGES:
        raise ValidationError(
            f"Artwork already has {len(existing)} additional images; "
            f"at most {MAX_ADDITIONAL_IMAGES} are allowed in total",
            reason="too_many_images"
        )

    prepared = []
    for file in files:
        content = await read_image_file(file)
        try:
            prepared.append(await asyncio.to_thread(prepare_additional_image, content))
        except ImageDecodeError as e:
            raise ValidationError(f"File '{file.filename}' could not be decoded", reason="invalid_image") from e

    new_urls: List[str] = []
    try:
        for content in prepared:
            new_urls.append(await _store_blob(content))
    except UpstreamError:
        await _discard_blobs(new_urls, f"artwork {artwork_id} (aborted batch)")
        raise

    try:
        artwork = await repo.set_additional_images(artwork, existing + new_urls)
    except Exception as e:
        logger.error(f"Failed to save additional images of artwork {artwork_id}: {str(e)}", exc_info=True)
        await _discard_blobs(new_urls, f"artwork {artwork_id} (unsaved batch)")
        raise UpstreamError("Failed to save additional images") from e

    logger.info(f"Appended {len(new_urls)} additional image(s) to artwork {artwork_id}")
    return artwork, new_urls


async def reorder_artworks(repo: PortfolioRepository, entries: List[OrderEntry]) -> int:
    pairs = ordering.normalize_entries(entries)
    missing = await repo.find_missing_ids(Artwork, [record_id for record_id, _ in pairs])
    if missing:
        raise NotFoundError(f"Artwork IDs not found: {sorted(missing)}")
    return await repo.reorder_artworks(pairs)


async def move_artwork(repo: PortfolioRepository, artwork_id: int, position: int) -> List[int]:
    """Relocate one artwork and renumber the whole collection. Returns the new id sequence."""
    ids = [artwork.id for artwork in await repo.list_artworks(visible_only=False)]
    if artwork_id not in ids:
        raise NotFoundError(f"Artwork ID {artwork_id} does not exist")

    new_sequence = ordering.move(ids, ids.index(artwork_id), position)
    await repo.reorder_artworks(ordering.renumber(new_sequence))
    return new_sequence


# Exhibitions

async def create_exhibition(repo: PortfolioRepository, data: ExhibitionCreate) -> Exhibition:
    gallery = [item.model_dump() for item in data.gallery_images or []]
    exhibition = await repo.create_exhibition(
        title=data.title,
        location=data.location,
        year=data.year,
        image_url=data.image_url,
        description=data.description,
        theme=data.theme or None,
        gallery_images=gallery,
        video_url=data.video_url or None,
        order=data.order if data.order is not None else 0,
    )
    logger.info(f"Exhibition created: ID {exhibition.id}")
    return exhibition


async def get_exhibition_or_404(repo: PortfolioRepository, exhibition_id: int) -> Exhibition:
    exhibition = await repo.get_exhibition(exhibition_id)
    if exhibition is None:
        raise NotFoundError(f"Exhibition ID {exhibition_id} does not exist")
    return exhibition


def _gallery_urls(gallery: Optional[list]) -> List[str]:
    return [item.get("url") for item in gallery or [] if isinstance(item, dict) and item.get("url")]


async def delete_exhibition(repo: PortfolioRepository, exhibition_id: int) -> None:
    exhibition = await get_exhibition_or_404(repo, exhibition_id)
    owner = f"exhibition {exhibition_id}"

    for url in [exhibition.image_url] + _gallery_urls(exhibition.gallery_images):
        if cloudinary_service.is_managed_url(url):
            await cloudinary_service.delete_image_best_effort(url, owner)

    await repo.delete_exhibition(exhibition_id)
    logger.info(f"Exhibition deleted: ID {exhibition_id}")


async def update_exhibition_gallery(
    repo: PortfolioRepository,
    exhibition_id: int,
    items: List[GalleryImageItem]
) -> Exhibition:
    """Replace the gallery list, deleting blobs whose URLs were dropped from it."""
    exhibition = await get_exhibition_or_404(repo, exhibition_id)

    next_gallery = [item.model_dump() for item in items]
    next_urls = set(_gallery_urls(next_gallery))
    # The cover image may also appear in the gallery; its blob stays while the record references it
    next_urls.add(exhibition.image_url)
    removed = [url for url in dict.fromkeys(_gallery_urls(exhibition.gallery_images)) if url not in next_urls]

    for url in removed:
        if cloudinary_service.is_managed_url(url):
            await cloudinary_service.delete_image_best_effort(url, f"exhibition {exhibition_id} gallery")

    exhibition = await repo.update_exhibition_gallery(exhibition, next_gallery)
    logger.info(f"Exhibition {exhibition_id} gallery updated: {len(next_gallery)} image(s), {len(removed)} removed")
    return exhibition


async def reorder_exhibitions(repo: PortfolioRepository, entries: List[OrderEntry]) -> int:
    pairs = ordering.normalize_entries(entries)
    missing = await repo.find_missing_ids(Exhibition, [record_id for record_id, _ in pairs])
    if missing:
        raise NotFoundError(f"Exhibition IDs not found: {sorted(missing)}")
    return await repo.reorder_exhibitions(pairs)


async def move_exhibition(repo: PortfolioRepository, exhibition_id: int, position: int) -> List[int]:
    ids = [exhibition.id for exhibition in await repo.list_exhibitions()]
    if exhibition_id not in ids:
        raise NotFoundError(f"Exhibition ID {exhibition_id} does not exist")

    new_sequence = ordering.move(ids, ids.index(exhibition_id), position)
    await repo.reorder_exhibitions(ordering.renumber(new_sequence))
    return new_sequence
