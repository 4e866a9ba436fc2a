"""
Artwork routes: public catalog reads, artwork creation, and admin-only
deletion, supplementary images, slots and reordering.
"""
from fastapi import APIRouter, Body, Depends, File, Response, UploadFile, status
from typing import List, Optional
import logging

from portfolio.exceptions import PortfolioError, UpstreamError
from portfolio.repository import PortfolioRepository, get_repository
from portfolio.schemas import (
    AdditionalImagesResponse,
    ArtworkCreate,
    ArtworkResponse,
    OrderEntry,
    PositionUpdate,
)
from portfolio.services import catalog_service, content_service, settings_service
from portfolio.utils.session_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["artworks"])


@router.get("/artworks", response_model=List[ArtworkResponse])
async def list_artworks(
    response: Response,
    repo: PortfolioRepository = Depends(get_repository)
):
    """Visible artworks ordered by their `order` value."""
    response.headers["Cache-Control"] = "no-store"
    try:
        artworks = await catalog_service.list_artworks(repo)
    except Exception as e:
        logger.error(f"Failed to retrieve artworks: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to fetch artworks")

    logger.info(f"Retrieved {len(artworks)} visible artworks")
    return [ArtworkResponse.model_validate(artwork) for artwork in artworks]


# Static paths are registered before /artworks/{artwork_id}

@router.get("/artworks/slots")
async def get_slots(
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    return await settings_service.get_slots(repo)


@router.put("/artworks/slots")
async def save_slots(
    slots: List[Optional[int]] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """Replace the three homepage slots (artwork id or null each)."""
    await settings_service.set_slots(repo, slots)
    return {"success": True}


@router.put("/artworks/order")
async def reorder_artworks(
    entries: List[OrderEntry] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Apply a full-collection reorder.

    The client renumbers its whole sequence 0..n-1 after a drag-and-drop
    move and submits every (id, order) pair. The mapping is applied in a
    single transaction; concurrent submissions are last-writer-wins.
    """
    try:
        count = await content_service.reorder_artworks(repo, entries)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error reordering artworks: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to reorder artworks")

    return {"success": True, "count": count}


@router.get("/artworks/{artwork_id}", response_model=ArtworkResponse)
async def get_artwork(
    artwork_id: int,
    repo: PortfolioRepository = Depends(get_repository)
):
    artwork = await content_service.get_artwork_or_404(repo, artwork_id)
    return ArtworkResponse.model_validate(artwork)


@router.post("/artworks", response_model=ArtworkResponse, status_code=status.HTTP_201_CREATED)
async def create_artwork(
    data: ArtworkCreate,
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Create an artwork from an already-uploaded image URL.
    Missing or blank category is stored as the default category.
    """
    try:
        artwork = await content_service.create_artwork(repo, data)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error creating artwork: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to create artwork")

    return ArtworkResponse.model_validate(artwork)


@router.put("/artworks/{artwork_id}/position")
async def move_artwork(
    artwork_id: int,
    move: PositionUpdate,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """Move one artwork to a new index and renumber the whole collection."""
    try:
        sequence = await content_service.move_artwork(repo, artwork_id, move.position)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error moving artwork {artwork_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to move artwork")

    return {"success": True, "order": sequence}


@router.post("/artworks/{artwork_id}/additional-images", response_model=AdditionalImagesResponse)
async def add_additional_images(
    artwork_id: int,
    images: Optional[List[UploadFile]] = File(None, description="1 to 3 image files"),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Attach supplementary images to an artwork (at most 3 in total).
    Either every file is appended or none is.
    """
    try:
        artwork, new_urls = await content_service.add_additional_images(repo, artwork_id, images or [])
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error adding additional images to artwork {artwork_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to add additional images")

    return AdditionalImagesResponse(additional_images=artwork.additional_images, new_images=new_urls)


@router.delete("/artworks/{artwork_id}")
async def delete_artwork(
    artwork_id: int,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """Delete an artwork and, best-effort, the blobs it references."""
    try:
        await content_service.delete_artwork(repo, artwork_id)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error deleting artwork {artwork_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to delete artwork")

    return {"success": True}
