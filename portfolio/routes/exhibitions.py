"""
Exhibition routes. Listing is public; everything else requires the admin session.
"""
from fastapi import APIRouter, Body, Depends, Response, status
from typing import List
import logging

from portfolio.exceptions import PortfolioError, UpstreamError
from portfolio.repository import PortfolioRepository, get_repository
from portfolio.schemas import (
    ExhibitionCreate,
    ExhibitionResponse,
    GalleryImageItem,
    OrderEntry,
    PositionUpdate,
)
from portfolio.services import catalog_service, content_service
from portfolio.utils.session_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["exhibitions"])


@router.get("/exhibitions", response_model=List[ExhibitionResponse])
async def list_exhibitions(
    response: Response,
    repo: PortfolioRepository = Depends(get_repository)
):
    response.headers["Cache-Control"] = "no-store"
    try:
        exhibitions = await catalog_service.list_exhibitions(repo)
    except Exception as e:
        logger.error(f"Failed to retrieve exhibitions: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to fetch exhibitions")

    return [ExhibitionResponse.model_validate(exhibition) for exhibition in exhibitions]


@router.put("/exhibitions/order")
async def reorder_exhibitions(
    entries: List[OrderEntry] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """Apply a full-collection (id, order) mapping in one transaction."""
    try:
        count = await content_service.reorder_exhibitions(repo, entries)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error reordering exhibitions: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to reorder exhibitions")

    return {"success": True, "count": count}


@router.get("/exhibitions/{exhibition_id}", response_model=ExhibitionResponse)
async def get_exhibition(
    exhibition_id: int,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    exhibition = await content_service.get_exhibition_or_404(repo, exhibition_id)
    return ExhibitionResponse.model_validate(exhibition)


@router.post("/exhibitions", response_model=ExhibitionResponse, status_code=status.HTTP_201_CREATED)
async def create_exhibition(
    data: ExhibitionCreate,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    try:
        exhibition = await content_service.create_exhibition(repo, data)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error creating exhibition: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to create exhibition")

    return ExhibitionResponse.model_validate(exhibition)


@router.put("/exhibitions/{exhibition_id}/gallery", response_model=ExhibitionResponse)
async def update_gallery(
    exhibition_id: int,
    gallery: List[GalleryImageItem] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Replace the exhibition gallery.
    Images dropped from the list are deleted from object storage.
    """
    try:
        exhibition = await content_service.update_exhibition_gallery(repo, exhibition_id, gallery)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error updating gallery of exhibition {exhibition_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to update exhibition gallery")

    return ExhibitionResponse.model_validate(exhibition)


@router.put("/exhibitions/{exhibition_id}/position")
async def move_exhibition(
    exhibition_id: int,
    move: PositionUpdate,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    try:
        sequence = await content_service.move_exhibition(repo, exhibition_id, move.position)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error moving exhibition {exhibition_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to move exhibition")

    return {"success": True, "order": sequence}


@router.delete("/exhibitions/{exhibition_id}")
async def delete_exhibition(
    exhibition_id: int,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    """Delete an exhibition after best-effort removal of its cover and gallery blobs."""
    try:
        await content_service.delete_exhibition(repo, exhibition_id)
    except PortfolioError:
        raise
    except Exception as e:
        logger.error(f"Error deleting exhibition {exhibition_id}: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to delete exhibition")

    return {"success": True}
