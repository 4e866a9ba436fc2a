"""
Site settings routes: featured artworks, featured works and opening hours.
Reads are public; writes require the admin session.
"""
from fastapi import APIRouter, Body, Depends, status
from typing import List
import logging

from portfolio.repository import PortfolioRepository, get_repository
from portfolio.schemas import FeaturedWork, FeaturedWorkCreate, FeaturedWorkUpdate
from portfolio.services import settings_service
from portfolio.utils.session_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site settings"])


@router.get("/featured", response_model=List[int])
async def get_featured(repo: PortfolioRepository = Depends(get_repository)):
    return await settings_service.get_featured(repo)


@router.put("/featured")
async def save_featured(
    artwork_ids: List[int] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    await settings_service.set_featured(repo, artwork_ids)
    return {"success": True}


@router.get("/featured-works", response_model=List[FeaturedWork])
async def list_featured_works(repo: PortfolioRepository = Depends(get_repository)):
    """Featured works in their saved display order."""
    return await settings_service.list_featured_works(repo)


@router.put("/featured-works/order")
async def save_featured_works_order(
    ids: List[int] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    await settings_service.set_featured_works_order(repo, ids)
    return {"success": True}


@router.post("/featured-works", response_model=FeaturedWork, status_code=status.HTTP_201_CREATED)
async def add_featured_work(
    data: FeaturedWorkCreate,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    return await settings_service.add_featured_work(repo, data)


@router.put("/featured-works/{work_id}", response_model=FeaturedWork)
async def update_featured_work(
    work_id: int,
    data: FeaturedWorkUpdate,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    return await settings_service.update_featured_work(repo, work_id, data)


@router.delete("/featured-works/{work_id}")
async def delete_featured_work(
    work_id: int,
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    await settings_service.delete_featured_work(repo, work_id)
    return {"success": True}


@router.get("/hours", response_model=List[str])
async def get_hours(repo: PortfolioRepository = Depends(get_repository)):
    return await settings_service.get_hours(repo)


@router.put("/hours")
async def save_hours(
    hours: List[str] = Body(...),
    admin: dict = Depends(require_admin),
    repo: PortfolioRepository = Depends(get_repository)
):
    await settings_service.set_hours(repo, hours)
    return {"success": True}
