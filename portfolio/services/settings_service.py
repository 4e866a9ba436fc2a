"""
Site settings stored in the generic key-value table: homepage slots,
featured artwork ids, free-standing featured works with their own order
list, and opening hours.
"""
import logging
from typing import List, Optional

from portfolio.exceptions import NotFoundError, ValidationError
from portfolio.repository import PortfolioRepository
from portfolio.schemas import FeaturedWork, FeaturedWorkCreate, FeaturedWorkUpdate
from portfolio.services import cloudinary_service

logger = logging.getLogger(__name__)

SLOTS_KEY = "slots"
FEATURED_KEY = "featured"
FEATURED_WORKS_KEY = "featured_works"
FEATURED_WORKS_ORDER_KEY = "featured_works_order"
HOURS_KEY = "hours"

SLOT_COUNT = 3
DEFAULT_HOURS = [
    "Lundi - Vendredi : 9h00 - 18h00",
    "Samedi : Sur rendez-vous",
    "Dimanche : Fermé",
]


# Slots

async def get_slots(repo: PortfolioRepository) -> List[Optional[int]]:
    return await repo.get_setting(SLOTS_KEY, [None] * SLOT_COUNT)


async def set_slots(repo: PortfolioRepository, slots: list) -> None:
    if not isinstance(slots, list) or len(slots) != SLOT_COUNT:
        raise ValidationError(f"Slots must be an array of {SLOT_COUNT} entries", reason="invalid_slots")
    await repo.set_setting(SLOTS_KEY, slots)


# Featured artwork ids

async def get_featured(repo: PortfolioRepository) -> List[int]:
    return await repo.get_setting(FEATURED_KEY, [])


async def set_featured(repo: PortfolioRepository, artwork_ids: List[int]) -> None:
    await repo.set_setting(FEATURED_KEY, list(artwork_ids))


# Featured works

async def _load_featured_works(repo: PortfolioRepository) -> List[dict]:
    return await repo.get_setting(FEATURED_WORKS_KEY, [])


async def get_featured_works_order(repo: PortfolioRepository) -> List[int]:
    return await repo.get_setting(FEATURED_WORKS_ORDER_KEY, [])


async def list_featured_works(repo: PortfolioRepository) -> List[FeaturedWork]:
    """Featured works sorted by the order list; works missing from it come last."""
    works = [FeaturedWork.model_validate(work) for work in await _load_featured_works(repo)]
    order = await get_featured_works_order(repo)
    rank = {work_id: index for index, work_id in enumerate(order)}
    return sorted(works, key=lambda work: rank.get(work.id, len(rank)))


async def add_featured_work(repo: PortfolioRepository, data: FeaturedWorkCreate) -> FeaturedWork:
    works = await _load_featured_works(repo)
    next_id = max((work["id"] for work in works), default=0) + 1
    work = FeaturedWork(id=next_id, **data.model_dump())

    works.append(work.model_dump(by_alias=True))
    await repo.set_setting(FEATURED_WORKS_KEY, works)

    order = await get_featured_works_order(repo)
    if work.id not in order:
        order.append(work.id)
        await repo.set_setting(FEATURED_WORKS_ORDER_KEY, order)

    logger.info(f"Featured work added: ID {work.id}")
    return work


async def update_featured_work(repo: PortfolioRepository, work_id: int, data: FeaturedWorkUpdate) -> FeaturedWork:
    works = await _load_featured_works(repo)
    for index, stored in enumerate(works):
        if stored.get("id") == work_id:
            current = FeaturedWork.model_validate(stored)
            updated = FeaturedWork.model_validate({**current.model_dump(), **data.model_dump(exclude_unset=True)})
            works[index] = updated.model_dump(by_alias=True)
            await repo.set_setting(FEATURED_WORKS_KEY, works)
            return updated
    raise NotFoundError(f"Featured work ID {work_id} does not exist")


async def delete_featured_work(repo: PortfolioRepository, work_id: int) -> None:
    works = await _load_featured_works(repo)
    target = next((work for work in works if work.get("id") == work_id), None)
    if target is None:
        raise NotFoundError(f"Featured work ID {work_id} does not exist")

    image_url = target.get("imageUrl")
    if cloudinary_service.is_managed_url(image_url):
        await cloudinary_service.delete_image_best_effort(image_url, f"featured work {work_id}")

    await repo.set_setting(FEATURED_WORKS_KEY, [work for work in works if work.get("id") != work_id])
    order = await get_featured_works_order(repo)
    await repo.set_setting(FEATURED_WORKS_ORDER_KEY, [x for x in order if x != work_id])
    logger.info(f"Featured work deleted: ID {work_id}")


async def set_featured_works_order(repo: PortfolioRepository, ids: List[int]) -> None:
    if len(ids) != len(set(ids)):
        raise ValidationError("Duplicate ids are not allowed", reason="duplicate_ids")
    await repo.set_setting(FEATURED_WORKS_ORDER_KEY, list(ids))


# Opening hours

async def get_hours(repo: PortfolioRepository) -> List[str]:
    return await repo.get_setting(HOURS_KEY, DEFAULT_HOURS)


async def set_hours(repo: PortfolioRepository, hours: List[str]) -> None:
    await repo.set_setting(HOURS_KEY, [line.strip() for line in hours])
