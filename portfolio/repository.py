"""
Persistence gateway over the relational store.
Wraps one AsyncSession per request; every write method commits its own
transaction so callers never observe half-applied changes.
"""
import copy
import logging
from typing import Any, Iterable, List, Optional

from fastapi import Depends
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.database import get_db
from portfolio.models import Artwork, Exhibition, ContactMessage, SiteSetting, User

logger = logging.getLogger(__name__)


class PortfolioRepository:
    """Data access for users, artworks, exhibitions, contact messages and site settings."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Users

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def count_users(self) -> int:
        result = await self.session.execute(select(func.count(User.id)))
        return result.scalar() or 0

    async def create_user(self, username: str, password_hash: str) -> User:
        user = User(username=username, password=password_hash)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    # Artworks

    async def list_artworks(self, visible_only: bool = True) -> List[Artwork]:
        query = select(Artwork).order_by(Artwork.order.asc(), Artwork.id.asc())
        if visible_only:
            query = query.where(Artwork.is_visible.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_artwork(self, artwork_id: int) -> Optional[Artwork]:
        result = await self.session.execute(select(Artwork).where(Artwork.id == artwork_id))
        return result.scalar_one_or_none()

    async def create_artwork(self, **fields: Any) -> Artwork:
        artwork = Artwork(**fields)
        self.session.add(artwork)
        await self.session.commit()
        await self.session.refresh(artwork)
        return artwork

    async def set_additional_images(self, artwork: Artwork, urls: List[str]) -> Artwork:
        # Assign a new list so the JSON column is flagged as modified
        artwork.additional_images = list(urls)
        await self.session.commit()
        await self.session.refresh(artwork)
        return artwork

    async def delete_artwork(self, artwork_id: int) -> bool:
        result = await self.session.execute(delete(Artwork).where(Artwork.id == artwork_id))
        await self.session.commit()
        return result.rowcount > 0

    async def reorder_artworks(self, entries: Iterable[tuple[int, int]]) -> int:
        return await self._apply_order(Artwork, entries)

    # Exhibitions

    async def list_exhibitions(self) -> List[Exhibition]:
        result = await self.session.execute(
            select(Exhibition).order_by(Exhibition.order.asc(), Exhibition.id.asc())
        )
        return list(result.scalars().all())

    async def get_exhibition(self, exhibition_id: int) -> Optional[Exhibition]:
        result = await self.session.execute(select(Exhibition).where(Exhibition.id == exhibition_id))
        return result.scalar_one_or_none()

    async def create_exhibition(self, **fields: Any) -> Exhibition:
        exhibition = Exhibition(**fields)
        self.session.add(exhibition)
        await self.session.commit()
        await self.session.refresh(exhibition)
        return exhibition

    async def update_exhibition_gallery(self, exhibition: Exhibition, gallery_images: List[dict]) -> Exhibition:
        exhibition.gallery_images = [dict(item) for item in gallery_images]
        await self.session.commit()
        await self.session.refresh(exhibition)
        return exhibition

    async def delete_exhibition(self, exhibition_id: int) -> bool:
        result = await self.session.execute(delete(Exhibition).where(Exhibition.id == exhibition_id))
        await self.session.commit()
        return result.rowcount > 0

    async def reorder_exhibitions(self, entries: Iterable[tuple[int, int]]) -> int:
        return await self._apply_order(Exhibition, entries)

    async def find_missing_ids(self, model, ids: Iterable[int]) -> set:
        ids = set(ids)
        if not ids:
            return set()
        result = await self.session.execute(select(model.id).where(model.id.in_(ids)))
        return ids - set(result.scalars().all())

    async def _apply_order(self, model, entries: Iterable[tuple[int, int]]) -> int:
        """
        Write each (id, order) pair as its own row update, then commit once.
        Either the whole mapping lands or none of it does.
        """
        count = 0
        try:
            for record_id, position in entries:
                await self.session.execute(
                    update(model)
                    .where(model.id == record_id)
                    .values(order=position)
                )
                count += 1
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(f"Applied order to {count} {model.__tablename__} rows")
        return count

    # Contact messages

    async def create_contact_message(self, name: str, email: str, message: str) -> ContactMessage:
        contact = ContactMessage(name=name, email=email, message=message)
        self.session.add(contact)
        await self.session.commit()
        await self.session.refresh(contact)
        return contact

    # Site settings

    async def get_setting(self, key: str, default: Any = None) -> Any:
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None:
            return copy.deepcopy(default)
        return copy.deepcopy(setting.value)

    async def set_setting(self, key: str, value: Any) -> None:
        """Upsert keyed by the unique setting key."""
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None:
            self.session.add(SiteSetting(key=key, value=value))
        else:
            setting.value = value
        await self.session.commit()


async def get_repository(db: AsyncSession = Depends(get_db)) -> PortfolioRepository:
    """FastAPI dependency: a repository bound to the request's session."""
    return PortfolioRepository(db)
