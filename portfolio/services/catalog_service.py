"""
Read-only public catalog: visible artworks and exhibitions in presentation order.
"""
from typing import List

from portfolio.models import Artwork, Exhibition
from portfolio.repository import PortfolioRepository


async def list_artworks(repo: PortfolioRepository) -> List[Artwork]:
    return await repo.list_artworks(visible_only=True)


async def list_exhibitions(repo: PortfolioRepository) -> List[Exhibition]:
    return await repo.list_exhibitions()
