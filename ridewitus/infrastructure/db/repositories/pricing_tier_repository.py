"""
PricingTier Repository for RideWitUS

Data access for the persisted pricing catalog.
"""

from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ridewitus.infrastructure.db.models.pricing_tier import PricingTier
from ridewitus.infrastructure.db.repositories.base_repository import BaseRepository


class PricingTierRepository(BaseRepository[PricingTier]):
    """Repository for pricing tiers."""

    def __init__(self, session: AsyncSession):
        super().__init__(PricingTier, session)

    async def list_ordered(self) -> List[PricingTier]:
        stmt = select(PricingTier).order_by(PricingTier.position, PricingTier.price)
        result = await self._execute(stmt, "list")
        return list(result.scalars().all())

    async def replace_all(self, tiers: List[PricingTier]) -> List[PricingTier]:
        """
        Replace the whole catalog within the current transaction.

        The old rows are deleted and flushed before the new ones are added,
        so tiers may keep their names across a replacement.
        """
        await self._execute(delete(PricingTier), "replace_all")
        await self._flush("replace_all")
        return await self.add_many(tiers)
