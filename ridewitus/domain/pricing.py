"""
Pricing Catalog

Persisted subscription tiers. Every authenticated account can read the
catalog; only administrators can replace it.
"""

import logging
from typing import List

from ridewitus.domain.models import BillingInterval, PricingTierSchema, Role
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.models.pricing_tier import PricingTier
from ridewitus.infrastructure.db.repositories.pricing_tier_repository import PricingTierRepository
from ridewitus.infrastructure.exceptions import (
    AuthorizationError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)


DEFAULT_TIERS: List[PricingTierSchema] = [
    PricingTierSchema(
        id="free",
        name="Free",
        price=0,
        interval=BillingInterval.MONTH,
        features=["Local activity tracking", "Charts and statistics", "CSV import and export"],
    ),
    PricingTierSchema(
        id="monthly",
        name="Premium Monthly",
        price=9.99,
        interval=BillingInterval.MONTH,
        features=["Everything in Free", "Cloud sync across devices"],
        stripe_price_id="price_monthly",
    ),
    PricingTierSchema(
        id="annual",
        name="Premium Annual",
        price=99.99,
        interval=BillingInterval.YEAR,
        features=["Everything in Free", "Cloud sync across devices", "Two months free"],
        stripe_price_id="price_annual",
    ),
]


def validate_tiers(tiers: List[PricingTierSchema]) -> None:
    """
    Raises:
        ValidationError: MISSING_PRICE_REFERENCE for a priced tier without
            a billing price id, INVALID_INPUT for duplicate ids or names
    """
    if not tiers:
        raise ValidationError("At least one pricing tier is required")

    ids = [tier.id for tier in tiers]
    names = [tier.name for tier in tiers]
    if len(set(ids)) != len(ids) or len(set(names)) != len(names):
        raise ValidationError("Pricing tier ids and names must be unique")

    for tier in tiers:
        if tier.is_priced and not tier.stripe_price_id:
            raise ValidationError(
                f"Pricing tier '{tier.name}' has a price but no Stripe price id",
                error_code=ErrorCode.MISSING_PRICE_REFERENCE,
            )


def _to_row(tier: PricingTierSchema, position: int) -> PricingTier:
    return PricingTier(
        id=tier.id,
        name=tier.name,
        price=tier.price,
        interval=tier.interval.value,
        features=list(tier.features),
        stripe_price_id=tier.stripe_price_id,
        position=position,
    )


class PricingCatalog:
    """Read and replace the pricing tiers."""

    def __init__(self, tiers: PricingTierRepository):
        self._tiers = tiers

    async def list_tiers(self) -> List[PricingTierSchema]:
        return [PricingTierSchema.model_validate(t) for t in await self._tiers.list_ordered()]

    async def get(self, tier_id: str) -> PricingTierSchema:
        tier = await self._tiers.get_by_id(tier_id)
        if tier is None:
            raise NotFoundError(
                "Pricing tier not found",
                error_code=ErrorCode.PRICING_TIER_NOT_FOUND,
            )
        return PricingTierSchema.model_validate(tier)

    async def replace(self, caller: Account, tiers: List[PricingTierSchema]) -> List[PricingTierSchema]:
        """
        Replace the whole catalog. Validation runs before anything is
        written, so a rejected replacement leaves the catalog unchanged.
        """
        if caller.role_enum != Role.ADMIN:
            raise AuthorizationError("Unauthorized", error_code=ErrorCode.UNAUTHORIZED)
        validate_tiers(tiers)

        await self._tiers.replace_all([_to_row(t, i) for i, t in enumerate(tiers)])
        logger.info(f"Pricing catalog replaced by {caller.id} ({len(tiers)} tiers)")
        return await self.list_tiers()

    async def seed_defaults(self) -> int:
        """Insert the default tiers when the catalog is empty."""
        if await self._tiers.count() > 0:
            return 0
        await self._tiers.add_many([_to_row(t, i) for i, t in enumerate(DEFAULT_TIERS)])
        logger.info(f"Seeded {len(DEFAULT_TIERS)} default pricing tiers")
        return len(DEFAULT_TIERS)
