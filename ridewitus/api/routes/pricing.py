"""
Pricing API Routes

Read-only view of the pricing catalog for signed-in accounts.
"""

from typing import List

from fastapi import APIRouter

from ridewitus.api.dependencies import IdentityDep, PricingCatalogDep
from ridewitus.domain.models import PricingTierSchema


router = APIRouter()


@router.get("/pricing", response_model=List[PricingTierSchema])
async def list_pricing(identity: IdentityDep, catalog: PricingCatalogDep):
    return await catalog.list_tiers()
