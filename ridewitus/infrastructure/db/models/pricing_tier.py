"""
PricingTier SQLModel for RideWitUS

Subscription plans, persisted so that every process instance serves the
same catalog.
"""

from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ridewitus.domain.models import BillingInterval
from ridewitus.infrastructure.db.models.base import TimestampMixin


class PricingTier(TimestampMixin, table=True):
    """Pricing tier database table model."""

    __tablename__ = "pricing_tiers"

    id: str = Field(..., primary_key=True, max_length=50)
    name: str = Field(..., unique=True, max_length=100)
    price: float = Field(default=0.0)
    interval: str = Field(default=BillingInterval.MONTH.value, max_length=10)
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    stripe_price_id: Optional[str] = Field(default=None, max_length=255)
    position: int = Field(default=0, description="Display order")
