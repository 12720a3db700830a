"""
SQLModel ORM Models for RideWitUS

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from ridewitus.infrastructure.db.models.base import TimestampMixin
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.models.activity import Activity
from ridewitus.infrastructure.db.models.pricing_tier import PricingTier


__all__ = [
    "TimestampMixin",
    "Account",
    "Activity",
    "PricingTier",
]
