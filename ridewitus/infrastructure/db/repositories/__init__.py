"""
Repository Layer for RideWitUS

Exports all repository classes for dependency injection.
"""

from ridewitus.infrastructure.db.repositories.base_repository import BaseRepository
from ridewitus.infrastructure.db.repositories.account_repository import AccountRepository
from ridewitus.infrastructure.db.repositories.activity_repository import ActivityRepository
from ridewitus.infrastructure.db.repositories.pricing_tier_repository import (
    PricingTierRepository,
)


__all__ = [
    # Base
    "BaseRepository",
    # Repositories
    "AccountRepository",
    "ActivityRepository",
    "PricingTierRepository",
]
