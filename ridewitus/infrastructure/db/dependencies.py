"""
Dependency Injection Providers for RideWitUS

Provides FastAPI dependencies for database sessions and repositories.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ridewitus.infrastructure.db.database import get_session
from ridewitus.infrastructure.db.repositories import (
    AccountRepository,
    ActivityRepository,
    PricingTierRepository,
)


# Type alias for session dependency
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_account_repository(
    session: SessionDep,
) -> AsyncGenerator[AccountRepository, None]:
    """
    Dependency provider for AccountRepository.

    Usage:
        @router.get("/accounts")
        async def list_accounts(repo: AccountRepoDep):
            ...
    """
    yield AccountRepository(session)


async def get_activity_repository(
    session: SessionDep,
) -> AsyncGenerator[ActivityRepository, None]:
    """Dependency provider for ActivityRepository."""
    yield ActivityRepository(session)


async def get_pricing_tier_repository(
    session: SessionDep,
) -> AsyncGenerator[PricingTierRepository, None]:
    """Dependency provider for PricingTierRepository."""
    yield PricingTierRepository(session)


# Type aliases for repository dependencies
AccountRepoDep = Annotated[AccountRepository, Depends(get_account_repository)]
ActivityRepoDep = Annotated[ActivityRepository, Depends(get_activity_repository)]
PricingTierRepoDep = Annotated[PricingTierRepository, Depends(get_pricing_tier_repository)]
