"""
Database Infrastructure Package for RideWitUS

Exports database utilities and dependency providers.
"""

from ridewitus.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    get_session,
    get_session_context,
    init_db,
    close_db,
)

from ridewitus.infrastructure.db.dependencies import (
    SessionDep,
    get_account_repository,
    get_activity_repository,
    get_pricing_tier_repository,
    AccountRepoDep,
    ActivityRepoDep,
    PricingTierRepoDep,
)


__all__ = [
    # Database management
    "DatabaseManager",
    "get_db_manager",
    "get_session",
    "get_session_context",
    "init_db",
    "close_db",
    # Dependencies
    "SessionDep",
    "get_account_repository",
    "get_activity_repository",
    "get_pricing_tier_repository",
    "AccountRepoDep",
    "ActivityRepoDep",
    "PricingTierRepoDep",
]
