#!/usr/bin/env python3
"""
Seed the default pricing tiers and, optionally, a bootstrap admin account.

The admin is created only when SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD are
set and no account with that email exists yet.

Usage: python -m scripts.seed_database
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ridewitus.domain.accounts import validate_registration
from ridewitus.domain.models import Role
from ridewitus.domain.pricing import PricingCatalog
from ridewitus.infrastructure.db.database import get_session_context
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.repositories import AccountRepository, PricingTierRepository
from ridewitus.infrastructure.security.passwords import get_password_hasher


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def seed_admin(session, email: str, password: str, name: str) -> None:
    accounts = AccountRepository(session)
    if await accounts.get_by_email(email) is not None:
        logger.info(f"Admin {email} already exists, skipping")
        return

    validate_registration(email, password, name)
    account = await accounts.create(
        Account(
            email=email,
            name=name,
            password_hash=await get_password_hasher().hash(password),
            role=Role.ADMIN.value,
        )
    )
    logger.info(f"Created admin account {account.id} ({email})")


async def main():
    async with get_session_context() as session:
        inserted = await PricingCatalog(PricingTierRepository(session)).seed_defaults()
        if inserted:
            logger.info(f"Inserted {inserted} pricing tiers")
        else:
            logger.info("Pricing tiers already present, skipping")

        email = os.getenv("SEED_ADMIN_EMAIL")
        password = os.getenv("SEED_ADMIN_PASSWORD")
        if email and password:
            await seed_admin(session, email, password, os.getenv("SEED_ADMIN_NAME", "Administrator"))


if __name__ == "__main__":
    asyncio.run(main())
