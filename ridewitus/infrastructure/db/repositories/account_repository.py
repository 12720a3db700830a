"""
Account Repository for RideWitUS

Data access for accounts. Enforces email uniqueness at the storage layer
and deletes an account's activities together with the account.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.models.activity import Activity
from ridewitus.infrastructure.db.repositories.base_repository import BaseRepository
from ridewitus.infrastructure.exceptions import ConflictError, ErrorCode


logger = logging.getLogger(__name__)


class AccountRepository(BaseRepository[Account]):
    """
    Repository for Account CRUD and lookups.

    - get_by_email: Login and uniqueness checks
    - list_newest_first: Administrative listing
    - delete_with_activities: Cascade delete
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def get_by_email(self, email: str) -> Optional[Account]:
        """
        Find an account by its exact email.

        Returns:
            Account or None if not found
        """
        stmt = select(Account).where(Account.email == email)
        result = await self._execute(stmt, "get_by_email")
        return result.scalar_one_or_none()

    async def email_in_use(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether an email belongs to an account other than ``exclude_id``."""
        stmt = select(Account.id).where(Account.email == email)
        if exclude_id:
            stmt = stmt.where(Account.id != exclude_id)
        result = await self._execute(stmt, "email_in_use")
        return result.first() is not None

    async def list_newest_first(self) -> List[Account]:
        stmt = select(Account).order_by(Account.created_at.desc())
        result = await self._execute(stmt, "list")
        return list(result.scalars().all())

    async def create(self, account: Account) -> Account:
        """
        Insert a new account.

        Raises:
            ConflictError: If the email is already registered
        """
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Account insert rejected by unique email constraint")
            raise ConflictError(
                "User with this email already exists",
                error_code=ErrorCode.USER_EXISTS,
                original_error=e,
            )
        await self.session.refresh(account)
        return account

    async def save(self, account: Account) -> Account:
        """
        Persist changes to an existing account.

        Raises:
            ConflictError: If an email change collides with another account
        """
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(
                "Email is already in use",
                error_code=ErrorCode.EMAIL_IN_USE,
                original_error=e,
            )
        await self.session.refresh(account)
        return account

    async def delete_with_activities(self, account: Account) -> None:
        """Delete an account and every activity it owns."""
        await self._execute(
            delete(Activity).where(Activity.account_id == account.id),
            "delete_activities",
        )
        await self.session.delete(account)
        await self._flush("delete")
        logger.info(f"Deleted account {account.id} and its activities")
