"""
Activity Repository for RideWitUS

Data access for activities. Every query is scoped to one owning account.
"""

from typing import List, Optional, Set

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ridewitus.infrastructure.db.models.activity import Activity
from ridewitus.infrastructure.db.repositories.base_repository import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    """Repository for an account's activity records."""

    def __init__(self, session: AsyncSession):
        super().__init__(Activity, session)

    async def list_for_account(self, account_id: str) -> List[Activity]:
        """All activities of an account, newest first."""
        stmt = (
            select(Activity)
            .where(Activity.account_id == account_id)
            .order_by(Activity.date.desc())
        )
        result = await self._execute(stmt, "list_for_account")
        return list(result.scalars().all())

    async def get_for_account(self, account_id: str, activity_id: str) -> Optional[Activity]:
        stmt = select(Activity).where(
            Activity.account_id == account_id,
            Activity.id == activity_id,
        )
        result = await self._execute(stmt, "get_for_account")
        return result.scalar_one_or_none()

    async def ids_for_account(self, account_id: str) -> Set[str]:
        stmt = select(Activity.id).where(Activity.account_id == account_id)
        result = await self._execute(stmt, "ids_for_account")
        return set(result.scalars().all())

    async def delete_for_account(self, account_id: str, activity_id: str) -> bool:
        """
        Delete one activity.

        Returns:
            True if deleted, False if the account has no such activity
        """
        activity = await self.get_for_account(account_id, activity_id)
        if activity is None:
            return False
        await self.session.delete(activity)
        await self._flush("delete")
        return True

    async def clear_for_account(self, account_id: str) -> int:
        """Delete every activity of an account and return how many were removed."""
        result = await self._execute(
            delete(Activity).where(Activity.account_id == account_id),
            "clear_for_account",
        )
        return result.rowcount or 0

    async def count_for_account(self, account_id: str) -> int:
        return len(await self.ids_for_account(account_id))
