"""
Base Repository for RideWitUS

Generic async repository implementing shared CRUD operations. SQLAlchemy
errors are translated into ``DatabaseError`` here so that nothing above
the repository layer sees driver exceptions.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from ridewitus.infrastructure.exceptions import DatabaseError


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic async repository with CRUD operations.

    Args:
        model: The SQLModel class to operate on
        session: Async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the current session."""
        return self._session

    @property
    def table_name(self) -> str:
        return self._model.__tablename__

    async def _execute(self, statement, operation: str):
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during {operation}",
                operation=operation,
                table=self.table_name,
                original_error=e,
            )

    async def _flush(self, operation: str) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during {operation}",
                operation=operation,
                table=self.table_name,
                original_error=e,
            )

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Get a single record by its primary key.

        Args:
            id: Primary key value, or a tuple for composite keys

        Returns:
            Model instance or None if not found
        """
        try:
            return await self._session.get(self._model, id)
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Database error during get",
                operation="get",
                table=self.table_name,
                original_error=e,
            )

    async def add(self, db_obj: ModelType) -> ModelType:
        """
        Persist a new or modified model instance.

        Returns:
            The refreshed instance
        """
        self._session.add(db_obj)
        await self._flush("save")
        await self._session.refresh(db_obj)
        return db_obj

    async def add_many(self, db_objects: List[ModelType]) -> List[ModelType]:
        """Bulk persist model instances."""
        self._session.add_all(db_objects)
        await self._flush("bulk insert")
        return db_objects

    async def count(self) -> int:
        """Get total count of records."""
        stmt = select(func.count()).select_from(self._model)
        result = await self._execute(stmt, "count")
        return result.scalar_one()
