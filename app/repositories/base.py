"""
Base repository with generic CRUD operations.

All entity-specific repositories inherit from this. Repositories hold no
session of their own: every method takes the AsyncSession it should run on,
so callers decide which credential scope a query uses.
"""
from typing import Any, Dict, Generic, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import BaseModel, utcnow

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository providing standard CRUD operations.

    Usage:
        class JobRepository(BaseRepository[Job]):
            def __init__(self):
                super().__init__(Job)
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get_by_id(
        self,
        db: AsyncSession,
        id: UUID,
    ) -> Optional[ModelType]:
        """Get a single record by ID."""
        result = await db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        **kwargs: Any,
    ) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        db.add(instance)
        await db.flush()
        await db.refresh(instance)
        return instance

    async def delete(
        self,
        db: AsyncSession,
        id: UUID,
    ) -> bool:
        """Hard delete a record by ID."""
        result = await db.execute(
            delete(self.model).where(self.model.id == id)
        )
        return result.rowcount > 0

    async def delete_where(
        self,
        db: AsyncSession,
        *criteria: Any,
    ) -> int:
        """Delete every row matching the given criteria. Returns rows deleted."""
        result = await db.execute(delete(self.model).where(*criteria))
        return result.rowcount or 0

    async def upsert(
        self,
        db: AsyncSession,
        *,
        key_columns: Sequence[str],
        values: Dict[str, Any],
    ) -> None:
        """
        Insert a row or replace the existing one for the same key.

        Every non-key column in `values` is overwritten on conflict, so the
        stored record is always the full latest regeneration.
        """
        stmt = pg_insert(self.model).values(**values)
        update_cols = {
            name: stmt.excluded[name]
            for name in values
            if name not in key_columns
        }
        update_cols["updated_at"] = utcnow()
        stmt = stmt.on_conflict_do_update(
            index_elements=list(key_columns),
            set_=update_cols,
        )
        await db.execute(stmt)
