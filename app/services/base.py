"""
Base service class for async database operations.

This module provides the generic CRUD store every catalog entity kind is
persisted through, with storage errors mapped onto the application's error
taxonomy.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InternalError, NotFoundError
from app.db.base_class import Base

# Type variable for generic base service
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)

# Integer primary keys are signed 64-bit; larger ids cannot name a stored row
MAX_ID = 2**63 - 1


def _is_storable_id(id: Any) -> bool:
    return not isinstance(id, int) or -MAX_ID - 1 <= id <= MAX_ID


class AsyncBaseService(Generic[ModelType]):
    """
    Base async service class providing common CRUD operations.

    Each instance operates on one SQLAlchemy model. ``kind`` is the
    human-readable entity name used in error messages, and ``order_by``
    lists the columns (``-`` prefix for descending) used when listing.
    """

    def __init__(self, model: Type[ModelType], kind: str, order_by: Sequence[str] = ("-created_at", "-id")):
        """
        Initialize the base service with a SQLAlchemy model.

        Args:
            model: The SQLAlchemy model class this service operates on
            kind: Entity kind name, e.g. "Restaurant"
            order_by: Listing order, newest first by default
        """
        self.model = model
        self.kind = kind
        self.order_by = tuple(order_by)

    def _ordering(self) -> List[Any]:
        clauses = []
        for field in self.order_by:
            descending = field.startswith("-")
            column = getattr(self.model, field.lstrip("-"))
            clauses.append(column.desc() if descending else column.asc())
        return clauses

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Returns:
            Model instance or None if not found
        """
        if not _is_storable_id(id):
            return None

        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.kind} by id {id}: {e}")
            raise InternalError(f"Database error while retrieving {self.kind}") from e

    async def get_or_404(self, db: AsyncSession, id: Any) -> ModelType:
        obj = await self.get(db, id)
        if obj is None:
            raise NotFoundError(self.kind)
        return obj

    async def get_multi(self, db: AsyncSession) -> List[ModelType]:
        """Get every record, newest first."""
        try:
            stmt = select(self.model).order_by(*self._ordering())
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing {self.kind} records: {e}")
            raise InternalError(f"Database error while retrieving {self.kind} records") from e

    async def get_multi_where(self, db: AsyncSession, *criteria) -> List[ModelType]:
        try:
            stmt = select(self.model).where(*criteria).order_by(*self._ordering())
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error filtering {self.kind} records: {e}")
            raise InternalError(f"Database error while retrieving {self.kind} records") from e

    async def create(self, db: AsyncSession, *, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record.

        Args:
            db: Async database session
            obj_in: Column values for the new row

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        await self._commit(db, "creating")
        await db.refresh(db_obj)
        return db_obj

    async def update(self, db: AsyncSession, *, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Apply the given fields to an existing record.

        Only keys present in ``obj_in`` are written; everything else keeps
        its stored value.
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._commit(db, "updating")
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> None:
        """
        Delete a record by ID. Dependent rows go with it (ON DELETE CASCADE).

        Raises:
            NotFoundError: If no row had this ID
        """
        if not _is_storable_id(id):
            raise NotFoundError(self.kind)

        try:
            result = await db.execute(delete(self.model).where(self.model.id == id))
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting {self.kind} with id {id}: {e}")
            raise InternalError(f"Database error while deleting {self.kind}") from e

        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError(self.kind)

        await self._commit(db, "deleting")

    async def _commit(self, db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Integrity error while {action} {self.kind}: {e.orig}")
            raise ConflictError(f"{self.kind} violates a data integrity constraint") from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error {action} {self.kind}: {e}")
            raise InternalError(f"Database error while {action} {self.kind}") from e
