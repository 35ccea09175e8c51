# sponsorship/db/repository.py
"""
Generic persistence access used by the service layer.

Services talk to the store only through this capability set: get by id,
select by equality filters (AND-ed, with an optional OR group), count,
insert, update, delete, and a unit of work that makes a sequence of writes
atomic. Nothing in the workflow depends on a particular engine.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Mapping, Optional, Sequence, Type, TypeVar

from fastapi import Depends
from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sponsorship.core.exceptions import DatabaseError
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.base import Base
from sponsorship.db.session import get_session

logger = get_structlog_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

Filters = Mapping[str, Any]


class Repository:
    """SQLAlchemy-backed repository bound to one session (one request)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _conditions(self, model: Type[ModelT], where: Optional[Filters], any_of: Optional[Sequence[Filters]]):
        conditions = [getattr(model, key) == value for key, value in (where or {}).items()]
        if any_of:
            conditions.append(
                or_(*[
                    and_(*[getattr(model, key) == value for key, value in clause.items()])
                    for clause in any_of
                ])
            )
        return conditions

    async def get(self, model: Type[ModelT], entity_id: Optional[str]) -> Optional[ModelT]:
        if not entity_id:
            return None
        return await self.session.get(model, entity_id)

    async def find(
        self,
        model: Type[ModelT],
        where: Optional[Filters] = None,
        any_of: Optional[Sequence[Filters]] = None,
        order_by: Optional[str] = "created_at",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        stmt = select(model)
        conditions = self._conditions(model, where, any_of)
        if conditions:
            stmt = stmt.where(*conditions)
        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_one(
        self,
        model: Type[ModelT],
        where: Optional[Filters] = None,
        any_of: Optional[Sequence[Filters]] = None,
    ) -> Optional[ModelT]:
        rows = await self.find(model, where=where, any_of=any_of, limit=1)
        return rows[0] if rows else None

    async def count(self, model: Type[ModelT], where: Optional[Filters] = None) -> int:
        stmt = select(func.count()).select_from(model)
        conditions = self._conditions(model, where, None)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def add(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: ModelT, **fields: Any) -> ModelT:
        for key, value in fields.items():
            setattr(entity, key, value)
        await self.session.flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)
        await self.session.flush()

    async def delete_where(self, model: Type[ModelT], where: Filters) -> int:
        stmt = delete(model).where(*self._conditions(model, where, None))
        result = await self.session.execute(stmt, execution_options={"synchronize_session": "fetch"})
        return result.rowcount or 0

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncGenerator["Repository", None]:
        """Commit everything written inside the block, or nothing."""
        try:
            yield self
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("repository.unit_of_work.failed", error=str(exc))
            raise DatabaseError(
                "Database write failed",
                details={"error": exc.__class__.__name__},
            ) from exc
        except Exception:
            await self.session.rollback()
            logger.warning("repository.unit_of_work.rolled_back")
            raise


async def get_repository(session: AsyncSession = Depends(get_session)) -> Repository:
    return Repository(session)
