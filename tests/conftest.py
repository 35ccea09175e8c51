# tests/conftest.py
import os

os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from contextlib import asynccontextmanager
from itertools import count

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sponsorship.db.base import Base, new_id, utcnow
from sponsorship.db.repository import get_repository
from tests.factories import make_creator, make_sponsor, make_user


def _column_keys(model):
    return [attr.key for attr in inspect(model).column_attrs]


def _matches(entity, clause):
    return all(getattr(entity, key) == value for key, value in clause.items())


class InMemoryRepository:
    """Dict-backed stand-in for the SQLAlchemy repository."""

    def __init__(self):
        self.rows = {}
        self.commits = 0
        self.rollbacks = 0
        self._seq = count()
        self._order = {}

    def _table(self, model):
        return self.rows.setdefault(model, {})

    def seed(self, entity):
        """Synchronous insert for test setup."""
        model = type(entity)
        for attr in inspect(model).column_attrs:
            if getattr(entity, attr.key) is not None:
                continue
            default = attr.columns[0].default
            if default is not None and not default.is_callable:
                setattr(entity, attr.key, default.arg)
        if entity.id is None:
            entity.id = new_id()
        now = utcnow()
        if entity.created_at is None:
            entity.created_at = now
        if entity.updated_at is None:
            entity.updated_at = now
        self._table(model)[entity.id] = entity
        self._order[id(entity)] = next(self._seq)
        return entity

    def all(self, model):
        return sorted(self._table(model).values(), key=lambda e: self._order[id(e)])

    async def get(self, model, entity_id):
        if not entity_id:
            return None
        return self._table(model).get(entity_id)

    async def find(self, model, where=None, any_of=None, order_by="created_at", descending=True, limit=None):
        rows = [e for e in self._table(model).values() if _matches(e, where or {})]
        if any_of:
            rows = [e for e in rows if any(_matches(e, clause) for clause in any_of)]
        if order_by:
            rows.sort(
                key=lambda e: (getattr(e, order_by) is not None, getattr(e, order_by) or 0, self._order[id(e)]),
                reverse=descending,
            )
        else:
            rows.sort(key=lambda e: self._order[id(e)])
        return rows[:limit] if limit is not None else rows

    async def find_one(self, model, where=None, any_of=None):
        rows = await self.find(model, where=where, any_of=any_of, limit=1)
        return rows[0] if rows else None

    async def count(self, model, where=None):
        return len(await self.find(model, where=where, order_by=None))

    async def add(self, entity):
        return self.seed(entity)

    async def update(self, entity, **fields):
        for key, value in fields.items():
            setattr(entity, key, value)
        entity.updated_at = utcnow()
        return entity

    async def delete(self, entity):
        self._table(type(entity)).pop(entity.id, None)

    async def delete_where(self, model, where):
        doomed = [e for e in self._table(model).values() if _matches(e, where)]
        for entity in doomed:
            self._table(model).pop(entity.id, None)
        return len(doomed)

    def _snapshot(self):
        return {
            model: {
                entity_id: (entity, {key: getattr(entity, key) for key in _column_keys(model)})
                for entity_id, entity in table.items()
            }
            for model, table in self.rows.items()
        }

    def _restore(self, snapshot):
        self.rows = {}
        for model, table in snapshot.items():
            restored = self._table(model)
            for entity_id, (entity, values) in table.items():
                for key, value in values.items():
                    setattr(entity, key, value)
                restored[entity_id] = entity

    @asynccontextmanager
    async def unit_of_work(self):
        snapshot = self._snapshot()
        try:
            yield self
            self.commits += 1
        except Exception:
            self._restore(snapshot)
            self.rollbacks += 1
            raise


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest_asyncio.fixture
async def db_session(tmp_path):
    """A real SQLAlchemy session on a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sponsorship.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def client(repo):
    from sponsorship.main import app
    from sponsorship.routes.health import get_database_health

    async def _healthy_database():
        return {"status": "healthy"}

    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_database_health] = _healthy_database
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def world(repo):
    """A sponsor user, a creator user and their profiles."""
    sponsor_user = make_user(repo, fid="1001", username="cafe_owner")
    creator_user = make_user(repo, fid="2002", username="ava")
    return {
        "sponsor_user": sponsor_user,
        "creator_user": creator_user,
        "sponsor": make_sponsor(repo, sponsor_user),
        "creator": make_creator(repo, creator_user),
    }
