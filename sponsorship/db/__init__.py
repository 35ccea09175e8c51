# sponsorship/db/__init__.py
"""
Database package for SQLAlchemy setup, session management, and the repository.
"""

from sponsorship.db.base import Base, EntityMixin, JSONType, new_id, utcnow
from sponsorship.db.repository import Repository, get_repository
from sponsorship.db.session import create_database_engine, create_schema, get_session

__all__ = [
    "Base",
    "EntityMixin",
    "JSONType",
    "Repository",
    "create_database_engine",
    "create_schema",
    "get_repository",
    "get_session",
    "new_id",
    "utcnow",
]
