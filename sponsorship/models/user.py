# sponsorship/models/user.py
from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, String

from sponsorship.db.base import Base, EntityMixin


class User(EntityMixin, Base):
    __tablename__ = "users"

    fid = Column(String(64), nullable=False, unique=True)
    username = Column(String(100))
    display_name = Column(String(200))
    pfp_url = Column(String(1000))


class IdentityAccount(EntityMixin, Base):
    """Identity-provider account linked to a user."""

    __tablename__ = "identity_accounts"

    user_id = Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    fid = Column(String(64), nullable=False, unique=True)
    username = Column(String(100), nullable=False)

    __table_args__ = (
        Index("idx_identity_accounts_user_fid", "user_id", "fid"),
    )
