# sponsorship/models/creator.py
from __future__ import annotations

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text, text

from sponsorship.db.base import Base, EntityMixin, JSONType
from sponsorship.models.enums import PaymentMethod, enum_column


class CreatorProfile(EntityMixin, Base):
    __tablename__ = "creator_profiles"

    user_id = Column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    display_name = Column(String(200), nullable=False)
    bio = Column(Text)
    specialties = Column(JSONType)  # list[str]
    communities = Column(JSONType)  # list[str]
    portfolio_url = Column(String(1000))
    social_links = Column(JSONType)  # dict[str, str]
    reputation_score = Column(Float, nullable=False, default=0.0)
    completed_campaigns = Column(Integer, nullable=False, default=0)
    payout_method = Column(
        enum_column(PaymentMethod, "payout_method"),
        nullable=False,
        default=PaymentMethod.TRADITIONAL,
    )
    # Opaque; never validated or transacted
    wallet_address = Column(String(200))
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index(
            "uq_creator_profiles_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
        Index("idx_creator_profiles_reputation", "reputation_score"),
    )


class Offering(EntityMixin, Base):
    __tablename__ = "offerings"

    creator_id = Column(ForeignKey("creator_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    deliverable_types = Column(JSONType, nullable=False)  # list[DeliverableType value]
    base_price = Column(Float)
    estimated_duration = Column(String(100))
    is_active = Column(Boolean, nullable=False, default=True)
