# sponsorship/models/sponsor.py
from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, Float, ForeignKey, Index, String, Text, text

from sponsorship.db.base import Base, EntityMixin
from sponsorship.models.enums import PaymentMethod, enum_column


class SponsorProfile(EntityMixin, Base):
    __tablename__ = "sponsor_profiles"

    user_id = Column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    industry = Column(String(100))
    description = Column(Text)
    location = Column(String(200))
    website = Column(String(500))
    logo_url = Column(String(1000))
    budget_range_min = Column(Float)
    budget_range_max = Column(Float)
    payment_method = Column(
        enum_column(PaymentMethod, "payment_method"),
        nullable=False,
        default=PaymentMethod.TRADITIONAL,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        # One active profile per user
        Index(
            "uq_sponsor_profiles_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
        CheckConstraint(
            "budget_range_min IS NULL OR budget_range_max IS NULL OR budget_range_min <= budget_range_max",
            name="budget_range_ordered",
        ),
    )
