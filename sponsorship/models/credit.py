# sponsorship/models/credit.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Index, String, Text

from sponsorship.db.base import Base, EntityMixin, JSONType, utcnow
from sponsorship.models.enums import CreditStatus, enum_column


class Credit(EntityMixin, Base):
    __tablename__ = "credits"

    sponsor_id = Column(ForeignKey("sponsor_profiles.id", ondelete="RESTRICT"), nullable=False, index=True)
    campaign_id = Column(ForeignKey("campaigns.id", ondelete="SET NULL"), nullable=True, index=True)
    recipient_id = Column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    value = Column(Float, nullable=False)
    redemption_rules = Column(JSONType)  # dict[str, Any]
    expires_at = Column(DateTime(timezone=True))
    status = Column(
        enum_column(CreditStatus, "credit_status"),
        nullable=False,
        default=CreditStatus.ACTIVE,
    )
    redeemed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_credits_status", "status"),
        CheckConstraint("value >= 0", name="non_negative_value"),
    )

    def has_lapsed(self, now: Optional[datetime] = None) -> bool:
        """Advisory only: an active credit past its expiry date."""
        if self.expires_at is None or self.status != CreditStatus.ACTIVE:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=(now or utcnow()).tzinfo)
        return expires_at <= (now or utcnow())
