# sponsorship/models/campaign.py
from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Index, String, Text

from sponsorship.db.base import Base, EntityMixin, JSONType
from sponsorship.models.enums import (
    CampaignStatus,
    CompensationType,
    DeliverableStatus,
    DeliverableType,
    ProofStatus,
    ProofType,
    VerificationMethod,
    enum_column,
)


class Campaign(EntityMixin, Base):
    __tablename__ = "campaigns"

    sponsor_id = Column(ForeignKey("sponsor_profiles.id", ondelete="RESTRICT"), nullable=False, index=True)
    # Null for open campaigns
    creator_id = Column(ForeignKey("creator_profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(
        enum_column(CampaignStatus, "campaign_status"),
        nullable=False,
        default=CampaignStatus.DRAFT,
    )
    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True))

    compensation_type = Column(enum_column(CompensationType, "compensation_type"), nullable=False)
    cash_amount = Column(Float)
    credit_amount = Column(Float)

    notes = Column(Text)

    __table_args__ = (
        Index("idx_campaigns_status", "status"),
        Index("idx_campaigns_sponsor_created", "sponsor_id", "created_at"),
        Index("idx_campaigns_creator_created", "creator_id", "created_at"),
        CheckConstraint("cash_amount IS NULL OR cash_amount >= 0", name="non_negative_cash"),
        CheckConstraint("credit_amount IS NULL OR credit_amount >= 0", name="non_negative_credit"),
    )


class Deliverable(EntityMixin, Base):
    __tablename__ = "deliverables"

    campaign_id = Column(ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(enum_column(DeliverableType, "deliverable_type"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    deadline = Column(DateTime(timezone=True))
    verification_method = Column(
        enum_column(VerificationMethod, "verification_method"),
        nullable=False,
        default=VerificationMethod.MANUAL_UPLOAD,
    )
    status = Column(
        enum_column(DeliverableStatus, "deliverable_status"),
        nullable=False,
        default=DeliverableStatus.PENDING,
    )
    completed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_deliverables_campaign_status", "campaign_id", "status"),
    )


class Proof(EntityMixin, Base):
    __tablename__ = "proofs"

    deliverable_id = Column(ForeignKey("deliverables.id", ondelete="CASCADE"), nullable=False, index=True)
    submitted_by = Column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    proof_type = Column(enum_column(ProofType, "proof_type"), nullable=False)
    # URL for images/links, or free text
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    proof_metadata = Column("metadata", JSONType)
    status = Column(
        enum_column(ProofStatus, "proof_status"),
        nullable=False,
        default=ProofStatus.PENDING,
    )
    reviewed_by = Column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True))
    review_notes = Column(Text)

    __table_args__ = (
        Index("idx_proofs_deliverable_status", "deliverable_id", "status"),
    )
