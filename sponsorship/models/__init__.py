# sponsorship/models/__init__.py
"""
SQLAlchemy ORM models for database entities.
"""

from sponsorship.models.campaign import Campaign, Deliverable, Proof
from sponsorship.models.creator import CreatorProfile, Offering
from sponsorship.models.credit import Credit
from sponsorship.models.enums import (
    CampaignStatus,
    CompensationType,
    CreditStatus,
    DeliverableStatus,
    DeliverableType,
    PaymentMethod,
    ProofStatus,
    ProofType,
    VerificationMethod,
)
from sponsorship.models.sponsor import SponsorProfile
from sponsorship.models.user import IdentityAccount, User

__all__ = [
    "Campaign",
    "CampaignStatus",
    "CompensationType",
    "CreatorProfile",
    "Credit",
    "CreditStatus",
    "Deliverable",
    "DeliverableStatus",
    "DeliverableType",
    "IdentityAccount",
    "Offering",
    "PaymentMethod",
    "Proof",
    "ProofStatus",
    "ProofType",
    "SponsorProfile",
    "User",
    "VerificationMethod",
]
