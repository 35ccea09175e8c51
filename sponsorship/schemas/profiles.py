# sponsorship/schemas/profiles.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from sponsorship.models.enums import PaymentMethod
from sponsorship.schemas.common import ORMModel


def _check_budget(model):
    low, high = model.budget_range_min, model.budget_range_max
    if low is not None and high is not None and low > high:
        raise ValueError("budget_range_min must not exceed budget_range_max")
    return model


class SponsorProfileBase(BaseModel):
    industry: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    website: Optional[str] = Field(None, max_length=500)
    logo_url: Optional[str] = Field(None, max_length=1000)
    budget_range_min: Optional[float] = Field(None, ge=0)
    budget_range_max: Optional[float] = Field(None, ge=0)


class SponsorProfileCreate(SponsorProfileBase):
    # Falls back to the session user when omitted
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200, description="Business name")
    payment_method: PaymentMethod = PaymentMethod.TRADITIONAL

    @model_validator(mode="after")
    def check_budget(self):
        return _check_budget(self)


class SponsorProfileUpdate(SponsorProfileBase):
    user_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    payment_method: Optional[PaymentMethod] = None

    @model_validator(mode="after")
    def check_budget(self):
        return _check_budget(self)


class SponsorProfileResponse(ORMModel):
    user_id: str
    name: str
    industry: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    budget_range_min: Optional[float] = None
    budget_range_max: Optional[float] = None
    payment_method: PaymentMethod
    is_active: bool


class SponsorProfileEnvelope(BaseModel):
    profile: Optional[SponsorProfileResponse] = None


class CreatorProfileBase(BaseModel):
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    communities: Optional[List[str]] = None
    portfolio_url: Optional[str] = Field(None, max_length=1000)
    social_links: Optional[Dict[str, str]] = None
    wallet_address: Optional[str] = Field(None, max_length=200)


class CreatorProfileCreate(CreatorProfileBase):
    user_id: Optional[str] = None
    display_name: str = Field(..., min_length=1, max_length=200)
    payout_method: PaymentMethod = PaymentMethod.TRADITIONAL


class CreatorProfileUpdate(CreatorProfileBase):
    user_id: Optional[str] = None
    display_name: Optional[str] = Field(None, min_length=1, max_length=200)
    payout_method: Optional[PaymentMethod] = None


class CreatorProfileResponse(ORMModel):
    user_id: str
    display_name: str
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    communities: Optional[List[str]] = None
    portfolio_url: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    reputation_score: float
    completed_campaigns: int
    payout_method: PaymentMethod
    wallet_address: Optional[str] = None
    is_active: bool


class CreatorProfileEnvelope(BaseModel):
    profile: Optional[CreatorProfileResponse] = None
