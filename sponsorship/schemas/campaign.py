# sponsorship/schemas/campaign.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from sponsorship.models.enums import CampaignStatus, CompensationType
from sponsorship.schemas.common import ORMModel
from sponsorship.schemas.deliverable import DeliverableDetail, DeliverableDraft
from sponsorship.schemas.profiles import CreatorProfileResponse, SponsorProfileResponse


class CampaignCreate(BaseModel):
    sponsor_id: str
    creator_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[CampaignStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    compensation_type: CompensationType
    cash_amount: Optional[float] = Field(None, ge=0)
    credit_amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    deliverables: List[DeliverableDraft] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class CampaignUpdate(BaseModel):
    creator_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[CampaignStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    compensation_type: Optional[CompensationType] = None
    cash_amount: Optional[float] = Field(None, ge=0)
    credit_amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class CampaignResponse(ORMModel):
    sponsor_id: str
    creator_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: CampaignStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    compensation_type: CompensationType
    cash_amount: Optional[float] = None
    credit_amount: Optional[float] = None
    notes: Optional[str] = None


class CampaignSummary(CampaignResponse):
    sponsor: Optional[SponsorProfileResponse] = None
    creator: Optional[CreatorProfileResponse] = None


class CampaignDetail(CampaignSummary):
    deliverables: List[DeliverableDetail] = []


class CampaignEnvelope(BaseModel):
    campaign: CampaignDetail


class CampaignList(BaseModel):
    campaigns: List[CampaignSummary]
