# sponsorship/schemas/offering.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from sponsorship.models.enums import DeliverableType
from sponsorship.schemas.common import ORMModel
from sponsorship.schemas.profiles import CreatorProfileResponse


class OfferingCreate(BaseModel):
    user_id: Optional[str] = None
    creator_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    deliverable_types: List[DeliverableType] = Field(..., min_length=1)
    base_price: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[str] = Field(None, max_length=100)


class OfferingUpdate(BaseModel):
    user_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    deliverable_types: Optional[List[DeliverableType]] = Field(None, min_length=1)
    base_price: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[str] = Field(None, max_length=100)


class OfferingResponse(ORMModel):
    creator_id: str
    title: str
    description: Optional[str] = None
    deliverable_types: List[DeliverableType]
    base_price: Optional[float] = None
    estimated_duration: Optional[str] = None
    is_active: bool


class OfferingWithCreator(OfferingResponse):
    creator: Optional[CreatorProfileResponse] = None


class OfferingEnvelope(BaseModel):
    offering: OfferingResponse


class OfferingList(BaseModel):
    offerings: List[OfferingWithCreator]
