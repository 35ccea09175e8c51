# sponsorship/schemas/deliverable.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sponsorship.models.enums import DeliverableStatus, DeliverableType, VerificationMethod
from sponsorship.schemas.common import ORMModel
from sponsorship.schemas.proof import ProofResponse


class DeliverableDraft(BaseModel):
    """Deliverable created alongside its campaign."""

    type: DeliverableType = DeliverableType.CUSTOM
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    verification_method: VerificationMethod = VerificationMethod.MANUAL_UPLOAD


class DeliverableCreate(DeliverableDraft):
    campaign_id: str
    type: DeliverableType


class DeliverableUpdate(BaseModel):
    type: Optional[DeliverableType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    verification_method: Optional[VerificationMethod] = None
    status: Optional[DeliverableStatus] = None


class DeliverableResponse(ORMModel):
    campaign_id: str
    type: DeliverableType
    title: str
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    verification_method: VerificationMethod
    status: DeliverableStatus
    completed_at: Optional[datetime] = None


class DeliverableDetail(DeliverableResponse):
    proofs: List[ProofResponse] = []


class DeliverableEnvelope(BaseModel):
    deliverable: DeliverableDetail


class DeliverableList(BaseModel):
    deliverables: List[DeliverableResponse]
