# sponsorship/schemas/proof.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

from sponsorship.models.enums import ProofStatus, ProofType
from sponsorship.schemas.common import ORMModel
from sponsorship.schemas.user import UserResponse


class ProofCreate(BaseModel):
    deliverable_id: str
    submitted_by: str
    proof_type: ProofType
    content: str = Field(..., min_length=1)
    metadata: Optional[Dict[str, Any]] = None


class ProofReview(BaseModel):
    status: Literal["approved", "rejected"]
    reviewed_by: str
    review_notes: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("review_notes", "notes"),
    )


class ProofResponse(ORMModel):
    deliverable_id: str
    submitted_by: str
    proof_type: ProofType
    content: str
    metadata: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("proof_metadata", "metadata"),
    )
    status: ProofStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None


class ProofWithSubmitter(ProofResponse):
    submitter: Optional[UserResponse] = None


class ProofEnvelope(BaseModel):
    proof: ProofResponse


class ProofList(BaseModel):
    proofs: List[ProofWithSubmitter]


class ProofReviewResponse(BaseModel):
    proof: ProofResponse
    deliverable_status: str
    campaign_completed: bool = False
