# sponsorship/routes/proofs.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.models.campaign import Proof
from sponsorship.models.enums import ProofStatus
from sponsorship.schemas.proof import (
    ProofCreate,
    ProofEnvelope,
    ProofList,
    ProofResponse,
    ProofReview,
    ProofReviewResponse,
    ProofWithSubmitter,
)
from sponsorship.schemas.user import UserResponse
from sponsorship.services import deliverables, workflow
from sponsorship.services.common import get_or_404

router = APIRouter(prefix="/proofs", tags=["proofs"])


@router.get("", response_model=ProofList)
async def list_proofs(
    deliverable_id: Optional[str] = Query(None),
    status: Optional[ProofStatus] = Query(None),
    repo: Repository = Depends(get_repository),
) -> ProofList:
    rows = await deliverables.list_proofs(repo, deliverable_id=deliverable_id, status=status)
    return ProofList(
        proofs=[
            ProofWithSubmitter.model_validate(proof).model_copy(
                update={"submitter": UserResponse.model_validate(user) if user else None}
            )
            for proof, user in rows
        ]
    )


@router.post("", response_model=ProofEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_proof(payload: ProofCreate, repo: Repository = Depends(get_repository)) -> ProofEnvelope:
    proof = await workflow.submit_proof(
        repo,
        deliverable_id=payload.deliverable_id,
        submitted_by=payload.submitted_by,
        proof_type=payload.proof_type,
        content=payload.content,
        metadata=payload.metadata,
    )
    return ProofEnvelope(proof=ProofResponse.model_validate(proof))


@router.get("/{proof_id}", response_model=ProofEnvelope)
async def get_proof(proof_id: str, repo: Repository = Depends(get_repository)) -> ProofEnvelope:
    proof = await get_or_404(repo, Proof, proof_id)
    return ProofEnvelope(proof=ProofResponse.model_validate(proof))


@router.post("/{proof_id}/review", response_model=ProofReviewResponse)
async def review_proof(
    proof_id: str,
    payload: ProofReview,
    repo: Repository = Depends(get_repository),
) -> ProofReviewResponse:
    outcome = await workflow.review_proof(
        repo,
        proof_id,
        status=payload.status,
        reviewed_by=payload.reviewed_by,
        notes=payload.review_notes,
    )
    return ProofReviewResponse(
        proof=ProofResponse.model_validate(outcome.proof),
        deliverable_status=str(outcome.deliverable.status),
        campaign_completed=outcome.campaign_completed,
    )
