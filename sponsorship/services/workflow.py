# sponsorship/services/workflow.py
"""
Proof -> deliverable -> campaign workflow.

Submitting or reviewing a proof moves its deliverable along the
deliverable state machine, and a deliverable reaching ``verified`` may
complete its campaign. Each entry point runs its writes in one unit of
work, so a failure part-way leaves no half-applied cascade behind.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sponsorship.core.exceptions import ValidationError
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.base import utcnow
from sponsorship.db.repository import Repository
from sponsorship.models.campaign import Campaign, Deliverable, Proof
from sponsorship.models.creator import CreatorProfile
from sponsorship.models.enums import (
    CampaignStatus,
    DeliverableStatus,
    ProofStatus,
    ProofType,
)
from sponsorship.models.user import User
from sponsorship.services.common import get_or_404, reject_nulls
from sponsorship.services.transitions import (
    can_auto_complete,
    ensure_deliverable_transition,
    ensure_proof_review,
    status_after_rejection,
    status_after_submission,
)

logger = get_structlog_logger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    proof: Proof
    deliverable: Deliverable
    campaign_completed: bool = False


@dataclass(frozen=True)
class DeliverableUpdate:
    deliverable: Deliverable
    campaign_completed: bool = False


async def maybe_complete_campaign(repo: Repository, campaign_id: str, verified_deliverable_id: str) -> bool:
    """Complete the campaign once every one of its deliverables is verified.

    The deliverable that triggered the check counts as verified whatever
    was read back. Only active campaigns with at least one deliverable
    complete. Must run inside the caller's unit of work.
    """
    campaign = await repo.get(Campaign, campaign_id)
    if campaign is None or not can_auto_complete(campaign.status):
        return False

    deliverables = await repo.find(Deliverable, where={"campaign_id": campaign_id}, order_by=None)
    total = len(deliverables)
    verified = sum(
        1
        for d in deliverables
        if d.id == verified_deliverable_id or d.status == DeliverableStatus.VERIFIED
    )
    if total == 0 or verified < total:
        logger.debug("campaign.completion_pending", campaign_id=campaign_id, verified=verified, total=total)
        return False

    await repo.update(campaign, status=CampaignStatus.COMPLETED)
    if campaign.creator_id:
        creator = await repo.get(CreatorProfile, campaign.creator_id)
        if creator is not None:
            await repo.update(creator, completed_campaigns=(creator.completed_campaigns or 0) + 1)

    logger.info("campaign.completed", campaign_id=campaign_id, deliverables=total)
    return True


async def _verify(repo: Repository, deliverable: Deliverable) -> bool:
    if deliverable.status != DeliverableStatus.VERIFIED or deliverable.completed_at is None:
        await repo.update(
            deliverable,
            status=DeliverableStatus.VERIFIED,
            completed_at=deliverable.completed_at or utcnow(),
        )
    return await maybe_complete_campaign(repo, deliverable.campaign_id, deliverable.id)


async def submit_proof(
    repo: Repository,
    deliverable_id: str,
    submitted_by: str,
    proof_type: Any,
    content: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> Proof:
    if not content or not str(content).strip():
        raise ValidationError("content is required", details={"field": "content"})
    proof_type = ProofType.parse(proof_type)

    deliverable = await get_or_404(repo, Deliverable, deliverable_id)
    await get_or_404(repo, User, submitted_by)

    async with repo.unit_of_work():
        proof = await repo.add(
            Proof(
                deliverable_id=deliverable.id,
                submitted_by=submitted_by,
                proof_type=proof_type,
                content=content,
                proof_metadata=metadata,
                status=ProofStatus.PENDING,
            )
        )
        new_status = status_after_submission(deliverable.status)
        if new_status != deliverable.status:
            await repo.update(deliverable, status=new_status)

    logger.info(
        "proof.submitted",
        proof_id=proof.id,
        deliverable_id=deliverable.id,
        deliverable_status=str(deliverable.status),
    )
    return proof


async def review_proof(
    repo: Repository,
    proof_id: str,
    status: Any,
    reviewed_by: str,
    notes: Optional[str] = None,
) -> ReviewOutcome:
    requested = ProofStatus.parse(status)
    if requested == ProofStatus.PENDING:
        raise ValidationError(
            "status must be approved or rejected",
            details={"field": "status", "allowed": [ProofStatus.APPROVED.value, ProofStatus.REJECTED.value]},
        )

    proof = await get_or_404(repo, Proof, proof_id)
    await get_or_404(repo, User, reviewed_by)
    ensure_proof_review(proof.status, requested)
    deliverable = await get_or_404(repo, Deliverable, proof.deliverable_id)

    completed = False
    async with repo.unit_of_work():
        await repo.update(
            proof,
            status=requested,
            reviewed_by=reviewed_by,
            reviewed_at=utcnow(),
            review_notes=notes,
        )

        if requested == ProofStatus.APPROVED:
            completed = await _verify(repo, deliverable)
        else:
            approved = await repo.count(
                Proof,
                where={"deliverable_id": deliverable.id, "status": ProofStatus.APPROVED},
            )
            new_status = status_after_rejection(deliverable.status, has_other_approved=approved > 0)
            if new_status != deliverable.status:
                await repo.update(deliverable, status=new_status)

    logger.info(
        "proof.reviewed",
        proof_id=proof.id,
        status=requested.value,
        deliverable_id=deliverable.id,
        deliverable_status=str(deliverable.status),
        campaign_completed=completed,
    )
    return ReviewOutcome(proof=proof, deliverable=deliverable, campaign_completed=completed)


async def update_deliverable(repo: Repository, deliverable_id: str, changes: Dict[str, Any]) -> DeliverableUpdate:
    """Apply field edits; a status change must follow the manual table."""
    deliverable = await get_or_404(repo, Deliverable, deliverable_id)
    values = {key: value for key, value in changes.items() if key not in {"id", "campaign_id", "completed_at"}}

    requested = values.pop("status", None)
    reject_nulls(Deliverable, values)
    verifying = False
    if requested is not None:
        requested = DeliverableStatus.parse(requested)
        if ensure_deliverable_transition(deliverable.status, requested):
            if requested == DeliverableStatus.VERIFIED:
                verifying = True
            else:
                values["status"] = requested

    completed = False
    async with repo.unit_of_work():
        if values:
            await repo.update(deliverable, **values)
        if verifying:
            completed = await _verify(repo, deliverable)

    logger.info(
        "deliverable.updated",
        deliverable_id=deliverable.id,
        status=str(deliverable.status),
        fields=sorted(values),
        campaign_completed=completed,
    )
    return DeliverableUpdate(deliverable=deliverable, campaign_completed=completed)


async def delete_deliverable(repo: Repository, deliverable_id: str) -> None:
    deliverable = await get_or_404(repo, Deliverable, deliverable_id)
    async with repo.unit_of_work():
        proofs = await repo.delete_where(Proof, where={"deliverable_id": deliverable.id})
        await repo.delete(deliverable)
    logger.info("deliverable.deleted", deliverable_id=deliverable_id, proofs=proofs)


async def delete_campaign(repo: Repository, campaign_id: str) -> None:
    """Remove a campaign with its deliverables and their proofs, all or nothing."""
    campaign = await get_or_404(repo, Campaign, campaign_id)
    deliverables = await repo.find(Deliverable, where={"campaign_id": campaign.id}, order_by=None)

    async with repo.unit_of_work():
        proofs = 0
        for deliverable in deliverables:
            proofs += await repo.delete_where(Proof, where={"deliverable_id": deliverable.id})
        await repo.delete_where(Deliverable, where={"campaign_id": campaign.id})
        await repo.delete(campaign)

    logger.info(
        "campaign.deleted",
        campaign_id=campaign_id,
        deliverables=len(deliverables),
        proofs=proofs,
    )
