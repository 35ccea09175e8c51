# sponsorship/services/campaigns.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sponsorship.core.exceptions import ValidationError
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository
from sponsorship.models.campaign import Campaign, Deliverable, Proof
from sponsorship.models.creator import CreatorProfile
from sponsorship.models.enums import (
    CampaignStatus,
    CompensationType,
    DeliverableStatus,
    DeliverableType,
    VerificationMethod,
)
from sponsorship.models.sponsor import SponsorProfile
from sponsorship.services.common import get_or_404, reject_nulls
from sponsorship.services.transitions import ensure_campaign_transition

logger = get_structlog_logger(__name__)

# A new campaign may start in one of these
INITIAL_STATUSES = frozenset({CampaignStatus.DRAFT, CampaignStatus.ACTIVE})


@dataclass
class DeliverableView:
    deliverable: Deliverable
    proofs: List[Proof] = field(default_factory=list)


@dataclass
class CampaignView:
    campaign: Campaign
    sponsor: Optional[SponsorProfile] = None
    creator: Optional[CreatorProfile] = None
    deliverables: List[DeliverableView] = field(default_factory=list)


def validate_compensation(
    compensation_type: Any,
    cash_amount: Optional[float],
    credit_amount: Optional[float],
) -> CompensationType:
    """Amounts must match the compensation type they are paid under."""
    compensation_type = CompensationType.parse(compensation_type)
    if cash_amount is not None and not compensation_type.includes_cash:
        raise ValidationError(
            f"cash_amount is not allowed for {compensation_type.value} compensation",
            details={"field": "cash_amount", "compensation_type": compensation_type.value},
        )
    if credit_amount is not None and not compensation_type.includes_credit:
        raise ValidationError(
            f"credit_amount is not allowed for {compensation_type.value} compensation",
            details={"field": "credit_amount", "compensation_type": compensation_type.value},
        )
    return compensation_type


async def list_campaigns(
    repo: Repository,
    sponsor_id: Optional[str] = None,
    creator_id: Optional[str] = None,
    status: Optional[Any] = None,
    user_id: Optional[str] = None,
) -> List[CampaignView]:
    """Campaigns newest first. ``user_id`` matches either side of the campaign."""
    where: Dict[str, Any] = {}
    if sponsor_id:
        where["sponsor_id"] = sponsor_id
    if creator_id:
        where["creator_id"] = creator_id
    if status:
        where["status"] = CampaignStatus.parse(status)

    any_of: List[Dict[str, Any]] = []
    if user_id:
        sponsor = await repo.find_one(SponsorProfile, where={"user_id": user_id, "is_active": True})
        creator = await repo.find_one(CreatorProfile, where={"user_id": user_id, "is_active": True})
        if sponsor is not None:
            any_of.append({"sponsor_id": sponsor.id})
        if creator is not None:
            any_of.append({"creator_id": creator.id})
        if not any_of:
            return []

    campaigns = await repo.find(Campaign, where=where, any_of=any_of or None)
    return [await _summary(repo, campaign) for campaign in campaigns]


async def _summary(repo: Repository, campaign: Campaign) -> CampaignView:
    return CampaignView(
        campaign=campaign,
        sponsor=await repo.get(SponsorProfile, campaign.sponsor_id),
        creator=await repo.get(CreatorProfile, campaign.creator_id) if campaign.creator_id else None,
    )


async def get_campaign_view(repo: Repository, campaign_id: str) -> CampaignView:
    campaign = await get_or_404(repo, Campaign, campaign_id)
    view = await _summary(repo, campaign)
    deliverables = await repo.find(
        Deliverable,
        where={"campaign_id": campaign.id},
        order_by="created_at",
        descending=False,
    )
    for deliverable in deliverables:
        proofs = await repo.find(Proof, where={"deliverable_id": deliverable.id})
        view.deliverables.append(DeliverableView(deliverable=deliverable, proofs=proofs))
    return view


async def create_campaign(
    repo: Repository,
    fields: Dict[str, Any],
    deliverables: Optional[List[Dict[str, Any]]] = None,
) -> CampaignView:
    values = dict(fields)
    sponsor = await get_or_404(repo, SponsorProfile, values.get("sponsor_id"))
    if values.get("creator_id"):
        await get_or_404(repo, CreatorProfile, values["creator_id"])

    values["compensation_type"] = validate_compensation(
        values.get("compensation_type"),
        values.get("cash_amount"),
        values.get("credit_amount"),
    )

    status = CampaignStatus.parse(values.pop("status", None) or CampaignStatus.DRAFT)
    if status not in INITIAL_STATUSES:
        raise ValidationError(
            f"A campaign cannot be created as {status.value}",
            details={"field": "status", "allowed": sorted(s.value for s in INITIAL_STATUSES)},
        )

    async with repo.unit_of_work():
        campaign = await repo.add(Campaign(status=status, **values))
        for draft in deliverables or []:
            await repo.add(
                Deliverable(
                    campaign_id=campaign.id,
                    type=DeliverableType.parse(draft.get("type") or DeliverableType.CUSTOM),
                    title=draft["title"],
                    description=draft.get("description"),
                    deadline=draft.get("deadline"),
                    verification_method=VerificationMethod.parse(
                        draft.get("verification_method") or VerificationMethod.MANUAL_UPLOAD
                    ),
                    status=DeliverableStatus.PENDING,
                )
            )

    logger.info(
        "campaign.created",
        campaign_id=campaign.id,
        sponsor_id=sponsor.id,
        status=status.value,
        deliverables=len(deliverables or []),
    )
    return await get_campaign_view(repo, campaign.id)


async def update_campaign(repo: Repository, campaign_id: str, changes: Dict[str, Any]) -> CampaignView:
    campaign = await get_or_404(repo, Campaign, campaign_id)
    values = {key: value for key, value in changes.items() if key not in {"id", "sponsor_id"}}

    if "status" in values:
        requested = values.pop("status")
        if requested is not None:
            requested = CampaignStatus.parse(requested)
            if ensure_campaign_transition(campaign.status, requested):
                values["status"] = requested

    reject_nulls(Campaign, values)

    if values.get("creator_id"):
        await get_or_404(repo, CreatorProfile, values["creator_id"])

    if {"compensation_type", "cash_amount", "credit_amount"} & values.keys():
        compensation_type = validate_compensation(
            values.get("compensation_type", campaign.compensation_type),
            values.get("cash_amount", campaign.cash_amount),
            values.get("credit_amount", campaign.credit_amount),
        )
        if "compensation_type" in values:
            values["compensation_type"] = compensation_type

    previous = campaign.status
    if values:
        async with repo.unit_of_work():
            await repo.update(campaign, **values)

    if "status" in values:
        logger.info(
            "campaign.status_changed",
            campaign_id=campaign.id,
            previous=str(previous),
            status=str(campaign.status),
        )
    logger.info("campaign.updated", campaign_id=campaign.id, fields=sorted(values))
    return await get_campaign_view(repo, campaign.id)
