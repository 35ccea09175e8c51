# sponsorship/routes/campaigns.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.models.enums import CampaignStatus
from sponsorship.schemas.campaign import (
    CampaignCreate,
    CampaignDetail,
    CampaignEnvelope,
    CampaignList,
    CampaignSummary,
    CampaignUpdate,
)
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.deliverable import DeliverableDetail
from sponsorship.schemas.profiles import CreatorProfileResponse, SponsorProfileResponse
from sponsorship.schemas.proof import ProofResponse
from sponsorship.services import campaigns, workflow
from sponsorship.services.campaigns import CampaignView, DeliverableView

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


def deliverable_detail(view: DeliverableView) -> DeliverableDetail:
    return DeliverableDetail.model_validate(view.deliverable).model_copy(
        update={"proofs": [ProofResponse.model_validate(p) for p in view.proofs]}
    )


def _summary_fields(view: CampaignView) -> dict:
    return {
        "sponsor": SponsorProfileResponse.model_validate(view.sponsor) if view.sponsor else None,
        "creator": CreatorProfileResponse.model_validate(view.creator) if view.creator else None,
    }


def campaign_detail(view: CampaignView) -> CampaignDetail:
    fields = _summary_fields(view)
    fields["deliverables"] = [deliverable_detail(d) for d in view.deliverables]
    return CampaignDetail.model_validate(view.campaign).model_copy(update=fields)


@router.get("", response_model=CampaignList)
async def list_campaigns(
    sponsor_id: Optional[str] = Query(None),
    creator_id: Optional[str] = Query(None),
    status: Optional[CampaignStatus] = Query(None),
    user_id: Optional[str] = Query(None),
    repo: Repository = Depends(get_repository),
) -> CampaignList:
    views = await campaigns.list_campaigns(
        repo,
        sponsor_id=sponsor_id,
        creator_id=creator_id,
        status=status,
        user_id=user_id,
    )
    return CampaignList(
        campaigns=[
            CampaignSummary.model_validate(view.campaign).model_copy(update=_summary_fields(view))
            for view in views
        ]
    )


@router.post("", response_model=CampaignEnvelope, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    payload: CampaignCreate,
    repo: Repository = Depends(get_repository),
) -> CampaignEnvelope:
    view = await campaigns.create_campaign(
        repo,
        payload.model_dump(exclude={"deliverables"}),
        deliverables=[d.model_dump() for d in payload.deliverables],
    )
    return CampaignEnvelope(campaign=campaign_detail(view))


@router.get("/{campaign_id}", response_model=CampaignEnvelope)
async def get_campaign(campaign_id: str, repo: Repository = Depends(get_repository)) -> CampaignEnvelope:
    view = await campaigns.get_campaign_view(repo, campaign_id)
    return CampaignEnvelope(campaign=campaign_detail(view))


@router.put("/{campaign_id}", response_model=CampaignEnvelope)
async def update_campaign(
    campaign_id: str,
    payload: CampaignUpdate,
    repo: Repository = Depends(get_repository),
) -> CampaignEnvelope:
    view = await campaigns.update_campaign(repo, campaign_id, payload.model_dump(exclude_unset=True))
    return CampaignEnvelope(campaign=campaign_detail(view))


@router.delete("/{campaign_id}", response_model=MessageResponse)
async def delete_campaign(campaign_id: str, repo: Repository = Depends(get_repository)) -> MessageResponse:
    await workflow.delete_campaign(repo, campaign_id)
    return MessageResponse(message="Campaign deleted")
