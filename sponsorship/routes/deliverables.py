# sponsorship/routes/deliverables.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.models.enums import DeliverableStatus
from sponsorship.routes.campaigns import deliverable_detail
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.deliverable import (
    DeliverableCreate,
    DeliverableDetail,
    DeliverableEnvelope,
    DeliverableList,
    DeliverableResponse,
    DeliverableUpdate,
)
from sponsorship.services import deliverables, workflow

router = APIRouter(prefix="/deliverables", tags=["deliverables"])


@router.get("", response_model=DeliverableList)
async def list_deliverables(
    campaign_id: Optional[str] = Query(None),
    status: Optional[DeliverableStatus] = Query(None),
    repo: Repository = Depends(get_repository),
) -> DeliverableList:
    rows = await deliverables.list_deliverables(repo, campaign_id=campaign_id, status=status)
    return DeliverableList(deliverables=[DeliverableResponse.model_validate(d) for d in rows])


@router.post("", response_model=DeliverableEnvelope, status_code=status.HTTP_201_CREATED)
async def create_deliverable(
    payload: DeliverableCreate,
    repo: Repository = Depends(get_repository),
) -> DeliverableEnvelope:
    deliverable = await deliverables.create_deliverable(repo, payload.model_dump())
    return DeliverableEnvelope(deliverable=DeliverableDetail.model_validate(deliverable))


@router.get("/{deliverable_id}", response_model=DeliverableEnvelope)
async def get_deliverable(deliverable_id: str, repo: Repository = Depends(get_repository)) -> DeliverableEnvelope:
    view = await deliverables.get_deliverable_view(repo, deliverable_id)
    return DeliverableEnvelope(deliverable=deliverable_detail(view))


@router.put("/{deliverable_id}", response_model=DeliverableEnvelope)
async def update_deliverable(
    deliverable_id: str,
    payload: DeliverableUpdate,
    repo: Repository = Depends(get_repository),
) -> DeliverableEnvelope:
    await workflow.update_deliverable(repo, deliverable_id, payload.model_dump(exclude_unset=True))
    view = await deliverables.get_deliverable_view(repo, deliverable_id)
    return DeliverableEnvelope(deliverable=deliverable_detail(view))


@router.delete("/{deliverable_id}", response_model=MessageResponse)
async def delete_deliverable(deliverable_id: str, repo: Repository = Depends(get_repository)) -> MessageResponse:
    await workflow.delete_deliverable(repo, deliverable_id)
    return MessageResponse(message="Deliverable deleted")
