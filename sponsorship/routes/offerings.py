# sponsorship/routes/offerings.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.middleware.session import get_session_user_id
from sponsorship.models.creator import Offering
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.offering import (
    OfferingCreate,
    OfferingEnvelope,
    OfferingList,
    OfferingResponse,
    OfferingUpdate,
    OfferingWithCreator,
)
from sponsorship.schemas.profiles import CreatorProfileResponse
from sponsorship.services import offerings
from sponsorship.services.common import get_or_404, resolve_acting_user

router = APIRouter(prefix="/offerings", tags=["offerings"])


@router.get("", response_model=OfferingList)
async def list_offerings(
    creator_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    repo: Repository = Depends(get_repository),
) -> OfferingList:
    rows = await offerings.list_offerings(repo, creator_id=creator_id, user_id=user_id)
    return OfferingList(
        offerings=[
            OfferingWithCreator.model_validate(offering).model_copy(
                update={"creator": CreatorProfileResponse.model_validate(creator) if creator else None}
            )
            for offering, creator in rows
        ]
    )


@router.post("", response_model=OfferingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_offering(
    payload: OfferingCreate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> OfferingEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    offering = await offerings.create_offering(
        repo,
        acting,
        payload.creator_id,
        payload.model_dump(exclude={"user_id", "creator_id"}),
    )
    return OfferingEnvelope(offering=OfferingResponse.model_validate(offering))


@router.get("/{offering_id}", response_model=OfferingEnvelope)
async def get_offering(offering_id: str, repo: Repository = Depends(get_repository)) -> OfferingEnvelope:
    offering = await get_or_404(repo, Offering, offering_id)
    return OfferingEnvelope(offering=OfferingResponse.model_validate(offering))


@router.put("/{offering_id}", response_model=OfferingEnvelope)
async def update_offering(
    offering_id: str,
    payload: OfferingUpdate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> OfferingEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    offering = await offerings.update_offering(
        repo,
        offering_id,
        acting,
        payload.model_dump(exclude_unset=True, exclude={"user_id"}),
    )
    return OfferingEnvelope(offering=OfferingResponse.model_validate(offering))


@router.delete("/{offering_id}", response_model=MessageResponse)
async def delete_offering(
    offering_id: str,
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> MessageResponse:
    acting = resolve_acting_user(user_id, session_user_id)
    await offerings.deactivate_offering(repo, offering_id, acting)
    return MessageResponse(message="Offering deleted")
