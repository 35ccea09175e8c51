# sponsorship/routes/creators.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from sponsorship.db.repository import Repository, get_repository
from sponsorship.middleware.session import get_session_user_id
from sponsorship.models.creator import CreatorProfile
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.offering import OfferingResponse
from sponsorship.schemas.profiles import (
    CreatorProfileCreate,
    CreatorProfileEnvelope,
    CreatorProfileResponse,
    CreatorProfileUpdate,
)
from sponsorship.schemas.user import UserResponse
from sponsorship.services import profiles
from sponsorship.services.common import get_or_404, resolve_acting_user

router = APIRouter(prefix="/creators", tags=["creators"])


class CreatorListing(CreatorProfileResponse):
    offerings: List[OfferingResponse] = []
    user: Optional[UserResponse] = None


class CreatorList(BaseModel):
    creators: List[CreatorListing]


@router.get("", response_model=CreatorList)
async def discover_creators(repo: Repository = Depends(get_repository)) -> CreatorList:
    """Active creators, highest reputation first."""
    rows = await profiles.discover_creators(repo)
    return CreatorList(
        creators=[
            CreatorListing.model_validate(row["profile"]).model_copy(
                update={
                    "offerings": [OfferingResponse.model_validate(o) for o in row["offerings"]],
                    "user": UserResponse.model_validate(row["user"]) if row["user"] else None,
                }
            )
            for row in rows
        ]
    )


@router.get("/profile", response_model=CreatorProfileEnvelope)
async def get_my_creator_profile(
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> CreatorProfileEnvelope:
    acting = resolve_acting_user(user_id, session_user_id)
    profile = await profiles.get_active_profile(repo, CreatorProfile, acting)
    return CreatorProfileEnvelope(profile=CreatorProfileResponse.model_validate(profile) if profile else None)


@router.post("/profile", response_model=CreatorProfileEnvelope, status_code=status.HTTP_201_CREATED)
async def create_creator_profile(
    payload: CreatorProfileCreate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> CreatorProfileEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    profile = await profiles.create_profile(
        repo,
        CreatorProfile,
        acting,
        payload.model_dump(exclude={"user_id"}),
    )
    return CreatorProfileEnvelope(profile=CreatorProfileResponse.model_validate(profile))


@router.get("/{profile_id}", response_model=CreatorProfileEnvelope)
async def get_creator_profile(
    profile_id: str,
    repo: Repository = Depends(get_repository),
) -> CreatorProfileEnvelope:
    profile = await get_or_404(repo, CreatorProfile, profile_id)
    return CreatorProfileEnvelope(profile=CreatorProfileResponse.model_validate(profile))


@router.put("/{profile_id}", response_model=CreatorProfileEnvelope)
async def update_creator_profile(
    profile_id: str,
    payload: CreatorProfileUpdate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> CreatorProfileEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    profile = await profiles.update_profile(
        repo,
        CreatorProfile,
        profile_id,
        acting,
        payload.model_dump(exclude_unset=True, exclude={"user_id"}),
    )
    return CreatorProfileEnvelope(profile=CreatorProfileResponse.model_validate(profile))


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_creator_profile(
    profile_id: str,
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> MessageResponse:
    acting = resolve_acting_user(user_id, session_user_id)
    await profiles.deactivate_profile(repo, CreatorProfile, profile_id, acting)
    return MessageResponse(message="Creator profile deleted")
