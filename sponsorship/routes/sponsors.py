# sponsorship/routes/sponsors.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.middleware.session import get_session_user_id
from sponsorship.models.sponsor import SponsorProfile
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.profiles import (
    SponsorProfileCreate,
    SponsorProfileEnvelope,
    SponsorProfileResponse,
    SponsorProfileUpdate,
)
from sponsorship.services import profiles
from sponsorship.services.common import get_or_404, resolve_acting_user

router = APIRouter(prefix="/sponsors", tags=["sponsors"])


@router.get("/profile", response_model=SponsorProfileEnvelope)
async def get_my_sponsor_profile(
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> SponsorProfileEnvelope:
    acting = resolve_acting_user(user_id, session_user_id)
    profile = await profiles.get_active_profile(repo, SponsorProfile, acting)
    return SponsorProfileEnvelope(profile=SponsorProfileResponse.model_validate(profile) if profile else None)


@router.post("/profile", response_model=SponsorProfileEnvelope, status_code=status.HTTP_201_CREATED)
async def create_sponsor_profile(
    payload: SponsorProfileCreate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> SponsorProfileEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    profile = await profiles.create_profile(
        repo,
        SponsorProfile,
        acting,
        payload.model_dump(exclude={"user_id"}),
    )
    return SponsorProfileEnvelope(profile=SponsorProfileResponse.model_validate(profile))


@router.get("/{profile_id}", response_model=SponsorProfileEnvelope)
async def get_sponsor_profile(
    profile_id: str,
    repo: Repository = Depends(get_repository),
) -> SponsorProfileEnvelope:
    profile = await get_or_404(repo, SponsorProfile, profile_id)
    return SponsorProfileEnvelope(profile=SponsorProfileResponse.model_validate(profile))


@router.put("/{profile_id}", response_model=SponsorProfileEnvelope)
async def update_sponsor_profile(
    profile_id: str,
    payload: SponsorProfileUpdate,
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> SponsorProfileEnvelope:
    acting = resolve_acting_user(payload.user_id, session_user_id)
    profile = await profiles.update_profile(
        repo,
        SponsorProfile,
        profile_id,
        acting,
        payload.model_dump(exclude_unset=True, exclude={"user_id"}),
    )
    return SponsorProfileEnvelope(profile=SponsorProfileResponse.model_validate(profile))


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_sponsor_profile(
    profile_id: str,
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> MessageResponse:
    acting = resolve_acting_user(user_id, session_user_id)
    await profiles.deactivate_profile(repo, SponsorProfile, profile_id, acting)
    return MessageResponse(message="Sponsor profile deleted")
