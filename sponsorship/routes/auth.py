# sponsorship/routes/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository, get_repository
from sponsorship.middleware.session import clear_session_cookie, get_session_user_id, set_session_cookie
from sponsorship.schemas.common import MessageResponse
from sponsorship.schemas.user import AuthResponse, MiniAppAuthRequest, UserEnvelope, UserResponse
from sponsorship.services import users

logger = get_structlog_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/auth/miniapp", response_model=AuthResponse)
async def miniapp_auth(
    payload: MiniAppAuthRequest,
    response: Response,
    repo: Repository = Depends(get_repository),
) -> AuthResponse:
    """Upsert the user behind a mini-app identity and start a session."""
    user = await users.upsert_user(
        repo,
        fid=str(payload.fid),
        username=payload.username or None,
        display_name=payload.display_name or None,
        pfp_url=payload.pfp_url or None,
    )
    set_session_cookie(response, user.id)
    logger.info("auth.miniapp.authenticated", user_id=user.id, fid=user.fid)
    return AuthResponse(user=UserResponse.model_validate(user))


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    clear_session_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/user/me", response_model=UserEnvelope)
async def current_user(
    user_id: Optional[str] = Query(None),
    session_user_id: Optional[str] = Depends(get_session_user_id),
    repo: Repository = Depends(get_repository),
) -> UserEnvelope:
    # An unknown user is an empty result, not an error
    user = None
    if user_id:
        user = await users.get_user(repo, user_id)
    if user is None and session_user_id:
        user = await users.get_user(repo, session_user_id)
    if user is None:
        return UserEnvelope(user=None)
    return UserEnvelope(user=UserResponse.model_validate(user))
