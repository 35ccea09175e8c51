# sponsorship/middleware/session.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware

from sponsorship.core.config import settings
from sponsorship.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)


class SessionTokenManager:
    """Signs and reads the ``user_session`` cookie value."""

    @staticmethod
    def create_session_token(user_id: str, max_age: Optional[int] = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + timedelta(seconds=max_age or settings.session_max_age_seconds),
            "type": "session",
        }
        return jwt.encode(payload, settings.secret_key, algorithm=settings.session_algorithm)

    @staticmethod
    def read_session_token(token: Optional[str]) -> Optional[str]:
        """Return the user id for a valid token, None otherwise."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.session_algorithm])
        except JWTError as exc:
            logger.info("session.invalid_token", error=str(exc))
            return None
        if payload.get("type") != "session":
            return None
        return payload.get("sub")


def set_session_cookie(response: Response, user_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=SessionTokenManager.create_session_token(user_id),
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
    )


class SessionMiddleware(BaseHTTPMiddleware):
    """Decodes the session cookie into ``request.state.user_id``.

    Requests without a valid cookie continue anonymously; routes decide
    whether they need a user.
    """

    async def dispatch(self, request: Request, call_next):
        token = request.cookies.get(settings.session_cookie_name)
        request.state.user_id = SessionTokenManager.read_session_token(token)
        return await call_next(request)


def get_session_user_id(request: Request) -> Optional[str]:
    """Route dependency: the session user, if any.

    Falls back to decoding the cookie when the middleware is not installed.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        user_id = SessionTokenManager.read_session_token(request.cookies.get(settings.session_cookie_name))
    return user_id
