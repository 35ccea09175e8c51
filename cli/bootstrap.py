# cli/bootstrap.py
"""
Client-side operations behind the CLI commands: API health, identity login
and schema creation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from sponsorship.core.config import settings
from sponsorship.core.logging import get_structlog_logger
from sponsorship.services.identity import (
    IdentityProbe,
    IdentityResolver,
    ReadySignal,
    env_probe,
    explicit_probe,
    file_probe,
)

logger = get_structlog_logger(__name__)

DEFAULT_CONTEXT_FILE = Path.home() / ".sponsorship" / "identity.json"


@dataclass
class CommandResult:
    """Structured result from CLI operations."""
    success: bool
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


def _api_url(api_url: Optional[str]) -> str:
    return (api_url or settings.api_base_url).rstrip("/")


async def check_api_health(
    api_url: Optional[str] = None,
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CommandResult:
    base = _api_url(api_url)
    async with httpx.AsyncClient(base_url=base, timeout=timeout, transport=transport) as client:
        try:
            response = await client.get(f"{settings.api_prefix}/health")
        except httpx.RequestError as exc:
            return CommandResult(False, f"API not accessible at {base}: {exc}", {"url": base})

    if response.status_code != 200:
        return CommandResult(False, f"Health check returned {response.status_code}", {"url": base})

    body = response.json()
    healthy = body.get("status") == "healthy"
    message = "API healthy" if healthy else f"API reachable but {body.get('status')}"
    return CommandResult(healthy, message, {"url": base, "checks": body.get("checks", {})})


def build_probes(
    fid: Optional[str] = None,
    username: Optional[str] = None,
    context_file: Optional[Path] = None,
) -> List[IdentityProbe]:
    """Identity sources in priority order."""
    probes = []
    if fid is not None or username:
        probes.append(explicit_probe(fid, username=username))
    probes.append(env_probe())
    probes.append(file_probe(context_file or DEFAULT_CONTEXT_FILE))
    return probes


async def login(
    probes: List[IdentityProbe],
    api_url: Optional[str] = None,
    ready: Optional[ReadySignal] = None,
    resolver: Optional[IdentityResolver] = None,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CommandResult:
    """Resolve the current identity, authenticate it, then signal ready once."""
    resolver = resolver or IdentityResolver(probes)
    ready = ready or ReadySignal()

    identity = await resolver.resolve()
    if identity is None:
        await ready.fire()
        return CommandResult(False, f"No identity found after {resolver.attempts} attempts")
    if not identity.has_fid:
        await ready.fire()
        return CommandResult(False, "Identity has no fid to authenticate with", {"source": identity.source})

    base = _api_url(api_url)
    async with httpx.AsyncClient(base_url=base, timeout=timeout, transport=transport) as client:
        try:
            response = await client.post(f"{settings.api_prefix}/auth/miniapp", json=identity.to_auth_payload())
        except httpx.RequestError as exc:
            await ready.fire()
            return CommandResult(False, f"API not accessible at {base}: {exc}", {"url": base})

    await ready.fire()

    if response.status_code != 200:
        body = response.json() if response.content else {}
        return CommandResult(
            False,
            body.get("message", f"Authentication failed with {response.status_code}"),
            {"status_code": response.status_code},
        )

    user = response.json().get("user", {})
    logger.info("cli.login.succeeded", user_id=user.get("id"), source=identity.source)
    return CommandResult(
        True,
        f"Logged in as {user.get('username') or user.get('fid')}",
        {
            "user": user,
            "source": identity.source,
            "session": response.cookies.get(settings.session_cookie_name),
        },
    )


async def init_database() -> CommandResult:
    from sqlalchemy.exc import SQLAlchemyError

    from sponsorship.db.session import create_schema, dispose_engine

    try:
        await create_schema()
    except (SQLAlchemyError, OSError) as exc:
        return CommandResult(False, f"Schema creation failed: {exc}")
    finally:
        await dispose_engine()
    return CommandResult(True, "Database schema created")
