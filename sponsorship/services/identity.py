# sponsorship/services/identity.py
"""
Client-side identity bootstrap.

The identity provider injects the current user's context at some point
after start-up, under one of several names. ``IdentityResolver`` polls a
fixed, prioritized list of probes on an interval until one yields a valid
identity or the attempt budget runs out. The loop is a plain coroutine, so
cancelling the task that awaits it stops polling immediately.
"""
from __future__ import annotations

import asyncio
import inspect
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Union

from sponsorship.core.config import settings
from sponsorship.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)

IDENTITY_ENV_VAR = "SPONSORSHIP_IDENTITY"

RawIdentity = Optional[Mapping[str, Any]]
ProbeFn = Callable[[], Union[RawIdentity, Awaitable[RawIdentity]]]


@dataclass(frozen=True)
class IdentityContext:
    fid: Optional[str]
    username: Optional[str] = None
    display_name: Optional[str] = None
    pfp_url: Optional[str] = None
    # Account id on the secondary identity provider
    provider_user_id: Optional[str] = None
    source: str = "unknown"

    @property
    def has_fid(self) -> bool:
        if self.fid is None or not str(self.fid).strip():
            return False
        try:
            return int(str(self.fid)) != 0
        except ValueError:
            # Non-numeric ids are still identifiers
            return True

    @property
    def is_valid(self) -> bool:
        return self.has_fid or bool(self.provider_user_id) or bool(self.username)

    def to_auth_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"fid": self.fid}
        if self.username:
            payload["username"] = self.username
        if self.display_name:
            payload["displayName"] = self.display_name
        if self.pfp_url:
            payload["pfpUrl"] = self.pfp_url
        return payload


def _first(raw: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def normalize_identity(raw: RawIdentity, source: str = "unknown") -> Optional[IdentityContext]:
    """Build an identity from a provider payload, or None if it names nobody.

    Accepts the bare user object or one wrapped as ``{"user": {...}}``, and
    both camelCase and snake_case field spellings.
    """
    if not raw or not isinstance(raw, Mapping):
        return None
    user = raw.get("user")
    if isinstance(user, Mapping):
        raw = user

    identity = IdentityContext(
        fid=_first(raw, "fid"),
        username=_first(raw, "username"),
        display_name=_first(raw, "displayName", "display_name"),
        pfp_url=_first(raw, "pfpUrl", "pfp_url"),
        provider_user_id=_first(raw, "renaissanceUserId", "provider_user_id", "providerUserId"),
        source=source,
    )
    return identity if identity.is_valid else None


class IdentityProbe:
    """A named source the resolver asks for the current user context."""

    def __init__(self, name: str, fn: ProbeFn):
        self.name = name
        self._fn = fn

    async def __call__(self) -> RawIdentity:
        result = self._fn()
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"<IdentityProbe({self.name!r})>"


def explicit_probe(
    fid: Optional[Union[int, str]],
    username: Optional[str] = None,
    display_name: Optional[str] = None,
    pfp_url: Optional[str] = None,
) -> IdentityProbe:
    def _probe() -> RawIdentity:
        if fid is None and not username:
            return None
        return {"fid": fid, "username": username, "displayName": display_name, "pfpUrl": pfp_url}

    return IdentityProbe("explicit", _probe)


def env_probe(var_name: str = IDENTITY_ENV_VAR, environ: Optional[Mapping[str, str]] = None) -> IdentityProbe:
    def _probe() -> RawIdentity:
        value = (environ if environ is not None else os.environ).get(var_name)
        if not value:
            return None
        return json.loads(value)

    return IdentityProbe(f"env:{var_name}", _probe)


def file_probe(path: Union[str, Path]) -> IdentityProbe:
    """Reads a JSON context file that the provider may write after start-up."""
    path = Path(path)

    def _probe() -> RawIdentity:
        if not path.is_file():
            return None
        text = path.read_text(encoding="utf-8").strip()
        return json.loads(text) if text else None

    return IdentityProbe(f"file:{path}", _probe)


class ReadySignal:
    """One-shot notification that the client finished bootstrapping."""

    def __init__(self, callback: Optional[Callable[[], Any]] = None):
        self._callback = callback
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    async def fire(self) -> bool:
        if self._fired:
            return False
        self._fired = True
        if self._callback is not None:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        logger.info("identity.ready_signalled")
        return True


class IdentityResolver:
    """Bounded polling over identity probes, tried in order on every attempt."""

    def __init__(
        self,
        probes: Sequence[IdentityProbe],
        interval_ms: Optional[int] = None,
        max_attempts: Optional[int] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if not probes:
            raise ValueError("at least one identity probe is required")
        self.probes = list(probes)
        self.interval = (interval_ms or settings.identity_poll_interval_ms) / 1000.0
        self.max_attempts = max_attempts or settings.identity_poll_max_attempts
        self._sleep = sleep
        self.attempts = 0

    async def probe_once(self) -> Optional[IdentityContext]:
        for probe in self.probes:
            try:
                raw = await probe()
            except (OSError, ValueError) as exc:
                logger.warning("identity.probe_failed", probe=probe.name, error=str(exc))
                continue
            identity = normalize_identity(raw, source=probe.name)
            if identity is not None:
                return identity
        return None

    async def resolve(self) -> Optional[IdentityContext]:
        """Poll until a probe yields a valid identity; None once attempts run out."""
        self.attempts = 0
        while self.attempts < self.max_attempts:
            self.attempts += 1
            identity = await self.probe_once()
            if identity is not None:
                logger.info(
                    "identity.resolved",
                    source=identity.source,
                    fid=identity.fid,
                    attempt=self.attempts,
                )
                return identity
            logger.debug("identity.poll", attempt=self.attempts, max_attempts=self.max_attempts)
            if self.attempts < self.max_attempts:
                await self._sleep(self.interval)

        logger.warning("identity.unresolved", attempts=self.attempts)
        return None
