# sponsorship/services/profiles.py
"""
Sponsor and creator profile management.

Both roles share the same rules: one active profile per (user, role),
owner-only writes, and soft deletion through ``is_active``. A write by
someone other than the owner is reported as not-found so profile ids do
not leak ownership.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, Union

from sponsorship.core.exceptions import ConflictError, NotFoundError
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository
from sponsorship.models.creator import CreatorProfile, Offering
from sponsorship.models.sponsor import SponsorProfile
from sponsorship.models.user import User
from sponsorship.services.common import get_or_404, label_for, reject_nulls

logger = get_structlog_logger(__name__)

Profile = Union[SponsorProfile, CreatorProfile]

# Never writable through create/update payloads
_PROTECTED_FIELDS = {"id", "user_id", "is_active", "reputation_score", "completed_campaigns", "created_at", "updated_at"}


def _role(model: Type[Profile]) -> str:
    return "sponsor" if model is SponsorProfile else "creator"


def _clean(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if key not in _PROTECTED_FIELDS}


async def get_active_profile(repo: Repository, model: Type[Profile], user_id: str) -> Optional[Profile]:
    return await repo.find_one(model, where={"user_id": user_id, "is_active": True})


async def create_profile(repo: Repository, model: Type[Profile], user_id: str, fields: Dict[str, Any]) -> Profile:
    role = _role(model)
    await get_or_404(repo, User, user_id)

    existing = await get_active_profile(repo, model, user_id)
    if existing is not None:
        raise ConflictError(
            f"User already has an active {role} profile",
            details={"user_id": user_id, "profile_id": existing.id, "role": role},
        )

    values = _clean(fields)
    if model is CreatorProfile:
        values.setdefault("reputation_score", 0.0)
        values.setdefault("completed_campaigns", 0)

    async with repo.unit_of_work():
        profile = await repo.add(model(user_id=user_id, is_active=True, **values))

    logger.info(f"{role}_profile.created", profile_id=profile.id, user_id=user_id)
    return profile


async def get_owned_profile(repo: Repository, model: Type[Profile], profile_id: str, user_id: str) -> Profile:
    profile = await repo.get(model, profile_id)
    if profile is None or not profile.is_active or profile.user_id != user_id:
        raise NotFoundError(
            f"{label_for(model)} not found",
            details={"resource": model.__tablename__, "id": profile_id},
        )
    return profile


async def update_profile(
    repo: Repository,
    model: Type[Profile],
    profile_id: str,
    user_id: str,
    changes: Dict[str, Any],
) -> Profile:
    profile = await get_owned_profile(repo, model, profile_id, user_id)
    values = _clean(changes)
    reject_nulls(model, values)
    if values:
        async with repo.unit_of_work():
            await repo.update(profile, **values)
        logger.info(f"{_role(model)}_profile.updated", profile_id=profile.id, fields=sorted(values))
    return profile


async def deactivate_profile(repo: Repository, model: Type[Profile], profile_id: str, user_id: str) -> Profile:
    profile = await get_owned_profile(repo, model, profile_id, user_id)
    async with repo.unit_of_work():
        await repo.update(profile, is_active=False)
    logger.info(f"{_role(model)}_profile.deactivated", profile_id=profile.id, user_id=user_id)
    return profile


async def discover_creators(repo: Repository) -> List[Dict[str, Any]]:
    """Active creators by reputation, each with its active offerings and user."""
    creators = await repo.find(CreatorProfile, where={"is_active": True}, order_by="reputation_score", descending=True)
    listing = []
    for creator in creators:
        offerings = await repo.find(Offering, where={"creator_id": creator.id, "is_active": True})
        user = await repo.get(User, creator.user_id)
        listing.append({"profile": creator, "offerings": offerings, "user": user})
    return listing
