# sponsorship/services/offerings.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sponsorship.core.exceptions import NotFoundError
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository
from sponsorship.models.creator import CreatorProfile, Offering
from sponsorship.services import profiles
from sponsorship.services.common import reject_nulls

logger = get_structlog_logger(__name__)


def _type_values(types) -> List[str]:
    return [getattr(t, "value", t) for t in types]


async def list_offerings(
    repo: Repository,
    creator_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> List[Tuple[Offering, Optional[CreatorProfile]]]:
    """Active offerings, optionally narrowed to one creator (by id or owning user)."""
    if user_id and not creator_id:
        creator = await profiles.get_active_profile(repo, CreatorProfile, user_id)
        if creator is None:
            return []
        creator_id = creator.id

    where: Dict[str, Any] = {"is_active": True}
    if creator_id:
        where["creator_id"] = creator_id

    rows = []
    creators: Dict[str, Optional[CreatorProfile]] = {}
    for offering in await repo.find(Offering, where=where):
        if offering.creator_id not in creators:
            creators[offering.creator_id] = await repo.get(CreatorProfile, offering.creator_id)
        rows.append((offering, creators[offering.creator_id]))
    return rows


async def create_offering(repo: Repository, user_id: str, creator_id: str, fields: Dict[str, Any]) -> Offering:
    creator = await profiles.get_owned_profile(repo, CreatorProfile, creator_id, user_id)
    values = dict(fields)
    values["deliverable_types"] = _type_values(values.get("deliverable_types") or [])

    async with repo.unit_of_work():
        offering = await repo.add(Offering(creator_id=creator.id, is_active=True, **values))

    logger.info("offering.created", offering_id=offering.id, creator_id=creator.id)
    return offering


async def get_owned_offering(repo: Repository, offering_id: str, user_id: str) -> Offering:
    offering = await repo.get(Offering, offering_id)
    if offering is None or not offering.is_active:
        raise NotFoundError("Offering not found", details={"resource": "offerings", "id": offering_id})
    creator = await repo.get(CreatorProfile, offering.creator_id)
    if creator is None or creator.user_id != user_id:
        raise NotFoundError("Offering not found", details={"resource": "offerings", "id": offering_id})
    return offering


async def update_offering(repo: Repository, offering_id: str, user_id: str, changes: Dict[str, Any]) -> Offering:
    offering = await get_owned_offering(repo, offering_id, user_id)
    values = {key: value for key, value in changes.items() if key not in {"id", "creator_id", "is_active"}}
    reject_nulls(Offering, values)
    if "deliverable_types" in values:
        values["deliverable_types"] = _type_values(values["deliverable_types"])
    if values:
        async with repo.unit_of_work():
            await repo.update(offering, **values)
        logger.info("offering.updated", offering_id=offering.id, fields=sorted(values))
    return offering


async def deactivate_offering(repo: Repository, offering_id: str, user_id: str) -> Offering:
    offering = await get_owned_offering(repo, offering_id, user_id)
    async with repo.unit_of_work():
        await repo.update(offering, is_active=False)
    logger.info("offering.deactivated", offering_id=offering.id)
    return offering
