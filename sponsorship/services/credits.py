# sponsorship/services/credits.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.base import utcnow
from sponsorship.db.repository import Repository
from sponsorship.models.campaign import Campaign
from sponsorship.models.credit import Credit
from sponsorship.models.enums import CreditStatus
from sponsorship.models.sponsor import SponsorProfile
from sponsorship.models.user import User
from sponsorship.services.common import get_or_404, reject_nulls
from sponsorship.services.transitions import ensure_credit_transition

logger = get_structlog_logger(__name__)


async def list_credits(
    repo: Repository,
    sponsor_id: Optional[str] = None,
    recipient_id: Optional[str] = None,
    status: Optional[Any] = None,
    user_id: Optional[str] = None,
) -> List[Credit]:
    """Credits newest first. ``user_id`` matches credits the user issued or holds."""
    where: Dict[str, Any] = {}
    if sponsor_id:
        where["sponsor_id"] = sponsor_id
    if recipient_id:
        where["recipient_id"] = recipient_id
    if status:
        where["status"] = CreditStatus.parse(status)

    any_of: Optional[List[Dict[str, Any]]] = None
    if user_id:
        any_of = [{"recipient_id": user_id}]
        sponsor = await repo.find_one(SponsorProfile, where={"user_id": user_id, "is_active": True})
        if sponsor is not None:
            any_of.append({"sponsor_id": sponsor.id})

    return await repo.find(Credit, where=where, any_of=any_of)


async def issue_credit(repo: Repository, fields: Dict[str, Any]) -> Credit:
    values = dict(fields)
    await get_or_404(repo, SponsorProfile, values.get("sponsor_id"))
    if values.get("campaign_id"):
        await get_or_404(repo, Campaign, values["campaign_id"])
    if values.get("recipient_id"):
        await get_or_404(repo, User, values["recipient_id"])

    async with repo.unit_of_work():
        credit = await repo.add(Credit(status=CreditStatus.ACTIVE, **values))

    logger.info(
        "credit.issued",
        credit_id=credit.id,
        sponsor_id=credit.sponsor_id,
        recipient_id=credit.recipient_id,
        value=credit.value,
    )
    return credit


def _status_fields(credit: Credit, requested: CreditStatus) -> Dict[str, Any]:
    if not ensure_credit_transition(credit.status, requested):
        return {}
    values: Dict[str, Any] = {"status": requested}
    if requested == CreditStatus.REDEEMED:
        values["redeemed_at"] = utcnow()
    return values


async def update_credit(repo: Repository, credit_id: str, changes: Dict[str, Any]) -> Credit:
    credit = await get_or_404(repo, Credit, credit_id)
    values = {
        key: value
        for key, value in changes.items()
        if key not in {"id", "sponsor_id", "campaign_id", "status", "redeemed_at"}
    }
    reject_nulls(Credit, values)
    if values.get("recipient_id"):
        await get_or_404(repo, User, values["recipient_id"])

    requested = changes.get("status")
    if requested is not None:
        values.update(_status_fields(credit, CreditStatus.parse(requested)))

    if values:
        async with repo.unit_of_work():
            await repo.update(credit, **values)
        logger.info("credit.updated", credit_id=credit.id, status=str(credit.status), fields=sorted(values))
    return credit


async def transition_credit(repo: Repository, credit_id: str, requested: Any) -> Credit:
    credit = await get_or_404(repo, Credit, credit_id)
    values = _status_fields(credit, CreditStatus.parse(requested))
    if values:
        async with repo.unit_of_work():
            await repo.update(credit, **values)
        logger.info("credit.status_changed", credit_id=credit.id, status=str(credit.status))
    return credit


async def redeem_credit(repo: Repository, credit_id: str) -> Credit:
    return await transition_credit(repo, credit_id, CreditStatus.REDEEMED)


async def cancel_credit(repo: Repository, credit_id: str) -> Credit:
    return await transition_credit(repo, credit_id, CreditStatus.CANCELLED)


async def expire_credit(repo: Repository, credit_id: str) -> Credit:
    return await transition_credit(repo, credit_id, CreditStatus.EXPIRED)
