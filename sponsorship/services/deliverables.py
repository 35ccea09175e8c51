# sponsorship/services/deliverables.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.repository import Repository
from sponsorship.models.campaign import Campaign, Deliverable, Proof
from sponsorship.models.enums import DeliverableStatus, DeliverableType, ProofStatus, VerificationMethod
from sponsorship.models.user import User
from sponsorship.services.campaigns import DeliverableView
from sponsorship.services.common import get_or_404

logger = get_structlog_logger(__name__)


async def list_deliverables(
    repo: Repository,
    campaign_id: Optional[str] = None,
    status: Optional[Any] = None,
) -> List[Deliverable]:
    where: Dict[str, Any] = {}
    if campaign_id:
        where["campaign_id"] = campaign_id
    if status:
        where["status"] = DeliverableStatus.parse(status)
    return await repo.find(Deliverable, where=where, order_by="created_at", descending=False)


async def get_deliverable_view(repo: Repository, deliverable_id: str) -> DeliverableView:
    deliverable = await get_or_404(repo, Deliverable, deliverable_id)
    proofs = await repo.find(Proof, where={"deliverable_id": deliverable.id})
    return DeliverableView(deliverable=deliverable, proofs=proofs)


async def create_deliverable(repo: Repository, fields: Dict[str, Any]) -> Deliverable:
    values = dict(fields)
    campaign = await get_or_404(repo, Campaign, values.pop("campaign_id", None))
    values["type"] = DeliverableType.parse(values.get("type"))
    values["verification_method"] = VerificationMethod.parse(
        values.get("verification_method") or VerificationMethod.MANUAL_UPLOAD
    )
    values.pop("status", None)

    async with repo.unit_of_work():
        deliverable = await repo.add(
            Deliverable(campaign_id=campaign.id, status=DeliverableStatus.PENDING, **values)
        )

    logger.info("deliverable.created", deliverable_id=deliverable.id, campaign_id=campaign.id)
    return deliverable


async def list_proofs(
    repo: Repository,
    deliverable_id: Optional[str] = None,
    status: Optional[Any] = None,
) -> List[Tuple[Proof, Optional[User]]]:
    """Proofs newest first, each paired with its submitter."""
    where: Dict[str, Any] = {}
    if deliverable_id:
        where["deliverable_id"] = deliverable_id
    if status:
        where["status"] = ProofStatus.parse(status)

    rows = []
    for proof in await repo.find(Proof, where=where):
        rows.append((proof, await repo.get(User, proof.submitted_by)))
    return rows
