# sponsorship/services/transitions.py
"""
Status transition tables for campaigns, deliverables, proofs and credits.

Every status change in the service layer goes through one of the
``ensure_*`` functions below, so an unlisted move is rejected with
``InvalidTransitionError`` (HTTP 400) no matter which endpoint asked for it.
"""
from __future__ import annotations

from typing import Dict, FrozenSet

from sponsorship.core.exceptions import InvalidTransitionError
from sponsorship.models.enums import (
    CampaignStatus,
    CreditStatus,
    DeliverableStatus,
    ProofStatus,
)

# Manual (sponsor-initiated) moves. COMPLETED is reachable only through
# the completion cascade.
CAMPAIGN_TRANSITIONS: Dict[CampaignStatus, FrozenSet[CampaignStatus]] = {
    CampaignStatus.DRAFT: frozenset({CampaignStatus.ACTIVE, CampaignStatus.CANCELLED}),
    CampaignStatus.ACTIVE: frozenset({CampaignStatus.DISPUTED, CampaignStatus.CANCELLED}),
    CampaignStatus.COMPLETED: frozenset(),
    CampaignStatus.DISPUTED: frozenset(),
    CampaignStatus.CANCELLED: frozenset(),
}

# Only an active campaign is moved to COMPLETED by the cascade.
AUTO_COMPLETABLE: FrozenSet[CampaignStatus] = frozenset({CampaignStatus.ACTIVE})

DELIVERABLE_TRANSITIONS: Dict[DeliverableStatus, FrozenSet[DeliverableStatus]] = {
    DeliverableStatus.PENDING: frozenset({
        DeliverableStatus.IN_PROGRESS,
        DeliverableStatus.SUBMITTED,
        DeliverableStatus.VERIFIED,
    }),
    DeliverableStatus.IN_PROGRESS: frozenset({
        DeliverableStatus.PENDING,
        DeliverableStatus.SUBMITTED,
        DeliverableStatus.VERIFIED,
    }),
    DeliverableStatus.SUBMITTED: frozenset({
        DeliverableStatus.VERIFIED,
        DeliverableStatus.REJECTED,
        DeliverableStatus.PENDING,
        DeliverableStatus.IN_PROGRESS,
    }),
    DeliverableStatus.REJECTED: frozenset({
        DeliverableStatus.PENDING,
        DeliverableStatus.IN_PROGRESS,
        DeliverableStatus.SUBMITTED,
    }),
    DeliverableStatus.VERIFIED: frozenset(),
}

PROOF_REVIEW_TRANSITIONS: Dict[ProofStatus, FrozenSet[ProofStatus]] = {
    ProofStatus.PENDING: frozenset({ProofStatus.APPROVED, ProofStatus.REJECTED}),
    ProofStatus.REJECTED: frozenset({ProofStatus.APPROVED}),
    ProofStatus.APPROVED: frozenset(),
}

CREDIT_TRANSITIONS: Dict[CreditStatus, FrozenSet[CreditStatus]] = {
    CreditStatus.ACTIVE: frozenset({
        CreditStatus.REDEEMED,
        CreditStatus.EXPIRED,
        CreditStatus.CANCELLED,
    }),
    CreditStatus.REDEEMED: frozenset(),
    CreditStatus.EXPIRED: frozenset(),
    CreditStatus.CANCELLED: frozenset(),
}

# Deliverable statuses from which a proof submission moves to SUBMITTED.
SUBMITTABLE: FrozenSet[DeliverableStatus] = frozenset({
    DeliverableStatus.PENDING,
    DeliverableStatus.IN_PROGRESS,
    DeliverableStatus.REJECTED,
})


def _ensure(entity: str, table, current, requested) -> bool:
    """Return True when the move changes status, False for a same-status no-op."""
    if current == requested:
        return False
    if requested not in table[current]:
        raise InvalidTransitionError(entity, current.value, requested.value)
    return True


def ensure_campaign_transition(current: CampaignStatus, requested: CampaignStatus) -> bool:
    return _ensure("campaign", CAMPAIGN_TRANSITIONS, CampaignStatus.parse(current), CampaignStatus.parse(requested))


def ensure_deliverable_transition(current: DeliverableStatus, requested: DeliverableStatus) -> bool:
    return _ensure(
        "deliverable",
        DELIVERABLE_TRANSITIONS,
        DeliverableStatus.parse(current),
        DeliverableStatus.parse(requested),
    )


def ensure_credit_transition(current: CreditStatus, requested: CreditStatus) -> bool:
    return _ensure("credit", CREDIT_TRANSITIONS, CreditStatus.parse(current), CreditStatus.parse(requested))


def ensure_proof_review(current: ProofStatus, requested: ProofStatus) -> None:
    """Reviews always record a decision, so there is no same-status no-op."""
    current = ProofStatus.parse(current)
    requested = ProofStatus.parse(requested)
    if requested not in PROOF_REVIEW_TRANSITIONS[current]:
        raise InvalidTransitionError("proof", current.value, requested.value)


def can_auto_complete(status: CampaignStatus) -> bool:
    return CampaignStatus.parse(status) in AUTO_COMPLETABLE


def status_after_submission(current: DeliverableStatus) -> DeliverableStatus:
    """A new proof flags the deliverable for review unless it is already
    awaiting review or verified."""
    current = DeliverableStatus.parse(current)
    if current in SUBMITTABLE:
        return DeliverableStatus.SUBMITTED
    return current


def status_after_rejection(current: DeliverableStatus, has_other_approved: bool) -> DeliverableStatus:
    if has_other_approved:
        return DeliverableStatus.parse(current)
    return DeliverableStatus.PENDING
