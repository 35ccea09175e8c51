# tests/test_transitions.py
import pytest

from sponsorship.core.exceptions import InvalidTransitionError, ValidationError
from sponsorship.models.enums import CampaignStatus, CreditStatus, DeliverableStatus, ProofStatus
from sponsorship.services.transitions import (
    can_auto_complete,
    ensure_campaign_transition,
    ensure_credit_transition,
    ensure_deliverable_transition,
    ensure_proof_review,
    status_after_rejection,
    status_after_submission,
)


@pytest.mark.parametrize(
    "current,requested",
    [
        (CampaignStatus.DRAFT, CampaignStatus.ACTIVE),
        (CampaignStatus.DRAFT, CampaignStatus.CANCELLED),
        (CampaignStatus.ACTIVE, CampaignStatus.DISPUTED),
        (CampaignStatus.ACTIVE, CampaignStatus.CANCELLED),
    ],
)
def test_campaign_manual_transitions_allowed(current, requested):
    assert ensure_campaign_transition(current, requested) is True


@pytest.mark.parametrize(
    "current,requested",
    [
        (CampaignStatus.DRAFT, CampaignStatus.COMPLETED),
        (CampaignStatus.ACTIVE, CampaignStatus.COMPLETED),
        (CampaignStatus.ACTIVE, CampaignStatus.DRAFT),
        (CampaignStatus.CANCELLED, CampaignStatus.ACTIVE),
        (CampaignStatus.DISPUTED, CampaignStatus.ACTIVE),
        (CampaignStatus.COMPLETED, CampaignStatus.ACTIVE),
    ],
)
def test_campaign_manual_transitions_rejected(current, requested):
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_campaign_transition(current, requested)
    assert exc_info.value.code == "invalid_transition"
    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {
        "entity": "campaign",
        "current_status": current.value,
        "requested_status": requested.value,
    }


def test_same_status_is_a_noop():
    assert ensure_campaign_transition(CampaignStatus.COMPLETED, CampaignStatus.COMPLETED) is False
    assert ensure_deliverable_transition(DeliverableStatus.VERIFIED, DeliverableStatus.VERIFIED) is False
    assert ensure_credit_transition(CreditStatus.REDEEMED, CreditStatus.REDEEMED) is False


def test_transition_accepts_raw_strings():
    assert ensure_campaign_transition("draft", "active") is True


def test_unknown_status_string_is_a_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        ensure_campaign_transition("draft", "archived")
    assert exc_info.value.code == "validation_error"
    assert "active" in exc_info.value.details["allowed"]


def test_deliverable_verified_is_terminal():
    for requested in (DeliverableStatus.PENDING, DeliverableStatus.SUBMITTED, DeliverableStatus.REJECTED):
        with pytest.raises(InvalidTransitionError):
            ensure_deliverable_transition(DeliverableStatus.VERIFIED, requested)


def test_deliverable_rejected_only_from_submitted():
    assert ensure_deliverable_transition(DeliverableStatus.SUBMITTED, DeliverableStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        ensure_deliverable_transition(DeliverableStatus.PENDING, DeliverableStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        ensure_deliverable_transition(DeliverableStatus.REJECTED, DeliverableStatus.VERIFIED)


def test_proof_review_table():
    ensure_proof_review(ProofStatus.PENDING, ProofStatus.APPROVED)
    ensure_proof_review(ProofStatus.PENDING, ProofStatus.REJECTED)
    ensure_proof_review(ProofStatus.REJECTED, ProofStatus.APPROVED)

    with pytest.raises(InvalidTransitionError):
        ensure_proof_review(ProofStatus.APPROVED, ProofStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        ensure_proof_review(ProofStatus.APPROVED, ProofStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        ensure_proof_review(ProofStatus.REJECTED, ProofStatus.REJECTED)


def test_credit_terminal_states():
    assert ensure_credit_transition(CreditStatus.ACTIVE, CreditStatus.REDEEMED)
    for terminal in (CreditStatus.REDEEMED, CreditStatus.EXPIRED, CreditStatus.CANCELLED):
        with pytest.raises(InvalidTransitionError):
            ensure_credit_transition(terminal, CreditStatus.ACTIVE)


def test_auto_complete_only_from_active():
    assert not can_auto_complete(CampaignStatus.DRAFT)
    assert can_auto_complete(CampaignStatus.ACTIVE)
    assert not can_auto_complete(CampaignStatus.CANCELLED)
    assert not can_auto_complete(CampaignStatus.DISPUTED)
    assert not can_auto_complete(CampaignStatus.COMPLETED)


def test_status_after_submission():
    assert status_after_submission(DeliverableStatus.PENDING) == DeliverableStatus.SUBMITTED
    assert status_after_submission(DeliverableStatus.IN_PROGRESS) == DeliverableStatus.SUBMITTED
    assert status_after_submission(DeliverableStatus.REJECTED) == DeliverableStatus.SUBMITTED
    assert status_after_submission(DeliverableStatus.SUBMITTED) == DeliverableStatus.SUBMITTED
    assert status_after_submission(DeliverableStatus.VERIFIED) == DeliverableStatus.VERIFIED


def test_status_after_rejection():
    assert status_after_rejection(DeliverableStatus.SUBMITTED, has_other_approved=False) == DeliverableStatus.PENDING
    assert status_after_rejection(DeliverableStatus.VERIFIED, has_other_approved=True) == DeliverableStatus.VERIFIED
