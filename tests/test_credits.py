# tests/test_credits.py
from datetime import datetime, timedelta, timezone

import pytest

from sponsorship.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from sponsorship.models import Credit, CreditStatus
from sponsorship.services import credits
from tests.factories import make_campaign, make_sponsor, make_user


async def _issue(repo, world, **overrides):
    fields = {
        "sponsor_id": world["sponsor"].id,
        "recipient_id": world["creator_user"].id,
        "title": "Free coffee",
        "value": 5.0,
    }
    fields.update(overrides)
    return await credits.issue_credit(repo, fields)


@pytest.mark.asyncio
async def test_issue_credit_starts_active(repo, world):
    campaign = make_campaign(repo, world["sponsor"], world["creator"])
    credit = await _issue(repo, world, campaign_id=campaign.id, redemption_rules={"max_per_visit": 1})

    assert credit.status == CreditStatus.ACTIVE
    assert credit.redeemed_at is None
    assert credit.redemption_rules == {"max_per_visit": 1}


@pytest.mark.asyncio
async def test_issue_credit_checks_references(repo, world):
    with pytest.raises(NotFoundError):
        await _issue(repo, world, sponsor_id="missing")
    with pytest.raises(NotFoundError):
        await _issue(repo, world, campaign_id="missing")
    with pytest.raises(NotFoundError):
        await _issue(repo, world, recipient_id="missing")
    assert repo.all(Credit) == []


@pytest.mark.asyncio
async def test_redeem_stamps_redeemed_at_and_is_terminal(repo, world):
    credit = await _issue(repo, world)

    await credits.redeem_credit(repo, credit.id)
    assert credit.status == CreditStatus.REDEEMED
    redeemed_at = credit.redeemed_at
    assert redeemed_at is not None

    # Same status again is a no-op
    await credits.redeem_credit(repo, credit.id)
    assert credit.redeemed_at == redeemed_at

    with pytest.raises(InvalidTransitionError):
        await credits.cancel_credit(repo, credit.id)
    with pytest.raises(InvalidTransitionError):
        await credits.update_credit(repo, credit.id, {"status": "active"})


@pytest.mark.asyncio
async def test_cancel_and_expire(repo, world):
    cancelled = await _issue(repo, world)
    expired = await _issue(repo, world, title="Free muffin")

    await credits.cancel_credit(repo, cancelled.id)
    await credits.expire_credit(repo, expired.id)

    assert cancelled.status == CreditStatus.CANCELLED
    assert expired.status == CreditStatus.EXPIRED
    assert cancelled.redeemed_at is None


@pytest.mark.asyncio
async def test_update_credit_ignores_fixed_fields(repo, world):
    credit = await _issue(repo, world)
    other_sponsor = make_sponsor(repo, make_user(repo, fid="3003", username="gym"), name="Gym")

    await credits.update_credit(repo, credit.id, {"title": "Two coffees", "value": 10.0, "sponsor_id": other_sponsor.id})

    assert credit.title == "Two coffees"
    assert credit.value == 10.0
    assert credit.sponsor_id == world["sponsor"].id


@pytest.mark.asyncio
async def test_update_credit_refuses_null_value(repo, world):
    credit = await _issue(repo, world)

    with pytest.raises(ValidationError) as exc_info:
        await credits.update_credit(repo, credit.id, {"value": None, "title": None})

    assert exc_info.value.details["fields"] == ["title", "value"]
    assert credit.value == 5.0
    assert credit.title == "Free coffee"


@pytest.mark.asyncio
async def test_list_credits_for_user_covers_issued_and_held(repo, world):
    held = await _issue(repo, world)
    issued_by_creator_user = await _issue(
        repo,
        world,
        sponsor_id=make_sponsor(repo, world["creator_user"], name="Ava Merch").id,
        recipient_id=None,
        title="Sticker pack",
    )
    await _issue(repo, world, recipient_id=world["sponsor_user"].id, title="Unrelated")

    listed = await credits.list_credits(repo, user_id=world["creator_user"].id)

    assert set(c.id for c in listed) == {held.id, issued_by_creator_user.id}


@pytest.mark.asyncio
async def test_list_credits_by_status(repo, world):
    first = await _issue(repo, world)
    await _issue(repo, world, title="Second")
    await credits.redeem_credit(repo, first.id)

    assert [c.id for c in await credits.list_credits(repo, status="redeemed")] == [first.id]


def test_has_lapsed_is_advisory():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    lapsed = Credit(status=CreditStatus.ACTIVE, expires_at=now - timedelta(days=1))
    fresh = Credit(status=CreditStatus.ACTIVE, expires_at=now + timedelta(days=1))
    naive = Credit(status=CreditStatus.ACTIVE, expires_at=datetime(2024, 5, 1))
    redeemed = Credit(status=CreditStatus.REDEEMED, expires_at=now - timedelta(days=1))
    open_ended = Credit(status=CreditStatus.ACTIVE)

    assert lapsed.has_lapsed(now) is True
    assert fresh.has_lapsed(now) is False
    assert naive.has_lapsed(now) is True
    assert redeemed.has_lapsed(now) is False
    assert open_ended.has_lapsed(now) is False
    # Lapsing never changes the stored status
    assert lapsed.status == CreditStatus.ACTIVE
