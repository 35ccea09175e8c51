# sponsorship/routes/credits.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sponsorship.db.repository import Repository, get_repository
from sponsorship.models.credit import Credit
from sponsorship.models.enums import CreditStatus
from sponsorship.schemas.credit import CreditCreate, CreditEnvelope, CreditList, CreditResponse, CreditUpdate
from sponsorship.services import credits
from sponsorship.services.common import get_or_404

router = APIRouter(prefix="/credits", tags=["credits"])


def credit_response(credit: Credit) -> CreditResponse:
    return CreditResponse.model_validate(credit).model_copy(update={"is_expired": credit.has_lapsed()})


@router.get("", response_model=CreditList)
async def list_credits(
    sponsor_id: Optional[str] = Query(None),
    recipient_id: Optional[str] = Query(None),
    status: Optional[CreditStatus] = Query(None),
    user_id: Optional[str] = Query(None),
    repo: Repository = Depends(get_repository),
) -> CreditList:
    rows = await credits.list_credits(
        repo,
        sponsor_id=sponsor_id,
        recipient_id=recipient_id,
        status=status,
        user_id=user_id,
    )
    return CreditList(credits=[credit_response(c) for c in rows])


@router.post("", response_model=CreditEnvelope, status_code=status.HTTP_201_CREATED)
async def issue_credit(payload: CreditCreate, repo: Repository = Depends(get_repository)) -> CreditEnvelope:
    credit = await credits.issue_credit(repo, payload.model_dump())
    return CreditEnvelope(credit=credit_response(credit))


@router.get("/{credit_id}", response_model=CreditEnvelope)
async def get_credit(credit_id: str, repo: Repository = Depends(get_repository)) -> CreditEnvelope:
    credit = await get_or_404(repo, Credit, credit_id)
    return CreditEnvelope(credit=credit_response(credit))


@router.put("/{credit_id}", response_model=CreditEnvelope)
async def update_credit(
    credit_id: str,
    payload: CreditUpdate,
    repo: Repository = Depends(get_repository),
) -> CreditEnvelope:
    credit = await credits.update_credit(repo, credit_id, payload.model_dump(exclude_unset=True))
    return CreditEnvelope(credit=credit_response(credit))


@router.post("/{credit_id}/redeem", response_model=CreditEnvelope)
async def redeem_credit(credit_id: str, repo: Repository = Depends(get_repository)) -> CreditEnvelope:
    return CreditEnvelope(credit=credit_response(await credits.redeem_credit(repo, credit_id)))


@router.post("/{credit_id}/cancel", response_model=CreditEnvelope)
async def cancel_credit(credit_id: str, repo: Repository = Depends(get_repository)) -> CreditEnvelope:
    return CreditEnvelope(credit=credit_response(await credits.cancel_credit(repo, credit_id)))


@router.post("/{credit_id}/expire", response_model=CreditEnvelope)
async def expire_credit(credit_id: str, repo: Repository = Depends(get_repository)) -> CreditEnvelope:
    return CreditEnvelope(credit=credit_response(await credits.expire_credit(repo, credit_id)))
