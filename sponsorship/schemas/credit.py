# sponsorship/schemas/credit.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from sponsorship.models.enums import CreditStatus
from sponsorship.schemas.common import ORMModel


class CreditCreate(BaseModel):
    sponsor_id: str
    campaign_id: Optional[str] = None
    recipient_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    value: float = Field(..., ge=0)
    redemption_rules: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None


class CreditUpdate(BaseModel):
    recipient_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    value: Optional[float] = Field(None, ge=0)
    redemption_rules: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None
    status: Optional[CreditStatus] = None


class CreditResponse(ORMModel):
    sponsor_id: str
    campaign_id: Optional[str] = None
    recipient_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    value: float
    redemption_rules: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None
    status: CreditStatus
    redeemed_at: Optional[datetime] = None
    is_expired: bool = False


class CreditEnvelope(BaseModel):
    credit: CreditResponse


class CreditList(BaseModel):
    credits: List[CreditResponse]
