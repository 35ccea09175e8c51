# sponsorship/schemas/common.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    """Response model read straight off ORM rows."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = {}
    error_id: Optional[str] = None
