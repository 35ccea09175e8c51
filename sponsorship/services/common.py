# sponsorship/services/common.py
from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy import inspect

from sponsorship.core.exceptions import NotFoundError, ValidationError
from sponsorship.db.base import Base
from sponsorship.db.repository import Repository

ModelT = TypeVar("ModelT", bound=Base)

_LABELS = {
    "users": "User",
    "sponsor_profiles": "Sponsor profile",
    "creator_profiles": "Creator profile",
    "offerings": "Offering",
    "campaigns": "Campaign",
    "deliverables": "Deliverable",
    "proofs": "Proof",
    "credits": "Credit",
}


def label_for(model: Type[Base]) -> str:
    return _LABELS.get(model.__tablename__, model.__name__)


async def get_or_404(repo: Repository, model: Type[ModelT], entity_id: Optional[str]) -> ModelT:
    entity = await repo.get(model, entity_id)
    if entity is None:
        label = label_for(model)
        raise NotFoundError(f"{label} not found", details={"resource": model.__tablename__, "id": entity_id})
    return entity


def resolve_acting_user(explicit_user_id: Optional[str], session_user_id: Optional[str]) -> str:
    """The caller named in the request wins over the session cookie."""
    user_id = explicit_user_id or session_user_id
    if not user_id:
        raise ValidationError("user_id is required", details={"field": "user_id"})
    return user_id


def reject_nulls(model: Type[Base], values: Dict[str, Any]) -> None:
    """Refuse an explicit null for a column the table requires."""
    required = {attr.key for attr in inspect(model).column_attrs if not attr.columns[0].nullable}
    nulled = sorted(key for key, value in values.items() if value is None and key in required)
    if nulled:
        raise ValidationError(
            f"{nulled[0]} cannot be null",
            details={"fields": nulled, "resource": model.__tablename__},
        )
