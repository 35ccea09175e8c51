# sponsorship/models/enums.py
from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from sqlalchemy import Enum as SAEnum

from sponsorship.core.exceptions import ValidationError

EnumT = TypeVar("EnumT", bound="ChoiceEnum")


class ChoiceEnum(str, Enum):
    """String-valued enum that rejects unknown values with a 400."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls: Type[EnumT], value: object) -> EnumT:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid {cls.label()}: {value!r}",
                details={"field": cls.label(), "allowed": [m.value for m in cls]},
            ) from None

    @classmethod
    def label(cls) -> str:
        return cls.__name__


class CampaignStatus(ChoiceEnum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"


class DeliverableStatus(ChoiceEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ProofStatus(ChoiceEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CreditStatus(ChoiceEnum):
    ACTIVE = "active"
    REDEEMED = "redeemed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class CompensationType(ChoiceEnum):
    CASH = "cash"
    CREDIT = "credit"
    HYBRID = "hybrid"

    @property
    def includes_cash(self) -> bool:
        return self in (CompensationType.CASH, CompensationType.HYBRID)

    @property
    def includes_credit(self) -> bool:
        return self in (CompensationType.CREDIT, CompensationType.HYBRID)


class DeliverableType(ChoiceEnum):
    EVENT_APPEARANCE = "event_appearance"
    CONTENT_POST = "content_post"
    CHECK_IN = "check_in"
    CUSTOM = "custom"


class VerificationMethod(ChoiceEnum):
    MANUAL_UPLOAD = "manual_upload"
    QR_CHECKIN = "qr_checkin"
    LINK_SUBMISSION = "link_submission"


class ProofType(ChoiceEnum):
    IMAGE = "image"
    LINK = "link"
    TEXT = "text"
    QR_SCAN = "qr_scan"
    ATTENDANCE = "attendance"


class PaymentMethod(ChoiceEnum):
    TRADITIONAL = "traditional"
    WALLET = "wallet"
    BOTH = "both"


def enum_column(enum_cls: Type[ChoiceEnum], name: str) -> SAEnum:
    """Portable (non-native) enum column storing the member values."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
