# sponsorship/core/exceptions.py
from __future__ import annotations

from typing import Any, Dict, Optional


class BaseAPIException(Exception):
    """Base exception for all API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(BaseAPIException):
    """Missing or malformed input."""
    def __init__(self, message: str = "Validation error", **kwargs):
        kwargs.setdefault("code", "validation_error")
        super().__init__(message, status_code=400, **kwargs)


class BusinessRuleError(BaseAPIException):
    """Business rule violation."""
    def __init__(self, message: str = "Business rule violation", **kwargs):
        kwargs.setdefault("code", "business_rule_violation")
        super().__init__(message, status_code=400, **kwargs)


class InvalidTransitionError(BusinessRuleError):
    """Requested status change is not allowed from the current status."""
    def __init__(self, entity: str, current: str, requested: str, **kwargs):
        kwargs.setdefault("code", "invalid_transition")
        kwargs.setdefault(
            "details",
            {"entity": entity, "current_status": current, "requested_status": requested},
        )
        super().__init__(f"Cannot move {entity} from '{current}' to '{requested}'", **kwargs)
        self.entity = entity
        self.current = current
        self.requested = requested


class NotFoundError(BaseAPIException):
    """Resource not found."""
    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("code", "not_found")
        super().__init__(message, status_code=404, **kwargs)


class ConflictError(BaseAPIException):
    """Resource conflict."""
    def __init__(self, message: str = "Resource conflict", **kwargs):
        kwargs.setdefault("code", "conflict")
        super().__init__(message, status_code=409, **kwargs)


class DatabaseError(BaseAPIException):
    """Database error."""
    def __init__(self, message: str = "Database error", **kwargs):
        kwargs.setdefault("code", "database_error")
        super().__init__(message, status_code=500, **kwargs)
