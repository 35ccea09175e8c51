# sponsorship/schemas/user.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from sponsorship.schemas.common import ORMModel


class MiniAppAuthRequest(BaseModel):
    """Identity-provider payload posted by the mini-app after the SDK resolves."""

    fid: Union[int, str]
    username: Optional[str] = Field(None, max_length=100)
    display_name: Optional[str] = Field(
        None,
        max_length=200,
        validation_alias=AliasChoices("display_name", "displayName"),
    )
    pfp_url: Optional[str] = Field(
        None,
        max_length=1000,
        validation_alias=AliasChoices("pfp_url", "pfpUrl"),
    )

    @field_validator("fid")
    @classmethod
    def validate_fid(cls, v):
        value = str(v).strip()
        if not value or value == "0":
            raise ValueError("fid is required")
        return value


class UserResponse(ORMModel):
    fid: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    pfp_url: Optional[str] = None


class UserEnvelope(BaseModel):
    user: Optional[UserResponse] = None


class AuthResponse(BaseModel):
    success: bool = True
    user: UserResponse
