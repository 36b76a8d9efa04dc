from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from lexiassist.models.base import ApiModel, new_id, utcnow


class UserRegister(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    bar_council_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserLogin(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class User(ApiModel):
    id: str = Field(default_factory=new_id)
    name: str
    email: str
    bar_council_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class UserRecord(User):
    """row as stored; never returned from a route"""

    password_hash: str


class TokenResponse(ApiModel):
    token: str
    user: User
