"""Schemas for the operator login flow."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from visitlog.core.auth.constants import MAX_PASSPHRASE_LENGTH


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    password: StrictStr

    @field_validator("password")
    @classmethod
    def normalize_password(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("password required")
        return v[:MAX_PASSPHRASE_LENGTH]


class LoginResponse(BaseModel):
    ok: bool = True
    token: str
    expiresIn: int
    expiresAt: int
