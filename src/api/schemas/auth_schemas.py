# This file defines request and response schemas for registration and login.
# It exists so credential rules are declared once and enforced before any database access.
# Emails are normalized to lower case so lookups and uniqueness use one canonical form.

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from src.api.schemas.common import SuccessEnvelope

_PASSWORD_COMPLEXITY_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
MIN_PASSWORD_LENGTH = 6


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if not _PASSWORD_COMPLEXITY_RE.match(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, one uppercase letter, and one number"
            )
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def require_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class UserOut(BaseModel):
    id: int
    email: str
    created_at: datetime


class AuthData(BaseModel):
    user: UserOut
    token: str


class AuthResponse(SuccessEnvelope):
    data: AuthData


class PrincipalOut(BaseModel):
    id: int
    email: str


class PrincipalResponse(SuccessEnvelope):
    data: PrincipalOut
