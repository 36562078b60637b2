# This file implements password hashing and bearer-token handling for the API.
# It exists so routers never touch token parsing or hashing details directly.
# Token verification is a pure function of the header, the shared secret, and the current time.
# Each failure mode maps to its own 401 message so clients can tell expiry from tampering.

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from passlib.context import CryptContext

from src.api.error_handlers import APIError

BEARER_PREFIX = "Bearer "

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class Principal:
    """Authenticated identity carried by a verified token."""

    user_id: int
    email: str


class AuthErrorKind(str, Enum):
    MISSING_TOKEN = "missing_token"
    BAD_TOKEN_FORMAT = "bad_token_format"
    TOKEN_EXPIRED = "token_expired"
    INVALID_TOKEN = "invalid_token"


_AUTH_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.MISSING_TOKEN: "No token provided, access denied",
    AuthErrorKind.BAD_TOKEN_FORMAT: "Invalid token format, use Bearer token",
    AuthErrorKind.TOKEN_EXPIRED: "Token expired",
    AuthErrorKind.INVALID_TOKEN: "Invalid token",
}


class AuthError(APIError):
    """401 raised by the credential verifier."""

    def __init__(self, kind: AuthErrorKind) -> None:
        self.kind = kind
        super().__init__(
            status_code=401,
            error_code=kind.name,
            message=_AUTH_MESSAGES[kind],
        )


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _pwd_context.verify(password, password_hash)


def create_access_token(
    *,
    user_id: int,
    email: str,
    secret: str,
    algorithm: str,
    expires_minutes: int,
    now: datetime | None = None,
) -> str:
    """Sign a token whose subject is the user id and which also carries the email."""

    issued_at = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_bearer_header(
    header_value: str | None,
    *,
    secret: str,
    algorithm: str,
) -> Principal:
    """Validate an `Authorization` header value and return the principal it names."""

    if not header_value:
        raise AuthError(AuthErrorKind.MISSING_TOKEN)
    if not header_value.startswith(BEARER_PREFIX):
        raise AuthError(AuthErrorKind.BAD_TOKEN_FORMAT)

    token = header_value[len(BEARER_PREFIX) :].strip()
    if not token:
        raise AuthError(AuthErrorKind.INVALID_TOKEN)

    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as exc:
        raise AuthError(AuthErrorKind.TOKEN_EXPIRED) from exc
    except JWTError as exc:
        raise AuthError(AuthErrorKind.INVALID_TOKEN) from exc

    subject = payload.get("sub")
    email = payload.get("email")
    try:
        user_id = int(str(subject))
    except ValueError as exc:
        raise AuthError(AuthErrorKind.INVALID_TOKEN) from exc
    if user_id <= 0 or not isinstance(email, str) or not email:
        raise AuthError(AuthErrorKind.INVALID_TOKEN)

    return Principal(user_id=user_id, email=email)
