# This file defines registration, login, and current-principal endpoints.
# It exists so account creation and token issuance share one set of credential rules.
# Tokens carry the user id and email; protected routes trust them without another lookup.
# Login failures use one message whether the email or the password was wrong.

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from src.api.api_config import ApiConfig
from src.api.dependencies import ConfigDep, PrincipalDep, get_user_repository
from src.api.error_handlers import APIError
from src.api.repositories.user_repository import UserRepository
from src.api.response_envelope import build_object_envelope
from src.api.schemas.auth_schemas import AuthResponse, LoginRequest, PrincipalResponse, RegisterRequest
from src.api.schemas.common import ERROR_RESPONSES
from src.api.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]


def _auth_payload(user: dict[str, Any], config: ApiConfig) -> dict[str, Any]:
    token = create_access_token(
        user_id=int(user["id"]),
        email=str(user["email"]),
        secret=config.jwt_secret,
        algorithm=config.jwt_algorithm,
        expires_minutes=config.jwt_expires_minutes,
    )
    return build_object_envelope(
        data={
            "user": {"id": user["id"], "email": user["email"], "created_at": user["created_at"]},
            "token": token,
        }
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    users: UserRepositoryDep,
    config: ConfigDep,
) -> dict[str, Any]:
    if users.get_by_email(payload.email) is not None:
        raise APIError(
            status_code=409,
            error_code="EMAIL_TAKEN",
            message="User already exists with this email",
        )

    user = users.create(email=payload.email, password_hash=hash_password(payload.password))
    logger.info("Registered user id=%s", user["id"])
    return _auth_payload(user, config)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    users: UserRepositoryDep,
    config: ConfigDep,
) -> dict[str, Any]:
    user = users.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, str(user["password_hash"])):
        raise APIError(
            status_code=401,
            error_code="INVALID_CREDENTIALS",
            message="Invalid email or password",
        )
    return _auth_payload(user, config)


@router.get("/me", response_model=PrincipalResponse)
def me(principal: PrincipalDep) -> dict[str, Any]:
    return build_object_envelope(data={"id": principal.user_id, "email": principal.email})
