# cartify/routers/auth.py
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from cartify.core.auth import require_auth
from cartify.database import get_session
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.base import MessageResponse
from cartify.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from cartify.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Create an account and return a bearer token.

    400 if the email (or display name) is already registered.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """Verify the password and return a 24h bearer token."""
    return service.login(session, payload)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    session: Session = Depends(get_session),
):
    """Rotate the password after checking the current one."""
    service.change_password(session, payload)
    return MessageResponse(message="Password updated successfully")


@router.get("/me", response_model=UserPublic)
def read_me(
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a valid bearer token.
    """
    return service.get_user(session, claims["userId"])
