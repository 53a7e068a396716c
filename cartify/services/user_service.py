# cartify/services/user_service.py
import logging

from sqlmodel import Session

from cartify.core.auth import create_access_token, hash_password, verify_password
from cartify.core.config import get_settings
from cartify.core.errors import Conflict, NotFound, ValidationFailed
from cartify.core.ids import timestamp_id
from cartify.models.user import User
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.user import (
    AdminAuthResponse,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserPublic,
    UserRead,
)

logger = logging.getLogger(__name__)

settings = get_settings()


class UserService:
    """
    Business logic for accounts and sessions.

    Responsibilities:
      - register / login / change password
      - admin login (built-in account or a user flagged is_admin)
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Helpers -----

    def _issue(self, user: User) -> AuthResponse:
        token = create_access_token(user_id=user.user_id, is_admin=user.is_admin)
        return AuthResponse(token=token, user=UserPublic.model_validate(user))

    def _authenticate(self, session: Session, email: str, password: str) -> User:
        user = self.repo.get_by_email(session, email)
        if not user:
            raise ValidationFailed("Invalid Email")
        if not verify_password(password, user.password_hash):
            raise ValidationFailed("Password is wrong")
        return user

    # ----- Self service -----

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign the user in.

        Rules:
          - email and name must both be unused
          - user_id is a millisecond timestamp string
        """
        if self.repo.get_by_email(session, payload.email):
            raise Conflict("User already exists")
        if self.repo.get_by_name(session, payload.name):
            raise Conflict("Username already taken")

        user = User(
            user_id=timestamp_id(
                "", lambda uid: self.repo.get_by_user_id(session, uid) is not None
            ),
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            cart=[],
        )
        user = self.repo.create(session, user)
        logger.info("Registered user %s", user.user_id)
        return self._issue(user)

    def login(self, session: Session, payload: LoginRequest) -> AuthResponse:
        user = self._authenticate(session, payload.email, payload.password)
        return self._issue(user)

    def change_password(
        self,
        session: Session,
        payload: ChangePasswordRequest,
    ) -> None:
        user = self.repo.get_by_email(session, payload.email)
        if not user:
            raise ValidationFailed("User not found")
        if not verify_password(payload.current_password, user.password_hash):
            raise ValidationFailed("Current password is incorrect")

        user.password_hash = hash_password(payload.new_password)
        self.repo.update(session, user)
        logger.info("Password changed for user %s", user.user_id)

    def get_user(self, session: Session, user_id: str) -> UserPublic:
        user = self.repo.get_by_user_id(session, user_id)
        if not user:
            raise NotFound("User not found")
        return UserPublic.model_validate(user)

    # ----- Admin -----

    def admin_login(self, session: Session, payload: LoginRequest) -> AdminAuthResponse:
        """
        Built-in admin credentials get an admin token with no userId;
        anyone else goes through the normal password check and gets
        isAdmin from their record.
        """
        if (
            payload.email == settings.ADMIN_EMAIL.lower()
            and payload.password == settings.ADMIN_PASSWORD
        ):
            logger.info("Built-in admin login")
            return AdminAuthResponse(
                token=create_access_token(user_id=None, is_admin=True),
                is_admin=True,
                user=UserPublic(user_id="admin", name="Admin", email=settings.ADMIN_EMAIL),
            )

        user = self._authenticate(session, payload.email, payload.password)
        auth = self._issue(user)
        return AdminAuthResponse(token=auth.token, user=auth.user, is_admin=user.is_admin)

    def list_users(self, session: Session) -> list[UserRead]:
        """All users, without password hashes (admin only)."""
        return [UserRead.model_validate(u) for u in self.repo.list_all(session)]
