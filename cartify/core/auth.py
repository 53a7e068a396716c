# cartify/core/auth.py
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext

from cartify.core.config import get_settings
from cartify.core.errors import Forbidden, Unauthorized

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so the 401 goes through our own error shape.
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(
    *,
    user_id: str | None,
    is_admin: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a bearer token carrying {userId, isAdmin}.

    Default lifetime:
      - regular users: USER_TOKEN_EXPIRE_HOURS (24h)
      - admin logins : ADMIN_TOKEN_EXPIRE_DAYS (1 day)
    """
    if expires_delta is None:
        if is_admin:
            expires_delta = timedelta(days=settings.ADMIN_TOKEN_EXPIRE_DAYS)
        else:
            expires_delta = timedelta(hours=settings.USER_TOKEN_EXPIRE_HOURS)

    claims: dict[str, Any] = {
        "isAdmin": is_admin,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    if user_id is not None:
        claims["userId"] = user_id
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a bearer token.

    Raises:
        Unauthorized(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise Unauthorized("Invalid or expired token")


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any] | None:
    """Decoded token claims, or None for guests."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def require_auth(
    claims: dict[str, Any] | None = Depends(get_current_claims),
) -> dict[str, Any]:
    """
    Enforce an authenticated *user* token (one that names a userId).

    The built-in admin token has no userId, so it cannot own a cart.
    """
    if claims is None:
        raise Unauthorized("No token, authorization denied")
    if not claims.get("userId"):
        raise Unauthorized("Token missing userId")
    return claims


def require_admin(
    claims: dict[str, Any] | None = Depends(get_current_claims),
) -> dict[str, Any]:
    """
    Enforce an admin token.

    Raises:
        Unauthorized(401): no token.
        Forbidden(403): token is not an admin token.
    """
    if claims is None:
        raise Unauthorized("No token, authorization denied")
    if not claims.get("isAdmin"):
        raise Forbidden("Admin access required")
    return claims
