"""Email/password session authentication for FastAPI.

Login and registration issue an HS256 JWT that the client sends back either as
a Bearer token or in the HttpOnly session cookie.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt as pyjwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select

from angelic.core.config import get_settings

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthUser:
    """Authenticated user extracted from a session JWT."""

    user_id: str
    email: str | None
    claims: dict


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _signing_secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        raise HTTPException(status_code=500, detail="Authentication is misconfigured")
    return secret


def create_access_token(user_id: str, email: str | None = None, now: datetime | None = None) -> str:
    """Issue a session token for ``user_id``."""
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.jwt_expire_hours),
    }
    return pyjwt.encode(payload, _signing_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AuthUser:
    """Verify and decode a session JWT.

    Raises ``HTTPException(401)`` on any validation failure.
    """
    settings = get_settings()
    try:
        payload = pyjwt.decode(
            token,
            _signing_secret(),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except pyjwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except pyjwt.MissingRequiredClaimError as exc:
        raise HTTPException(status_code=401, detail=f"Missing required claim: {exc}")
    except pyjwt.InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    return AuthUser(user_id=sub, email=payload.get("email"), claims=payload)


def _extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthUser:
    """FastAPI dependency that requires a valid session token.

    Usage::

        @router.get("/protected")
        async def protected(user: AuthUser = Depends(require_auth)):
            ...
    """
    token = _extract_token(request, credentials)
    if token is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    user = decode_access_token(token)
    request.state.user_id = user.user_id
    return user


async def optional_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthUser | None:
    """Like ``require_auth`` but anonymous callers (or stale tokens) get ``None``."""
    token = _extract_token(request, credentials)
    if token is None:
        return None
    try:
        user = decode_access_token(token)
    except HTTPException:
        return None
    request.state.user_id = user.user_id
    return user


async def is_admin_user(user: AuthUser) -> bool:
    """Check the ``users.is_admin`` flag for ``user``."""
    from angelic.db.base import get_session_factory
    from angelic.db.models.user import User

    try:
        factory = get_session_factory()
    except RuntimeError:
        return False  # DB not initialized

    async with factory() as session:
        result = await session.execute(
            select(User.id).where(User.id == user.user_id, User.is_admin.is_(True))
        )
        return result.scalar_one_or_none() is not None


async def require_admin(user: AuthUser = Depends(require_auth)) -> AuthUser:
    """FastAPI dependency that requires admin privileges."""
    if await is_admin_user(user):
        return user
    raise HTTPException(status_code=403, detail="Admin access required")
