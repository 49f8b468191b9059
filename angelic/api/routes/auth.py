"""Auth routes: email/password registration and login, session cookie, logout."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from angelic.api.schemas.auth import LoginRequest, RegisterRequest
from angelic.core.auth import AuthUser, create_access_token, hash_password, require_auth, verify_password
from angelic.core.config import get_settings
from angelic.db.base import get_session_factory
from angelic.db.models.user import User

logger = structlog.get_logger(__name__)

router = APIRouter()


def _session_response(user: User) -> JSONResponse:
    settings = get_settings()
    token = create_access_token(user.id, user.email)
    response = JSONResponse(content={"user": user.to_public_dict(), "token": token})
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.jwt_expire_hours * 3600,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
    )
    return response


@router.post("/auth/register")
async def register(body: RegisterRequest):
    """Create an account and start a session."""
    email = body.email.lower()
    factory = get_session_factory()
    async with factory() as session:
        existing = await session.execute(select(User.id).where(func.lower(User.email) == email))
        if existing.scalar_one_or_none() is not None:
            raise HTTPException(status_code=400, detail="Email is already registered")

        user = User(
            email=email,
            password_hash=hash_password(body.password),
            first_name=body.first_name,
            last_name=body.last_name,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise HTTPException(status_code=400, detail="Email is already registered")

    logger.info("user_registered", user_id=user.id)
    return _session_response(user)


@router.post("/auth/login")
async def login(body: LoginRequest):
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(User).where(func.lower(User.email) == body.email.lower()))
        user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    logger.info("user_logged_in", user_id=user.id)
    return _session_response(user)


@router.get("/auth/user")
async def current_user(user: AuthUser = Depends(require_auth)):
    factory = get_session_factory()
    async with factory() as session:
        record = await session.get(User, user.user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="User not found")
    return record.to_public_dict()


@router.get("/login")
async def login_redirect():
    return RedirectResponse(f"{get_settings().frontend_url}/auth", status_code=302)


@router.get("/logout")
async def logout():
    settings = get_settings()
    response = RedirectResponse(f"{settings.frontend_url}/", status_code=302)
    response.delete_cookie(settings.session_cookie_name)
    return response
