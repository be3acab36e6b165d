"""Auth router — register, login, logout, current user, password reset."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth import service as auth_service
from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User, UserSession
from shift_manager.auth.schemas import (
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    SessionUserResponse,
    UserResponse,
)
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import AUTH_RATE_LIMIT
from shift_manager.common.rate_limit import limiter
from shift_manager.common.schemas import SuccessResponse
from shift_manager.config import settings
from shift_manager.database import get_db
from shift_manager.workers.service import WorkerService

router = APIRouter(prefix="", tags=["auth"])


def _client(request: Request) -> tuple[Optional[str], Optional[str]]:
    ip = request.client.host if request.client else None
    return ip, request.headers.get("user-agent")


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def _session_user(user: User, session: UserSession) -> SessionUserResponse:
    safe = UserResponse.model_validate(user).model_dump()
    return SessionUserResponse(**safe, csrf_token=session.csrf_token)


# ── POST /register ─────────────────────────────────────────────────

@router.post("/register", response_model=SessionUserResponse, status_code=201)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.register_user(db, body)
    ip, user_agent = _client(request)
    token, session = await auth_service.open_session(db, user, ip, user_agent)
    _set_session_cookie(response, token)
    return _session_user(user, session)


# ── POST /login ────────────────────────────────────────────────────

@router.post("/login", response_model=SessionUserResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.authenticate(db, body.email, body.password)
    ip, user_agent = _client(request)
    token, session = await auth_service.open_session(db, user, ip, user_agent)

    # Audit trail
    await create_audit_entry(
        db,
        action="login",
        entity_type="user_session",
        entity_id=session.id,
        actor_id=user.id,
        new_values={"ip": ip, "user_agent": user_agent},
        ip_address=ip,
        user_agent=user_agent,
    )

    _set_session_cookie(response, token)
    return _session_user(user, session)


# ── POST /logout: Revoke current session ──────────────────────────

@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session: UserSession = request.state.user_session
    await auth_service.revoke_session(db, session)

    ip, user_agent = _client(request)
    await create_audit_entry(
        db,
        action="logout",
        entity_type="user_session",
        entity_id=session.id,
        actor_id=user.id,
        ip_address=ip,
        user_agent=user_agent,
    )

    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return SuccessResponse(success=True, message="Logged out successfully")


# ── GET /user: Current user ───────────────────────────────────────

@router.get("/user", response_model=SessionUserResponse)
async def current_user(
    request: Request,
    user: User = Depends(get_current_user),
):
    return _session_user(user, request.state.user_session)


# ── GET /users: Users visible to the caller ───────────────────────

@router.get("/users", response_model=list[UserResponse])
async def list_users(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await WorkerService.list_visible_users(db, user)


# ── POST /reset-password ───────────────────────────────────────────

@router.post("/reset-password", response_model=SuccessResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def reset_password(
    body: PasswordResetRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    await auth_service.request_password_reset(db, body.email)
    return SuccessResponse(
        success=True,
        message="A reset code has been issued. It is valid for "
        f"{settings.PASSWORD_RESET_TTL_MINUTES} minutes.",
    )


# ── POST /reset-password/confirm ───────────────────────────────────

@router.post("/reset-password/confirm", response_model=SuccessResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def confirm_reset_password(
    body: PasswordResetConfirm,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    await auth_service.confirm_password_reset(db, body.email, body.code, body.new_password)
    return SuccessResponse(success=True, message="Password has been reset")
