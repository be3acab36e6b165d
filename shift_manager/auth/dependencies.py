"""Auth dependencies — cookie sessions, CSRF, inactivity, RBAC enforcement."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User, UserSession
from shift_manager.auth.service import (
    SESSION_EXPIRED_INACTIVITY,
    decode_session_token,
    find_active_session,
    is_inactive,
)
from shift_manager.common.constants import UserRole
from shift_manager.common.exceptions import ForbiddenException, UnauthorizedException
from shift_manager.config import settings
from shift_manager.database import get_db

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
_UNSAFE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def _check_csrf(request: Request, session: UserSession) -> None:
    """Compare the CSRF header against the session token for unsafe methods."""
    if request.method not in _UNSAFE_METHODS:
        return
    supplied = request.headers.get(CSRF_HEADER)
    if supplied and supplied == session.csrf_token:
        return

    logger.warning(
        "CSRF validation failed: %s %s from %s",
        request.method,
        request.url.path,
        request.client.host if request.client else "unknown",
    )
    if settings.csrf_enforced:
        raise ForbiddenException(detail="CSRF validace selhala")


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the session cookie, enforce inactivity + CSRF, return the User."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedException()

    user_id = decode_session_token(token)
    session = await find_active_session(db, token)
    if session.user_id != user_id:
        raise UnauthorizedException()

    now = datetime.now(timezone.utc)
    if is_inactive(session, now):
        logger.info("Session of user %s revoked after inactivity", user_id)
        session.is_revoked = True
        await db.commit()  # Persist revocation BEFORE raising (avoid rollback)
        raise UnauthorizedException(detail=SESSION_EXPIRED_INACTIVITY)

    _check_csrf(request, session)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()
    if user is None:
        raise UnauthorizedException(detail="User account not found.")

    session.last_active_at = now
    await db.flush()

    # Attach role + session to request state for downstream use
    try:
        request.state.user_role = UserRole(user.role)
    except ValueError:
        request.state.user_role = UserRole.worker
    request.state.user_session = session

    return user


# Alias used by routes that only need an authenticated caller
require_auth = get_current_user


# ── Role-based dependency ───────────────────────────────────────────

def require_role(*allowed_roles: UserRole) -> Callable:
    """Return a FastAPI dependency that enforces role membership."""

    async def _check(
        request: Request,
        user: User = Depends(get_current_user),
    ) -> User:
        user_role: UserRole = request.state.user_role
        if user_role not in allowed_roles:
            logger.warning(
                "User %s (%s) denied: requires %s",
                user.id,
                user_role.value,
                [r.value for r in allowed_roles],
            )
            raise ForbiddenException(
                detail=f"Role '{user_role.value}' is not permitted. Required: {[r.value for r in allowed_roles]}.",
            )
        return user

    return _check
