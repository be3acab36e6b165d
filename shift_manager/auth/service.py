"""Auth service — password hashing, cookie sessions, password reset codes."""

from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from shift_manager.auth.models import PasswordResetCode, User, UserSession
from shift_manager.auth.schemas import RegisterRequest
from shift_manager.common.constants import UserRole
from shift_manager.common.dates import as_utc, naive_utc
from shift_manager.common.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from shift_manager.config import settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Neplatný email nebo heslo"
SESSION_EXPIRED_INACTIVITY = "Relace vypršela z důvodu neaktivity"


# ── Passwords ───────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return generate_password_hash(password, method="scrypt")


def verify_password(password: str, stored: str) -> bool:
    return check_password_hash(stored, password)


# ── User lookup ─────────────────────────────────────────────────────

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalars().first()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def ensure_unique_identity(
    db: AsyncSession,
    *,
    email: Optional[str],
    username: Optional[str],
    exclude_user_id: Optional[int] = None,
) -> None:
    """Raise 400 when *email* or *username* already belong to another user."""
    if email:
        existing = await get_user_by_email(db, email)
        if existing is not None and existing.id != exclude_user_id:
            raise ValidationException({"email": ["Email already exists"]}, detail="Email already exists")
    if username:
        existing = await get_user_by_username(db, username)
        if existing is not None and existing.id != exclude_user_id:
            raise ValidationException(
                {"username": ["Username already exists"]}, detail="Username already exists",
            )


# ── Registration / login ───────────────────────────────────────────

async def register_user(db: AsyncSession, body: RegisterRequest) -> User:
    """Create a self-registered account (admin cannot be self-assigned)."""
    if body.role == UserRole.admin:
        raise ForbiddenException(detail="The admin role cannot be self-assigned.")

    await ensure_unique_identity(db, email=body.email, username=body.username)

    data = body.model_dump(exclude={"password", "role", "email", "date_of_birth"})
    user = User(
        **data,
        email=body.email.lower(),
        role=body.role.value,
        date_of_birth=naive_utc(body.date_of_birth),
        password=hash_password(body.password),
    )
    if user.company_verified is None:
        user.company_verified = False
    db.add(user)
    await db.flush()
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials, or raise 401."""
    user = await get_user_by_email(db, email or "")
    if user is None or not verify_password(password, user.password):
        logger.info("Failed login attempt for %s", (email or "").lower())
        raise UnauthorizedException(detail=INVALID_CREDENTIALS)
    return user


# ── Session tokens ──────────────────────────────────────────────────

def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _create_session_token(user_id: int, expires_at: datetime) -> str:
    payload = {
        "sub": str(user_id),
        "sid": uuid.uuid4().hex,
        "type": "session",
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> int:
    """Verify the cookie signature and return the user id it names."""
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except JWTError:
        raise UnauthorizedException()
    if payload.get("type") != "session":
        raise UnauthorizedException()
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedException()


async def open_session(
    db: AsyncSession,
    user: User,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> tuple[str, UserSession]:
    """Persist a new session and return (cookie_token, session)."""
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(days=settings.SESSION_MAX_AGE_DAYS)
    token = _create_session_token(user.id, expires_at)

    session = UserSession(
        user_id=user.id,
        token_hash=hash_token(token),
        csrf_token=secrets.token_hex(32),
        ip_address=ip,
        user_agent=user_agent,
        expires_at=expires_at,
        last_active_at=now,
        created_at=now,
    )
    db.add(session)
    await db.flush()
    return token, session


async def find_active_session(db: AsyncSession, token: str) -> UserSession:
    """Return the live session for *token*, or raise 401."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == hash_token(token)),
    )
    session = result.scalars().first()
    if session is None or session.is_revoked:
        raise UnauthorizedException(detail="Session invalid or expired.")
    if as_utc(session.expires_at) <= datetime.now(timezone.utc):
        raise UnauthorizedException(detail="Session invalid or expired.")
    return session


def is_inactive(session: UserSession, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    idle = now - as_utc(session.last_active_at)
    return idle > timedelta(minutes=settings.SESSION_INACTIVITY_MINUTES)


async def revoke_session(db: AsyncSession, session: UserSession) -> None:
    session.is_revoked = True
    await db.flush()


# ── Password reset ──────────────────────────────────────────────────

def generate_reset_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


async def request_password_reset(db: AsyncSession, email: Optional[str]) -> PasswordResetCode:
    """Issue a 6-digit reset code for *email* (stored hashed)."""
    if not email:
        raise BadRequestException("Email is required")

    user = await get_user_by_email(db, email)
    if user is None:
        raise NotFoundException("User")

    code = generate_reset_code()
    entry = PasswordResetCode(
        user_id=user.id,
        code_hash=hash_token(code),
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES),
    )
    db.add(entry)
    await db.flush()
    logger.info("Password reset code issued for user %s", user.id)
    return entry


async def confirm_password_reset(
    db: AsyncSession,
    email: Optional[str],
    code: Optional[str],
    new_password: Optional[str],
) -> User:
    """Consume a valid reset code and set the new password."""
    if not email or not code or not new_password:
        raise BadRequestException("Email, code, and new password are required")

    user = await get_user_by_email(db, email)
    if user is None:
        raise BadRequestException("Invalid or expired code")

    result = await db.execute(
        select(PasswordResetCode)
        .where(
            PasswordResetCode.user_id == user.id,
            PasswordResetCode.code_hash == hash_token(code),
            PasswordResetCode.used_at.is_(None),
        )
        .order_by(PasswordResetCode.id.desc()),
    )
    entry = result.scalars().first()
    now = datetime.now(timezone.utc)
    if entry is None or as_utc(entry.expires_at) < now:
        raise BadRequestException("Invalid or expired code")

    user.password = hash_password(new_password)
    entry.used_at = now
    await db.flush()
    return user
