"""Worker service — user listing scoped by role, company-managed accounts."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.auth.service import ensure_unique_identity, hash_password
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import UserRole
from shift_manager.common.dates import naive_utc
from shift_manager.common.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
)
from shift_manager.workers.schemas import WorkerCreate, WorkerUpdate

logger = logging.getLogger(__name__)


class WorkerService:
    """User administration as seen by admins and companies."""

    @staticmethod
    async def list_visible_users(db: AsyncSession, user: User) -> Sequence[User]:
        """Admin sees everyone, a company itself + its workers, a worker only itself."""
        query = select(User)
        if user.role == UserRole.company.value:
            query = query.where(or_(User.id == user.id, User.parent_company_id == user.id))
        elif user.role != UserRole.admin.value:
            query = query.where(User.id == user.id)
        result = await db.execute(query.order_by(User.id))
        return result.scalars().all()

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> User:
        target = await db.get(User, user_id)
        if target is None:
            raise NotFoundException("User")
        return target

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_worker(
        db: AsyncSession,
        body: WorkerCreate,
        actor: User,
        ip_address: Optional[str] = None,
    ) -> User:
        if actor.role not in (UserRole.admin.value, UserRole.company.value):
            raise ForbiddenException(detail="Forbidden")

        await ensure_unique_identity(db, email=body.email, username=body.username)

        data = body.model_dump(exclude={"password", "email", "role", "date_of_birth"})
        role = body.role.value
        if actor.role == UserRole.company.value:
            role = UserRole.worker.value
            data["parent_company_id"] = actor.id

        worker = User(
            **data,
            email=body.email.lower(),
            role=role,
            date_of_birth=naive_utc(body.date_of_birth),
            password=hash_password(body.password),
        )
        if worker.company_verified is None:
            worker.company_verified = False
        db.add(worker)
        await db.flush()

        await create_audit_entry(
            db,
            action="create",
            entity_type="user",
            entity_id=worker.id,
            actor_id=actor.id,
            new_values={"email": worker.email, "role": worker.role},
            ip_address=ip_address,
        )
        return worker

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_worker(
        db: AsyncSession,
        user_id: int,
        body: WorkerUpdate,
        actor: User,
    ) -> User:
        target = await WorkerService.get_user(db, user_id)

        is_admin = actor.role == UserRole.admin.value
        is_self = actor.id == target.id
        is_parent = (
            actor.role == UserRole.company.value and target.parent_company_id == actor.id
        )
        if not (is_admin or is_self or is_parent):
            raise ForbiddenException(detail="Forbidden")

        updates = body.model_dump(exclude_unset=True)

        if not is_admin:
            new_role = updates.pop("role", None)
            if new_role is not None and new_role.value != target.role:
                raise ForbiddenException(detail="You cannot change the role of this user")
            updates.pop("parent_company_id", None)
        elif updates.get("role") is None:
            updates.pop("role", None)

        await ensure_unique_identity(
            db,
            email=updates.get("email"),
            username=updates.get("username"),
            exclude_user_id=target.id,
        )

        if updates.get("password"):
            updates["password"] = hash_password(updates["password"])
        else:
            updates.pop("password", None)
        if updates.get("email"):
            updates["email"] = updates["email"].lower()
        if "date_of_birth" in updates:
            updates["date_of_birth"] = naive_utc(updates["date_of_birth"])
        if isinstance(updates.get("role"), UserRole):
            updates["role"] = updates["role"].value

        for key, value in updates.items():
            setattr(target, key, value)
        await db.flush()
        return target

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_worker(db: AsyncSession, user_id: int, actor: User) -> None:
        if actor.id == user_id:
            raise BadRequestException("Cannot delete your own account")

        target = await WorkerService.get_user(db, user_id)
        is_parent = (
            actor.role == UserRole.company.value and target.parent_company_id == actor.id
        )
        if actor.role != UserRole.admin.value and not is_parent:
            raise ForbiddenException(detail="Forbidden")

        await create_audit_entry(
            db,
            action="delete",
            entity_type="user",
            entity_id=target.id,
            actor_id=actor.id,
            old_values={"email": target.email, "role": target.role},
        )
        logger.info("User %s deleted by %s", target.id, actor.id)
        await db.delete(target)
        await db.flush()
