"""Shift service layer — role scoping, assignment checks, hour derivation."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shift_manager.auth.models import User
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import UserRole
from shift_manager.common.dates import whole_hours
from shift_manager.common.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
)
from shift_manager.common.filters import apply_filters
from shift_manager.shifts.models import Shift
from shift_manager.shifts.schemas import ShiftPayload
from shift_manager.workplaces.models import Workplace


def company_worker_ids(company_id: int):
    """Subquery of the ids of users employed by *company_id*."""
    return select(User.id).where(User.parent_company_id == company_id)


def company_workplace_ids(company_id: int):
    """Subquery of the ids of workplaces *company_id* owns or manages."""
    return select(Workplace.id).where(
        or_(Workplace.owner_id == company_id, Workplace.manager_id == company_id),
    )


class ShiftService:
    """Async CRUD operations for shifts."""

    # ── List ────────────────────────────────────────────────────────

    @staticmethod
    async def list_shifts(
        db: AsyncSession,
        user: User,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        workplace_id: Optional[int] = None,
    ) -> Sequence[Shift]:
        query = select(Shift).options(
            selectinload(Shift.workplace),
            selectinload(Shift.user),
        ).execution_options(populate_existing=True)

        filters: dict[str, Any] = {"user_id": user_id, "workplace_id": workplace_id}
        # The date window applies only when both ends are given and no user filter is set
        if user_id is None and start_date is not None and end_date is not None:
            filters["date__from"] = start_date
            filters["date__to"] = end_date
        query = apply_filters(query, Shift, filters)

        if user.role == UserRole.company.value:
            query = query.where(
                or_(
                    Shift.user_id.in_(company_worker_ids(user.id)),
                    Shift.workplace_id.in_(company_workplace_ids(user.id)),
                ),
            )
        elif user.role != UserRole.admin.value:
            query = query.where(Shift.user_id == user.id)

        result = await db.execute(query.order_by(Shift.date, Shift.id))
        return result.scalars().all()

    # ── Get single ──────────────────────────────────────────────────

    @staticmethod
    async def get_shift(db: AsyncSession, shift_id: int, *, with_relations: bool = False) -> Shift:
        query = select(Shift).where(Shift.id == shift_id)
        if with_relations:
            query = query.options(
                selectinload(Shift.workplace),
                selectinload(Shift.user),
            ).execution_options(populate_existing=True)
        result = await db.execute(query)
        shift = result.scalars().first()
        if shift is None:
            raise NotFoundException("Shift")
        return shift

    # ── Assignment checks (company callers) ─────────────────────────

    @staticmethod
    async def _check_company_workplace(db: AsyncSession, workplace_id: int, company: User) -> None:
        workplace = await db.get(Workplace, workplace_id)
        if workplace is None:
            raise NotFoundException("Workplace")
        if not workplace.is_controlled_by(company.id):
            raise ForbiddenException(detail="Forbidden")

    @staticmethod
    async def _check_company_worker(db: AsyncSession, worker_id: int, company: User) -> None:
        worker = await db.get(User, worker_id)
        if worker is None:
            raise NotFoundException("Worker")
        if worker.parent_company_id != company.id:
            raise ForbiddenException(detail="Forbidden")

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_shift(db: AsyncSession, body: ShiftPayload, user: User) -> Shift:
        if not body.workplace_id:
            raise BadRequestException("Workplace ID is required")

        if user.role == UserRole.company.value:
            await ShiftService._check_company_workplace(db, body.workplace_id, user)
            if body.user_id:
                await ShiftService._check_company_worker(db, body.user_id, user)
        elif await db.get(Workplace, body.workplace_id) is None:
            raise NotFoundException("Workplace")

        shift = Shift(**body.model_dump())
        if shift.hours is None and shift.start_time and shift.end_time:
            shift.hours = whole_hours(shift.start_time, shift.end_time)
        db.add(shift)
        await db.flush()
        return shift

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_shift(
        db: AsyncSession,
        shift_id: int,
        body: ShiftPayload,
        user: User,
    ) -> Shift:
        shift = await ShiftService.get_shift(db, shift_id)
        updates = body.model_dump(exclude_unset=True)

        if user.role == UserRole.worker.value:
            # Workers may only edit the metadata of their own shift
            updates.pop("user_id", None)
            updates.pop("workplace_id", None)

        if user.role == UserRole.company.value:
            new_workplace = updates.get("workplace_id")
            if new_workplace and new_workplace != shift.workplace_id:
                await ShiftService._check_company_workplace(db, new_workplace, user)
            new_worker = updates.get("user_id")
            if new_worker and new_worker != shift.user_id:
                await ShiftService._check_company_worker(db, new_worker, user)

        if updates.get("workplace_id") is None:
            updates.pop("workplace_id", None)

        for key, value in updates.items():
            setattr(shift, key, value)

        times_changed = "start_time" in updates or "end_time" in updates
        if "hours" not in updates and times_changed and shift.start_time and shift.end_time:
            shift.hours = whole_hours(shift.start_time, shift.end_time)

        await db.flush()
        return shift

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_shift(db: AsyncSession, shift_id: int, user: User) -> None:
        if user.role == UserRole.worker.value:
            raise ForbiddenException(detail="Forbidden")

        shift = await ShiftService.get_shift(db, shift_id)
        await create_audit_entry(
            db,
            action="delete",
            entity_type="shift",
            entity_id=shift.id,
            actor_id=user.id,
            old_values={"workplaceId": shift.workplace_id, "userId": shift.user_id},
        )
        await db.delete(shift)
        await db.flush()
