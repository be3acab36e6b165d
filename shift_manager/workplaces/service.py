"""Workplace service layer — scoped listing and owner/manager rules."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import UserRole
from shift_manager.common.exceptions import ForbiddenException, NotFoundException
from shift_manager.shifts.models import Shift
from shift_manager.workplaces.models import Workplace
from shift_manager.workplaces.schemas import WorkplaceCreate, WorkplaceUpdate


class WorkplaceService:
    """Async CRUD operations for workplaces."""

    @staticmethod
    async def list_workplaces(db: AsyncSession, user: User) -> Sequence[Workplace]:
        query = select(Workplace).order_by(Workplace.id)
        if user.role == UserRole.company.value:
            query = query.where(
                or_(Workplace.owner_id == user.id, Workplace.manager_id == user.id),
            )
        elif user.role == UserRole.worker.value:
            shift_workplaces = select(Shift.workplace_id).where(Shift.user_id == user.id)
            query = query.where(Workplace.id.in_(shift_workplaces))
        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def get_workplace(db: AsyncSession, workplace_id: int) -> Workplace:
        workplace = await db.get(Workplace, workplace_id)
        if workplace is None:
            raise NotFoundException("Workplace")
        return workplace

    @staticmethod
    async def create_workplace(db: AsyncSession, body: WorkplaceCreate, user: User) -> Workplace:
        workplace = Workplace(**body.model_dump(mode="json"), owner_id=user.id)
        db.add(workplace)
        await db.flush()
        return workplace

    @staticmethod
    async def update_workplace(
        db: AsyncSession,
        workplace_id: int,
        body: WorkplaceUpdate,
        user: User,
    ) -> Workplace:
        if user.role == UserRole.worker.value:
            raise ForbiddenException(detail="Forbidden")

        workplace = await WorkplaceService.get_workplace(db, workplace_id)
        is_admin = user.role == UserRole.admin.value
        is_owner = workplace.owner_id == user.id
        is_manager = workplace.manager_id == user.id
        if not (is_admin or is_owner or is_manager):
            raise ForbiddenException(detail="Forbidden")

        updates = body.model_dump(mode="json", exclude_unset=True)
        if not (is_admin or is_owner):
            updates.pop("owner_id", None)

        for key, value in updates.items():
            setattr(workplace, key, value)
        await db.flush()
        return workplace

    @staticmethod
    async def delete_workplace(db: AsyncSession, workplace_id: int, user: User) -> None:
        if user.role == UserRole.worker.value:
            raise ForbiddenException(detail="Forbidden")

        workplace = await WorkplaceService.get_workplace(db, workplace_id)
        if user.role != UserRole.admin.value and workplace.owner_id != user.id:
            raise ForbiddenException(detail="Forbidden")

        await create_audit_entry(
            db,
            action="delete",
            entity_type="workplace",
            entity_id=workplace.id,
            actor_id=user.id,
            old_values={"name": workplace.name, "ownerId": workplace.owner_id},
        )
        await db.delete(workplace)
        await db.flush()
