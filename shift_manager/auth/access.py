"""Ownership checks for single-entity routes.

The decision itself (``decide_access``) is a pure function over rows that
were already loaded, so the whole role × resource table can be exercised
without HTTP.  ``has_data_access`` wraps it as a FastAPI dependency:

    @router.get("/{id}", dependencies=[Depends(has_data_access(Resource.shift))])
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource, UserRole
from shift_manager.common.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
)
from shift_manager.customers.models import Customer
from shift_manager.database import get_db
from shift_manager.documents.models import Document
from shift_manager.invoices.models import Invoice
from shift_manager.shifts.models import Shift
from shift_manager.workplaces.models import Workplace

logger = logging.getLogger(__name__)


class AccessDecision(str, enum.Enum):
    allow = "allow"
    forbid = "forbid"
    not_found = "not_found"


@dataclass
class AccessContext:
    """Rows the decision needs, loaded up front."""

    entity: Any = None
    # shift → the workplace it belongs to
    workplace: Optional[Workplace] = None
    # shift → the worker assigned to it
    shift_user: Optional[User] = None
    # workplace → ids of workplaces the calling worker has shifts at
    worker_workplace_ids: frozenset[int] = field(default_factory=frozenset)


_OWNED_RESOURCES = {Resource.customer, Resource.invoice, Resource.document}


def decide_access(
    resource: Resource,
    role: UserRole,
    user_id: int,
    ctx: AccessContext,
) -> AccessDecision:
    """Apply the role / ownership table for one entity."""
    if role == UserRole.admin:
        return AccessDecision.allow
    if ctx.entity is None:
        return AccessDecision.not_found

    if resource == Resource.workplace:
        workplace: Workplace = ctx.entity
        if role == UserRole.company:
            allowed = workplace.is_controlled_by(user_id)
        else:
            allowed = workplace.id in ctx.worker_workplace_ids

    elif resource == Resource.shift:
        shift: Shift = ctx.entity
        if role == UserRole.worker:
            allowed = shift.user_id == user_id
        else:
            allowed = (
                ctx.workplace is not None and ctx.workplace.is_controlled_by(user_id)
            ) or (
                ctx.shift_user is not None and ctx.shift_user.parent_company_id == user_id
            )

    elif resource in _OWNED_RESOURCES:
        allowed = role == UserRole.company and ctx.entity.user_id == user_id

    else:
        allowed = False

    return AccessDecision.allow if allowed else AccessDecision.forbid


# ── Loading ─────────────────────────────────────────────────────────

_MODELS = {
    Resource.workplace: Workplace,
    Resource.shift: Shift,
    Resource.customer: Customer,
    Resource.invoice: Invoice,
    Resource.document: Document,
}


async def load_access_context(
    db: AsyncSession,
    resource: Resource,
    entity_id: int,
    user: User,
) -> AccessContext:
    entity = await db.get(_MODELS[resource], entity_id)
    ctx = AccessContext(entity=entity)
    if entity is None:
        return ctx

    if resource == Resource.shift:
        ctx.workplace = await db.get(Workplace, entity.workplace_id)
        if entity.user_id is not None:
            ctx.shift_user = await db.get(User, entity.user_id)
    elif resource == Resource.workplace and user.role == UserRole.worker.value:
        result = await db.execute(
            select(Shift.workplace_id).where(Shift.user_id == user.id).distinct(),
        )
        ctx.worker_workplace_ids = frozenset(result.scalars().all())
    return ctx


# ── Dependency factory ──────────────────────────────────────────────

def has_data_access(resource: Resource, param: str = "id") -> Callable:
    """Return a dependency that 404s / 403s before the handler runs."""

    async def _check(
        request: Request,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        role: UserRole = request.state.user_role
        if role == UserRole.admin:
            return user

        raw_id = request.path_params.get(param)
        if raw_id is None:
            # Collection routes apply their own scoping
            return user
        try:
            entity_id = int(raw_id)
        except (TypeError, ValueError):
            raise BadRequestException("Invalid identifier")

        ctx = await load_access_context(db, resource, entity_id, user)
        decision = decide_access(resource, role, user.id, ctx)
        if decision == AccessDecision.not_found:
            raise NotFoundException(resource.value.capitalize())
        if decision == AccessDecision.forbid:
            logger.warning(
                "User %s (%s) denied access to %s %s",
                user.id,
                role.value,
                resource.value,
                entity_id,
            )
            raise ForbiddenException(detail="Forbidden")
        return user

    return _check
