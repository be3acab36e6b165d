"""Exchange request service — filing, scoping, and the atomic shift swap.

Approving a request moves each shift's worker onto the other shift.  The
status change and both shift updates happen inside the request-scoped
transaction opened by ``get_db``; the two shift rows are locked in id
order (``SELECT … FOR UPDATE``) so concurrent approvals touching the same
shifts serialise instead of interleaving.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shift_manager.auth.models import User
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import ExchangeStatus, UserRole
from shift_manager.common.exceptions import (
    BadRequestException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
)
from shift_manager.exchange_requests.models import ExchangeRequest
from shift_manager.exchange_requests.schemas import (
    ExchangeRequestCreate,
    ExchangeRequestUpdate,
)
from shift_manager.shifts.models import Shift
from shift_manager.shifts.service import company_worker_ids

logger = logging.getLogger(__name__)


async def _company_employs(db: AsyncSession, company_id: int, *user_ids: Optional[int]) -> set[int]:
    """Return which of *user_ids* are workers of *company_id*."""
    ids = [uid for uid in user_ids if uid is not None]
    if not ids:
        return set()
    result = await db.execute(
        select(User.id).where(User.parent_company_id == company_id, User.id.in_(ids)),
    )
    return set(result.scalars().all())


async def can_manage_request(
    db: AsyncSession,
    user: User,
    request: ExchangeRequest,
    *,
    allow_requester: bool = False,
) -> bool:
    """Admin always; a company whose worker is a party; otherwise the requestee
    (or, for deletion, the requester)."""
    if user.role == UserRole.admin.value:
        return True
    if user.role == UserRole.company.value:
        employed = await _company_employs(db, user.id, request.requester_id, request.requestee_id)
        return bool(employed)
    if allow_requester:
        return request.requester_id == user.id
    return request.requestee_id == user.id


class ExchangeRequestService:
    """Async operations for shift exchange requests."""

    # ── List ────────────────────────────────────────────────────────

    @staticmethod
    async def list_requests(
        db: AsyncSession,
        user: User,
        *,
        user_id: Optional[int] = None,
        pending: bool = False,
    ) -> Sequence[ExchangeRequest]:
        query = (
            select(ExchangeRequest)
            .options(
                selectinload(ExchangeRequest.requester),
                selectinload(ExchangeRequest.requestee),
                selectinload(ExchangeRequest.request_shift),
                selectinload(ExchangeRequest.offered_shift),
            )
            .execution_options(populate_existing=True)
        )

        if user_id is not None:
            query = query.where(
                or_(ExchangeRequest.requester_id == user_id, ExchangeRequest.requestee_id == user_id),
            )
        if pending:
            query = query.where(ExchangeRequest.status == ExchangeStatus.pending.value)

        if user.role == UserRole.company.value:
            employees = company_worker_ids(user.id)
            query = query.where(
                or_(
                    ExchangeRequest.requester_id.in_(employees),
                    ExchangeRequest.requestee_id.in_(employees),
                ),
            )
        elif user.role != UserRole.admin.value:
            query = query.where(
                or_(ExchangeRequest.requester_id == user.id, ExchangeRequest.requestee_id == user.id),
            )

        result = await db.execute(query.order_by(ExchangeRequest.id))
        return result.scalars().all()

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_request(
        db: AsyncSession,
        body: ExchangeRequestCreate,
        user: User,
    ) -> ExchangeRequest:
        if body.request_shift_id == body.offered_shift_id:
            raise BadRequestException("A shift cannot be exchanged for itself")

        request_shift = await db.get(Shift, body.request_shift_id)
        offered_shift = await db.get(Shift, body.offered_shift_id)

        if user.role == UserRole.worker.value:
            if request_shift is None or request_shift.user_id != user.id:
                raise ForbiddenException(detail="Cannot exchange a shift that is not yours")

        if request_shift is None or offered_shift is None:
            raise NotFoundException("Shift")

        if user.role == UserRole.company.value:
            employed = await _company_employs(
                db, user.id, request_shift.user_id, offered_shift.user_id,
            )
            if request_shift.user_id not in employed or offered_shift.user_id not in employed:
                raise ForbiddenException(detail="Forbidden")

        # The parties are always the workers currently holding the two shifts
        requester_id = request_shift.user_id
        requestee_id = offered_shift.user_id
        if requester_id is None:
            raise BadRequestException("The requested shift has no assigned worker")
        if body.requester_id is not None and body.requester_id != requester_id:
            raise ForbiddenException(detail="requesterId must be the worker of the requested shift")
        if body.requestee_id is not None and body.requestee_id != requestee_id:
            raise ForbiddenException(detail="requesteeId must be the worker of the offered shift")
        if requestee_id == requester_id:
            raise BadRequestException("Both shifts belong to the same worker")

        request = ExchangeRequest(
            requester_id=requester_id,
            requestee_id=requestee_id,
            request_shift_id=request_shift.id,
            offered_shift_id=offered_shift.id,
            status=ExchangeStatus.pending.value,
            notes=body.notes,
        )
        db.add(request)
        await db.flush()
        return request

    # ── Decide / update ─────────────────────────────────────────────

    @staticmethod
    async def update_request(
        db: AsyncSession,
        request_id: int,
        body: ExchangeRequestUpdate,
        user: User,
        *,
        ip_address: Optional[str] = None,
    ) -> ExchangeRequest:
        result = await db.execute(
            select(ExchangeRequest)
            .where(ExchangeRequest.id == request_id)
            .with_for_update(),
        )
        request = result.scalars().first()
        if request is None:
            raise NotFoundException("Exchange request")

        if not await can_manage_request(db, user, request):
            raise ForbiddenException(detail="Forbidden")

        if body.notes is not None:
            request.notes = body.notes

        decision = body.status
        if decision is None:
            await db.flush()
            return request

        if request.status != ExchangeStatus.pending.value:
            raise ConflictError(
                "status",
                request.status,
                detail=f"Exchange request has already been {request.status}.",
            )
        if decision == ExchangeStatus.pending:
            await db.flush()
            return request

        if decision == ExchangeStatus.approved:
            await ExchangeRequestService._swap_workers(db, request)

        request.status = decision.value
        await db.flush()

        await create_audit_entry(
            db,
            action="approve" if decision == ExchangeStatus.approved else "reject",
            entity_type="exchange_request",
            entity_id=request.id,
            actor_id=user.id,
            old_values={"status": ExchangeStatus.pending.value},
            new_values={"status": decision.value},
            ip_address=ip_address,
        )
        logger.info("Exchange request %s %s by user %s", request.id, decision.value, user.id)
        return request

    @staticmethod
    async def _swap_workers(db: AsyncSession, request: ExchangeRequest) -> None:
        """Swap ``user_id`` between the two shifts; nothing else is touched."""
        result = await db.execute(
            select(Shift)
            .where(Shift.id.in_([request.request_shift_id, request.offered_shift_id]))
            .order_by(Shift.id)
            .with_for_update(),
        )
        shifts = {shift.id: shift for shift in result.scalars().all()}
        request_shift = shifts.get(request.request_shift_id)
        offered_shift = shifts.get(request.offered_shift_id)
        if request_shift is None or offered_shift is None:
            raise NotFoundException("Shift")

        request_shift.user_id, offered_shift.user_id = offered_shift.user_id, request_shift.user_id
        await db.flush()

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_request(db: AsyncSession, request_id: int, user: User) -> None:
        request = await db.get(ExchangeRequest, request_id)
        if request is None:
            raise NotFoundException("Exchange request")

        if not await can_manage_request(db, user, request, allow_requester=True):
            raise ForbiddenException(detail="Forbidden")

        await create_audit_entry(
            db,
            action="delete",
            entity_type="exchange_request",
            entity_id=request.id,
            actor_id=user.id,
            old_values={"status": request.status},
        )
        await db.delete(request)
        await db.flush()
