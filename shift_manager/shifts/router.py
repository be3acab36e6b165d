"""Shifts router — scoped listing with embedded workplace/user, CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.access import has_data_access
from shift_manager.auth.dependencies import get_current_user, require_role
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource, UserRole
from shift_manager.common.dates import parse_datetime
from shift_manager.database import get_db
from shift_manager.shifts.schemas import ShiftDetail, ShiftPayload, ShiftResponse
from shift_manager.shifts.service import ShiftService

router = APIRouter(prefix="", tags=["shifts"])


# ── GET /: list ────────────────────────────────────────────────────

@router.get("", response_model=list[ShiftDetail])
async def list_shifts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    workplace_id: Optional[int] = Query(None, alias="workplaceId"),
):
    return await ShiftService.list_shifts(
        db,
        user,
        user_id=user_id,
        start_date=parse_datetime(start_date),
        end_date=parse_datetime(end_date),
        workplace_id=workplace_id,
    )


# ── POST /: create ────────────────────────────────────────────────

@router.post("", response_model=ShiftResponse, status_code=201)
async def create_shift(
    body: ShiftPayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_role(UserRole.admin, UserRole.company)),
):
    return await ShiftService.create_shift(db, body, user)


# ── GET /{id}: detail ─────────────────────────────────────────────

@router.get("/{id}", response_model=ShiftDetail)
async def get_shift(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.shift)),
):
    return await ShiftService.get_shift(db, id, with_relations=True)


# ── PUT /{id}: update ─────────────────────────────────────────────

@router.put("/{id}", response_model=ShiftResponse)
async def update_shift(
    id: int,
    body: ShiftPayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.shift)),
):
    return await ShiftService.update_shift(db, id, body, user)


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_shift(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.shift)),
):
    await ShiftService.delete_shift(db, id, user)
    return Response(status_code=204)
