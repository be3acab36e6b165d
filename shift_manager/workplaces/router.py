"""Workplaces router — scoped listing, CRUD with owner/manager rules."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.access import has_data_access
from shift_manager.auth.dependencies import get_current_user, require_role
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource, UserRole
from shift_manager.database import get_db
from shift_manager.workplaces.schemas import (
    WorkplaceCreate,
    WorkplaceResponse,
    WorkplaceUpdate,
)
from shift_manager.workplaces.service import WorkplaceService

router = APIRouter(prefix="", tags=["workplaces"])


# ── GET /: list (scoped by role) ───────────────────────────────────

@router.get("", response_model=list[WorkplaceResponse])
async def list_workplaces(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await WorkplaceService.list_workplaces(db, user)


# ── POST /: create (owner = caller) ───────────────────────────────

@router.post("", response_model=WorkplaceResponse, status_code=201)
async def create_workplace(
    body: WorkplaceCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_role(UserRole.admin, UserRole.company)),
):
    return await WorkplaceService.create_workplace(db, body, user)


# ── GET /{id}: detail ─────────────────────────────────────────────

@router.get("/{id}", response_model=WorkplaceResponse)
async def get_workplace(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.workplace)),
):
    return await WorkplaceService.get_workplace(db, id)


# ── PUT|PATCH /{id}: update ───────────────────────────────────────

@router.put("/{id}", response_model=WorkplaceResponse)
@router.patch("/{id}", response_model=WorkplaceResponse)
async def update_workplace(
    id: int,
    body: WorkplaceUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.workplace)),
):
    return await WorkplaceService.update_workplace(db, id, body, user)


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_workplace(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.workplace)),
):
    await WorkplaceService.delete_workplace(db, id, user)
    return Response(status_code=204)
