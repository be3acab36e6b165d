"""Workers router — account management for admins and companies."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.dependencies import get_current_user, require_role
from shift_manager.auth.models import User
from shift_manager.auth.schemas import UserResponse
from shift_manager.common.constants import UserRole
from shift_manager.database import get_db
from shift_manager.workers.schemas import DeleteResponse, WorkerCreate, WorkerUpdate
from shift_manager.workers.service import WorkerService

router = APIRouter(prefix="", tags=["workers"])


# ── GET /: visible users ──────────────────────────────────────────

@router.get("", response_model=list[UserResponse])
async def list_workers(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await WorkerService.list_visible_users(db, user)


# ── POST /: create account ────────────────────────────────────────

@router.post("", response_model=UserResponse, status_code=201)
async def create_worker(
    body: WorkerCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_role(UserRole.admin, UserRole.company)),
):
    ip = request.client.host if request.client else None
    return await WorkerService.create_worker(db, body, user, ip_address=ip)


# ── PATCH /{id}: update account ───────────────────────────────────

@router.patch("/{id}", response_model=UserResponse)
async def update_worker(
    id: int,
    body: WorkerUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await WorkerService.update_worker(db, id, body, user)


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", response_model=DeleteResponse)
async def delete_worker(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await WorkerService.delete_worker(db, id, user)
    return DeleteResponse(success=True)
