"""Exchange requests router — list, file, decide (approve swaps shifts), delete."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User
from shift_manager.database import get_db
from shift_manager.exchange_requests.schemas import (
    ExchangeRequestCreate,
    ExchangeRequestDetail,
    ExchangeRequestResponse,
    ExchangeRequestUpdate,
)
from shift_manager.exchange_requests.service import ExchangeRequestService

router = APIRouter(prefix="", tags=["exchange-requests"])


# ── GET /: list ────────────────────────────────────────────────────

@router.get("", response_model=list[ExchangeRequestDetail])
async def list_exchange_requests(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    user_id: Optional[int] = Query(None, alias="userId"),
    pending: Optional[str] = Query(None),
):
    return await ExchangeRequestService.list_requests(
        db, user, user_id=user_id, pending=pending == "true",
    )


# ── POST /: file a request ────────────────────────────────────────

@router.post("", response_model=ExchangeRequestResponse, status_code=201)
async def create_exchange_request(
    body: ExchangeRequestCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await ExchangeRequestService.create_request(db, body, user)


# ── PUT /{id}: decide ─────────────────────────────────────────────

@router.put("/{id}", response_model=ExchangeRequestResponse)
async def update_exchange_request(
    id: int,
    body: ExchangeRequestUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await ExchangeRequestService.update_request(
        db,
        id,
        body,
        user,
        ip_address=request.client.host if request.client else None,
    )


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_exchange_request(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await ExchangeRequestService.delete_request(db, id, user)
    return Response(status_code=204)
