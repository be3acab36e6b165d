"""Customers router — owner-scoped address book for invoicing."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.access import has_data_access
from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource
from shift_manager.customers.schemas import CustomerPayload, CustomerResponse
from shift_manager.customers.service import CustomerService
from shift_manager.database import get_db

router = APIRouter(prefix="", tags=["customers"])


# ── GET /: own customers ───────────────────────────────────────────

@router.get("", response_model=list[CustomerResponse])
async def list_customers(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await CustomerService.list_customers(db, user)


# ── GET /search: must precede /{id} ───────────────────────────────

@router.get("/search", response_model=list[CustomerResponse])
async def search_customers(
    q: str = Query(""),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await CustomerService.search_customers(db, user, q)


# ── POST /: create ────────────────────────────────────────────────

@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    body: CustomerPayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await CustomerService.create_customer(db, body, user)


# ── GET /{id} ──────────────────────────────────────────────────────

@router.get("/{id}", response_model=CustomerResponse)
async def get_customer(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.customer)),
):
    return await CustomerService.get_customer(db, id)


# ── PUT /{id} ──────────────────────────────────────────────────────

@router.put("/{id}", response_model=CustomerResponse)
async def update_customer(
    id: int,
    body: CustomerPayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.customer)),
):
    return await CustomerService.update_customer(db, id, body)


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_customer(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.customer)),
):
    await CustomerService.delete_customer(db, id)
    return Response(status_code=204)
