"""Customer directory service — owner-scoped CRUD, search, IČO/DIČ rules."""

from __future__ import annotations

import re
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.common.exceptions import NotFoundException, ValidationException
from shift_manager.common.filters import apply_search
from shift_manager.customers.models import Customer
from shift_manager.customers.schemas import CustomerPayload

DIC_PATTERN = re.compile(r"^CZ\d{8,10}$")
ICO_PATTERN = re.compile(r"^\d{8}$")

SEARCH_COLUMNS = ("name", "ic", "dic", "city", "email")


def validate_customer(data: dict) -> None:
    """Raise 400 for a missing name/address or malformed IČO/DIČ."""
    if not data.get("name") or not data.get("address"):
        raise ValidationException(
            {"name": ["required"], "address": ["required"]},
            detail="Name and address are required",
        )
    dic = data.get("dic")
    if dic and not DIC_PATTERN.match(dic):
        raise ValidationException(
            {"dic": ["invalid format"]},
            detail="DIČ must be in format 'CZ' followed by 8-10 digits",
        )
    ic = data.get("ic")
    if ic and not ICO_PATTERN.match(ic):
        raise ValidationException(
            {"ic": ["invalid format"]},
            detail="IČO must be exactly 8 digits",
        )


class CustomerService:
    """Async CRUD operations for customers."""

    @staticmethod
    async def list_customers(db: AsyncSession, user: User) -> Sequence[Customer]:
        result = await db.execute(
            select(Customer).where(Customer.user_id == user.id).order_by(Customer.name),
        )
        return result.scalars().all()

    @staticmethod
    async def search_customers(db: AsyncSession, user: User, q: str) -> Sequence[Customer]:
        query = select(Customer).where(Customer.user_id == user.id)
        query = apply_search(query, Customer, q, SEARCH_COLUMNS)
        result = await db.execute(query.order_by(Customer.name))
        return result.scalars().all()

    @staticmethod
    async def get_customer(db: AsyncSession, customer_id: int) -> Customer:
        customer = await db.get(Customer, customer_id)
        if customer is None:
            raise NotFoundException("Customer")
        return customer

    @staticmethod
    async def create_customer(db: AsyncSession, body: CustomerPayload, user: User) -> Customer:
        data = body.model_dump()
        validate_customer(data)
        customer = Customer(**data, user_id=user.id)
        db.add(customer)
        await db.flush()
        return customer

    @staticmethod
    async def update_customer(
        db: AsyncSession,
        customer_id: int,
        body: CustomerPayload,
    ) -> Customer:
        customer = await CustomerService.get_customer(db, customer_id)
        updates = body.model_dump(exclude_unset=True)

        merged = {
            "name": updates.get("name", customer.name),
            "address": updates.get("address", customer.address),
            "ic": updates.get("ic", customer.ic),
            "dic": updates.get("dic", customer.dic),
        }
        validate_customer(merged)

        for key, value in updates.items():
            setattr(customer, key, value)
        await db.flush()
        return customer

    @staticmethod
    async def delete_customer(db: AsyncSession, customer_id: int) -> None:
        customer = await CustomerService.get_customer(db, customer_id)
        await db.delete(customer)
        await db.flush()
