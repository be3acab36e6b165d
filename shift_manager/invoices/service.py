"""Invoice service — payload normalisation, item replacement, scoping."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shift_manager.auth.models import User
from shift_manager.common.audit import create_audit_entry
from shift_manager.common.constants import (
    DEFAULT_INVOICE_UNIT,
    InvoiceType,
    PaymentMethod,
    UserRole,
)
from shift_manager.common.dates import naive_utc
from shift_manager.common.exceptions import BadRequestException, NotFoundException
from shift_manager.invoices.models import Invoice, InvoiceItem
from shift_manager.invoices.schemas import InvoicePayload


def normalize_invoice(body: InvoicePayload) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Apply defaults and fallbacks; returns (invoice_fields, items)."""
    now = naive_utc(datetime.now(timezone.utc)).replace(microsecond=0)
    items = [
        {
            "description": item.description or "",
            "quantity": float(item.quantity or 0),
            "unit": item.unit or DEFAULT_INVOICE_UNIT,
            "price_per_unit": float(item.price_per_unit or 0),
        }
        for item in body.items
    ]

    if body.amount is not None:
        amount = float(body.amount)
    else:
        amount = round(sum(i["quantity"] * i["price_per_unit"] for i in items), 2)

    invoice = {
        "invoice_number": body.invoice_number,
        "type": (body.type or InvoiceType.issued).value,
        "date": body.date or now,
        "date_due": body.date_due or now,
        "date_issued": body.date_issued,
        "date_received": body.date_received,
        "customer_name": _first(body.customer_name, body.supplier_name, ""),
        "customer_address": _first(body.customer_address, body.supplier_address, ""),
        "customer_ic": body.customer_ic,
        "customer_dic": body.customer_dic,
        "supplier_name": body.supplier_name,
        "supplier_address": body.supplier_address,
        "supplier_ic": body.supplier_ic,
        "supplier_dic": body.supplier_dic,
        "bank_account": body.bank_account,
        "payment_method": body.payment_method or PaymentMethod.bank.value,
        "is_vat_payer": True if body.is_vat_payer is None else body.is_vat_payer,
        "amount": amount,
        "notes": body.notes,
        "is_paid": bool(body.is_paid),
    }
    if not invoice["invoice_number"]:
        raise BadRequestException("Invoice number is required")
    return invoice, items


def _first(*values: Optional[str]) -> str:
    for value in values:
        if value is not None:
            return value
    return ""


class InvoiceService:
    """Async CRUD operations for invoices and their items."""

    @staticmethod
    async def list_invoices(
        db: AsyncSession,
        user: User,
        invoice_type: Optional[str] = None,
    ) -> Sequence[Invoice]:
        query = select(Invoice)
        if user.role != UserRole.admin.value:
            query = query.where(Invoice.user_id == user.id)
        if invoice_type in (InvoiceType.issued.value, InvoiceType.received.value):
            query = query.where(Invoice.type == invoice_type)
        result = await db.execute(query.order_by(Invoice.date.desc(), Invoice.id.desc()))
        return result.scalars().all()

    @staticmethod
    async def get_invoice(db: AsyncSession, invoice_id: int) -> Invoice:
        result = await db.execute(
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .options(selectinload(Invoice.items))
            .execution_options(populate_existing=True),
        )
        invoice = result.scalars().first()
        if invoice is None:
            raise NotFoundException("Invoice")
        return invoice

    @staticmethod
    async def create_invoice(db: AsyncSession, body: InvoicePayload, user: User) -> Invoice:
        fields, items = normalize_invoice(body)
        invoice = Invoice(**fields, user_id=user.id)
        invoice.items = [InvoiceItem(**item) for item in items]
        db.add(invoice)
        await db.flush()
        return invoice

    @staticmethod
    async def update_invoice(
        db: AsyncSession,
        invoice_id: int,
        body: InvoicePayload,
    ) -> Invoice:
        invoice = await InvoiceService.get_invoice(db, invoice_id)
        fields, items = normalize_invoice(body)
        for key, value in fields.items():
            setattr(invoice, key, value)

        # Items are replaced wholesale
        invoice.items = [InvoiceItem(**item) for item in items]
        await db.flush()
        return invoice

    @staticmethod
    async def delete_invoice(db: AsyncSession, invoice_id: int, user: User) -> None:
        invoice = await InvoiceService.get_invoice(db, invoice_id)
        await create_audit_entry(
            db,
            action="delete",
            entity_type="invoice",
            entity_id=invoice.id,
            actor_id=user.id,
            old_values={"invoiceNumber": invoice.invoice_number, "amount": invoice.amount},
        )
        await db.delete(invoice)
        await db.flush()
