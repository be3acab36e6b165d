"""Invoice ORM models: Invoice, InvoiceItem."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_manager.common.audit import utcnow
from shift_manager.common.constants import DEFAULT_INVOICE_UNIT, InvoiceType, PaymentMethod
from shift_manager.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invoice_number: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    type: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=InvoiceType.issued.value
    )
    date: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)
    date_due: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)
    date_issued: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    date_received: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)

    customer_name: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    customer_address: Mapped[str] = mapped_column(sa.String(500), nullable=False, default="")
    customer_ic: Mapped[Optional[str]] = mapped_column(sa.String(20))
    customer_dic: Mapped[Optional[str]] = mapped_column(sa.String(20))
    supplier_name: Mapped[Optional[str]] = mapped_column(sa.String(255))
    supplier_address: Mapped[Optional[str]] = mapped_column(sa.String(500))
    supplier_ic: Mapped[Optional[str]] = mapped_column(sa.String(20))
    supplier_dic: Mapped[Optional[str]] = mapped_column(sa.String(20))

    bank_account: Mapped[Optional[str]] = mapped_column(sa.String(100))
    payment_method: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=PaymentMethod.bank.value
    )
    is_vat_payer: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    amount: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)
    is_paid: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Relationships
    items: Mapped[list["InvoiceItem"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )

    def __repr__(self) -> str:
        return f"<Invoice {self.id} {self.invoice_number}>"


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    invoice_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(sa.String(500), nullable=False, default="")
    quantity: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(sa.String(20), nullable=False, default=DEFAULT_INVOICE_UNIT)
    price_per_unit: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)

    # Relationships
    invoice: Mapped["Invoice"] = relationship(back_populates="items")

    @property
    def total(self) -> float:
        return self.quantity * self.price_per_unit
