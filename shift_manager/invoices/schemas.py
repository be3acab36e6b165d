"""Invoice Pydantic schemas.

Czech registration numbers keep their upper-case acronyms on the wire
(``customerIC``, ``supplierDIC``), so those fields carry explicit aliases.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from shift_manager.common.constants import DEFAULT_INVOICE_UNIT, InvoiceType
from shift_manager.common.dates import parse_datetime
from shift_manager.common.schemas import CamelModel

_DATE_KEYS = ("date", "dateDue", "dateIssued", "dateReceived", "date_due", "date_issued", "date_received")


class InvoiceItemPayload(CamelModel):
    description: Optional[str] = ""
    quantity: Optional[float] = 0
    unit: Optional[str] = DEFAULT_INVOICE_UNIT
    price_per_unit: Optional[float] = 0


class InvoicePayload(CamelModel):
    """Create / update body; normalisation happens in the service."""

    invoice_number: Optional[str] = None
    type: Optional[InvoiceType] = None
    date: Optional[datetime] = None
    date_due: Optional[datetime] = None
    date_issued: Optional[datetime] = None
    date_received: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_ic: Optional[str] = Field(None, alias="customerIC")
    customer_dic: Optional[str] = Field(None, alias="customerDIC")
    supplier_name: Optional[str] = None
    supplier_address: Optional[str] = None
    supplier_ic: Optional[str] = Field(None, alias="supplierIC")
    supplier_dic: Optional[str] = Field(None, alias="supplierDIC")
    bank_account: Optional[str] = None
    payment_method: Optional[str] = None
    is_vat_payer: Optional[bool] = None
    amount: Optional[float] = None
    notes: Optional[str] = None
    is_paid: Optional[bool] = None
    items: list[InvoiceItemPayload] = []

    @model_validator(mode="before")
    @classmethod
    def _drop_invalid_dates(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in _DATE_KEYS:
            if key in cleaned:
                cleaned[key] = parse_datetime(cleaned[key])
        return cleaned


class InvoiceItemResponse(CamelModel):
    id: int
    invoice_id: int
    description: str
    quantity: float
    unit: str
    price_per_unit: float


class InvoiceResponse(CamelModel):
    id: int
    user_id: int
    invoice_number: str
    type: str
    date: datetime
    date_due: datetime
    date_issued: Optional[datetime] = None
    date_received: Optional[datetime] = None
    customer_name: str
    customer_address: str
    customer_ic: Optional[str] = Field(None, alias="customerIC")
    customer_dic: Optional[str] = Field(None, alias="customerDIC")
    supplier_name: Optional[str] = None
    supplier_address: Optional[str] = None
    supplier_ic: Optional[str] = Field(None, alias="supplierIC")
    supplier_dic: Optional[str] = Field(None, alias="supplierDIC")
    bank_account: Optional[str] = None
    payment_method: str
    is_vat_payer: bool
    amount: float
    notes: Optional[str] = None
    is_paid: bool
    created_at: Optional[datetime] = None


class InvoiceDetail(InvoiceResponse):
    items: list[InvoiceItemResponse] = []


class GeneratePdfResponse(CamelModel):
    success: bool
    message: str
    pdf_url: str
