"""Customer Pydantic schemas."""

from datetime import datetime
from typing import Optional

from shift_manager.common.schemas import CamelModel


class CustomerPayload(CamelModel):
    """Create / update body; field rules are checked in the service."""

    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    ic: Optional[str] = None
    dic: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class CustomerResponse(CamelModel):
    id: int
    name: str
    address: str
    city: Optional[str] = None
    zip: Optional[str] = None
    ic: Optional[str] = None
    dic: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    user_id: int
