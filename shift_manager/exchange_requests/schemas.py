"""Exchange request Pydantic schemas."""

from typing import Optional

from shift_manager.auth.schemas import UserResponse
from shift_manager.common.constants import ExchangeStatus
from shift_manager.common.schemas import CamelModel
from shift_manager.shifts.schemas import ShiftResponse


class ExchangeRequestCreate(CamelModel):
    requester_id: Optional[int] = None
    requestee_id: Optional[int] = None
    request_shift_id: int
    offered_shift_id: int
    notes: Optional[str] = None


class ExchangeRequestUpdate(CamelModel):
    status: Optional[ExchangeStatus] = None
    notes: Optional[str] = None


class ExchangeRequestResponse(CamelModel):
    id: int
    requester_id: int
    requestee_id: Optional[int] = None
    request_shift_id: int
    offered_shift_id: int
    status: str
    notes: Optional[str] = None


class ExchangeRequestDetail(ExchangeRequestResponse):
    requester: Optional[UserResponse] = None
    requestee: Optional[UserResponse] = None
    request_shift: Optional[ShiftResponse] = None
    offered_shift: Optional[ShiftResponse] = None
