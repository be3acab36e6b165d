"""Shift Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import model_validator

from shift_manager.auth.schemas import UserResponse
from shift_manager.common.dates import parse_datetime
from shift_manager.common.schemas import CamelModel
from shift_manager.workplaces.schemas import WorkplaceResponse

_DATE_KEYS = ("date", "startTime", "endTime", "start_time", "end_time")


class ShiftPayload(CamelModel):
    """Create / update body; unparseable date values are dropped."""

    workplace_id: Optional[int] = None
    user_id: Optional[int] = None
    date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hours: Optional[int] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_unparseable_dates(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in _DATE_KEYS:
            if key in cleaned and cleaned[key] not in (None, ""):
                parsed = parse_datetime(cleaned[key])
                if parsed is None:
                    cleaned.pop(key)
                else:
                    cleaned[key] = parsed
            elif cleaned.get(key) == "":
                cleaned.pop(key)
        return cleaned


class ShiftResponse(CamelModel):
    id: int
    workplace_id: int
    user_id: Optional[int] = None
    date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hours: Optional[int] = None
    notes: Optional[str] = None


class ShiftDetail(ShiftResponse):
    workplace: Optional[WorkplaceResponse] = None
    user: Optional[UserResponse] = None
