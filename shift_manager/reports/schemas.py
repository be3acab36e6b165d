"""Report Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from shift_manager.common.schemas import CamelModel


class ReportGenerateRequest(CamelModel):
    user_id: Optional[int] = None
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)


class ReportResponse(CamelModel):
    id: int
    user_id: int
    month: int
    year: int
    total_hours: int
    generated: Optional[datetime] = None
