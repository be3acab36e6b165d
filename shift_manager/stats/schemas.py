"""Stats response schema."""

from shift_manager.common.schemas import CamelModel


class StatsResponse(CamelModel):
    planned_hours: int = 0
    worked_hours: int = 0
    upcoming_shifts: int = 0
    exchange_requests: int = 0
