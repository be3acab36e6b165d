"""Stats service — the caller's hours and pending work for the current month.

All values are computed per request; nothing is cached.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.common.constants import ExchangeStatus, UPCOMING_SHIFT_WINDOW_DAYS
from shift_manager.common.dates import naive_utc, whole_hours
from shift_manager.exchange_requests.models import ExchangeRequest
from shift_manager.reports.service import month_bounds
from shift_manager.shifts.models import Shift
from shift_manager.stats.schemas import StatsResponse


class StatsService:

    @staticmethod
    async def get_stats(
        db: AsyncSession,
        user: User,
        now: Optional[datetime] = None,
    ) -> StatsResponse:
        now = naive_utc(now or datetime.now(timezone.utc))
        month_start, month_end = month_bounds(now.year, now.month)

        result = await db.execute(
            select(Shift).where(
                Shift.user_id == user.id,
                Shift.date >= month_start,
                Shift.date < month_end,
            ),
        )
        month_shifts = result.scalars().all()
        planned = sum(whole_hours(s.start_time, s.end_time) for s in month_shifts)
        worked = sum(
            whole_hours(s.start_time, s.end_time)
            for s in month_shifts
            if s.date is not None and s.date < now
        )

        upcoming = await db.execute(
            select(func.count()).select_from(Shift).where(
                Shift.user_id == user.id,
                Shift.date >= now,
                Shift.date <= now + timedelta(days=UPCOMING_SHIFT_WINDOW_DAYS),
            ),
        )
        pending = await db.execute(
            select(func.count()).select_from(ExchangeRequest).where(
                ExchangeRequest.requestee_id == user.id,
                ExchangeRequest.status == ExchangeStatus.pending.value,
            ),
        )

        return StatsResponse(
            planned_hours=planned,
            worked_hours=worked,
            upcoming_shifts=upcoming.scalar() or 0,
            exchange_requests=pending.scalar() or 0,
        )
