"""Report service — monthly hour totals per worker."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.models import User
from shift_manager.common.constants import UserRole
from shift_manager.common.dates import whole_hours
from shift_manager.common.exceptions import ForbiddenException
from shift_manager.reports.models import Report
from shift_manager.reports.schemas import ReportGenerateRequest
from shift_manager.shifts.models import Shift

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open [first day, first day of next month) window."""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def _resolve_target(user: User, user_id: Optional[int]) -> int:
    target = user_id or user.id
    if target != user.id and user.role != UserRole.admin.value:
        raise ForbiddenException(detail="Forbidden")
    return target


class ReportService:

    @staticmethod
    async def list_reports(
        db: AsyncSession,
        user: User,
        user_id: Optional[int] = None,
    ) -> Sequence[Report]:
        target = _resolve_target(user, user_id)
        result = await db.execute(
            select(Report)
            .where(Report.user_id == target)
            .order_by(Report.year.desc(), Report.month.desc(), Report.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def total_hours(db: AsyncSession, user_id: int, year: int, month: int) -> int:
        start, end = month_bounds(year, month)
        result = await db.execute(
            select(Shift).where(
                Shift.user_id == user_id,
                Shift.date >= start,
                Shift.date < end,
            ),
        )
        return sum(whole_hours(s.start_time, s.end_time) for s in result.scalars().all())

    @staticmethod
    async def generate_report(
        db: AsyncSession,
        body: ReportGenerateRequest,
        user: User,
    ) -> Report:
        target = _resolve_target(user, body.user_id)
        total = await ReportService.total_hours(db, target, body.year, body.month)

        report = Report(user_id=target, month=body.month, year=body.year, total_hours=total)
        db.add(report)
        await db.flush()
        logger.info("Report %s/%s for user %s: %s h", body.month, body.year, target, total)
        return report
