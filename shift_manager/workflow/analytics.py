"""Workflow analytics — dashboard KPIs, finance overview, period reports.

Read-only aggregation; counts and sums are done in SQL.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.common.constants import ProjectStatus, WorkflowInvoiceStatus
from shift_manager.common.dates import as_utc, naive_utc
from shift_manager.workflow.models import (
    Attendance,
    Client,
    Employee,
    Payroll,
    Project,
    WorkflowInvoice,
    WorkflowShift,
)
from shift_manager.workflow.schemas import (
    ClientResponse,
    DashboardHighlights,
    DashboardStats,
    DashboardSummary,
    FinanceOverview,
    FinanceTotals,
    ReportRequest,
    ReportSummary,
    ShiftResponse,
)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 to the following Monday 00:00 around *now*."""
    start = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=7)


async def _scalar(db: AsyncSession, query) -> Any:
    result = await db.execute(query)
    return result.scalar() or 0


class AnalyticsService:

    # ═════════════════════════════════════════════════════════════════
    # GET /dashboard/summary
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def dashboard_summary(
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> DashboardSummary:
        now = naive_utc(now or datetime.now(timezone.utc))
        week_start, week_end = week_bounds(now)

        employees = await _scalar(db, select(func.count()).select_from(Employee))
        projects = await _scalar(
            db,
            select(func.count()).select_from(Project).where(
                Project.status != ProjectStatus.completed.value,
            ),
        )
        shifts_this_week = await _scalar(
            db,
            select(func.count()).select_from(WorkflowShift).where(
                WorkflowShift.start_time >= week_start,
                WorkflowShift.start_time < week_end,
            ),
        )
        overdue = await _scalar(
            db,
            select(func.count()).select_from(WorkflowInvoice).where(
                WorkflowInvoice.status == WorkflowInvoiceStatus.overdue.value,
            ),
        )
        attendance_this_week = await _scalar(
            db,
            select(func.count()).select_from(Attendance).where(
                Attendance.check_in >= week_start,
                Attendance.check_in < week_end,
            ),
        )
        revenue = await _scalar(
            db,
            select(func.sum(WorkflowInvoice.amount)).where(
                WorkflowInvoice.status == WorkflowInvoiceStatus.paid.value,
            ),
        )
        payroll_cost = await _scalar(db, select(func.sum(Payroll.net_pay)))

        clients = await db.execute(
            select(Client).order_by(Client.created_at.desc(), Client.id.desc()).limit(5),
        )
        shifts = await db.execute(
            select(WorkflowShift)
            .order_by(WorkflowShift.start_time.desc(), WorkflowShift.id.desc())
            .limit(5),
        )

        return DashboardSummary(
            stats=DashboardStats(
                employees=employees,
                projects=projects,
                shifts_this_week=shifts_this_week,
                overdue_invoices=overdue,
                attendance_records_this_week=attendance_this_week,
                revenue=round(float(revenue), 2),
                payroll_cost=round(float(payroll_cost), 2),
            ),
            highlights=DashboardHighlights(
                recent_clients=[ClientResponse.model_validate(c) for c in clients.scalars().all()],
                recent_shifts=[ShiftResponse.model_validate(s) for s in shifts.scalars().all()],
            ),
        )

    # ═════════════════════════════════════════════════════════════════
    # GET /finance/overview
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def finance_overview(db: AsyncSession) -> FinanceOverview:
        invoiced = await _scalar(db, select(func.sum(WorkflowInvoice.amount)))
        paid = await _scalar(
            db,
            select(func.sum(WorkflowInvoice.amount)).where(
                WorkflowInvoice.status == WorkflowInvoiceStatus.paid.value,
            ),
        )
        overdue = await _scalar(
            db,
            select(func.sum(WorkflowInvoice.amount)).where(
                WorkflowInvoice.status == WorkflowInvoiceStatus.overdue.value,
            ),
        )
        payroll = await _scalar(db, select(func.sum(Payroll.net_pay)))

        rows = await db.execute(
            select(WorkflowInvoice.status, func.sum(WorkflowInvoice.amount))
            .group_by(WorkflowInvoice.status),
        )
        breakdown = {status: round(float(total or 0), 2) for status, total in rows.all()}

        return FinanceOverview(
            totals=FinanceTotals(
                invoiced=round(float(invoiced), 2),
                paid=round(float(paid), 2),
                overdue=round(float(overdue), 2),
                payroll=round(float(payroll), 2),
            ),
            invoices_by_status=breakdown,
        )

    # ═════════════════════════════════════════════════════════════════
    # POST /reports/summary
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def report_summary(db: AsyncSession, body: ReportRequest) -> ReportSummary:
        """Totals over a period; the range applies only when both ends are given."""
        start = naive_utc(body.start_date)
        end = naive_utc(body.end_date)
        ranged = start is not None and end is not None

        shift_q = select(WorkflowShift)
        attendance_q = select(Attendance)
        payroll_q = select(Payroll)
        invoice_q = select(WorkflowInvoice)
        project_q = select(func.count()).select_from(Project)
        if ranged:
            shift_q = shift_q.where(WorkflowShift.start_time.between(start, end))
            attendance_q = attendance_q.where(Attendance.check_in.between(start, end))
            payroll_q = payroll_q.where(Payroll.created_at.between(as_utc(start), as_utc(end)))
            invoice_q = invoice_q.where(WorkflowInvoice.issue_date.between(start.date(), end.date()))
            project_q = project_q.where(Project.start_date.between(start.date(), end.date()))

        shifts = (await db.execute(shift_q)).scalars().all()
        attendance = (await db.execute(attendance_q)).scalars().all()
        payrolls = (await db.execute(payroll_q)).scalars().all()
        invoices = (await db.execute(invoice_q)).scalars().all()
        projects = await _scalar(db, project_q)

        invoice_totals = {"total": 0.0, "paid": 0.0, "overdue": 0.0}
        for invoice in invoices:
            invoice_totals["total"] += invoice.amount
            if invoice.status == WorkflowInvoiceStatus.paid.value:
                invoice_totals["paid"] += invoice.amount
            elif invoice.status == WorkflowInvoiceStatus.overdue.value:
                invoice_totals["overdue"] += invoice.amount

        metrics = {
            "shifts": {
                "count": len(shifts),
                "totalHours": round(sum(s.hours_worked or 0 for s in shifts), 2),
            },
            "attendance": {
                "count": len(attendance),
                "totalHours": round(sum(a.hours_worked or 0 for a in attendance), 2),
            },
            "payroll": {
                "gross": round(sum(p.gross_pay for p in payrolls), 2),
                "net": round(sum(p.net_pay for p in payrolls), 2),
                "taxes": round(sum(p.taxes for p in payrolls), 2),
            },
            "invoices": {k: round(v, 2) for k, v in invoice_totals.items()},
            "projects": projects,
        }

        return ReportSummary(
            generated_at=datetime.now(timezone.utc),
            filters={"startDate": body.start_date, "endDate": body.end_date},
            metrics=metrics,
        )
