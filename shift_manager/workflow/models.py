"""Workflow manager ORM models.

All tables carry the ``wf_`` prefix so they can live in the same database
as the shift-scheduling tables.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_manager.common.audit import TimestampMixin
from shift_manager.common.constants import (
    ApprovalStatus,
    AttendanceStatus,
    EmployeeStatus,
    NotificationType,
    PayrollStatus,
    ProjectStatus,
    WorkflowInvoiceStatus,
    WorkflowRole,
    WorkflowShiftStatus,
)
from shift_manager.database import Base


# ═════════════════════════════════════════════════════════════════════
# Accounts
# ═════════════════════════════════════════════════════════════════════


class WorkflowUser(Base, TimestampMixin):
    """Bearer-token account of the workflow manager."""

    __tablename__ = "wf_users"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=WorkflowRole.manager.value,
    )

    employee_profile: Mapped[Optional[Employee]] = relationship(
        back_populates="account", uselist=False,
    )

    def __repr__(self) -> str:
        return f"<WorkflowUser {self.id} {self.email} ({self.role})>"


# ═════════════════════════════════════════════════════════════════════
# Staff
# ═════════════════════════════════════════════════════════════════════


class Employee(Base, TimestampMixin):
    __tablename__ = "wf_employees"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(sa.String(50))
    position: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    department: Mapped[Optional[str]] = mapped_column(sa.String(100))
    hourly_rate: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    start_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=EmployeeStatus.active.value,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_users.id", ondelete="SET NULL"), index=True,
    )

    # ── Relationships ───────────────────────────────────────────────
    account: Mapped[Optional[WorkflowUser]] = relationship(back_populates="employee_profile")
    shifts: Mapped[list[WorkflowShift]] = relationship(
        back_populates="employee", passive_deletes=True, order_by="WorkflowShift.start_time",
    )
    attendance_records: Mapped[list[Attendance]] = relationship(
        back_populates="employee", passive_deletes=True, order_by="Attendance.check_in",
    )
    payrolls: Mapped[list[Payroll]] = relationship(
        back_populates="employee", passive_deletes=True, order_by="Payroll.id",
    )

    def __repr__(self) -> str:
        return f"<Employee {self.first_name} {self.last_name}>"


# ═════════════════════════════════════════════════════════════════════
# Clients / Projects
# ═════════════════════════════════════════════════════════════════════


class Client(Base, TimestampMixin):
    __tablename__ = "wf_clients"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(sa.String(200))
    email: Mapped[Optional[str]] = mapped_column(sa.String(255))
    phone: Mapped[Optional[str]] = mapped_column(sa.String(50))
    address: Mapped[Optional[str]] = mapped_column(sa.Text)
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)

    projects: Mapped[list[Project]] = relationship(
        back_populates="client", passive_deletes=True, order_by="Project.id",
    )
    invoices: Mapped[list[WorkflowInvoice]] = relationship(
        back_populates="client", passive_deletes=True, order_by="WorkflowInvoice.id",
    )


class Project(Base, TimestampMixin):
    __tablename__ = "wf_projects"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    start_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    end_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=ProjectStatus.planned.value,
    )
    budget: Mapped[Optional[float]] = mapped_column(sa.Float)
    client_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_clients.id", ondelete="SET NULL"), index=True,
    )

    client: Mapped[Optional[Client]] = relationship(back_populates="projects")
    shifts: Mapped[list[WorkflowShift]] = relationship(
        back_populates="project", passive_deletes=True, order_by="WorkflowShift.start_time",
    )
    invoices: Mapped[list[WorkflowInvoice]] = relationship(
        back_populates="project", passive_deletes=True,
    )


# ═════════════════════════════════════════════════════════════════════
# Time tracking
# ═════════════════════════════════════════════════════════════════════


class WorkflowShift(Base, TimestampMixin):
    __tablename__ = "wf_shifts"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    start_time: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=WorkflowShiftStatus.scheduled.value,
    )
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)
    hours_worked: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    employee_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_employees.id", ondelete="SET NULL"), index=True,
    )
    project_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_projects.id", ondelete="SET NULL"), index=True,
    )

    employee: Mapped[Optional[Employee]] = relationship(back_populates="shifts")
    project: Mapped[Optional[Project]] = relationship(back_populates="shifts")


class Attendance(Base, TimestampMixin):
    __tablename__ = "wf_attendance"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    check_in: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False, index=True)
    check_out: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    hours_worked: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=AttendanceStatus.present.value,
    )
    employee_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_employees.id", ondelete="CASCADE"), index=True,
    )
    shift_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_shifts.id", ondelete="SET NULL"),
    )

    employee: Mapped[Optional[Employee]] = relationship(back_populates="attendance_records")
    shift: Mapped[Optional[WorkflowShift]] = relationship()


# ═════════════════════════════════════════════════════════════════════
# Money
# ═════════════════════════════════════════════════════════════════════


class Payroll(Base, TimestampMixin):
    __tablename__ = "wf_payrolls"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    month: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    gross_pay: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    taxes: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    net_pay: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=PayrollStatus.pending.value,
    )
    employee_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_employees.id", ondelete="CASCADE"), index=True,
    )

    employee: Mapped[Optional[Employee]] = relationship(back_populates="payrolls")


class WorkflowInvoice(Base, TimestampMixin):
    __tablename__ = "wf_invoices"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    number: Mapped[str] = mapped_column(sa.String(100), nullable=False, unique=True)
    issue_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    due_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    amount: Mapped[float] = mapped_column(sa.Float, nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=WorkflowInvoiceStatus.draft.value,
    )
    client_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_clients.id", ondelete="SET NULL"), index=True,
    )
    project_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_projects.id", ondelete="SET NULL"), index=True,
    )

    client: Mapped[Optional[Client]] = relationship(back_populates="invoices")
    project: Mapped[Optional[Project]] = relationship(back_populates="invoices")


# ═════════════════════════════════════════════════════════════════════
# Approvals / Notifications
# ═════════════════════════════════════════════════════════════════════


class Approval(Base, TimestampMixin):
    __tablename__ = "wf_approvals"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=ApprovalStatus.pending.value,
    )
    comment: Mapped[Optional[str]] = mapped_column(sa.Text)
    requester_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_users.id", ondelete="CASCADE"), index=True,
    )
    approver_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_users.id", ondelete="SET NULL"),
    )


class Notification(Base, TimestampMixin):
    __tablename__ = "wf_notifications"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    message: Mapped[str] = mapped_column(sa.Text, nullable=False)
    type: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=NotificationType.info.value,
    )
    is_read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    user_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("wf_users.id", ondelete="CASCADE"), index=True,
    )
