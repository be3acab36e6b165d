"""Workflow manager Pydantic schemas."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import EmailStr, Field

from shift_manager.common.constants import (
    ApprovalStatus,
    ApprovalType,
    AttendanceStatus,
    EmployeeStatus,
    NotificationType,
    PayrollStatus,
    ProjectStatus,
    WorkflowInvoiceStatus,
    WorkflowRole,
    WorkflowShiftStatus,
)
from shift_manager.common.schemas import CamelModel


class _Timestamps(CamelModel):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ═════════════════════════════════════════════════════════════════════
# Employees
# ═════════════════════════════════════════════════════════════════════

class EmployeeCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    position: str = Field(..., min_length=1, max_length=100)
    department: Optional[str] = None
    hourly_rate: float = Field(..., ge=0)
    start_date: Optional[date] = None
    status: EmployeeStatus = EmployeeStatus.active
    user_id: Optional[int] = None


class EmployeeUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    start_date: Optional[date] = None
    status: Optional[EmployeeStatus] = None
    user_id: Optional[int] = None


class EmployeeResponse(_Timestamps):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    position: str
    department: Optional[str] = None
    hourly_rate: float
    start_date: Optional[date] = None
    status: str
    user_id: Optional[int] = None


# ═════════════════════════════════════════════════════════════════════
# Auth
# ═════════════════════════════════════════════════════════════════════

class WorkflowRegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[WorkflowRole] = None
    employee_profile: Optional[EmployeeCreate] = None


class WorkflowLoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class WorkflowUserResponse(_Timestamps):
    id: int
    name: str
    email: str
    role: str


class WorkflowUserProfile(WorkflowUserResponse):
    employee_profile: Optional[EmployeeResponse] = None


class AuthResponse(CamelModel):
    user: WorkflowUserResponse
    token: str


# ═════════════════════════════════════════════════════════════════════
# Clients / Projects
# ═════════════════════════════════════════════════════════════════════

class ClientCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    company: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class ClientResponse(_Timestamps):
    id: int
    name: str
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.planned
    budget: Optional[float] = None
    client_id: Optional[int] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[float] = None
    client_id: Optional[int] = None


class ProjectResponse(_Timestamps):
    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    budget: Optional[float] = None
    client_id: Optional[int] = None


# ═════════════════════════════════════════════════════════════════════
# Shifts / Attendance
# ═════════════════════════════════════════════════════════════════════

class ShiftCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    start_time: datetime
    end_time: datetime
    status: WorkflowShiftStatus = WorkflowShiftStatus.scheduled
    notes: Optional[str] = None
    employee_id: int
    project_id: Optional[int] = None


class ShiftUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[WorkflowShiftStatus] = None
    notes: Optional[str] = None
    employee_id: Optional[int] = None
    project_id: Optional[int] = None


class ShiftResponse(_Timestamps):
    id: int
    title: str
    start_time: datetime
    end_time: datetime
    status: str
    notes: Optional[str] = None
    hours_worked: float
    employee_id: Optional[int] = None
    project_id: Optional[int] = None


class ShiftDetail(ShiftResponse):
    employee: Optional[EmployeeResponse] = None
    project: Optional[ProjectResponse] = None


class AttendanceCreate(CamelModel):
    employee_id: int
    check_in: datetime
    check_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.present
    shift_id: Optional[int] = None


class AttendanceUpdate(CamelModel):
    employee_id: Optional[int] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    shift_id: Optional[int] = None


class AttendanceResponse(_Timestamps):
    id: int
    check_in: datetime
    check_out: Optional[datetime] = None
    hours_worked: float
    status: str
    employee_id: Optional[int] = None
    shift_id: Optional[int] = None


class AttendanceDetail(AttendanceResponse):
    employee: Optional[EmployeeResponse] = None
    shift: Optional[ShiftResponse] = None


# ═════════════════════════════════════════════════════════════════════
# Payroll / Invoices
# ═════════════════════════════════════════════════════════════════════

class PayrollGenerate(CamelModel):
    employee_id: int
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)


class PayrollStatusUpdate(CamelModel):
    status: PayrollStatus


class PayrollResponse(_Timestamps):
    id: int
    month: int
    year: int
    gross_pay: float
    taxes: float
    net_pay: float
    status: str
    employee_id: Optional[int] = None


class PayrollDetail(PayrollResponse):
    employee: Optional[EmployeeResponse] = None


class InvoiceCreate(CamelModel):
    number: str = Field(..., min_length=1, max_length=100)
    issue_date: date
    due_date: date
    amount: float = Field(..., ge=0)
    status: WorkflowInvoiceStatus = WorkflowInvoiceStatus.draft
    client_id: Optional[int] = None
    project_id: Optional[int] = None


class InvoiceUpdate(CamelModel):
    number: Optional[str] = Field(None, min_length=1, max_length=100)
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[WorkflowInvoiceStatus] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None


class InvoiceResponse(_Timestamps):
    id: int
    number: str
    issue_date: date
    due_date: date
    amount: float
    status: str
    client_id: Optional[int] = None
    project_id: Optional[int] = None


class InvoiceDetail(InvoiceResponse):
    client: Optional[ClientResponse] = None
    project: Optional[ProjectResponse] = None


# ── Embedding details (declared after their members) ────────────────

class EmployeeDetail(EmployeeResponse):
    shifts: list[ShiftResponse] = []
    attendance_records: list[AttendanceResponse] = []
    payrolls: list[PayrollResponse] = []


class ClientDetail(ClientResponse):
    projects: list[ProjectResponse] = []
    invoices: list[InvoiceResponse] = []


class ProjectDetail(ProjectResponse):
    client: Optional[ClientResponse] = None
    shifts: list[ShiftResponse] = []


# ═════════════════════════════════════════════════════════════════════
# Approvals / Notifications
# ═════════════════════════════════════════════════════════════════════

class ApprovalCreate(CamelModel):
    type: ApprovalType
    comment: Optional[str] = None


class ApprovalDecision(CamelModel):
    status: ApprovalStatus
    comment: Optional[str] = None


class ApprovalResponse(_Timestamps):
    id: int
    type: str
    status: str
    comment: Optional[str] = None
    requester_id: Optional[int] = None
    approver_id: Optional[int] = None


class NotificationResponse(_Timestamps):
    id: int
    title: str
    message: str
    type: NotificationType
    is_read: bool
    user_id: Optional[int] = None


# ═════════════════════════════════════════════════════════════════════
# Analytics
# ═════════════════════════════════════════════════════════════════════

class DashboardStats(CamelModel):
    employees: int = 0
    projects: int = 0
    shifts_this_week: int = 0
    overdue_invoices: int = 0
    attendance_records_this_week: int = 0
    revenue: float = 0
    payroll_cost: float = 0


class DashboardHighlights(CamelModel):
    recent_clients: list[ClientResponse] = []
    recent_shifts: list[ShiftResponse] = []


class DashboardSummary(CamelModel):
    stats: DashboardStats
    highlights: DashboardHighlights


class FinanceTotals(CamelModel):
    invoiced: float = 0
    paid: float = 0
    overdue: float = 0
    payroll: float = 0


class FinanceOverview(CamelModel):
    totals: FinanceTotals
    invoices_by_status: dict[str, float] = {}


class ReportRequest(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ReportSummary(CamelModel):
    generated_at: datetime
    filters: dict[str, Optional[datetime]]
    metrics: dict[str, Any]
