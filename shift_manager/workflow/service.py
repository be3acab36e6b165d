"""Workflow service layer — accounts, staff, clients, time tracking, payroll.

All methods are static async and take the request-scoped session, following
the shift-scheduling services.  Relations that a response embeds are loaded
with ``selectinload`` up front; nothing is lazy-loaded under asyncio.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence, Type, TypeVar

from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shift_manager.auth.service import hash_password, verify_password
from shift_manager.common.constants import (
    ApprovalStatus,
    NotificationType,
    WorkflowRole,
)
from shift_manager.common.dates import naive_utc
from shift_manager.common.exceptions import (
    BadRequestException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
)
from shift_manager.config import settings
from shift_manager.reports.service import month_bounds
from shift_manager.workflow.models import (
    Approval,
    Attendance,
    Client,
    Employee,
    Notification,
    Payroll,
    Project,
    WorkflowInvoice,
    WorkflowShift,
    WorkflowUser,
)
from shift_manager.workflow.schemas import (
    ApprovalCreate,
    ApprovalDecision,
    AttendanceCreate,
    AttendanceUpdate,
    ClientCreate,
    ClientUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    InvoiceCreate,
    InvoiceUpdate,
    PayrollGenerate,
    ProjectCreate,
    ProjectUpdate,
    ShiftCreate,
    ShiftUpdate,
    WorkflowLoginRequest,
    WorkflowRegisterRequest,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

INVALID_CREDENTIALS = "Invalid credentials"
_STAFF_ROLES = {WorkflowRole.admin.value, WorkflowRole.manager.value}


# ── Shared helpers ──────────────────────────────────────────────────

def hours_between(start: Optional[datetime], end: Optional[datetime]) -> float:
    """Elapsed whole minutes between *start* and *end*, as hours to 2 dp."""
    if start is None or end is None:
        return 0
    minutes = int((naive_utc(end) - naive_utc(start)).total_seconds() / 60)
    return round(minutes / 60, 2)


async def _get_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    entity_id: int,
    label: str,
    *options: Any,
) -> ModelT:
    query = select(model).where(model.id == entity_id)
    if options:
        query = query.options(*options).execution_options(populate_existing=True)
    result = await db.execute(query)
    entity = result.scalars().first()
    if entity is None:
        raise NotFoundException(label)
    return entity


async def _ensure_exists(db: AsyncSession, model: Type[Any], entity_id: Optional[int], label: str) -> None:
    if entity_id is not None and await db.get(model, entity_id) is None:
        raise NotFoundException(label)


def _apply(entity: Any, updates: dict[str, Any]) -> None:
    for key, value in updates.items():
        setattr(entity, key, value)


def _enum_values(data: dict[str, Any]) -> dict[str, Any]:
    return {k: getattr(v, "value", v) for k, v in data.items()}


def _drop_nulls(updates: dict[str, Any], *required: str) -> dict[str, Any]:
    """Ignore explicit nulls sent for NOT NULL columns."""
    for key in required:
        if key in updates and updates[key] is None:
            updates.pop(key)
    return updates


# ═════════════════════════════════════════════════════════════════════
# Accounts
# ═════════════════════════════════════════════════════════════════════

def create_token(user: WorkflowUser) -> str:
    payload = {
        "id": user.id,
        "role": user.role,
        "exp": datetime.now(timezone.utc) + timedelta(days=settings.WORKFLOW_JWT_EXPIRY_DAYS),
    }
    return jwt.encode(payload, settings.WORKFLOW_JWT_SECRET, algorithm=settings.WORKFLOW_JWT_ALGORITHM)


class WorkflowAuthService:

    @staticmethod
    async def register(db: AsyncSession, body: WorkflowRegisterRequest) -> tuple[WorkflowUser, str]:
        email = body.email.lower()
        existing = await db.execute(select(WorkflowUser).where(WorkflowUser.email == email))
        if existing.scalars().first() is not None:
            raise ConflictError("email", email, detail="User with this email already exists")

        role = body.role or WorkflowRole.manager
        if role == WorkflowRole.admin:
            # Only the very first account may bootstrap itself as admin
            count = await db.execute(select(func.count()).select_from(WorkflowUser))
            if (count.scalar() or 0) > 0:
                raise ForbiddenException(detail="The admin role cannot be self-assigned.")

        user = WorkflowUser(
            name=body.name,
            email=email,
            password=hash_password(body.password),
            role=role.value,
        )
        db.add(user)
        await db.flush()

        if body.employee_profile is not None:
            profile = body.employee_profile.model_copy(update={"user_id": user.id})
            await EmployeeService.create_employee(db, profile)

        logger.info("Workflow account %s registered (%s)", user.id, user.role)
        return user, create_token(user)

    @staticmethod
    async def login(db: AsyncSession, body: WorkflowLoginRequest) -> tuple[WorkflowUser, str]:
        result = await db.execute(
            select(WorkflowUser).where(WorkflowUser.email == body.email.lower()),
        )
        user = result.scalars().first()
        if user is None or not verify_password(body.password, user.password):
            logger.info("Failed workflow login for %s", body.email.lower())
            raise UnauthorizedException(detail=INVALID_CREDENTIALS)
        return user, create_token(user)

    @staticmethod
    async def profile(db: AsyncSession, user_id: int) -> WorkflowUser:
        return await _get_or_404(
            db, WorkflowUser, user_id, "User", selectinload(WorkflowUser.employee_profile),
        )


# ═════════════════════════════════════════════════════════════════════
# Employees
# ═════════════════════════════════════════════════════════════════════

class EmployeeService:

    @staticmethod
    async def _ensure_unique_email(
        db: AsyncSession,
        email: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        result = await db.execute(select(Employee).where(Employee.email == email))
        existing = result.scalars().first()
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("email", email, detail="Employee with this email already exists")

    @staticmethod
    async def list_employees(db: AsyncSession) -> Sequence[Employee]:
        result = await db.execute(
            select(Employee).order_by(Employee.created_at.desc(), Employee.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_employee(db: AsyncSession, employee_id: int) -> Employee:
        return await _get_or_404(
            db,
            Employee,
            employee_id,
            "Employee",
            selectinload(Employee.shifts),
            selectinload(Employee.attendance_records),
            selectinload(Employee.payrolls),
        )

    @staticmethod
    async def create_employee(db: AsyncSession, body: EmployeeCreate) -> Employee:
        data = _enum_values(body.model_dump())
        data["email"] = data["email"].lower()
        await EmployeeService._ensure_unique_email(db, data["email"])
        await _ensure_exists(db, WorkflowUser, data.get("user_id"), "User")

        employee = Employee(**data)
        db.add(employee)
        await db.flush()
        return employee

    @staticmethod
    async def update_employee(db: AsyncSession, employee_id: int, body: EmployeeUpdate) -> Employee:
        employee = await _get_or_404(db, Employee, employee_id, "Employee")
        updates = _drop_nulls(
            _enum_values(body.model_dump(exclude_unset=True)),
            "first_name", "last_name", "email", "position", "hourly_rate", "status",
        )
        if updates.get("email"):
            updates["email"] = updates["email"].lower()
            await EmployeeService._ensure_unique_email(db, updates["email"], exclude_id=employee.id)
        await _ensure_exists(db, WorkflowUser, updates.get("user_id"), "User")

        _apply(employee, updates)
        await db.flush()
        return employee

    @staticmethod
    async def delete_employee(db: AsyncSession, employee_id: int) -> None:
        employee = await _get_or_404(db, Employee, employee_id, "Employee")
        await db.delete(employee)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Shifts
# ═════════════════════════════════════════════════════════════════════

class WorkflowShiftService:

    _embed = (selectinload(WorkflowShift.employee), selectinload(WorkflowShift.project))

    @staticmethod
    async def list_shifts(db: AsyncSession) -> Sequence[WorkflowShift]:
        result = await db.execute(
            select(WorkflowShift)
            .options(*WorkflowShiftService._embed)
            .execution_options(populate_existing=True)
            .order_by(WorkflowShift.start_time.desc(), WorkflowShift.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_shift(db: AsyncSession, shift_id: int) -> WorkflowShift:
        return await _get_or_404(db, WorkflowShift, shift_id, "Shift", *WorkflowShiftService._embed)

    @staticmethod
    async def create_shift(db: AsyncSession, body: ShiftCreate) -> WorkflowShift:
        data = _enum_values(body.model_dump())
        data["start_time"] = naive_utc(data["start_time"])
        data["end_time"] = naive_utc(data["end_time"])
        if data["end_time"] < data["start_time"]:
            raise BadRequestException("endTime must not be before startTime")
        await _ensure_exists(db, Employee, data["employee_id"], "Employee")
        await _ensure_exists(db, Project, data.get("project_id"), "Project")

        shift = WorkflowShift(**data, hours_worked=hours_between(data["start_time"], data["end_time"]))
        db.add(shift)
        await db.flush()
        return shift

    @staticmethod
    async def update_shift(db: AsyncSession, shift_id: int, body: ShiftUpdate) -> WorkflowShift:
        shift = await _get_or_404(db, WorkflowShift, shift_id, "Shift")
        updates = _drop_nulls(
            _enum_values(body.model_dump(exclude_unset=True)),
            "title", "start_time", "end_time", "status", "employee_id",
        )
        for key in ("start_time", "end_time"):
            if key in updates:
                updates[key] = naive_utc(updates[key])
        await _ensure_exists(db, Employee, updates.get("employee_id"), "Employee")
        await _ensure_exists(db, Project, updates.get("project_id"), "Project")

        if "start_time" in updates and "end_time" in updates:
            updates["hours_worked"] = hours_between(updates["start_time"], updates["end_time"])

        _apply(shift, updates)
        await db.flush()
        return shift

    @staticmethod
    async def delete_shift(db: AsyncSession, shift_id: int) -> None:
        shift = await _get_or_404(db, WorkflowShift, shift_id, "Shift")
        await db.delete(shift)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Clients / Projects
# ═════════════════════════════════════════════════════════════════════

class ClientService:

    _embed = (selectinload(Client.projects), selectinload(Client.invoices))

    @staticmethod
    async def list_clients(db: AsyncSession) -> Sequence[Client]:
        result = await db.execute(
            select(Client)
            .options(*ClientService._embed)
            .execution_options(populate_existing=True)
            .order_by(Client.id),
        )
        return result.scalars().all()

    @staticmethod
    async def get_client(db: AsyncSession, client_id: int) -> Client:
        return await _get_or_404(db, Client, client_id, "Client", *ClientService._embed)

    @staticmethod
    async def create_client(db: AsyncSession, body: ClientCreate) -> Client:
        client = Client(**body.model_dump())
        db.add(client)
        await db.flush()
        return client

    @staticmethod
    async def update_client(db: AsyncSession, client_id: int, body: ClientUpdate) -> Client:
        client = await _get_or_404(db, Client, client_id, "Client")
        _apply(client, _drop_nulls(body.model_dump(exclude_unset=True), "name"))
        await db.flush()
        return client

    @staticmethod
    async def delete_client(db: AsyncSession, client_id: int) -> None:
        client = await _get_or_404(db, Client, client_id, "Client")
        await db.delete(client)
        await db.flush()


class ProjectService:

    _embed = (selectinload(Project.client), selectinload(Project.shifts))

    @staticmethod
    async def list_projects(db: AsyncSession) -> Sequence[Project]:
        result = await db.execute(
            select(Project)
            .options(*ProjectService._embed)
            .execution_options(populate_existing=True)
            .order_by(Project.id),
        )
        return result.scalars().all()

    @staticmethod
    async def get_project(db: AsyncSession, project_id: int) -> Project:
        return await _get_or_404(db, Project, project_id, "Project", *ProjectService._embed)

    @staticmethod
    async def create_project(db: AsyncSession, body: ProjectCreate) -> Project:
        data = _enum_values(body.model_dump())
        await _ensure_exists(db, Client, data.get("client_id"), "Client")
        project = Project(**data)
        db.add(project)
        await db.flush()
        return project

    @staticmethod
    async def update_project(db: AsyncSession, project_id: int, body: ProjectUpdate) -> Project:
        project = await _get_or_404(db, Project, project_id, "Project")
        updates = _drop_nulls(_enum_values(body.model_dump(exclude_unset=True)), "name", "status")
        await _ensure_exists(db, Client, updates.get("client_id"), "Client")
        _apply(project, updates)
        await db.flush()
        return project

    @staticmethod
    async def delete_project(db: AsyncSession, project_id: int) -> None:
        project = await _get_or_404(db, Project, project_id, "Project")
        await db.delete(project)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Attendance
# ═════════════════════════════════════════════════════════════════════

class AttendanceService:

    _embed = (selectinload(Attendance.employee), selectinload(Attendance.shift))

    @staticmethod
    async def list_attendance(db: AsyncSession) -> Sequence[Attendance]:
        result = await db.execute(
            select(Attendance)
            .options(*AttendanceService._embed)
            .execution_options(populate_existing=True)
            .order_by(Attendance.check_in.desc(), Attendance.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_attendance(db: AsyncSession, record_id: int) -> Attendance:
        return await _get_or_404(db, Attendance, record_id, "Attendance", *AttendanceService._embed)

    @staticmethod
    async def create_attendance(db: AsyncSession, body: AttendanceCreate) -> Attendance:
        data = _enum_values(body.model_dump())
        data["check_in"] = naive_utc(data["check_in"])
        data["check_out"] = naive_utc(data.get("check_out"))
        await _ensure_exists(db, Employee, data["employee_id"], "Employee")
        await _ensure_exists(db, WorkflowShift, data.get("shift_id"), "Shift")

        record = Attendance(**data, hours_worked=hours_between(data["check_in"], data["check_out"]))
        db.add(record)
        await db.flush()
        return record

    @staticmethod
    async def update_attendance(db: AsyncSession, record_id: int, body: AttendanceUpdate) -> Attendance:
        record = await _get_or_404(db, Attendance, record_id, "Attendance")
        updates = _drop_nulls(
            _enum_values(body.model_dump(exclude_unset=True)),
            "check_in", "status", "employee_id",
        )
        for key in ("check_in", "check_out"):
            if key in updates:
                updates[key] = naive_utc(updates[key])
        await _ensure_exists(db, Employee, updates.get("employee_id"), "Employee")
        await _ensure_exists(db, WorkflowShift, updates.get("shift_id"), "Shift")

        if "check_in" in updates or "check_out" in updates:
            updates["hours_worked"] = hours_between(
                updates.get("check_in", record.check_in),
                updates.get("check_out", record.check_out),
            )

        _apply(record, updates)
        await db.flush()
        return record

    @staticmethod
    async def delete_attendance(db: AsyncSession, record_id: int) -> None:
        record = await _get_or_404(db, Attendance, record_id, "Attendance")
        await db.delete(record)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Invoices
# ═════════════════════════════════════════════════════════════════════

class WorkflowInvoiceService:

    _embed = (selectinload(WorkflowInvoice.client), selectinload(WorkflowInvoice.project))

    @staticmethod
    async def _ensure_unique_number(
        db: AsyncSession,
        number: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        result = await db.execute(select(WorkflowInvoice).where(WorkflowInvoice.number == number))
        existing = result.scalars().first()
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("number", number, detail="Invoice number already exists")

    @staticmethod
    async def list_invoices(db: AsyncSession) -> Sequence[WorkflowInvoice]:
        result = await db.execute(
            select(WorkflowInvoice)
            .options(*WorkflowInvoiceService._embed)
            .execution_options(populate_existing=True)
            .order_by(WorkflowInvoice.issue_date.desc(), WorkflowInvoice.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_invoice(db: AsyncSession, invoice_id: int) -> WorkflowInvoice:
        return await _get_or_404(
            db, WorkflowInvoice, invoice_id, "Invoice", *WorkflowInvoiceService._embed,
        )

    @staticmethod
    async def create_invoice(db: AsyncSession, body: InvoiceCreate) -> WorkflowInvoice:
        data = _enum_values(body.model_dump())
        await WorkflowInvoiceService._ensure_unique_number(db, data["number"])
        await _ensure_exists(db, Client, data.get("client_id"), "Client")
        await _ensure_exists(db, Project, data.get("project_id"), "Project")

        invoice = WorkflowInvoice(**data)
        db.add(invoice)
        await db.flush()
        return invoice

    @staticmethod
    async def update_invoice(db: AsyncSession, invoice_id: int, body: InvoiceUpdate) -> WorkflowInvoice:
        invoice = await _get_or_404(db, WorkflowInvoice, invoice_id, "Invoice")
        updates = _drop_nulls(
            _enum_values(body.model_dump(exclude_unset=True)),
            "number", "issue_date", "due_date", "amount", "status",
        )
        if "number" in updates:
            await WorkflowInvoiceService._ensure_unique_number(db, updates["number"], exclude_id=invoice.id)
        await _ensure_exists(db, Client, updates.get("client_id"), "Client")
        await _ensure_exists(db, Project, updates.get("project_id"), "Project")

        _apply(invoice, updates)
        await db.flush()
        return invoice

    @staticmethod
    async def delete_invoice(db: AsyncSession, invoice_id: int) -> None:
        invoice = await _get_or_404(db, WorkflowInvoice, invoice_id, "Invoice")
        await db.delete(invoice)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Payroll
# ═════════════════════════════════════════════════════════════════════

def compute_pay(total_hours: float, hourly_rate: float, tax_rate: float) -> tuple[float, float, float]:
    """Return (gross, taxes, net), each rounded to 2 dp."""
    gross = round(total_hours * hourly_rate, 2)
    taxes = round(gross * tax_rate, 2)
    net = round(gross - taxes, 2)
    return gross, taxes, net


class PayrollService:

    @staticmethod
    async def list_payrolls(db: AsyncSession) -> Sequence[Payroll]:
        result = await db.execute(
            select(Payroll)
            .options(selectinload(Payroll.employee))
            .execution_options(populate_existing=True)
            .order_by(Payroll.year.desc(), Payroll.month.desc(), Payroll.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def get_payroll(db: AsyncSession, payroll_id: int) -> Payroll:
        return await _get_or_404(
            db, Payroll, payroll_id, "Payroll", selectinload(Payroll.employee),
        )

    @staticmethod
    async def generate_payroll(db: AsyncSession, body: PayrollGenerate) -> Payroll:
        """Create a payroll run from the employee's attendance in the month."""
        employee = await _get_or_404(db, Employee, body.employee_id, "Employee")
        period_start, period_end = month_bounds(body.year, body.month)

        result = await db.execute(
            select(func.coalesce(func.sum(Attendance.hours_worked), 0)).where(
                Attendance.employee_id == employee.id,
                Attendance.check_in >= period_start,
                Attendance.check_in < period_end,
            ),
        )
        total_hours = float(result.scalar() or 0)
        gross, taxes, net = compute_pay(total_hours, employee.hourly_rate, settings.WORKFLOW_TAX_RATE)

        payroll = Payroll(
            employee_id=employee.id,
            month=body.month,
            year=body.year,
            gross_pay=gross,
            taxes=taxes,
            net_pay=net,
        )
        db.add(payroll)
        await db.flush()
        logger.info(
            "Payroll %s/%s for employee %s: %.2f h, gross %.2f",
            body.month, body.year, employee.id, total_hours, gross,
        )
        return payroll

    @staticmethod
    async def update_status(db: AsyncSession, payroll_id: int, status: str) -> Payroll:
        payroll = await _get_or_404(db, Payroll, payroll_id, "Payroll")
        payroll.status = status
        await db.flush()
        return payroll

    @staticmethod
    async def delete_payroll(db: AsyncSession, payroll_id: int) -> None:
        payroll = await _get_or_404(db, Payroll, payroll_id, "Payroll")
        await db.delete(payroll)
        await db.flush()


# ═════════════════════════════════════════════════════════════════════
# Approvals / Notifications
# ═════════════════════════════════════════════════════════════════════

class ApprovalService:

    @staticmethod
    async def list_approvals(db: AsyncSession, user: WorkflowUser) -> Sequence[Approval]:
        query = select(Approval).order_by(Approval.created_at.desc(), Approval.id.desc())
        if user.role not in _STAFF_ROLES:
            query = query.where(Approval.requester_id == user.id)
        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def get_approval(db: AsyncSession, approval_id: int, user: WorkflowUser) -> Approval:
        approval = await _get_or_404(db, Approval, approval_id, "Approval")
        if user.role not in _STAFF_ROLES and approval.requester_id != user.id:
            raise ForbiddenException(detail="Forbidden")
        return approval

    @staticmethod
    async def create_approval(db: AsyncSession, body: ApprovalCreate, user: WorkflowUser) -> Approval:
        approval = Approval(type=body.type.value, comment=body.comment, requester_id=user.id)
        db.add(approval)
        await db.flush()
        return approval

    @staticmethod
    async def decide(
        db: AsyncSession,
        approval_id: int,
        body: ApprovalDecision,
        approver: WorkflowUser,
    ) -> Approval:
        """Approve or reject a pending request and notify the requester."""
        if body.status == ApprovalStatus.pending:
            raise BadRequestException("Status must be 'approved' or 'rejected'")

        result = await db.execute(
            select(Approval).where(Approval.id == approval_id).with_for_update(),
        )
        approval = result.scalars().first()
        if approval is None:
            raise NotFoundException("Approval")
        if approval.status != ApprovalStatus.pending.value:
            raise ConflictError("status", approval.status, detail="Approval has already been decided")

        approval.status = body.status.value
        approval.approver_id = approver.id
        if body.comment is not None:
            approval.comment = body.comment

        if approval.requester_id is not None:
            approved = body.status == ApprovalStatus.approved
            db.add(
                Notification(
                    user_id=approval.requester_id,
                    title=f"Request {approval.status}",
                    message=f"Your {approval.type.replace('_', ' ')} request was {approval.status}.",
                    type=(NotificationType.success if approved else NotificationType.warning).value,
                ),
            )
        await db.flush()
        return approval


class NotificationService:

    @staticmethod
    async def list_notifications(db: AsyncSession, user: WorkflowUser) -> Sequence[Notification]:
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user.id)
            .order_by(Notification.created_at.desc(), Notification.id.desc()),
        )
        return result.scalars().all()

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user: WorkflowUser) -> Notification:
        notification = await db.get(Notification, notification_id)
        if notification is None or notification.user_id != user.id:
            raise NotFoundException("Notification")
        notification.is_read = True
        await db.flush()
        return notification
