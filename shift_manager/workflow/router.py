"""Workflow manager router — bearer-token API mounted under /api/workflow.

Routes:
    /auth                 — Register, login, current account
    /employees            — Staff CRUD (detail embeds shifts, attendance, payrolls)
    /shifts               — Scheduled work with derived hours
    /projects, /clients   — Client work tracking
    /attendance           — Check-in / check-out records
    /invoices             — Client invoices (admin, manager)
    /payroll              — Monthly payroll runs (admin, manager)
    /approvals            — Shift / time-off / expense requests
    /notifications        — The caller's notifications
    /dashboard, /finance, /reports — Aggregates
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.database import get_db
from shift_manager.workflow.analytics import AnalyticsService
from shift_manager.workflow.dependencies import admin_only, get_workflow_user, staff_only
from shift_manager.workflow.models import WorkflowUser
from shift_manager.workflow.schemas import (
    ApprovalCreate,
    ApprovalDecision,
    ApprovalResponse,
    AttendanceCreate,
    AttendanceDetail,
    AttendanceResponse,
    AttendanceUpdate,
    AuthResponse,
    ClientCreate,
    ClientDetail,
    ClientResponse,
    ClientUpdate,
    DashboardSummary,
    EmployeeCreate,
    EmployeeDetail,
    EmployeeResponse,
    EmployeeUpdate,
    FinanceOverview,
    InvoiceCreate,
    InvoiceDetail,
    InvoiceResponse,
    InvoiceUpdate,
    NotificationResponse,
    PayrollDetail,
    PayrollGenerate,
    PayrollResponse,
    PayrollStatusUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectResponse,
    ProjectUpdate,
    ReportRequest,
    ReportSummary,
    ShiftCreate,
    ShiftDetail,
    ShiftResponse,
    ShiftUpdate,
    WorkflowLoginRequest,
    WorkflowRegisterRequest,
    WorkflowUserProfile,
    WorkflowUserResponse,
)
from shift_manager.workflow.service import (
    ApprovalService,
    AttendanceService,
    ClientService,
    EmployeeService,
    NotificationService,
    PayrollService,
    ProjectService,
    WorkflowAuthService,
    WorkflowInvoiceService,
    WorkflowShiftService,
)


# ═════════════════════════════════════════════════════════════════════
# Routers
# ═════════════════════════════════════════════════════════════════════

_authenticated = [Depends(get_workflow_user)]

auth_router = APIRouter(prefix="", tags=["workflow-auth"])
employees_router = APIRouter(prefix="", tags=["workflow-employees"], dependencies=_authenticated)
shifts_router = APIRouter(prefix="", tags=["workflow-shifts"], dependencies=_authenticated)
projects_router = APIRouter(prefix="", tags=["workflow-projects"], dependencies=_authenticated)
clients_router = APIRouter(prefix="", tags=["workflow-clients"], dependencies=_authenticated)
attendance_router = APIRouter(prefix="", tags=["workflow-attendance"], dependencies=_authenticated)
invoices_router = APIRouter(prefix="", tags=["workflow-invoices"], dependencies=[Depends(staff_only)])
payroll_router = APIRouter(prefix="", tags=["workflow-payroll"], dependencies=[Depends(staff_only)])
approvals_router = APIRouter(prefix="", tags=["workflow-approvals"])
notifications_router = APIRouter(prefix="", tags=["workflow-notifications"])
dashboard_router = APIRouter(prefix="", tags=["workflow-dashboard"], dependencies=_authenticated)
finance_router = APIRouter(prefix="", tags=["workflow-finance"], dependencies=[Depends(staff_only)])
reports_router = APIRouter(prefix="", tags=["workflow-reports"], dependencies=[Depends(staff_only)])


# ═════════════════════════════════════════════════════════════════════
# Auth
# ═════════════════════════════════════════════════════════════════════

@auth_router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: WorkflowRegisterRequest, db: AsyncSession = Depends(get_db)):
    user, token = await WorkflowAuthService.register(db, body)
    return AuthResponse(user=WorkflowUserResponse.model_validate(user), token=token)


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: WorkflowLoginRequest, db: AsyncSession = Depends(get_db)):
    user, token = await WorkflowAuthService.login(db, body)
    return AuthResponse(user=WorkflowUserResponse.model_validate(user), token=token)


@auth_router.get("/me", response_model=WorkflowUserProfile)
async def me(
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await WorkflowAuthService.profile(db, user.id)


# ═════════════════════════════════════════════════════════════════════
# Employees
# ═════════════════════════════════════════════════════════════════════

@employees_router.get("", response_model=list[EmployeeResponse])
async def list_employees(db: AsyncSession = Depends(get_db)):
    return await EmployeeService.list_employees(db)


@employees_router.get("/{id}", response_model=EmployeeDetail)
async def get_employee(id: int, db: AsyncSession = Depends(get_db)):
    return await EmployeeService.get_employee(db, id)


@employees_router.post("", response_model=EmployeeResponse, status_code=201, dependencies=[Depends(staff_only)])
async def create_employee(body: EmployeeCreate, db: AsyncSession = Depends(get_db)):
    return await EmployeeService.create_employee(db, body)


@employees_router.put("/{id}", response_model=EmployeeResponse, dependencies=[Depends(staff_only)])
async def update_employee(id: int, body: EmployeeUpdate, db: AsyncSession = Depends(get_db)):
    return await EmployeeService.update_employee(db, id, body)


@employees_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_employee(id: int, db: AsyncSession = Depends(get_db)):
    await EmployeeService.delete_employee(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Shifts
# ═════════════════════════════════════════════════════════════════════

@shifts_router.get("", response_model=list[ShiftDetail])
async def list_shifts(db: AsyncSession = Depends(get_db)):
    return await WorkflowShiftService.list_shifts(db)


@shifts_router.get("/{id}", response_model=ShiftDetail)
async def get_shift(id: int, db: AsyncSession = Depends(get_db)):
    return await WorkflowShiftService.get_shift(db, id)


@shifts_router.post("", response_model=ShiftResponse, status_code=201, dependencies=[Depends(staff_only)])
async def create_shift(body: ShiftCreate, db: AsyncSession = Depends(get_db)):
    return await WorkflowShiftService.create_shift(db, body)


@shifts_router.put("/{id}", response_model=ShiftResponse, dependencies=[Depends(staff_only)])
async def update_shift(id: int, body: ShiftUpdate, db: AsyncSession = Depends(get_db)):
    return await WorkflowShiftService.update_shift(db, id, body)


@shifts_router.delete("/{id}", status_code=204, dependencies=[Depends(staff_only)])
async def delete_shift(id: int, db: AsyncSession = Depends(get_db)):
    await WorkflowShiftService.delete_shift(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Projects
# ═════════════════════════════════════════════════════════════════════

@projects_router.get("", response_model=list[ProjectDetail])
async def list_projects(db: AsyncSession = Depends(get_db)):
    return await ProjectService.list_projects(db)


@projects_router.get("/{id}", response_model=ProjectDetail)
async def get_project(id: int, db: AsyncSession = Depends(get_db)):
    return await ProjectService.get_project(db, id)


@projects_router.post("", response_model=ProjectResponse, status_code=201, dependencies=[Depends(staff_only)])
async def create_project(body: ProjectCreate, db: AsyncSession = Depends(get_db)):
    return await ProjectService.create_project(db, body)


@projects_router.put("/{id}", response_model=ProjectResponse, dependencies=[Depends(staff_only)])
async def update_project(id: int, body: ProjectUpdate, db: AsyncSession = Depends(get_db)):
    return await ProjectService.update_project(db, id, body)


@projects_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_project(id: int, db: AsyncSession = Depends(get_db)):
    await ProjectService.delete_project(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Clients
# ═════════════════════════════════════════════════════════════════════

@clients_router.get("", response_model=list[ClientDetail])
async def list_clients(db: AsyncSession = Depends(get_db)):
    return await ClientService.list_clients(db)


@clients_router.get("/{id}", response_model=ClientDetail)
async def get_client(id: int, db: AsyncSession = Depends(get_db)):
    return await ClientService.get_client(db, id)


@clients_router.post("", response_model=ClientResponse, status_code=201, dependencies=[Depends(staff_only)])
async def create_client(body: ClientCreate, db: AsyncSession = Depends(get_db)):
    return await ClientService.create_client(db, body)


@clients_router.put("/{id}", response_model=ClientResponse, dependencies=[Depends(staff_only)])
async def update_client(id: int, body: ClientUpdate, db: AsyncSession = Depends(get_db)):
    return await ClientService.update_client(db, id, body)


@clients_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_client(id: int, db: AsyncSession = Depends(get_db)):
    await ClientService.delete_client(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Attendance
# ═════════════════════════════════════════════════════════════════════

@attendance_router.get("", response_model=list[AttendanceDetail])
async def list_attendance(db: AsyncSession = Depends(get_db)):
    return await AttendanceService.list_attendance(db)


@attendance_router.get("/{id}", response_model=AttendanceDetail)
async def get_attendance(id: int, db: AsyncSession = Depends(get_db)):
    return await AttendanceService.get_attendance(db, id)


@attendance_router.post("", response_model=AttendanceResponse, status_code=201, dependencies=[Depends(staff_only)])
async def create_attendance(body: AttendanceCreate, db: AsyncSession = Depends(get_db)):
    return await AttendanceService.create_attendance(db, body)


@attendance_router.put("/{id}", response_model=AttendanceResponse, dependencies=[Depends(staff_only)])
async def update_attendance(id: int, body: AttendanceUpdate, db: AsyncSession = Depends(get_db)):
    return await AttendanceService.update_attendance(db, id, body)


@attendance_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_attendance(id: int, db: AsyncSession = Depends(get_db)):
    await AttendanceService.delete_attendance(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Invoices (admin, manager)
# ═════════════════════════════════════════════════════════════════════

@invoices_router.get("", response_model=list[InvoiceDetail])
async def list_invoices(db: AsyncSession = Depends(get_db)):
    return await WorkflowInvoiceService.list_invoices(db)


@invoices_router.get("/{id}", response_model=InvoiceDetail)
async def get_invoice(id: int, db: AsyncSession = Depends(get_db)):
    return await WorkflowInvoiceService.get_invoice(db, id)


@invoices_router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(body: InvoiceCreate, db: AsyncSession = Depends(get_db)):
    return await WorkflowInvoiceService.create_invoice(db, body)


@invoices_router.put("/{id}", response_model=InvoiceResponse)
async def update_invoice(id: int, body: InvoiceUpdate, db: AsyncSession = Depends(get_db)):
    return await WorkflowInvoiceService.update_invoice(db, id, body)


@invoices_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_invoice(id: int, db: AsyncSession = Depends(get_db)):
    await WorkflowInvoiceService.delete_invoice(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Payroll (admin, manager)
# ═════════════════════════════════════════════════════════════════════

@payroll_router.get("", response_model=list[PayrollDetail])
async def list_payrolls(db: AsyncSession = Depends(get_db)):
    return await PayrollService.list_payrolls(db)


@payroll_router.get("/{id}", response_model=PayrollDetail)
async def get_payroll(id: int, db: AsyncSession = Depends(get_db)):
    return await PayrollService.get_payroll(db, id)


@payroll_router.post("", response_model=PayrollResponse, status_code=201)
async def generate_payroll(body: PayrollGenerate, db: AsyncSession = Depends(get_db)):
    return await PayrollService.generate_payroll(db, body)


@payroll_router.patch("/{id}/status", response_model=PayrollResponse, dependencies=[Depends(admin_only)])
async def update_payroll_status(id: int, body: PayrollStatusUpdate, db: AsyncSession = Depends(get_db)):
    return await PayrollService.update_status(db, id, body.status.value)


@payroll_router.delete("/{id}", status_code=204, dependencies=[Depends(admin_only)])
async def delete_payroll(id: int, db: AsyncSession = Depends(get_db)):
    await PayrollService.delete_payroll(db, id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Approvals
# ═════════════════════════════════════════════════════════════════════

@approvals_router.get("", response_model=list[ApprovalResponse])
async def list_approvals(
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await ApprovalService.list_approvals(db, user)


@approvals_router.post("", response_model=ApprovalResponse, status_code=201)
async def create_approval(
    body: ApprovalCreate,
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await ApprovalService.create_approval(db, body, user)


@approvals_router.get("/{id}", response_model=ApprovalResponse)
async def get_approval(
    id: int,
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await ApprovalService.get_approval(db, id, user)


@approvals_router.patch("/{id}", response_model=ApprovalResponse)
async def decide_approval(
    id: int,
    body: ApprovalDecision,
    user: WorkflowUser = Depends(staff_only),
    db: AsyncSession = Depends(get_db),
):
    return await ApprovalService.decide(db, id, body, user)


# ═════════════════════════════════════════════════════════════════════
# Notifications
# ═════════════════════════════════════════════════════════════════════

@notifications_router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService.list_notifications(db, user)


@notifications_router.patch("/{id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    id: int,
    user: WorkflowUser = Depends(get_workflow_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService.mark_read(db, id, user)


# ═════════════════════════════════════════════════════════════════════
# Aggregates
# ═════════════════════════════════════════════════════════════════════

@dashboard_router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService.dashboard_summary(db)


@finance_router.get("/overview", response_model=FinanceOverview)
async def finance_overview(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService.finance_overview(db)


@reports_router.post("/summary", response_model=ReportSummary)
async def report_summary(body: ReportRequest, db: AsyncSession = Depends(get_db)):
    return await AnalyticsService.report_summary(db, body)


# ── Assembled router (mounted at /api/workflow in main.py) ─────────

router = APIRouter()
router.include_router(auth_router, prefix="/auth")
router.include_router(employees_router, prefix="/employees")
router.include_router(shifts_router, prefix="/shifts")
router.include_router(projects_router, prefix="/projects")
router.include_router(clients_router, prefix="/clients")
router.include_router(attendance_router, prefix="/attendance")
router.include_router(invoices_router, prefix="/invoices")
router.include_router(payroll_router, prefix="/payroll")
router.include_router(approvals_router, prefix="/approvals")
router.include_router(notifications_router, prefix="/notifications")
router.include_router(dashboard_router, prefix="/dashboard")
router.include_router(finance_router, prefix="/finance")
router.include_router(reports_router, prefix="/reports")
