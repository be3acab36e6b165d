"""Enums and constants for Shift Manager and Workflow Manager."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    admin = "admin"
    company = "company"
    worker = "worker"


# ── Scheduling ──────────────────────────────────────────────────────

class WorkplaceType(str, enum.Enum):
    warehouse = "warehouse"
    event = "event"
    club = "club"
    office = "office"
    other = "other"


class ExchangeStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# ── Invoicing / Documents ───────────────────────────────────────────

class InvoiceType(str, enum.Enum):
    issued = "issued"
    received = "received"


class PaymentMethod(str, enum.Enum):
    bank = "bank"
    cash = "cash"
    card = "card"


class DocumentType(str, enum.Enum):
    image = "image"
    pdf = "pdf"


# Resources guarded by the ownership check
class Resource(str, enum.Enum):
    workplace = "workplace"
    shift = "shift"
    customer = "customer"
    invoice = "invoice"
    document = "document"


# ── Workflow manager ────────────────────────────────────────────────

class WorkflowRole(str, enum.Enum):
    admin = "admin"
    manager = "manager"
    employee = "employee"


class EmployeeStatus(str, enum.Enum):
    active = "active"
    on_leave = "on_leave"
    terminated = "terminated"


class ProjectStatus(str, enum.Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    on_hold = "on_hold"


class WorkflowShiftStatus(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    late = "late"
    excused = "excused"


class PayrollStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"


class WorkflowInvoiceStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    paid = "paid"
    overdue = "overdue"


class ApprovalType(str, enum.Enum):
    shift = "shift"
    time_off = "time_off"
    expense = "expense"


class ApprovalStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class NotificationType(str, enum.Enum):
    info = "info"
    warning = "warning"
    success = "success"


# ── Misc constants ──────────────────────────────────────────────────

DEFAULT_INVOICE_UNIT = "ks"
UPCOMING_SHIFT_WINDOW_DAYS = 14
ALLOWED_UPLOAD_TYPES = {"image/jpeg", "image/png", "image/gif", "application/pdf"}
UPLOAD_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/gif": ".gif", "application/pdf": ".pdf"}
AUTH_RATE_LIMIT = "20/minute"
