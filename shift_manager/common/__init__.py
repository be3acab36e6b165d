"""Common module — shared utilities for Shift Manager."""

from shift_manager.common.audit import AuditTrail, TimestampMixin, create_audit_entry
from shift_manager.common.constants import (
    ExchangeStatus,
    InvoiceType,
    Resource,
    UserRole,
    WorkflowRole,
    WorkplaceType,
)
from shift_manager.common.exceptions import (
    AppException,
    BadRequestException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    UpstreamException,
    ValidationException,
    register_exception_handlers,
)
from shift_manager.common.filters import apply_filters, apply_search
from shift_manager.common.schemas import CamelModel

__all__ = [
    # Audit
    "AuditTrail",
    "TimestampMixin",
    "create_audit_entry",
    # Constants / Enums
    "ExchangeStatus",
    "InvoiceType",
    "Resource",
    "UserRole",
    "WorkflowRole",
    "WorkplaceType",
    # Exceptions
    "AppException",
    "BadRequestException",
    "ConflictError",
    "ForbiddenException",
    "NotFoundException",
    "UnauthorizedException",
    "UpstreamException",
    "ValidationException",
    "register_exception_handlers",
    # Filters
    "apply_filters",
    "apply_search",
    # Schemas
    "CamelModel",
]
