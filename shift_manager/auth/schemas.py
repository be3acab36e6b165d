"""Auth Pydantic schemas for request / response validation."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from shift_manager.common.constants import UserRole
from shift_manager.common.schemas import CamelModel


# ── Requests ────────────────────────────────────────────────────────

class UserProfileFields(CamelModel):
    date_of_birth: Optional[datetime] = None
    personal_id: Optional[str] = None
    phone: Optional[str] = None
    hourly_wage: Optional[int] = None
    notes: Optional[str] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None
    company_vat_id: Optional[str] = None
    company_address: Optional[str] = None
    company_city: Optional[str] = None
    company_zip: Optional[str] = None
    company_verified: Optional[bool] = None


class RegisterRequest(UserProfileFields):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.worker


class LoginRequest(CamelModel):
    email: str
    password: str


class PasswordResetRequest(CamelModel):
    email: Optional[str] = None


class PasswordResetConfirm(CamelModel):
    email: Optional[str] = None
    code: Optional[str] = None
    new_password: Optional[str] = None


# ── Responses ───────────────────────────────────────────────────────

class UserResponse(CamelModel):
    """User without the password hash."""

    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    role: str
    date_of_birth: Optional[datetime] = None
    personal_id: Optional[str] = None
    phone: Optional[str] = None
    hourly_wage: Optional[int] = None
    notes: Optional[str] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None
    company_vat_id: Optional[str] = None
    company_address: Optional[str] = None
    company_city: Optional[str] = None
    company_zip: Optional[str] = None
    company_verified: Optional[bool] = None
    parent_company_id: Optional[int] = None


class SessionUserResponse(UserResponse):
    csrf_token: str
