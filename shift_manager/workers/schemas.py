"""Worker management schemas."""

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, EmailStr, Field

from shift_manager.auth.schemas import UserProfileFields
from shift_manager.common.constants import UserRole
from shift_manager.common.schemas import CamelModel


def _wage_to_int(value: Any) -> Any:
    # Forms submit the wage as a string
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return int(float(value))
        except ValueError:
            return value
    return value


HourlyWage = Annotated[Optional[int], BeforeValidator(_wage_to_int)]


class WorkerCreate(UserProfileFields):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.worker
    hourly_wage: HourlyWage = None
    parent_company_id: Optional[int] = None


class WorkerUpdate(UserProfileFields):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    hourly_wage: HourlyWage = None
    parent_company_id: Optional[int] = None


class DeleteResponse(CamelModel):
    success: bool = True
