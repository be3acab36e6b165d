"""Workplace Pydantic schemas."""

from typing import Optional

from pydantic import Field

from shift_manager.common.constants import WorkplaceType
from shift_manager.common.schemas import CamelModel


class WorkplaceCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: WorkplaceType
    address: Optional[str] = None
    notes: Optional[str] = None
    manager_id: Optional[int] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None
    company_vat_id: Optional[str] = None
    company_address: Optional[str] = None


class WorkplaceUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[WorkplaceType] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    manager_id: Optional[int] = None
    owner_id: Optional[int] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None
    company_vat_id: Optional[str] = None
    company_address: Optional[str] = None


class WorkplaceResponse(CamelModel):
    id: int
    name: str
    type: str
    address: Optional[str] = None
    notes: Optional[str] = None
    manager_id: Optional[int] = None
    owner_id: Optional[int] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None
    company_vat_id: Optional[str] = None
    company_address: Optional[str] = None
