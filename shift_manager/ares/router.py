"""ARES router — company lookup used to prefill registration and invoices."""

from typing import Optional

from fastapi import APIRouter, Query

from shift_manager.ares.schemas import CompanyInfo
from shift_manager.ares.service import lookup_company

router = APIRouter(prefix="", tags=["ares"])


@router.get("", response_model=CompanyInfo)
@router.get("/company", response_model=CompanyInfo)
async def get_company(ico: Optional[str] = Query(None)):
    return await lookup_company(ico)
