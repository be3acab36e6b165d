"""Reports router — monthly hour reports."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User
from shift_manager.database import get_db
from shift_manager.reports.schemas import ReportGenerateRequest, ReportResponse
from shift_manager.reports.service import ReportService

router = APIRouter(prefix="", tags=["reports"])


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    user_id: Optional[int] = Query(None, alias="userId"),
):
    return await ReportService.list_reports(db, user, user_id)


@router.post("/generate", response_model=ReportResponse, status_code=201)
async def generate_report(
    body: ReportGenerateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await ReportService.generate_report(db, body, user)
