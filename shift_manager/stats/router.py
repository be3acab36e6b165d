"""Stats router — dashboard numbers for the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.dependencies import get_current_user
from shift_manager.auth.models import User
from shift_manager.database import get_db
from shift_manager.stats.schemas import StatsResponse
from shift_manager.stats.service import StatsService

router = APIRouter(prefix="", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await StatsService.get_stats(db, user)
