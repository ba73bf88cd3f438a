"""Reports API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from langschool.modules.reports.schemas import OverviewRead
from langschool.modules.reports.service import ReportsService, get_reports_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/overview", response_model=OverviewRead)
async def get_overview(
    service: ReportsService = Depends(get_reports_service),
) -> OverviewRead:
    """Return counts for the dashboard home page."""
    return await service.get_overview()
