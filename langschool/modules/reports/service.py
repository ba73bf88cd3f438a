"""Reports business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.modules.reports.repository import ReportsRepository
from langschool.modules.reports.schemas import OverviewRead


class ReportsService:
    """Read-only dashboard aggregates."""

    def __init__(self, repository: ReportsRepository) -> None:
        self.repository = repository

    async def get_overview(self) -> OverviewRead:
        snapshot = await self.repository.get_overview()
        return OverviewRead.model_validate(snapshot)


async def get_reports_service(session: AsyncSession = Depends(get_db_session)) -> ReportsService:
    """Dependency provider for reports service."""
    return ReportsService(ReportsRepository(session))
