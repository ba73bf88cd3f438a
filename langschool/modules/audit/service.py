"""Audit business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.modules.audit.models import AuditLog
from langschool.modules.audit.repository import AuditRepository


class AuditService:
    """Read access to the audit journal."""

    def __init__(self, repository: AuditRepository) -> None:
        self.repository = repository

    async def list_logs(
        self,
        entity_type: str | None,
        entity_id: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[AuditLog], int]:
        return await self.repository.list_audit_logs(
            entity_type=entity_type,
            entity_id=entity_id,
            limit=limit,
            offset=offset,
        )


async def get_audit_service(session: AsyncSession = Depends(get_db_session)) -> AuditService:
    """Dependency provider for audit service."""
    return AuditService(AuditRepository(session))
