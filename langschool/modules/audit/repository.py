"""Audit repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.modules.audit.models import AuditLog


class AuditRepository:
    """DB operations for the audit journal."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_audit_log(
        self,
        action: str,
        entity_type: str,
        entity_id: str | None,
        payload: dict,
    ) -> AuditLog:
        log = AuditLog(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            payload=payload,
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def list_audit_logs(
        self,
        entity_type: str | None,
        entity_id: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[AuditLog], int]:
        base_stmt: Select[tuple[AuditLog]] = select(AuditLog)
        if entity_type is not None:
            base_stmt = base_stmt.where(AuditLog.entity_type == entity_type)
        if entity_id is not None:
            base_stmt = base_stmt.where(AuditLog.entity_id == entity_id)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
            .offset(offset)
        )
        items = (await self.session.scalars(stmt)).all()
        return items, total
