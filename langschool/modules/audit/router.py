"""Audit API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from langschool.modules.audit.schemas import AuditLogRead
from langschool.modules.audit.service import AuditService, get_audit_service
from langschool.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/logs", response_model=Page[AuditLogRead])
async def list_logs(
    entity_type: str | None = Query(default=None, max_length=128),
    entity_id: str | None = Query(default=None, max_length=128),
    pagination=Depends(get_pagination_params),
    service: AuditService = Depends(get_audit_service),
) -> Page[AuditLogRead]:
    """List audit logs, newest first."""
    items, total = await service.list_logs(entity_type, entity_id, pagination.limit, pagination.offset)
    serialized = [AuditLogRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
