"""Audit log API endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.archive import AuditOperation
from ..services.data_management import DataManagementService
from .deps import get_service, require_admin

router = APIRouter(prefix="/data/audit", tags=["audit"])


@router.get("")
async def get_audit_log(
    operation: Optional[AuditOperation] = None,
    actor_id: Optional[str] = Query(None, alias="actorId"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.audit_log(operation, actor_id, limit)
