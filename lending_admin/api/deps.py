"""Shared request dependencies."""

from typing import Optional

from fastapi import Header, HTTPException

from ..config import settings
from ..services.data_management import DataManagementService
from ..stores import create_store

_service: Optional[DataManagementService] = None


def get_service() -> DataManagementService:
    global _service
    if _service is None:
        _service = DataManagementService(create_store(settings), settings)
    return _service


async def require_admin(
    x_admin_id: Optional[str] = Header(None),
    x_admin_role: Optional[str] = Header(None),
) -> str:
    """Identity and role are asserted by the upstream auth layer."""
    if not x_admin_id or (x_admin_role or "").lower() != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return x_admin_id
