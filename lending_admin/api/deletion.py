"""Delete, backup and restore API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.common import Family
from ..models.options import DeleteOptions
from ..services.data_management import DataManagementService
from .deps import get_service, require_admin

router = APIRouter(prefix="/data", tags=["delete"])


@router.get("/confirmation-phrase")
async def confirmation_phrase(
    data_types: list[Family] = Query(..., alias="dataTypes"),
    admin_id: str = Depends(require_admin),
):
    return {"phrase": DataManagementService.confirmation_phrase(data_types)}


@router.post("/delete")
async def delete_data(
    options: DeleteOptions,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.delete_data(options, admin_id)


@router.get("/backups")
async def list_backups(
    data_type: Optional[Family] = Query(None, alias="dataType"),
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    archives = await service.list_backup_archives(data_type)
    # Record payloads stay server-side; the console only needs the summary.
    return [a.model_dump(mode="json", by_alias=True, exclude={"records"}) for a in archives]


@router.post("/backups/{archive_id}/restore")
async def restore_backup(
    archive_id: str,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.restore_from_backup(archive_id, admin_id)
