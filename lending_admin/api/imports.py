"""Import API endpoints."""

from fastapi import APIRouter, Depends

from ..models.common import CamelModel, ExportFormat, Family
from ..services.data_management import DataManagementService
from .deps import get_service, require_admin

router = APIRouter(prefix="/data/import", tags=["import"])


class ImportRequest(CamelModel):
    content: str
    format: ExportFormat = ExportFormat.CSV
    data_type: Family


@router.post("/preview")
async def preview_import(
    request: ImportRequest,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return service.preview_import(request.content, request.format, request.data_type)


@router.post("")
async def import_data(
    request: ImportRequest,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.import_data(request.content, request.format, request.data_type, admin_id)


@router.post("/rollbacks/{rollback_id}/execute")
async def execute_rollback(
    rollback_id: str,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.execute_rollback(rollback_id, admin_id)
