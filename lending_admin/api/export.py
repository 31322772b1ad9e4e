"""Export API endpoint."""

from fastapi import APIRouter, Depends

from ..models.options import ExportOptions
from ..services.data_management import DataManagementService
from .deps import get_service, require_admin

router = APIRouter(prefix="/data/export", tags=["export"])


@router.post("")
async def export_data(
    options: ExportOptions,
    admin_id: str = Depends(require_admin),
    service: DataManagementService = Depends(get_service),
):
    return await service.export_data(options, exported_by=admin_id)
