"""Data management service: export, import, delete, restore and audit."""

from typing import Any, Optional, Sequence, Union

from ..config import Settings, settings
from ..models.archive import AuditLogEntry, AuditOperation, BackupArchive
from ..models.common import ExportFormat, Family
from ..models.options import DeleteOptions, ExportOptions
from ..models.results import (
    DeleteResult,
    ExportResult,
    ImportPreview,
    ImportResult,
    RestoreResult,
    RollbackResult,
)
from ..stores.base import RecordStore
from .audit import AuditLogger
from .backup_manager import BackupManager
from .deletion_manager import DeletionManager, generate_confirmation_phrase, validate_confirmation_phrase
from .export_manager import ExportManager
from .import_manager import ImportManager


class DataManagementService:
    """Every operation runs against the injected store and returns a result
    object; none of them raise.
    """

    def __init__(self, store: RecordStore, config: Settings = settings):
        self.store = store
        self.config = config
        self.audit = AuditLogger(store, config)
        self.backups = BackupManager(store, self.audit, config)
        self.exports = ExportManager(store, self.audit, config)
        self.imports = ImportManager(store, self.audit, config)
        self.deletions = DeletionManager(store, self.backups, self.audit, config)

    async def export_data(
        self,
        options: Union[ExportOptions, dict[str, Any]],
        exported_by: Optional[str] = None,
    ) -> ExportResult:
        return await self.exports.export_data(options, exported_by)

    def preview_import(self, content: str, fmt: ExportFormat, family: Family) -> ImportPreview:
        return self.imports.preview_import(content, fmt, family)

    async def import_data(
        self,
        content: str,
        fmt: ExportFormat,
        family: Family,
        imported_by: str,
    ) -> ImportResult:
        return await self.imports.import_data(content, fmt, family, imported_by)

    async def execute_rollback(self, rollback_id: str, executed_by: str) -> RollbackResult:
        return await self.imports.execute_rollback(rollback_id, executed_by)

    async def delete_data(
        self,
        options: Union[DeleteOptions, dict[str, Any]],
        deleted_by: str,
    ) -> DeleteResult:
        return await self.deletions.delete_data(options, deleted_by)

    async def restore_from_backup(self, archive_id: str, restored_by: str) -> RestoreResult:
        return await self.backups.restore(archive_id, restored_by)

    async def list_backup_archives(self, data_type: Optional[Family] = None) -> list[BackupArchive]:
        return await self.backups.list_archives(data_type)

    async def audit_log(
        self,
        operation: Optional[AuditOperation] = None,
        actor_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[AuditLogEntry]:
        return await self.audit.entries(operation, actor_id, limit)

    @staticmethod
    def confirmation_phrase(data_types: Sequence[Family]) -> str:
        return generate_confirmation_phrase(data_types)

    @staticmethod
    def is_confirmed(phrase: str, data_types: Sequence[Family]) -> bool:
        return validate_confirmation_phrase(phrase, data_types)
