"""Pre-delete backup archives and restoring from them."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..config import Settings, settings
from ..models.archive import ArchivedRecord, ArchiveStatus, AuditOperation, BackupArchive
from ..models.common import CollectedRecord, DateRange, Family
from ..models.results import RestoreResult
from ..stores.base import RecordStore
from ..stores.records import RecordRepository, chunked
from ..utils.instants import SERVER_TIMESTAMP, ensure_utc
from .audit import AuditLogger

logger = logging.getLogger(__name__)


class ArchiveUnavailableError(Exception):
    """The archive is missing, already restored, or expired."""


class BackupManager:
    def __init__(
        self,
        store: RecordStore,
        audit: Optional[AuditLogger] = None,
        config: Settings = settings,
    ):
        self.store = store
        self.config = config
        self.records = RecordRepository(store, config)
        self.audit = audit or AuditLogger(store, config)

    async def create_archive(
        self,
        records: list[CollectedRecord],
        data_types: list[Family],
        date_range: Optional[DateRange],
        created_by: str,
    ) -> str:
        """Snapshot ``records`` and return the archive id. Raises on failure."""
        archived = [
            ArchivedRecord(id=r.id, collection=r.collection, data_type=r.family, data=r.data)
            for r in records
        ]
        document = BackupArchive.new_document(
            archived,
            data_types,
            date_range,
            created_by,
            self.config.backup_retention_days,
        )
        try:
            archive_id = await self.store.add(self.config.archives_collection, document)
        except Exception as e:
            logger.error(f"Error creating backup archive: {e}")
            raise
        logger.info(f"Backup archive {archive_id} holds {len(archived)} records")
        return archive_id

    async def get_archive(self, archive_id: str) -> Optional[BackupArchive]:
        doc = await self.store.get(self.config.archives_collection, archive_id)
        if doc is None:
            return None
        return BackupArchive.from_document(doc.id, doc.data)

    async def list_archives(self, data_type: Optional[Family] = None) -> list[BackupArchive]:
        """Archives still available for restore, newest first."""
        filters = [("status", "==", ArchiveStatus.AVAILABLE.value)]
        if data_type:
            filters.insert(0, ("dataTypes", "array_contains", Family(data_type).value))
        try:
            docs = await self.store.query(
                self.config.archives_collection,
                filters,
                order_by="createdAt",
                descending=True,
            )
        except Exception as e:
            logger.error(f"Error getting backup archives: {e}")
            return []
        return [BackupArchive.from_document(d.id, d.data) for d in docs]

    async def restore(self, archive_id: str, restored_by: str) -> RestoreResult:
        """Write every archived record back to its original collection and id.

        The archive is marked restored before any record is written and
        released again if the writes fail.
        """
        try:
            archive = await self._load_restorable(archive_id)
            await self._set_status(archive_id, ArchiveStatus.RESTORED, restored_by)
        except Exception as e:
            logger.error(f"Error restoring from backup {archive_id}: {e}")
            return RestoreResult(success=False, error=str(e))

        restored = 0
        error = None
        try:
            for chunk in chunked(archive.records, self.config.batch_size):
                restored += await self.records.set_batch([
                    (r.collection, r.id, {**r.data, "restoredAt": SERVER_TIMESTAMP, "restoredBy": restored_by})
                    for r in chunk
                ])
        except Exception as e:
            logger.error(f"Error restoring from backup {archive_id}: {e}")
            error = str(e)
            try:
                await self._set_status(archive_id, ArchiveStatus.AVAILABLE, None)
            except Exception as release_error:
                logger.error(f"Backup {archive_id} left marked restored: {release_error}")

        details = {
            "archiveId": archive_id,
            "dataTypes": [t.value for t in archive.data_types],
            "recordCount": restored,
            "restoredBy": restored_by,
            "success": error is None,
        }
        if error:
            details["error"] = error
        await self.audit.log(AuditOperation.RESTORE, details, actor_id=restored_by)

        if error:
            return RestoreResult(success=False, error=error)
        return RestoreResult(success=True, restored_count=restored)

    async def _load_restorable(self, archive_id: str) -> BackupArchive:
        archive = await self.get_archive(archive_id)
        if archive is None:
            raise ArchiveUnavailableError("Backup archive not found")
        if archive.status != ArchiveStatus.AVAILABLE:
            raise ArchiveUnavailableError("Backup archive already used or expired")
        if archive.expires_at and ensure_utc(archive.expires_at) < datetime.now(tz=timezone.utc):
            raise ArchiveUnavailableError("Backup archive has expired")
        return archive

    async def _set_status(self, archive_id: str, status: ArchiveStatus, restored_by: Optional[str]) -> None:
        await self.store.update(self.config.archives_collection, archive_id, {
            "status": status.value,
            "restoredBy": restored_by,
            "restoredAt": SERVER_TIMESTAMP if restored_by else None,
        })
