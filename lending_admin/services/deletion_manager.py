"""Confirmation-gated bulk deletion with pre-delete backup.

One ``delete_data`` call walks the phases

    VALIDATING_CONFIRMATION -> COLLECTING -> (BACKING_UP) -> DELETING -> LOGGING -> DONE

and, when a batch commit fails after a backup exists, DELETING -> RESTORING
-> FAILED. Batches are committed one after another; the store only makes a
single batch atomic, so a failure in batch N leaves batches 1..N-1 applied
and the backup is what puts them back.

The confirmation phrase guards against slips in the console. It is not an
authorization check.
"""

import logging
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from ..config import Settings, settings
from ..models.archive import AuditOperation
from ..models.common import CollectedRecord, DateRange, Family
from ..models.options import DeleteOptions
from ..models.results import DeletePhase, DeleteResult
from ..stores.base import RecordStore
from ..stores.records import RecordRepository, chunked
from .audit import AuditLogger
from .backup_manager import BackupManager

logger = logging.getLogger(__name__)

FAMILY_LABELS = {
    Family.LOANS: "LOANS",
    Family.RESERVATIONS: "RESERVATIONS",
    Family.EQUIPMENT: "EQUIPMENT",
}


def generate_confirmation_phrase(data_types: Sequence[Family]) -> str:
    return "DELETE " + ", ".join(FAMILY_LABELS[Family(t)] for t in data_types)


def validate_confirmation_phrase(phrase: str, data_types: Sequence[Family]) -> bool:
    return (phrase or "").strip().upper() == generate_confirmation_phrase(data_types)


class DeletionManager:
    def __init__(
        self,
        store: RecordStore,
        backups: Optional[BackupManager] = None,
        audit: Optional[AuditLogger] = None,
        config: Settings = settings,
    ):
        self.config = config
        self.records = RecordRepository(store, config)
        self.audit = audit or AuditLogger(store, config)
        self.backups = backups or BackupManager(store, self.audit, config)

    async def delete_data(
        self,
        options: Union[DeleteOptions, dict[str, Any]],
        deleted_by: str,
    ) -> DeleteResult:
        phase = self._enter(DeletePhase.VALIDATING_CONFIRMATION)
        try:
            opts = options if isinstance(options, DeleteOptions) else DeleteOptions.model_validate(options)
        except ValidationError as e:
            return DeleteResult(success=False, error=f"Invalid delete options: {e}")

        if not validate_confirmation_phrase(opts.confirmation_phrase, opts.data_types):
            return DeleteResult(success=False, error="Invalid confirmation phrase")

        backup_id = None
        total_deleted = 0
        try:
            phase = self._enter(DeletePhase.COLLECTING)
            records = await self._collect(opts.data_types, opts.date_range)
            if not records:
                self._enter(DeletePhase.DONE)
                return DeleteResult(success=True, message="No records found matching criteria")

            if opts.create_backup:
                phase = self._enter(DeletePhase.BACKING_UP)
                backup_id = await self.backups.create_archive(
                    records, opts.data_types, opts.date_range, deleted_by
                )

            phase = self._enter(DeletePhase.DELETING)
            for chunk in chunked(records, self.config.batch_size):
                total_deleted += await self.records.delete_batch(chunk)
                logger.debug(f"Deleted {total_deleted}/{len(records)} records")

        except Exception as e:
            logger.error(f"Delete failed while {phase.value} ({total_deleted} committed): {e}")
            if backup_id and phase == DeletePhase.DELETING:
                await self._restore_after_failure(backup_id, deleted_by)
            self._enter(DeletePhase.FAILED)
            return DeleteResult(success=False, error=str(e), backup_id=backup_id)

        self._enter(DeletePhase.LOGGING)
        details: dict[str, Any] = {
            "dataTypes": [t.value for t in opts.data_types],
            "recordCount": total_deleted,
            "deletedBy": deleted_by,
        }
        if opts.date_range:
            details["dateRange"] = opts.date_range.to_summary()
        if backup_id:
            details["backupId"] = backup_id
        audit_log_id = await self.audit.log(AuditOperation.DELETE, details, actor_id=deleted_by)

        self._enter(DeletePhase.DONE)
        return DeleteResult(
            success=True,
            deleted_count=total_deleted,
            backup_id=backup_id,
            audit_log_id=audit_log_id,
        )

    async def _collect(
        self,
        data_types: Sequence[Family],
        date_range: Optional[DateRange],
    ) -> list[CollectedRecord]:
        collected: list[CollectedRecord] = []
        seen: set[tuple[str, str]] = set()
        for family in data_types:
            for doc in await self.records.query_family(family, date_range):
                if (doc.collection, doc.id) in seen:
                    continue
                seen.add((doc.collection, doc.id))
                collected.append(CollectedRecord(
                    family=family, collection=doc.collection, id=doc.id, data=doc.data
                ))
        logger.info(f"Collected {len(collected)} records for deletion")
        return collected

    async def _restore_after_failure(self, backup_id: str, restored_by: str) -> None:
        self._enter(DeletePhase.RESTORING)
        try:
            result = await self.backups.restore(backup_id, restored_by)
        except Exception as e:
            logger.error(f"Error restoring from backup {backup_id}: {e}")
            return
        if not result.success:
            logger.error(f"Restore from backup {backup_id} failed: {result.error}")

    @staticmethod
    def _enter(phase: DeletePhase) -> DeletePhase:
        logger.debug(f"delete: {phase.value}")
        return phase
