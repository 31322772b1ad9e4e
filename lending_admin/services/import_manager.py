"""Validated import with an undo manifest.

Records are inserted in batches under ids generated up front. Every id is
added to the rollback manifest as soon as it is queued, so the manifest covers
the intended writes even when a later batch fails.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from ..config import Settings, settings
from ..models.archive import AuditOperation, ManifestEntry, ManifestStatus, RollbackManifest
from ..models.common import ExportFormat, Family
from ..models.results import ImportPreview, ImportResult, RollbackResult, ValidationIssue
from ..stores.base import RecordStore
from ..stores.records import RecordRepository, chunked
from ..utils.instants import SERVER_TIMESTAMP, StoreTimestamp, ensure_utc, from_epoch_millis, parse_iso
from .audit import AuditLogger
from .codec import parse_csv, parse_json
from .validator import validate_batch

logger = logging.getLogger(__name__)

IMPORT_DATE_FIELDS = (
    "borrowDate", "expectedReturnDate", "actualReturnDate",
    "startTime", "endTime", "purchaseDate", "warrantyExpiry",
)

DEFAULT_STATUS: dict[Family, dict[str, Any]] = {
    Family.EQUIPMENT: {"status": "available", "isActive": True},
    Family.LOANS: {"status": "pending"},
    Family.RESERVATIONS: {"status": "pending"},
}


class RollbackUnavailableError(Exception):
    """The manifest is missing, already executed, or expired."""


def parse_content(content: str, fmt: ExportFormat) -> list[Any]:
    if ExportFormat(fmt) == ExportFormat.CSV:
        return parse_csv(content)
    return parse_json(content)


def prepare_record(record: dict[str, Any], family: Family, imported_by: str) -> dict[str, Any]:
    """Strip the caller's id, stamp import metadata and coerce dates.

    ISO strings and epoch milliseconds become store timestamps.
    """
    prepared = {k: v for k, v in record.items() if k != "id"}
    prepared["importedAt"] = SERVER_TIMESTAMP
    prepared["importedBy"] = imported_by
    prepared["createdAt"] = SERVER_TIMESTAMP
    prepared["updatedAt"] = SERVER_TIMESTAMP

    for field in IMPORT_DATE_FIELDS:
        value = prepared.get(field)
        if isinstance(value, str) and value:
            parsed = parse_iso(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            parsed = from_epoch_millis(value)
        else:
            continue
        if parsed is not None:
            prepared[field] = StoreTimestamp.from_datetime(parsed)

    if not prepared.get("status"):
        prepared.update(DEFAULT_STATUS[family])
    return prepared


class ImportManager:
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

    def preview_import(self, content: str, fmt: ExportFormat, family: Family) -> ImportPreview:
        """Parse and validate without writing anything."""
        try:
            validation = validate_batch(parse_content(content, fmt), Family(family))
        except Exception as e:
            logger.error(f"Error previewing import: {e}")
            return ImportPreview(success=False, error=str(e))

        return ImportPreview(
            total_records=validation.total_records,
            valid_records=validation.valid_count,
            invalid_records=validation.error_count,
            sample_records=validation.valid_records[:self.config.preview_sample_size],
            errors=validation.errors[:self.config.preview_error_limit],
            can_proceed=validation.valid_count > 0,
        )

    async def import_data(
        self,
        content: str,
        fmt: ExportFormat,
        family: Family,
        imported_by: str,
    ) -> ImportResult:
        manifest: list[ManifestEntry] = []
        try:
            family = Family(family)
            validation = validate_batch(parse_content(content, fmt), family)
            if validation.valid_count == 0:
                return ImportResult(
                    success=False,
                    total_records=validation.total_records,
                    failed_records=validation.error_count,
                    errors=validation.errors,
                    error="No valid records to import",
                )

            collection = self.records.collection_for(family)
            pending: list[tuple[str, dict[str, Any]]] = []
            for record in validation.valid_records:
                doc_id = self.records.new_id(collection)
                pending.append((doc_id, prepare_record(record, family, imported_by)))
                manifest.append(ManifestEntry(id=doc_id, collection=collection))
                if len(pending) >= self.config.batch_size:
                    await self.records.insert_batch(collection, pending)
                    pending = []
            if pending:
                await self.records.insert_batch(collection, pending)

        except Exception as e:
            logger.error(f"Error importing data: {e}")
            if manifest:
                await self._delete_entries(manifest)
            return ImportResult(
                success=False,
                errors=[ValidationIssue(index=-1, record=None, errors=[str(e)])],
                error=str(e),
            )

        rollback_id = await self._create_manifest(manifest, family, imported_by)
        await self.audit.log(AuditOperation.IMPORT, {
            "dataType": family.value,
            "recordCount": len(manifest),
            "importedBy": imported_by,
            "rollbackId": rollback_id,
        }, actor_id=imported_by)
        logger.info(f"Imported {len(manifest)} {family.value} records (rollback {rollback_id})")

        return ImportResult(
            success=True,
            total_records=validation.total_records,
            imported_records=len(manifest),
            failed_records=validation.error_count,
            errors=validation.errors,
            rollback_id=rollback_id,
        )

    async def execute_rollback(self, rollback_id: str, executed_by: str) -> RollbackResult:
        """Undo a previous import. A manifest can be used once.

        The manifest is marked executed before any record is deleted.
        """
        try:
            manifest = await self._load_available(rollback_id)
            await self.store.update(self.config.rollbacks_collection, rollback_id, {
                "status": ManifestStatus.EXECUTED.value,
                "executedBy": executed_by,
                "executedAt": SERVER_TIMESTAMP,
            })
        except Exception as e:
            logger.error(f"Error executing rollback {rollback_id}: {e}")
            return RollbackResult(success=False, error=str(e))

        success = await self._delete_entries(manifest.records)
        if not success:
            try:
                await self.store.update(self.config.rollbacks_collection, rollback_id, {
                    "status": ManifestStatus.FAILED.value,
                })
            except Exception as e:
                logger.error(f"Error updating rollback {rollback_id} status: {e}")

        await self.audit.log(AuditOperation.ROLLBACK, {
            "rollbackId": rollback_id,
            "dataType": manifest.data_type.value,
            "recordCount": len(manifest.records),
            "executedBy": executed_by,
            "success": success,
        }, actor_id=executed_by)

        if not success:
            return RollbackResult(success=False, error="Rollback failed")
        return RollbackResult(success=True, deleted_count=len(manifest.records))

    async def _load_available(self, rollback_id: str) -> RollbackManifest:
        doc = await self.store.get(self.config.rollbacks_collection, rollback_id)
        if doc is None:
            raise RollbackUnavailableError("Rollback record not found")
        manifest = RollbackManifest.from_document(doc.id, doc.data)
        if manifest.status != ManifestStatus.AVAILABLE:
            raise RollbackUnavailableError("Rollback already executed or expired")
        if manifest.expires_at and ensure_utc(manifest.expires_at) < datetime.now(tz=timezone.utc):
            raise RollbackUnavailableError("Rollback record has expired")
        return manifest

    async def _create_manifest(
        self,
        entries: list[ManifestEntry],
        family: Family,
        created_by: str,
    ) -> Optional[str]:
        document = RollbackManifest.new_document(
            entries, family, created_by, self.config.rollback_retention_days
        )
        try:
            return await self.store.add(self.config.rollbacks_collection, document)
        except Exception as e:
            logger.error(f"Error creating rollback record: {e}")
            return None

    async def _delete_entries(self, entries: Sequence[ManifestEntry]) -> bool:
        """Best-effort delete; failures are logged, never raised."""
        try:
            for chunk in chunked(entries, self.config.batch_size):
                await self.records.delete_batch(chunk)
        except Exception as e:
            logger.error(f"Error rolling back import: {e}")
            return False
        return True
