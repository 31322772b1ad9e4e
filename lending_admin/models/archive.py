"""Bookkeeping documents owned by the data-management core.

Backup archives, import rollback manifests and audit log entries live in
their own collections. ``new_document`` builds the stored shape by hand so
record payloads are written verbatim.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from ..utils.instants import SERVER_TIMESTAMP, StoreTimestamp, days_from_now
from .common import CamelModel, DateRange, Family, StoredInstant


class ArchiveType(str, Enum):
    PRE_DELETE_BACKUP = "pre_delete_backup"
    SCHEDULED_BACKUP = "scheduled_backup"
    MANUAL_BACKUP = "manual_backup"


class ArchiveStatus(str, Enum):
    AVAILABLE = "available"
    RESTORED = "restored"


class ManifestStatus(str, Enum):
    AVAILABLE = "available"
    EXECUTED = "executed"
    FAILED = "failed"


class AuditOperation(str, Enum):
    EXPORT = "export"
    IMPORT = "import"
    DELETE = "delete"
    RESTORE = "restore"
    ROLLBACK = "rollback"


class ArchivedRecord(CamelModel):
    id: str
    collection: str
    data_type: Family
    data: dict[str, Any] = Field(default_factory=dict)


class ArchivedRange(CamelModel):
    start: StoredInstant = None
    end: StoredInstant = None


class BackupArchive(CamelModel):
    id: Optional[str] = None
    archive_type: ArchiveType = ArchiveType.PRE_DELETE_BACKUP
    data_types: list[Family] = Field(default_factory=list)
    date_range: ArchivedRange = Field(default_factory=ArchivedRange)
    record_count: int = 0
    records: list[ArchivedRecord] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: StoredInstant = None
    expires_at: StoredInstant = None
    status: ArchiveStatus = ArchiveStatus.AVAILABLE
    restored_by: Optional[str] = None
    restored_at: StoredInstant = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "BackupArchive":
        return cls.model_validate({**data, "id": doc_id})

    @staticmethod
    def new_document(
        records: list[ArchivedRecord],
        data_types: list[Family],
        date_range: Optional[DateRange],
        created_by: str,
        retention_days: int,
    ) -> dict[str, Any]:
        return {
            "archiveType": ArchiveType.PRE_DELETE_BACKUP.value,
            "dataTypes": [t.value for t in data_types],
            "dateRange": {
                "start": StoreTimestamp.from_datetime(date_range.start) if date_range else None,
                "end": StoreTimestamp.from_datetime(date_range.end) if date_range else None,
            },
            "recordCount": len(records),
            "records": [
                {
                    "id": r.id,
                    "collection": r.collection,
                    "dataType": r.data_type.value,
                    "data": r.data,
                }
                for r in records
            ],
            "createdBy": created_by,
            "createdAt": SERVER_TIMESTAMP,
            "expiresAt": days_from_now(retention_days),
            "status": ArchiveStatus.AVAILABLE.value,
        }


class ManifestEntry(CamelModel):
    id: str
    collection: str


class RollbackManifest(CamelModel):
    id: Optional[str] = None
    data_type: Family
    records: list[ManifestEntry] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: StoredInstant = None
    expires_at: StoredInstant = None
    status: ManifestStatus = ManifestStatus.AVAILABLE
    executed_by: Optional[str] = None
    executed_at: StoredInstant = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "RollbackManifest":
        return cls.model_validate({**data, "id": doc_id})

    @staticmethod
    def new_document(
        entries: list[ManifestEntry],
        data_type: Family,
        created_by: str,
        retention_days: int,
    ) -> dict[str, Any]:
        return {
            "dataType": data_type.value,
            "records": [{"id": e.id, "collection": e.collection} for e in entries],
            "createdBy": created_by,
            "createdAt": SERVER_TIMESTAMP,
            "status": ManifestStatus.AVAILABLE.value,
            "expiresAt": days_from_now(retention_days),
        }


class AuditLogEntry(CamelModel):
    """Append-only. ``details`` holds the operation-specific fields."""

    id: Optional[str] = None
    operation: AuditOperation
    actor_id: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: StoredInstant = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "AuditLogEntry":
        known = {"operation", "actorId", "timestamp", "metadata"}
        return cls(
            id=doc_id,
            operation=data["operation"],
            actor_id=data.get("actorId"),
            details={k: v for k, v in data.items() if k not in known},
            timestamp=data.get("timestamp"),
            metadata=data.get("metadata") or {},
        )
