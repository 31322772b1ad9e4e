"""Data models."""

from .common import CollectedRecord, DateRange, ExportFormat, Family, RecordRef
from .options import DeleteOptions, ExportFilters, ExportOptions
from .results import (
    DeletePhase,
    DeleteResult,
    ExportResult,
    ImportPreview,
    ImportResult,
    RestoreResult,
    RollbackResult,
    ValidationIssue,
    ValidationResult,
)
from .archive import (
    ArchivedRecord,
    ArchiveStatus,
    ArchiveType,
    AuditLogEntry,
    AuditOperation,
    BackupArchive,
    ManifestEntry,
    ManifestStatus,
    RollbackManifest,
)

__all__ = [
    "CollectedRecord",
    "DateRange",
    "ExportFormat",
    "Family",
    "RecordRef",
    "DeleteOptions",
    "ExportFilters",
    "ExportOptions",
    "DeletePhase",
    "DeleteResult",
    "ExportResult",
    "ImportPreview",
    "ImportResult",
    "RestoreResult",
    "RollbackResult",
    "ValidationIssue",
    "ValidationResult",
    "ArchivedRecord",
    "ArchiveStatus",
    "ArchiveType",
    "AuditLogEntry",
    "AuditOperation",
    "BackupArchive",
    "ManifestEntry",
    "ManifestStatus",
    "RollbackManifest",
]
