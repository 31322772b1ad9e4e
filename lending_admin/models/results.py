"""Result objects returned by data-management operations.

None of the public operations raise; failures come back as one of these with
``success=False``, an ``error`` message and zero counts.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, Field

from .common import CamelModel, ExportFormat, Family


class DeletePhase(str, Enum):
    VALIDATING_CONFIRMATION = "validating_confirmation"
    COLLECTING = "collecting"
    BACKING_UP = "backing_up"
    DELETING = "deleting"
    RESTORING = "restoring"
    LOGGING = "logging"
    DONE = "done"
    FAILED = "failed"


class ValidationIssue(CamelModel):
    index: int
    record: Any = None
    errors: list[str] = Field(default_factory=list)


class ValidationResult(CamelModel):
    is_valid: bool = False
    valid_records: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    total_records: int = 0
    valid_count: int = 0
    error_count: int = 0


class ImportPreview(CamelModel):
    success: bool = True
    total_records: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    sample_records: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    can_proceed: bool = False
    error: Optional[str] = None


class ImportResult(CamelModel):
    success: bool = False
    total_records: int = 0
    imported_records: int = 0
    failed_records: int = 0
    errors: list[ValidationIssue] = Field(default_factory=list)
    rollback_id: Optional[str] = None
    error: Optional[str] = None


class RollbackResult(CamelModel):
    success: bool = False
    deleted_count: int = 0
    error: Optional[str] = None


class ExportResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    data: str = ""
    record_count: int = 0
    format: ExportFormat = ExportFormat.CSV
    data_type: Family = Family.LOANS
    summary: dict[str, Any] = Field(default_factory=dict)
    exported_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    error: Optional[str] = None


class DeleteResult(CamelModel):
    success: bool = False
    deleted_count: int = 0
    backup_id: Optional[str] = None
    audit_log_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


class RestoreResult(CamelModel):
    success: bool = False
    restored_count: int = 0
    error: Optional[str] = None
