"""Import validation per record family."""

from datetime import datetime
from typing import Any, Optional

from ..models.common import Family
from ..models.results import ValidationIssue, ValidationResult
from ..utils.instants import from_epoch_millis, value_to_datetime

REQUIRED_FIELDS: dict[Family, list[str]] = {
    Family.EQUIPMENT: ["name", "category"],
    Family.LOANS: ["equipmentId", "userId", "borrowDate", "expectedReturnDate"],
    Family.RESERVATIONS: ["equipmentId", "userId", "startTime", "endTime"],
}

# (start field, end field) pairs where end must come strictly after start.
DATE_PAIRS: dict[Family, tuple[str, str]] = {
    Family.LOANS: ("borrowDate", "expectedReturnDate"),
    Family.RESERVATIONS: ("startTime", "endTime"),
}


def required_fields(family: Family) -> list[str]:
    try:
        return list(REQUIRED_FIELDS[Family(family)])
    except (KeyError, ValueError):
        return []


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return from_epoch_millis(value)
    return value_to_datetime(value)


def validate_record(record: Any, family: Family) -> list[str]:
    """Return one message per problem; an empty list means the record is valid."""
    if not isinstance(record, dict):
        return ["Record must be an object"]

    errors = []
    for field in required_fields(family):
        if _is_blank(record.get(field)):
            errors.append(f"Missing required field: {field}")

    try:
        family = Family(family)
    except ValueError:
        return errors

    if family == Family.EQUIPMENT:
        for field in ("name", "category"):
            value = record.get(field)
            if not _is_blank(value) and not isinstance(value, str):
                errors.append(f'Field "{field}" must be a string')

    elif family in DATE_PAIRS:
        start_field, end_field = DATE_PAIRS[family]
        start = end = None
        if not _is_blank(record.get(start_field)):
            start = _parse_date(record[start_field])
            if start is None:
                errors.append(f'Field "{start_field}" must be a valid date')
        if not _is_blank(record.get(end_field)):
            end = _parse_date(record[end_field])
            if end is None:
                errors.append(f'Field "{end_field}" must be a valid date')
        if start is not None and end is not None and end <= start:
            errors.append(f"{end_field} must be after {start_field}")

    return errors


def validate_batch(records: Any, family: Family) -> ValidationResult:
    if not isinstance(records, list):
        return ValidationResult(
            is_valid=False,
            errors=[ValidationIssue(index=-1, record=None, errors=["Data must be an array"])],
            error_count=1,
        )

    valid = []
    issues = []
    for index, record in enumerate(records):
        problems = validate_record(record, family)
        if problems:
            issues.append(ValidationIssue(index=index, record=record, errors=problems))
        else:
            valid.append(record)

    return ValidationResult(
        is_valid=not issues,
        valid_records=valid,
        errors=issues,
        total_records=len(records),
        valid_count=len(valid),
        error_count=len(issues),
    )
