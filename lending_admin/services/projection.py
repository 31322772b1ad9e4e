"""Flatten stored records into the fixed per-family export shape.

The field lists below are the interchange format for CSV/JSON exports and
imports; keep their order stable.
"""

from typing import Any

from ..models.common import Family
from ..utils.instants import to_instant

EXPORT_FIELDS: dict[Family, list[str]] = {
    Family.LOANS: [
        "id", "equipmentId", "equipmentName", "equipmentNumber",
        "userId", "userName", "userEmail", "userDepartment",
        "status", "purpose", "notes",
        "borrowDate", "expectedReturnDate", "actualReturnDate",
        "approvedBy", "approvedAt", "rejectionReason",
        "createdAt", "updatedAt",
    ],
    Family.RESERVATIONS: [
        "id", "equipmentId", "equipmentName",
        "userId", "userName", "userEmail",
        "status", "purpose", "notes",
        "startTime", "endTime",
        "approvedBy", "approvedAt",
        "createdAt", "updatedAt",
    ],
    Family.EQUIPMENT: [
        "id", "name", "equipmentNumber", "serialNumber",
        "category", "brand", "model",
        "status", "condition", "location",
        "purchaseDate", "purchasePrice", "warrantyExpiry",
        "description", "notes",
        "isActive", "createdAt", "updatedAt",
    ],
}

# Denormalized snapshot objects a missing field can be recovered from.
SNAPSHOT_FALLBACKS: dict[str, tuple[str, str]] = {
    "equipmentName": ("equipmentSnapshot", "name"),
    "userName": ("userSnapshot", "displayName"),
    "userEmail": ("userSnapshot", "email"),
}


def export_fields(family: Family) -> list[str]:
    try:
        return list(EXPORT_FIELDS[Family(family)])
    except (KeyError, ValueError):
        return ["id"]


def is_date_field(field: str) -> bool:
    return "Date" in field or "At" in field or "Time" in field


def flatten(record: dict[str, Any], family: Family) -> dict[str, Any]:
    """``record`` is the stored data with its ``id`` merged in."""
    flat: dict[str, Any] = {"id": record.get("id")}
    for field in export_fields(family):
        if field == "id":
            continue
        value = record.get(field)
        if field not in record and field in SNAPSHOT_FALLBACKS:
            parent, key = SNAPSHOT_FALLBACKS[field]
            snapshot = record.get(parent)
            if isinstance(snapshot, dict):
                value = snapshot.get(key)
        if is_date_field(field):
            value = to_instant(value)
        flat[field] = value
    return flat
