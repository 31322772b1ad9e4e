"""CSV and JSON conversion for export and import files."""

import csv
import io
import json
import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..utils.instants import StoreTimestamp, format_iso

logger = logging.getLogger(__name__)

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_iso(value)
    if isinstance(value, StoreTimestamp):
        return format_iso(value.to_datetime())
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_json_default)
    if isinstance(value, (datetime, StoreTimestamp)):
        return _json_default(value)
    return str(value)


def escape_csv_field(value: Any) -> str:
    """Quote a field if it holds a comma, quote or line break."""
    text = _to_text(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(records: Sequence[dict[str, Any]], fields: Optional[Sequence[str]] = None) -> str:
    if not records:
        return ",".join(fields) if fields else ""
    columns = list(fields) if fields else list(records[0].keys())
    lines = [",".join(columns)]
    for record in records:
        line = ",".join(escape_csv_field(record.get(f)) for f in columns)
        # A lone empty field would otherwise read back as a blank line.
        lines.append(line or '""')
    return "\n".join(lines)


def to_json(records: Sequence[Any]) -> str:
    return json.dumps(list(records), indent=2, ensure_ascii=False, default=_json_default)


def parse_csv(text: Any) -> list[dict[str, str]]:
    """First non-blank row is the header; short rows are padded with ''.

    Blank and whitespace-only lines are skipped; a quoted empty field
    (``""``) is a real row.
    """
    if not text or not isinstance(text, str):
        return []
    rows = [
        row for row in csv.reader(io.StringIO(text, newline=""))
        if row and not (len(row) == 1 and row[0] and not row[0].strip())
    ]
    if len(rows) < 2:
        return []
    header = rows[0]
    return [
        {name: (row[i] if i < len(row) else "") for i, name in enumerate(header)}
        for row in rows[1:]
    ]


def parse_json(text: Any) -> list[Any]:
    """Parse a JSON document into a list; malformed input gives []."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse JSON import: {e}")
        return []
    return data if isinstance(data, list) else [data]
