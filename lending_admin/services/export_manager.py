"""Filtered export of a record family to CSV or JSON."""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional, Union

from ..config import Settings, settings
from ..models.archive import AuditOperation
from ..models.common import DateRange, ExportFormat, Family
from ..models.options import ExportOptions
from ..models.results import ExportResult
from ..stores.base import RecordStore
from ..stores.records import RecordRepository
from ..utils.instants import format_iso
from .audit import AuditLogger
from .codec import to_csv, to_json
from .projection import export_fields, flatten

logger = logging.getLogger(__name__)


def build_summary(
    rows: list[dict[str, Any]],
    family: Family,
    date_range: Optional[DateRange],
) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "totalRecords": len(rows),
        "dataType": family.value,
        "dateRange": date_range.to_summary() if date_range else {"start": None, "end": None},
        "generatedAt": format_iso(datetime.now(tz=timezone.utc)),
    }
    if family == Family.EQUIPMENT:
        summary["categoryBreakdown"] = dict(Counter(r.get("category") or "uncategorized" for r in rows))
    else:
        summary["statusBreakdown"] = dict(Counter(r.get("status") or "unknown" for r in rows))
    return summary


class ExportManager:
    def __init__(
        self,
        store: RecordStore,
        audit: Optional[AuditLogger] = None,
        config: Settings = settings,
    ):
        self.records = RecordRepository(store, config)
        self.audit = audit or AuditLogger(store, config)

    async def export_data(
        self,
        options: Union[ExportOptions, dict[str, Any]],
        exported_by: Optional[str] = None,
    ) -> ExportResult:
        opts = None
        try:
            opts = options if isinstance(options, ExportOptions) else ExportOptions.model_validate(options)
            family = opts.data_type
            docs = await self.records.query_family(
                family,
                opts.date_range,
                status=opts.filters.status,
                category=opts.filters.category,
                order_by="createdAt",
                descending=True,
            )
            rows = [flatten({**doc.data, "id": doc.id}, family) for doc in docs]
            if opts.format == ExportFormat.CSV:
                data = to_csv(rows, export_fields(family))
            else:
                data = to_json(rows)
            summary = build_summary(rows, family, opts.date_range)
        except Exception as e:
            logger.error(f"Error exporting data: {e}")
            return ExportResult(
                success=False,
                error=str(e),
                record_count=0,
                format=opts.format if opts else ExportFormat.CSV,
                data_type=opts.data_type if opts else Family.LOANS,
            )

        logger.info(f"Exported {len(rows)} {family.value} records as {opts.format.value}")
        if exported_by:
            await self.audit.log(AuditOperation.EXPORT, {
                "dataType": family.value,
                "format": opts.format.value,
                "recordCount": len(rows),
                "exportedBy": exported_by,
            }, actor_id=exported_by)

        return ExportResult(
            success=True,
            data=data,
            record_count=len(rows),
            format=opts.format,
            data_type=family,
            summary=summary,
        )
