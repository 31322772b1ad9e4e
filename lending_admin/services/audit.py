"""Append-only audit trail for data-management operations."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ..config import Settings, settings
from ..models.archive import AuditLogEntry, AuditOperation
from ..stores.base import Filter, RecordStore
from ..utils.instants import SERVER_TIMESTAMP, format_iso

logger = logging.getLogger(__name__)


class AuditLogger:
    def __init__(self, store: RecordStore, config: Settings = settings):
        self.store = store
        self.config = config

    async def log(
        self,
        operation: AuditOperation,
        details: dict[str, Any],
        actor_id: Optional[str] = None,
    ) -> Optional[str]:
        """Write one entry and return its id, or None if the write failed.

        Never raises: by the time an operation is logged its outcome is
        already decided.
        """
        entry = {
            "operation": AuditOperation(operation).value,
            **details,
            "actorId": actor_id,
            "timestamp": SERVER_TIMESTAMP,
            "metadata": {
                "source": "server",
                "timestamp": format_iso(datetime.now(tz=timezone.utc)),
            },
        }
        try:
            entry_id = await self.store.add(self.config.audit_collection, entry)
        except Exception as e:
            logger.error(f"Error logging {entry['operation']} operation: {e}")
            return None
        logger.info(f"Audit: {entry['operation']} by {actor_id} -> {entry_id}")
        return entry_id

    async def entries(
        self,
        operation: Optional[AuditOperation] = None,
        actor_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[AuditLogEntry]:
        filters: list[Filter] = []
        if operation:
            filters.append(("operation", "==", AuditOperation(operation).value))
        if actor_id:
            filters.append(("actorId", "==", actor_id))
        try:
            docs = await self.store.query(
                self.config.audit_collection,
                filters,
                order_by="timestamp",
                descending=True,
                limit=limit,
            )
        except Exception as e:
            logger.error(f"Error reading audit log: {e}")
            return []
        return [AuditLogEntry.from_document(d.id, d.data) for d in docs]
