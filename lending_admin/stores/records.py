"""Per-family access to the loan, reservation and equipment collections."""

from typing import Any, Iterator, Optional, Sequence, TypeVar

from ..config import Settings, settings
from ..models.common import DateRange, Family
from .base import Document, Filter, RecordStore, StoreError

T = TypeVar("T")

# Field each family is range-filtered on.
DATE_ANCHOR_FIELDS = {
    Family.LOANS: "borrowDate",
    Family.RESERVATIONS: "startTime",
    Family.EQUIPMENT: "createdAt",
}


class UnknownFamilyError(StoreError):
    pass


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


class RecordRepository:
    """Family lookup, filtered queries and single-batch writes.

    Each write method commits exactly one batch; callers split larger sets
    with ``chunked`` so every batch stays under the store limit.
    """

    def __init__(self, store: RecordStore, config: Settings = settings):
        self.store = store
        self.config = config

    def collection_for(self, family: Family) -> str:
        collections = {
            Family.LOANS: self.config.loans_collection,
            Family.RESERVATIONS: self.config.reservations_collection,
            Family.EQUIPMENT: self.config.equipment_collection,
        }
        try:
            return collections[Family(family)]
        except (KeyError, ValueError):
            raise UnknownFamilyError(f"Unknown data type: {family}") from None

    @staticmethod
    def date_anchor(family: Family) -> str:
        return DATE_ANCHOR_FIELDS[Family(family)]

    async def query_family(
        self,
        family: Family,
        date_range: Optional[DateRange] = None,
        status: Sequence[str] = (),
        category: Sequence[str] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Document]:
        collection = self.collection_for(family)
        filters: list[Filter] = []
        if date_range is not None:
            anchor = self.date_anchor(family)
            filters.append((anchor, ">=", date_range.start))
            filters.append((anchor, "<=", date_range.end))
        if status:
            filters.append(("status", "in", list(status)))
        if category and Family(family) == Family.EQUIPMENT:
            filters.append(("category", "in", list(category)))
        return await self.store.query(collection, filters, order_by=order_by, descending=descending)

    def new_id(self, collection: str) -> str:
        return self.store.new_id(collection)

    async def delete_batch(self, refs: Sequence[Any]) -> int:
        """Delete ``refs`` (anything with ``collection`` and ``id``) in one batch."""
        batch = self.store.batch()
        for ref in refs:
            batch.delete(ref.collection, ref.id)
        await batch.commit()
        return len(refs)

    async def insert_batch(self, collection: str, items: Sequence[tuple[str, dict[str, Any]]]) -> list[str]:
        batch = self.store.batch()
        for doc_id, data in items:
            batch.set(collection, doc_id, data)
        await batch.commit()
        return [doc_id for doc_id, _ in items]

    async def set_batch(self, items: Sequence[tuple[str, str, dict[str, Any]]]) -> int:
        """Write ``(collection, id, data)`` triples verbatim, overwriting."""
        batch = self.store.batch()
        for collection, doc_id, data in items:
            batch.set(collection, doc_id, data)
        await batch.commit()
        return len(items)
