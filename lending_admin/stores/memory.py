"""In-process document store."""

import copy
from typing import Any, Optional, Sequence

from ..utils.instants import StoreTimestamp
from .base import (
    Document,
    DocumentNotFound,
    Filter,
    RecordStore,
    WriteBatch,
    WriteOp,
    matches,
    resolve_server_timestamps,
    sort_documents,
)
from .registry import register_store


class MemoryRecordStore(RecordStore):
    backend_id = "memory"

    def __init__(self, max_batch_ops: int = 500):
        super().__init__(max_batch_ops)
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, collection=collection, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        docs = [
            Document(id=doc_id, collection=collection, data=copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if matches(data, filters)
        ]
        if order_by:
            docs = sort_documents(docs, order_by, descending)
        if limit is not None:
            docs = docs[:limit]
        return docs

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = self.new_id(collection)
        await self._apply([WriteOp("set", collection, doc_id, data)])
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        if doc_id not in self._collection(collection):
            raise DocumentNotFound(f"{collection}/{doc_id} not found")
        await self._apply([WriteOp("merge", collection, doc_id, fields)])

    async def commit(self, batch: WriteBatch) -> None:
        await self._apply(batch.ops)

    def snapshot(self, collection: str) -> dict[str, dict[str, Any]]:
        """Copy of a whole collection, keyed by document id."""
        return copy.deepcopy(self._collection(collection))

    async def _apply(self, ops: list[WriteOp]) -> None:
        """Stage ``ops`` on copies of the touched collections, persist them,
        then swap them in. A failed persist leaves the store unchanged.
        """
        now = StoreTimestamp.now()
        staged: dict[str, dict[str, dict[str, Any]]] = {}
        for op in ops:
            if op.collection not in staged:
                staged[op.collection] = dict(self._collection(op.collection))
            docs = staged[op.collection]
            if op.kind == "set":
                docs[op.doc_id] = resolve_server_timestamps(op.data, now)
            elif op.kind == "merge":
                docs[op.doc_id] = {**docs[op.doc_id], **resolve_server_timestamps(op.data, now)}
            else:
                docs.pop(op.doc_id, None)
        await self._persist(staged)
        self._collections.update(staged)

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    async def _persist(self, staged: dict[str, dict[str, dict[str, Any]]]) -> None:
        pass


register_store(MemoryRecordStore.backend_id, lambda cfg: MemoryRecordStore(cfg.batch_size))
