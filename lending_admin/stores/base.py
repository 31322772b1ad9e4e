"""Abstract document store interface."""

import copy
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from ..utils.instants import SERVER_TIMESTAMP, StoreTimestamp, value_to_datetime

# (field, operator, value)
Filter = tuple[str, str, Any]

OPERATORS = ("==", ">=", "<=", "in", "array_contains")

_MISSING = object()


class StoreError(Exception):
    """Raised by store backends when a read or write cannot be completed."""


class BatchLimitError(StoreError):
    pass


class DocumentNotFound(StoreError):
    pass


class Document(BaseModel):
    id: str
    collection: str
    data: dict[str, Any] = Field(default_factory=dict)


@dataclass
class WriteOp:
    kind: str  # "set", "merge" or "delete"
    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)


class WriteBatch:
    """Queued writes applied all-or-nothing by a single ``commit``."""

    def __init__(self, store: "RecordStore", max_ops: int):
        self._store = store
        self._max_ops = max_ops
        self._ops: list[WriteOp] = []
        self._committed = False

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._queue(WriteOp("set", collection, doc_id, dict(data)))

    def delete(self, collection: str, doc_id: str) -> None:
        self._queue(WriteOp("delete", collection, doc_id))

    @property
    def ops(self) -> list[WriteOp]:
        return list(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        if self._committed:
            raise StoreError("Batch already committed")
        await self._store.commit(self)
        self._committed = True

    def _queue(self, op: WriteOp) -> None:
        if self._committed:
            raise StoreError("Batch already committed")
        if len(self._ops) >= self._max_ops:
            raise BatchLimitError(f"A batch holds at most {self._max_ops} operations")
        self._ops.append(op)


class RecordStore(ABC):
    """All store backends implement this interface."""

    backend_id: str = ""

    def __init__(self, max_batch_ops: int = 500):
        self.max_batch_ops = max_batch_ops

    def batch(self) -> WriteBatch:
        return WriteBatch(self, self.max_batch_ops)

    def new_id(self, collection: str) -> str:
        return uuid.uuid4().hex[:20]

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        """Documents matching every filter (range bounds are inclusive)."""
        ...

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert under a generated id and return it."""
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def commit(self, batch: WriteBatch) -> None:
        ...


def resolve_server_timestamps(data: dict[str, Any], now: StoreTimestamp) -> dict[str, Any]:
    resolved = {}
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            resolved[key] = now
        elif isinstance(value, dict):
            resolved[key] = resolve_server_timestamps(value, now)
        else:
            resolved[key] = copy.deepcopy(value)
    return resolved


def comparable(value: Any) -> Any:
    """Date-like values compare as datetimes, everything else as-is."""
    if isinstance(value, (bool, int, float)) or value is None:
        return value
    dt = value_to_datetime(value)
    return dt if dt is not None else value


def matches(data: dict[str, Any], filters: Sequence[Filter]) -> bool:
    for field_name, op, expected in filters:
        actual = data.get(field_name, _MISSING)
        if actual is _MISSING:
            return False
        try:
            if not _check(actual, op, expected):
                return False
        except TypeError:
            return False
    return True


def _check(actual: Any, op: str, expected: Any) -> bool:
    if op == "==":
        return comparable(actual) == comparable(expected)
    if op == ">=":
        return comparable(actual) >= comparable(expected)
    if op == "<=":
        return comparable(actual) <= comparable(expected)
    if op == "in":
        target = comparable(actual)
        return any(target == comparable(e) for e in expected)
    if op == "array_contains":
        return isinstance(actual, list) and expected in actual
    raise StoreError(f"Unsupported operator: {op}")


def sort_documents(docs: list[Document], order_by: str, descending: bool) -> list[Document]:
    """Sort on one field; documents without it go last."""
    present = [d for d in docs if d.data.get(order_by) is not None]
    absent = [d for d in docs if d.data.get(order_by) is None]
    try:
        present.sort(key=lambda d: comparable(d.data[order_by]), reverse=descending)
    except TypeError:
        present.sort(key=lambda d: str(d.data[order_by]), reverse=descending)
    return present + absent
