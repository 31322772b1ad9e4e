"""Shared fixtures: in-memory stores, seeding helpers and fault injection."""

from datetime import datetime, timezone
from typing import Any

import pytest

from lending_admin.config import Settings
from lending_admin.stores import MemoryRecordStore, StoreError
from lending_admin.utils.instants import StoreTimestamp


class FlakyStore(MemoryRecordStore):
    """Memory store that fails chosen commits (1-based), adds or updates."""

    def __init__(
        self,
        max_batch_ops: int = 500,
        fail_commits=(),
        fail_add_collections=(),
        fail_update_collections=(),
    ):
        super().__init__(max_batch_ops)
        self.fail_commits = set(fail_commits)
        self.fail_add_collections = set(fail_add_collections)
        self.fail_update_collections = set(fail_update_collections)
        self.commit_calls = 0

    async def commit(self, batch):
        self.commit_calls += 1
        if self.commit_calls in self.fail_commits:
            raise StoreError(f"simulated failure on commit {self.commit_calls}")
        await super().commit(batch)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        if collection in self.fail_add_collections:
            raise StoreError(f"simulated failure writing {collection}")
        return await super().add(collection, data)

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        if collection in self.fail_update_collections:
            raise StoreError(f"simulated failure updating {collection}")
        await super().update(collection, doc_id, fields)


def ts(*args) -> StoreTimestamp:
    return StoreTimestamp.from_datetime(datetime(*args, tzinfo=timezone.utc))


async def seed(store: MemoryRecordStore, collection: str, docs: dict[str, dict[str, Any]]) -> None:
    batch = store.batch()
    for doc_id, data in docs.items():
        batch.set(collection, doc_id, data)
    await batch.commit()


def loan(n: int, borrow: StoreTimestamp, status: str = "active") -> dict[str, Any]:
    return {
        "equipmentId": f"eq-{n}",
        "equipmentSnapshot": {"name": f"Camera {n}"},
        "userId": f"user-{n}",
        "userSnapshot": {"displayName": f"User {n}", "email": f"user{n}@example.com"},
        "status": status,
        "borrowDate": borrow,
        "expectedReturnDate": StoreTimestamp(borrow.seconds + 7 * 86400),
        "createdAt": borrow,
    }


@pytest.fixture
def config() -> Settings:
    return Settings(batch_size=500)


@pytest.fixture
def small_batches() -> Settings:
    return Settings(batch_size=2)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def loans_by_day():
    """Five loans borrowed on 2024-01-01 .. 2024-01-05 at noon."""
    return {f"loan-{d}": loan(d, ts(2024, 1, d, 12, 0, 0)) for d in range(1, 6)}
