"""JSON-file document store: one file per collection under a data directory."""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import Settings
from ..utils.instants import StoreTimestamp, format_iso, parse_iso
from .base import StoreError
from .memory import MemoryRecordStore
from .registry import register_store

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "__timestamp__"
_DATETIME_TAG = "__datetime__"


def _encode(value: Any) -> Any:
    if isinstance(value, StoreTimestamp):
        return {_TIMESTAMP_TAG: [value.seconds, value.nanos]}
    if isinstance(value, datetime):
        return {_DATETIME_TAG: format_iso(value)}
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_TIMESTAMP_TAG}:
            seconds, nanos = value[_TIMESTAMP_TAG]
            return StoreTimestamp(seconds, nanos)
        if set(value) == {_DATETIME_TAG}:
            return parse_iso(value[_DATETIME_TAG])
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


class FileRecordStore(MemoryRecordStore):
    backend_id = "file"

    def __init__(self, data_dir: Path, max_batch_ops: int = 500):
        super().__init__(max_batch_ops)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        if name not in self._collections:
            path = self._path(name)
            docs: dict[str, dict[str, Any]] = {}
            if path.exists():
                try:
                    docs = _decode(json.loads(path.read_text(encoding="utf-8")))
                except (OSError, json.JSONDecodeError) as e:
                    raise StoreError(f"Cannot read collection {name}: {e}") from e
            self._collections[name] = docs
        return self._collections[name]

    async def _persist(self, staged: dict[str, dict[str, dict[str, Any]]]) -> None:
        """Write every staged collection to a temp file, then move them all into place."""
        written: list[tuple[Path, Path]] = []
        try:
            for name, docs in staged.items():
                path = self._path(name)
                tmp = path.with_suffix(".json.tmp")
                written.append((tmp, path))
                tmp.write_text(self._dump(docs), encoding="utf-8")
        except OSError as e:
            self._discard(tmp for tmp, _ in written)
            logger.error(f"Failed to write collection {name}: {e}")
            raise StoreError(f"Cannot write collection {name}: {e}") from e

        replaced: list[str] = []
        try:
            for tmp, path in written:
                os.replace(tmp, path)
                replaced.append(path.stem)
        except OSError as e:
            logger.error(f"Failed to replace {path.name}: {e}")
            self._discard(tmp for tmp, _ in written)
            self._restore_files(replaced)
            raise StoreError(f"Cannot write collection {path.stem}: {e}") from e

    def _dump(self, docs: dict[str, dict[str, Any]]) -> str:
        return json.dumps(_encode(docs), ensure_ascii=False, indent=2)

    def _restore_files(self, names: list[str]) -> None:
        """Put back the last committed contents of collections already replaced."""
        for name in names:
            try:
                self._path(name).write_text(self._dump(self._collections.get(name, {})), encoding="utf-8")
            except OSError as e:
                logger.error(f"Could not restore collection file {name}: {e}")

    @staticmethod
    def _discard(paths) -> None:
        for tmp in paths:
            try:
                if tmp.is_file():
                    tmp.unlink()
            except OSError as e:
                logger.warning(f"Could not remove {tmp.name}: {e}")


def _factory(cfg: Settings) -> FileRecordStore:
    return FileRecordStore(cfg.data_dir, cfg.batch_size)


register_store(FileRecordStore.backend_id, _factory)
