"""Document store backends."""

from .registry import register_store, create_store, available_backends
from .base import Document, RecordStore, StoreError, BatchLimitError, DocumentNotFound, WriteBatch
from .memory import MemoryRecordStore
from .file_store import FileRecordStore
from .records import RecordRepository, UnknownFamilyError, chunked

__all__ = [
    "register_store",
    "create_store",
    "available_backends",
    "Document",
    "RecordStore",
    "StoreError",
    "BatchLimitError",
    "DocumentNotFound",
    "WriteBatch",
    "MemoryRecordStore",
    "FileRecordStore",
    "RecordRepository",
    "UnknownFamilyError",
    "chunked",
]
