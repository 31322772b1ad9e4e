"""Store backend auto-registration."""

from typing import Callable, Optional

from ..config import Settings
from .base import RecordStore, StoreError

StoreFactory = Callable[[Settings], RecordStore]

_registry: dict[str, StoreFactory] = {}


def register_store(backend_id: str, factory: StoreFactory) -> None:
    _registry[backend_id] = factory


def get_store_factory(backend_id: str) -> Optional[StoreFactory]:
    return _registry.get(backend_id)


def available_backends() -> list[str]:
    return sorted(_registry)


def create_store(config: Settings) -> RecordStore:
    factory = get_store_factory(config.store_backend)
    if factory is None:
        raise StoreError(
            f"Unknown store backend '{config.store_backend}' "
            f"(available: {', '.join(available_backends())})"
        )
    return factory(config)
