"""Infrastructure layer exports."""

from .memory_store import InMemoryStore
from .session import LocalStorageSession, SessionAccessor
from .store import (
    HttpStoreClient,
    StoreClient,
    StoreError,
    StoreResource,
    configure_store_client,
    get_store_client,
)

__all__ = [
    "HttpStoreClient",
    "InMemoryStore",
    "LocalStorageSession",
    "SessionAccessor",
    "StoreClient",
    "StoreError",
    "StoreResource",
    "configure_store_client",
    "get_store_client",
]
