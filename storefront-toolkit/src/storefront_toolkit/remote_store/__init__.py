from storefront_toolkit.remote_store.base import RemoteStore, Row, StoreError, StoreResult
from storefront_toolkit.remote_store.in_memory import InMemoryRemoteStore

__all__ = [
    "InMemoryRemoteStore",
    "RemoteStore",
    "Row",
    "StoreError",
    "StoreResult",
]
