# =============================================================================
# fabstock_core/storage/__init__.py
# Storage adapters for FabStock Manager
# =============================================================================
"""
Storage layer.

    LocalStore     durable key-value JSON blobs (SQLite)
    RemoteStore    Supabase tables, change feed, magic-link auth
    LocalBackend / RemoteBackend
                   the two StorageBackend variants used by the DataProvider
"""

from .local_store import LocalStore, get_local_store
from .remote_store import RemoteStore, Subscription
from .backends import LocalBackend, RemoteBackend, StorageBackend, NullSubscription, schema_sql

__all__ = [
    "LocalStore",
    "get_local_store",
    "RemoteStore",
    "Subscription",
    "StorageBackend",
    "LocalBackend",
    "RemoteBackend",
    "NullSubscription",
    "schema_sql",
]
