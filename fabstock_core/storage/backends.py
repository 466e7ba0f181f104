# =============================================================================
# fabstock_core/storage/backends.py
# Storage backends used by the data provider (local vs Supabase)
# =============================================================================
"""
The data provider depends only on ``StorageBackend``; the two variants are:

    LocalBackend   - JSON blobs in the local key-value store
    RemoteBackend  - Supabase tables + polling change feed

Both write whole collections: there is no diffing, a single quantity change
re-sends (or re-serializes) the entire collection.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from fabstock_core.errors import RemoteError
from fabstock_core.logging import get_logger
from fabstock_core.models import Collection, Record, StorageMode
from fabstock_core.models.collections import ALL_COLLECTIONS

from .local_store import LocalStore
from .remote_store import RemoteStore

logger = get_logger(__name__)

Collections = Dict[Collection, List[Record]]


class NullSubscription:
    """Subscription returned by backends without a change feed."""

    active = False

    def unsubscribe(self) -> None:
        pass


class StorageBackend(ABC):
    """Abstract storage backend."""

    mode: StorageMode

    @abstractmethod
    def load_all(self) -> Collections:
        """Load the four collections."""

    @abstractmethod
    def fetch(self, collection: Collection) -> List[Record]:
        """Load one collection."""

    @abstractmethod
    def write_through(self, collection: Collection, records: List[Record]) -> None:
        """Persist the whole collection."""

    @abstractmethod
    def delete_one(self, collection: Collection, record_id: str, remaining: List[Record]) -> None:
        """Persist the removal of one record."""

    def subscribe(self, collection: Collection, on_change: Callable[[Collection], None]):
        """Register a change listener; no-op unless the backend has a feed."""
        return NullSubscription()

    def close(self) -> None:
        pass


class LocalBackend(StorageBackend):
    """Backend over the local durable key-value store."""

    mode = StorageMode.LOCAL

    def __init__(self, store: LocalStore):
        self.store = store

    def fetch(self, collection: Collection) -> List[Record]:
        """
        Read one blob; a missing key is seeded with the built-in dataset and
        malformed content degrades this collection only to its defaults.
        """
        raw = self.store.load(collection.storage_key, None)
        if raw is None:
            return collection.default_records()

        try:
            return collection.parse(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Malformed {collection.storage_key}, using defaults: {e}")
            return collection.default_records()

    def load_all(self) -> Collections:
        return {collection: self.fetch(collection) for collection in ALL_COLLECTIONS}

    def write_through(self, collection: Collection, records: List[Record]) -> None:
        self.store.save(collection.storage_key, Collection.serialize(records))

    def delete_one(self, collection: Collection, record_id: str, remaining: List[Record]) -> None:
        self.store.save(collection.storage_key, Collection.serialize(remaining))


class RemoteBackend(StorageBackend):
    """Backend over Supabase tables."""

    mode = StorageMode.REMOTE

    def __init__(self, store: RemoteStore):
        self.store = store

    def fetch(self, collection: Collection) -> List[Record]:
        rows = self.store.select_all(collection.table)
        try:
            return collection.parse(rows)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RemoteError(
                f"Malformed rows in {collection.table}: {e}",
                table=collection.table,
                operation="select",
            ) from e

    def load_all(self) -> Collections:
        """Fetch all four tables; the first failure raises ``RemoteError``."""
        return {collection: self.fetch(collection) for collection in ALL_COLLECTIONS}

    def write_through(self, collection: Collection, records: List[Record]) -> None:
        self.store.upsert(collection.table, Collection.serialize(records))

    def delete_one(self, collection: Collection, record_id: str, remaining: List[Record]) -> None:
        self.store.delete_by_id(collection.table, record_id)

    def subscribe(self, collection: Collection, on_change: Callable[[Collection], None]):
        return self.store.subscribe(collection.table, lambda _table: on_change(collection))

    def close(self) -> None:
        self.store.unsubscribe_all()


def schema_sql() -> str:
    """
    SQL creating the four ``{id, data}`` tables in a Supabase project.

    The policies are permissive: any holder of the anon key can read and
    write. Permissions are only checked in the app.
    """
    statements = ["-- Run once in the Supabase SQL editor", ""]
    for collection in ALL_COLLECTIONS:
        statements.append(
            f"create table if not exists {collection.table} "
            f"( id text primary key, data jsonb not null );"
        )
    statements.append("")
    for collection in ALL_COLLECTIONS:
        statements.append(f"alter table {collection.table} enable row level security;")
    statements.append("")
    for collection in ALL_COLLECTIONS:
        statements.append(
            f'create policy "fabstock_{collection.table}" on {collection.table} '
            f"for all using (true) with check (true);"
        )
    return "\n".join(statements) + "\n"
