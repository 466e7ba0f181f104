# =============================================================================
# fabstock_core/sync/data_provider.py
# Data Provider - owns the entity collections and the active storage backend
# =============================================================================
"""
DataProvider - single owner of the four entity collections.

Responsibilities:
- Pick a backend from ``AppSettings`` (Supabase when mode is remote and
  credentials are present, local otherwise) and load the initial state
- Keep the in-memory collections fresh from the remote change feed
- Apply mutations optimistically, then write them through asynchronously
- One-shot bulk migrations local -> Supabase and Supabase -> local

State machine:

    UNINITIALIZED --initialize()--> LOADING --+--> READY(mode)
                                              +--> ERROR(message)

Write-through failures are logged and flagged per collection
(``pending_write_failed``); they are never retried nor rolled back. Remote
notifications replace the whole collection with the server snapshot, so a
notification racing with an optimistic write may show either value last.

Usage:
    provider = DataProvider(settings, local_store=get_local_store())
    provider.initialize()
    provider.set_items(updated_items)
    provider.upload_local_to_remote(settings)
"""

from __future__ import annotations
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from fabstock_core.errors import ConfigurationError, FabStockError, RemoteError
from fabstock_core.logging import get_logger, LogContext
from fabstock_core.models import (
    AppSettings,
    Collection,
    InventoryItem,
    Machine,
    MaintenanceTicket,
    Record,
    StorageMode,
    TeamMember,
)
from fabstock_core.models.collections import ALL_COLLECTIONS, SETTINGS_KEY
from fabstock_core.storage import LocalBackend, LocalStore, RemoteBackend, RemoteStore, StorageBackend
from fabstock_core.storage.local_store import get_local_store

logger = get_logger(__name__)

SettingsUpdate = Union[AppSettings, Mapping[str, Any]]
RemoteFactory = Callable[[str, str], RemoteStore]


class ProviderStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class ProviderState:
    """Snapshot of the provider's global state, handed to listeners."""
    status: ProviderStatus = ProviderStatus.UNINITIALIZED
    mode: Optional[StorageMode] = None
    error: Optional[str] = None
    pending_write_failed: Dict[Collection, bool] = field(default_factory=dict)


class InlineExecutor(Executor):
    """Executor that runs each task immediately in the calling thread."""

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


def _completed(result: Any = None) -> Future:
    future: Future = Future()
    future.set_result(result)
    return future


class DataProvider:
    """Synchronization orchestrator between the UI and the storage backend."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        local_store: Optional[LocalStore] = None,
        remote_factory: Optional[RemoteFactory] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Args:
            settings: Initial application settings
            local_store: Durable store for local mode and for settings
            remote_factory: Builds a RemoteStore from (url, key)
            executor: Runs write-throughs; defaults to one worker thread so
                writes are dispatched in call order
        """
        self._settings = settings or AppSettings()
        self.local_store = local_store or get_local_store()
        self._remote_factory = remote_factory or RemoteStore.connect
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="FabStockWrite"
        )

        self._lock = threading.RLock()
        self._collections: Dict[Collection, List[Record]] = {c: [] for c in ALL_COLLECTIONS}
        self._local_backend = LocalBackend(self.local_store)
        self._backend: Optional[StorageBackend] = None
        self._subscriptions: List[Any] = []
        self._pending: Set[Future] = set()
        self._listeners: List[Callable[[ProviderState], None]] = []

        self._status = ProviderStatus.UNINITIALIZED
        self._mode: Optional[StorageMode] = None
        self._error: Optional[str] = None
        self._write_failed: Dict[Collection, bool] = {c: False for c in ALL_COLLECTIONS}

    @classmethod
    def from_stored_settings(cls, local_store: Optional[LocalStore] = None, **kwargs) -> DataProvider:
        """Build a provider from the settings persisted in local storage."""
        store = local_store or get_local_store()
        settings = AppSettings.from_dict(store.load(SETTINGS_KEY, {}))
        return cls(settings, local_store=store, **kwargs)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def status(self) -> ProviderStatus:
        return self._status

    @property
    def mode(self) -> Optional[StorageMode]:
        return self._mode

    @property
    def error(self) -> Optional[str]:
        """Last initialization/load error, shown as a persistent banner."""
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._status in (ProviderStatus.UNINITIALIZED, ProviderStatus.LOADING)

    @property
    def state(self) -> ProviderState:
        with self._lock:
            return ProviderState(
                status=self._status,
                mode=self._mode,
                error=self._error,
                pending_write_failed=dict(self._write_failed),
            )

    def pending_write_failed(self, collection: Collection) -> bool:
        """True if the latest background write of ``collection`` failed."""
        with self._lock:
            return self._write_failed[collection]

    def get(self, collection: Collection) -> List[Record]:
        """Snapshot copy of a collection."""
        with self._lock:
            return list(self._collections[collection])

    @property
    def items(self) -> List[InventoryItem]:
        return self.get(Collection.INVENTORY)

    @property
    def machines(self) -> List[Machine]:
        return self.get(Collection.MACHINES)

    @property
    def maintenance_tickets(self) -> List[MaintenanceTicket]:
        return self.get(Collection.MAINTENANCE)

    @property
    def team_members(self) -> List[TeamMember]:
        return self.get(Collection.TEAM)

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def initialize(self) -> ProviderStatus:
        """
        Select the backend from the current settings and load all collections.

        A remote fetch failure leaves the in-memory collections untouched and
        ends in ERROR. A rejected remote configuration falls back to local
        storage, keeping the configuration message in ``error``.
        """
        settings = self._settings

        with LogContext(logger, f"Initializing data provider ({settings.mode.value})"):
            self._close_backend()
            self._error = None
            self._set_status(ProviderStatus.LOADING)

            if settings.uses_remote():
                try:
                    store = self._remote_factory(settings.remote_url, settings.remote_key)
                except ConfigurationError as e:
                    logger.error(f"Invalid Supabase configuration: {e.message}")
                    self._error = e.message
                else:
                    return self._initialize_remote(RemoteBackend(store))

            backend = self._local_backend
            loaded = backend.load_all()
            with self._lock:
                self._backend = backend
                self._collections = loaded
                self._mode = StorageMode.LOCAL
            self._set_status(ProviderStatus.READY)
            return self._status

    def _initialize_remote(self, backend: RemoteBackend) -> ProviderStatus:
        with self._lock:
            self._backend = backend
            self._mode = StorageMode.REMOTE

        try:
            loaded = backend.load_all()
        except RemoteError as e:
            logger.error(f"Supabase load error: {e}")
            self._error = f"Connection error: {e.message}"
            self._set_status(ProviderStatus.ERROR)
            return self._status

        with self._lock:
            # Single assignment: readers never observe a partial reload
            self._collections = loaded

        for collection in ALL_COLLECTIONS:
            subscription = backend.subscribe(
                collection,
                lambda changed, b=backend: self._reload_collection(changed, b),
            )
            self._subscriptions.append(subscription)

        self._set_status(ProviderStatus.READY)
        return self._status

    def _reload_collection(self, collection: Collection, backend: StorageBackend) -> None:
        """Change-feed handler: replace one collection with the server snapshot."""
        if backend is not self._backend:
            return

        try:
            records = backend.fetch(collection)
        except RemoteError as e:
            logger.warning(f"Reload of {collection.value} after change failed: {e.message}")
            return

        with self._lock:
            if backend is not self._backend:
                return
            self._collections[collection] = records
        logger.debug(f"Reloaded {collection.value} from change feed ({len(records)} rows)")
        self._notify()

    def _close_backend(self) -> None:
        # Detach first: reloads already in flight from the old backend are dropped
        with self._lock:
            backend, self._backend = self._backend, None
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()
        if backend is not None:
            backend.close()

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def _persist_settings(self, settings: AppSettings) -> None:
        self.local_store.save(SETTINGS_KEY, settings.to_dict())

    def update_settings(self, partial: SettingsUpdate) -> AppSettings:
        """
        Shallow-merge ``partial`` into the current settings and persist them.

        The backend is re-selected when the mode or Supabase credentials
        changed.
        """
        with self._lock:
            previous = self._settings
            merged = previous.merge(partial)
            self._settings = merged

        self._persist_settings(merged)
        logger.info(f"Settings updated (mode={merged.mode.value})")

        if merged.connection_key() != previous.connection_key():
            self.initialize()
        return merged

    def reconfigure(self, new_settings: SettingsUpdate) -> ProviderStatus:
        """Replace the settings and always re-run initialization."""
        with self._lock:
            self._settings = self._settings.merge(new_settings)
        self._persist_settings(self._settings)
        return self.initialize()

    # =========================================================================
    # WRITE-THROUGH MUTATIONS
    # =========================================================================

    def _require_backend(self) -> StorageBackend:
        if self._backend is None:
            raise FabStockError("Data provider is not initialized", code="SYNC_001")
        return self._backend

    def _dispatch(
        self,
        collection: Collection,
        operation: str,
        task: Callable[[StorageBackend], None],
    ) -> Future:
        backend = self._require_backend()

        def run() -> None:
            try:
                task(backend)
            except Exception as e:
                with self._lock:
                    self._write_failed[collection] = True
                logger.error(f"{operation} on {collection.value} failed, not persisted: {e}")
                self._notify()
                raise
            with self._lock:
                recovered = self._write_failed[collection]
                self._write_failed[collection] = False
            if recovered:
                self._notify()

        future = self._executor.submit(run)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def set_collection(self, collection: Collection, records: List[Record]) -> Future:
        """
        Replace a collection optimistically, then write the whole collection
        through to the active backend in the background.
        """
        self._require_backend()
        snapshot = list(records)
        with self._lock:
            self._collections[collection] = snapshot
        self._notify()

        persisted = list(snapshot)
        return self._dispatch(
            collection,
            "Write-through",
            lambda backend: backend.write_through(collection, persisted),
        )

    def delete(
        self,
        collection: Collection,
        record_id: str,
        remaining: Optional[List[Record]] = None,
    ) -> Future:
        """
        Remove ``record_id``: the in-memory collection becomes ``remaining``
        (defaults to the current one without that id), then the deletion is
        persisted in the background. Deleting an unknown id is a no-op.
        """
        self._require_backend()
        with self._lock:
            current = self._collections[collection]
            if all(record.id != record_id for record in current):
                return _completed()
            if remaining is None:
                remaining = [record for record in current if record.id != record_id]
            pruned = list(remaining)
            self._collections[collection] = pruned
        self._notify()

        persisted = list(pruned)
        return self._dispatch(
            collection,
            "Delete",
            lambda backend: backend.delete_one(collection, record_id, persisted),
        )

    def set_items(self, items: List[InventoryItem]) -> Future:
        return self.set_collection(Collection.INVENTORY, items)

    def set_machines(self, machines: List[Machine]) -> Future:
        return self.set_collection(Collection.MACHINES, machines)

    def set_maintenance_tickets(self, tickets: List[MaintenanceTicket]) -> Future:
        return self.set_collection(Collection.MAINTENANCE, tickets)

    def set_team_members(self, members: List[TeamMember]) -> Future:
        return self.set_collection(Collection.TEAM, members)

    def delete_item(self, item_id: str, remaining: Optional[List[InventoryItem]] = None) -> Future:
        return self.delete(Collection.INVENTORY, item_id, remaining)

    def delete_machine(self, machine_id: str, remaining: Optional[List[Machine]] = None) -> Future:
        return self.delete(Collection.MACHINES, machine_id, remaining)

    def delete_ticket(self, ticket_id: str, remaining: Optional[List[MaintenanceTicket]] = None) -> Future:
        return self.delete(Collection.MAINTENANCE, ticket_id, remaining)

    def delete_member(self, member_id: str, remaining: Optional[List[TeamMember]] = None) -> Future:
        return self.delete(Collection.TEAM, member_id, remaining)

    def wait_for_writes(self, timeout: Optional[float] = None) -> bool:
        """Block until dispatched writes finish; True if none are left."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    # =========================================================================
    # BULK MIGRATIONS
    # =========================================================================

    def _connect_target(self, target_settings: SettingsUpdate) -> RemoteStore:
        target = self._settings.merge(target_settings)
        if not target.has_remote_credentials():
            raise ConfigurationError("Supabase URL or API key missing")
        return self._remote_factory(target.remote_url, target.remote_key)

    def upload_local_to_remote(self, target_settings: SettingsUpdate) -> Dict[Collection, int]:
        """
        Upsert every current in-memory collection to the target Supabase
        project, in inventory/machines/maintenance/team order, skipping empty
        ones. Stops at the first failing table; nothing is rolled back.

        Returns:
            Rows upserted per collection
        """
        store = self._connect_target(target_settings)
        with self._lock:
            snapshot = {c: list(self._collections[c]) for c in ALL_COLLECTIONS}

        uploaded: Dict[Collection, int] = {}
        with LogContext(logger, "Uploading local data to Supabase"):
            for collection in ALL_COLLECTIONS:
                records = snapshot[collection]
                if not records:
                    continue
                store.upsert(collection.table, Collection.serialize(records))
                uploaded[collection] = len(records)
        return uploaded

    def download_remote_to_local(self, target_settings: SettingsUpdate) -> Dict[Collection, int]:
        """
        Fetch each Supabase table, replace the in-memory collection and save
        it under its local key. Stops at the first failing fetch; collections
        fetched before the failure stay replaced.

        Returns:
            Rows downloaded per collection
        """
        backend = RemoteBackend(self._connect_target(target_settings))

        downloaded: Dict[Collection, int] = {}
        with LogContext(logger, "Downloading Supabase data to local storage"):
            for collection in ALL_COLLECTIONS:
                records = backend.fetch(collection)
                with self._lock:
                    self._collections[collection] = records
                self.local_store.save(collection.storage_key, Collection.serialize(records))
                downloaded[collection] = len(records)
                self._notify()
        return downloaded

    # =========================================================================
    # LISTENERS & TEARDOWN
    # =========================================================================

    def add_listener(self, callback: Callable[[ProviderState], None]) -> None:
        """Register a callback for state or collection changes."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[ProviderState], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _set_status(self, status: ProviderStatus) -> None:
        self._status = status
        self._notify()

    def _notify(self) -> None:
        state = self.state
        for callback in list(self._listeners):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"Error in provider listener: {e}")

    def teardown(self) -> None:
        """Unsubscribe from change feeds and stop the write executor."""
        self._close_backend()
        self._executor.shutdown(wait=True)
        logger.info("Data provider torn down")
