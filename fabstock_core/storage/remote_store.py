# =============================================================================
# fabstock_core/storage/remote_store.py
# Supabase storage adapter: table access, change feed and auth helpers
# =============================================================================
"""
RemoteStore wraps a Supabase client for the four FabStock tables.

Each table stores one row per entity shaped ``{id: text, data: jsonb}``;
reads unwrap ``data``, writes upsert ``{id, data}`` pairs.

The change feed (``subscribe``) is a background watcher thread per table that
re-reads the table every ``poll_interval`` seconds and calls the listener when
the content fingerprint changes. It sees writes from any party, including
this process. Delivery is at-least-once and carries no payload.
"""

from __future__ import annotations
import hashlib
import json
import threading
from typing import Any, Callable, Dict, List, Optional

from fabstock_core.config import get_poll_interval
from fabstock_core.errors import ConfigurationError, RemoteError
from fabstock_core.logging import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[[str], None]


class Subscription:
    """
    Handle for one table's change feed.

    ``poll_once()`` performs a single check and is what the watcher thread
    runs in a loop.
    """

    def __init__(
        self,
        store: RemoteStore,
        table: str,
        on_change: ChangeListener,
        interval: float,
    ):
        self.store = store
        self.table = table
        self.on_change = on_change
        self.interval = interval
        self._fingerprint: Optional[str] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(
            target=self._watch_loop,
            daemon=True,
            name=f"RemoteWatcher-{self.table}",
        )
        self._thread.start()

    def _watch_loop(self) -> None:
        # First pass records the baseline right away
        while self.active:
            try:
                self.poll_once()
            except RemoteError as e:
                logger.warning(f"Change feed for '{self.table}' unavailable: {e.message}")
            if self._stop.wait(timeout=self.interval):
                break

    def poll_once(self) -> bool:
        """
        Compare the table against the last seen fingerprint.

        The first call only records the baseline. Returns True if the
        listener was invoked.
        """
        if not self.active:
            return False

        fingerprint = self.store.fingerprint(self.table)
        previous, self._fingerprint = self._fingerprint, fingerprint

        if previous is None or previous == fingerprint or not self.active:
            return False

        try:
            self.on_change(self.table)
        except Exception as e:
            logger.error(f"Change listener for '{self.table}' failed: {e}", exc_info=True)
        return True

    def unsubscribe(self) -> None:
        """Stop further invocations of the listener."""
        # The watcher checks the flag before notifying, no join needed
        self._stop.set()
        self._thread = None


class RemoteStore:
    """
    Supabase table access for FabStock.

    Usage:
        store = RemoteStore.connect(settings.remote_url, settings.remote_key)
        items = store.select_all("inventory")
        store.upsert("inventory", [item.to_dict() for item in items])
    """

    BATCH_SIZE = 1000

    def __init__(
        self,
        client: Any,
        poll_interval: Optional[float] = None,
        autostart_watchers: bool = True,
    ):
        """
        Args:
            client: Supabase client (``supabase.Client``)
            poll_interval: Seconds between change-feed polls
            autostart_watchers: Start a watcher thread per subscription
        """
        self.client = client
        self.poll_interval = poll_interval if poll_interval is not None else get_poll_interval()
        self.autostart_watchers = autostart_watchers
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    @classmethod
    def connect(cls, url: str, key: str, **kwargs) -> RemoteStore:
        """
        Build a store from endpoint credentials.

        Raises:
            ConfigurationError: blank URL/key or rejected by the client
        """
        url = (url or "").strip()
        key = (key or "").strip()
        if not url:
            raise ConfigurationError("Supabase URL is missing", config_key="remoteUrl")
        if not key:
            raise ConfigurationError("Supabase API key is missing", config_key="remoteKey")

        from supabase import create_client

        try:
            client = create_client(url, key)
        except Exception as e:
            raise ConfigurationError(f"Invalid Supabase configuration: {e}") from e

        logger.info(f"Connected Supabase client for {url}")
        return cls(client, **kwargs)

    # =========================================================================
    # TABLE ACCESS
    # =========================================================================

    def select_all(self, table: str) -> List[Dict[str, Any]]:
        """
        Fetch every row of ``table`` (paginated) and unwrap ``data``.

        Raises:
            RemoteError: on transport/auth/query failure
        """
        rows: List[Dict[str, Any]] = []
        offset = 0

        try:
            while True:
                response = (
                    self.client.table(table)
                    .select("*")
                    .range(offset, offset + self.BATCH_SIZE - 1)
                    .execute()
                )
                batch = response.data or []
                rows.extend(batch)
                if len(batch) < self.BATCH_SIZE:
                    break
                offset += self.BATCH_SIZE
        except Exception as e:
            raise RemoteError(
                f"Error fetching data from {table}: {e}",
                table=table,
                operation="select",
            ) from e

        return [row["data"] for row in rows if row.get("data") is not None]

    def upsert(self, table: str, records: List[Dict[str, Any]]) -> None:
        """
        Insert-or-replace ``records`` by id in a single batch.

        Raises:
            RemoteError: if the batch fails (no per-record reporting)
        """
        if not records:
            return

        payload = [{"id": record["id"], "data": record} for record in records]
        try:
            self.client.table(table).upsert(payload).execute()
        except Exception as e:
            raise RemoteError(
                f"Error upserting {len(payload)} rows into {table}: {e}",
                table=table,
                operation="upsert",
            ) from e

    def delete_by_id(self, table: str, record_id: str) -> None:
        """Delete one row; deleting a missing id is not an error."""
        try:
            self.client.table(table).delete().eq("id", record_id).execute()
        except Exception as e:
            raise RemoteError(
                f"Error deleting {record_id} from {table}: {e}",
                table=table,
                operation="delete",
            ) from e

    def fingerprint(self, table: str) -> str:
        """Stable hash of a table's content."""
        rows = self.select_all(table)
        rows = sorted(rows, key=lambda r: str(r.get("id", "")))
        encoded = json.dumps(rows, sort_keys=True, default=str).encode()
        return hashlib.sha256(encoded).hexdigest()

    # =========================================================================
    # CHANGE FEED
    # =========================================================================

    def subscribe(self, table: str, on_change: ChangeListener) -> Subscription:
        """Register ``on_change(table)`` for any change to ``table``."""
        subscription = Subscription(self, table, on_change, self.poll_interval)
        with self._lock:
            self._subscriptions.append(subscription)
        if self.autostart_watchers:
            subscription.start()
        logger.debug(f"Subscribed to changes on {table}")
        return subscription

    @property
    def subscriptions(self) -> List[Subscription]:
        with self._lock:
            return [s for s in self._subscriptions if s.active]

    def unsubscribe_all(self) -> None:
        with self._lock:
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()

    # =========================================================================
    # AUTH (passwordless magic link)
    # =========================================================================

    def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        options = {"email_redirect_to": redirect_to} if redirect_to else {}
        try:
            self.client.auth.sign_in_with_otp({"email": email, "options": options})
        except Exception as e:
            raise RemoteError(f"Could not send login link: {e}", operation="auth") from e

    def get_session_email(self) -> Optional[str]:
        """Email of the authenticated session, or None."""
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            raise RemoteError(f"Could not read auth session: {e}", operation="auth") from e

        user = getattr(session, "user", None) if session else None
        return getattr(user, "email", None)

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise RemoteError(f"Sign out failed: {e}", operation="auth") from e

    def exchange_code(self, auth_code: str) -> Optional[str]:
        """Complete a PKCE magic-link login; returns the session email."""
        try:
            response = self.client.auth.exchange_code_for_session({"auth_code": auth_code})
        except Exception as e:
            raise RemoteError(f"Login link is invalid or expired: {e}", operation="auth") from e

        user = getattr(response, "user", None)
        return getattr(user, "email", None)
