import threading

import streamlit as st

from fabstock_core.auth import AuthService
from fabstock_core.logging import get_logger, setup_logging
from fabstock_core.services import InventoryService, MaintenanceService, TeamService
from fabstock_core.sync import DataProvider, ProviderStatus

logger = get_logger(__name__)

_init_lock = threading.Lock()

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "chat_history": [],
    "item_suggestion": None,
    "inventory_query": "",
    "ticket_filter": "all",
    "debug_mode": False,
}


@st.cache_resource
def _configure_logging() -> bool:
    # Once per server process
    setup_logging()
    return True


def init_state():
    """Initialize logging and session state defaults."""
    _configure_logging()
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = list(v) if isinstance(v, list) else v


@st.cache_resource
def _shared_provider() -> DataProvider:
    # One per server process: every session sees the same settings and data
    provider = DataProvider.from_stored_settings()
    logger.info(f"Data provider created (mode={provider.settings.mode.value})")
    return provider


def get_data_provider() -> DataProvider:
    """
    The process-wide DataProvider, built from the persisted settings and
    initialized on first access.
    """
    provider = _shared_provider()
    with _init_lock:
        if provider.status is ProviderStatus.UNINITIALIZED:
            with st.spinner("Loading data..."):
                provider.initialize()
    return provider


def get_auth_service() -> AuthService:
    """Per-session auth flow bound to the current shared provider."""
    provider = get_data_provider()
    auth = st.session_state.get("auth_service")
    if auth is None or auth.provider is not provider:
        auth = AuthService(provider)
        st.session_state["auth_service"] = auth
    return auth


def get_inventory_service() -> InventoryService:
    return InventoryService(get_data_provider())


def get_maintenance_service() -> MaintenanceService:
    return MaintenanceService(get_data_provider())


def get_team_service() -> TeamService:
    return TeamService(get_data_provider())


def reset_session():
    """
    Tear the shared provider down, drop it from the cache and clear this
    session's state. The next access rebuilds it from the persisted settings.
    """
    _shared_provider().teardown()
    _shared_provider.clear()

    for key in list(st.session_state.keys()):
        del st.session_state[key]

    init_state()
