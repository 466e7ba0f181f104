from .session import (
    SESSION_DEFAULTS,
    init_state,
    get_data_provider,
    get_auth_service,
    get_inventory_service,
    get_maintenance_service,
    get_team_service,
    reset_session,
)

__all__ = [
    "SESSION_DEFAULTS",
    "init_state",
    "get_data_provider",
    "get_auth_service",
    "get_inventory_service",
    "get_maintenance_service",
    "get_team_service",
    "reset_session",
]
