"""
Authentication module for FabStock Manager.
Passwordless login against the team roster (local match or Supabase magic link).

Permissions are enforced in the UI and service layer only.
"""

from .authentication import (
    AuthService,
    LoginResult,
    resolve_member,
    super_admin_profile,
    SUPER_ADMIN_ID,
    initialize_session_state,
    check_authentication,
    get_current_user,
    set_current_user,
    logout_user,
    require_authentication,
)

__all__ = [
    "AuthService",
    "LoginResult",
    "resolve_member",
    "super_admin_profile",
    "SUPER_ADMIN_ID",
    "initialize_session_state",
    "check_authentication",
    "get_current_user",
    "set_current_user",
    "logout_user",
    "require_authentication",
]
