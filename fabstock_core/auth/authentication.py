"""
Authentication module for FabStock Manager.

Passwordless login against the team roster:
- Local mode: the email is matched against the team list and the session
  starts immediately (no proof of identity, suitable for a shared device)
- Supabase mode: a magic link is emailed; once the user comes back
  authenticated, the session email is cross-referenced with the team

Permissions (``canManageStock``, Admin role) are enforced in the UI and the
service layer only. There is no server-side enforcement.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import streamlit as st

from fabstock_core.config import get_app_url, get_super_admin_email
from fabstock_core.errors import AuthenticationError
from fabstock_core.logging import get_logger
from fabstock_core.models import MemberRole, TeamMember
from fabstock_core.storage import RemoteStore

logger = get_logger(__name__)

SUPER_ADMIN_ID = "super-admin"
SUPER_ADMIN_NAME = "Administrateur Principal"
SUPER_ADMIN_AVATAR = "bg-indigo-600"


def _normalize(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def super_admin_profile(email: Optional[str] = None) -> TeamMember:
    """Profile synthesized for the reserved address when it is not a member."""
    return TeamMember(
        id=SUPER_ADMIN_ID,
        name=SUPER_ADMIN_NAME,
        email=email or get_super_admin_email(),
        role=MemberRole.ADMIN,
        can_manage_stock=True,
        avatar_color=SUPER_ADMIN_AVATAR,
    )


def resolve_member(email: str, team: List[TeamMember]) -> TeamMember:
    """
    Map a login email to a team member (case-insensitive, trimmed).

    Raises:
        AuthenticationError: the email matches no member and is not the
            reserved super-admin address
    """
    normalized = _normalize(email)
    if not normalized:
        raise AuthenticationError("Please enter your email address")

    for member in team:
        if member.email and _normalize(member.email) == normalized:
            return member

    if normalized == get_super_admin_email():
        return super_admin_profile(normalized)

    raise AuthenticationError(
        "This email does not match any team member.",
        email=normalized,
    )


@dataclass
class LoginResult:
    """Either a resolved member (local) or a pending magic link (Supabase)."""
    member: Optional[TeamMember] = None
    magic_link_sent: bool = False


class AuthService:
    """
    Login flow for the active storage mode.

    Usage:
        auth = AuthService(provider)
        result = auth.login(email)
        if result.member:
            set_current_user(result.member)
    """

    def __init__(self, provider, remote_factory: Optional[Callable[..., RemoteStore]] = None):
        self.provider = provider
        self._remote_factory = remote_factory or RemoteStore.connect
        self._remote: Optional[RemoteStore] = None
        self._remote_key = None

    def _uses_remote(self) -> bool:
        return self.provider.settings.uses_remote()

    def _remote_store(self) -> RemoteStore:
        settings = self.provider.settings
        key = (settings.remote_url, settings.remote_key)
        if self._remote is None or self._remote_key != key:
            # Auth needs no change feed
            self._remote = self._remote_factory(
                settings.remote_url, settings.remote_key, autostart_watchers=False
            )
            self._remote_key = key
        return self._remote

    def login(self, email: str, redirect_to: Optional[str] = None) -> LoginResult:
        """
        Raises:
            AuthenticationError: unknown email
            RemoteError: the magic link could not be sent
        """
        member = resolve_member(email, self.provider.team_members)

        if not self._uses_remote():
            logger.info(f"Local login: {member.name}")
            return LoginResult(member=member)

        self._remote_store().send_magic_link(_normalize(email), redirect_to or get_app_url())
        logger.info(f"Magic link sent to {_normalize(email)}")
        return LoginResult(magic_link_sent=True)

    def confirm_session(self, auth_code: Optional[str] = None) -> Optional[TeamMember]:
        """
        Resolve the authenticated Supabase session to a team member.

        ``auth_code`` is the ``code`` query parameter of a returning magic
        link, exchanged for a session first. Returns None when nobody is
        authenticated or the authenticated email is not on the team.
        """
        if not self._uses_remote():
            return None

        store = self._remote_store()
        email = store.exchange_code(auth_code) if auth_code else store.get_session_email()
        if not email:
            return None

        try:
            return resolve_member(email, self.provider.team_members)
        except AuthenticationError:
            logger.warning(f"Authenticated user {email} is not a team member")
            return None

    def logout(self) -> None:
        if self._uses_remote() and self._remote is not None:
            self._remote.sign_out()


# ==================== SESSION HELPERS ====================

def initialize_session_state():
    """
    Initialize session state variables for authentication.
    Call this at the start of every page.
    """
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False

    if "current_user" not in st.session_state:
        st.session_state.current_user = None

    if "magic_link_sent" not in st.session_state:
        st.session_state.magic_link_sent = False


def check_authentication() -> bool:
    return st.session_state.get("authenticated", False)


def get_current_user() -> Optional[TeamMember]:
    if not check_authentication():
        return None
    return st.session_state.get("current_user")


def set_current_user(member: TeamMember) -> None:
    st.session_state.authenticated = True
    st.session_state.current_user = member
    st.session_state.magic_link_sent = False


def logout_user(auth: Optional[AuthService] = None):
    """Sign out remotely when applicable and clear the session."""
    try:
        if auth is not None:
            auth.logout()
    finally:
        for key in ["authenticated", "current_user", "magic_link_sent"]:
            if key in st.session_state:
                del st.session_state[key]


def require_authentication() -> TeamMember:
    """
    Stop rendering the page unless someone is logged in.

    Returns:
        The logged-in member
    """
    initialize_session_state()
    user = get_current_user()
    if user is None:
        st.warning("Please log in from the Welcome page.")
        st.page_link("Welcome.py", label="Go to login", icon="🔐")
        st.stop()
    return user
