# =============================================================================
# tests/unit/test_auth.py
# Unit Tests for login resolution, AuthService and session helpers
# =============================================================================

import pytest


class TestResolveMember:

    def test_match_ignores_case_and_whitespace(self, admin, member):
        from fabstock_core.auth import resolve_member

        assert resolve_member("  Camille@FabLab.com ", [admin, member]) == member

    def test_reserved_address_without_member_gets_super_admin(self, monkeypatch):
        from fabstock_core.auth import SUPER_ADMIN_ID, resolve_member

        monkeypatch.setenv("FABSTOCK_SUPER_ADMIN_EMAIL", "boss@fablab.com")

        profile = resolve_member("BOSS@fablab.com", [])

        assert profile.id == SUPER_ADMIN_ID
        assert profile.is_admin
        assert profile.can_manage_stock
        assert profile.email == "boss@fablab.com"

    def test_existing_member_wins_over_super_admin(self, admin):
        from fabstock_core.auth import resolve_member

        assert resolve_member("admin@fablab.com", [admin]).id == "u1"

    def test_unknown_email_is_rejected(self, admin):
        from fabstock_core.auth import resolve_member
        from fabstock_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError):
            resolve_member("stranger@example.com", [admin])

    def test_blank_email_is_rejected(self, admin):
        from fabstock_core.auth import resolve_member
        from fabstock_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError):
            resolve_member("   ", [admin])


class TestAuthService:

    @pytest.fixture
    def remote_provider(self, local_store, remote_factory, inline_executor, fake_supabase,
                        remote_settings, member):
        from fabstock_core.sync import DataProvider

        fake_supabase.seed("team", [member.to_dict()])
        provider = DataProvider(remote_settings, local_store=local_store,
                                remote_factory=remote_factory, executor=inline_executor)
        provider.initialize()
        yield provider
        provider.teardown()

    def test_local_login_returns_member(self, provider, remote_factory):
        from fabstock_core.auth import AuthService

        result = AuthService(provider, remote_factory=remote_factory).login("admin@fablab.com")

        assert result.member.id == "u1"
        assert result.magic_link_sent is False
        assert remote_factory.calls == []

    def test_remote_login_sends_magic_link(self, remote_provider, remote_factory, fake_supabase):
        from fabstock_core.auth import AuthService

        result = AuthService(remote_provider, remote_factory=remote_factory).login(
            " Camille@fablab.com", redirect_to="https://fabstock.example"
        )

        assert result.member is None
        assert result.magic_link_sent is True
        fake_supabase.auth.sign_in_with_otp.assert_called_once_with({
            "email": "camille@fablab.com",
            "options": {"email_redirect_to": "https://fabstock.example"},
        })

    def test_remote_login_checks_roster_first(self, remote_provider, remote_factory, fake_supabase):
        from fabstock_core.auth import AuthService
        from fabstock_core.errors import AuthenticationError

        with pytest.raises(AuthenticationError):
            AuthService(remote_provider, remote_factory=remote_factory).login("x@example.com")
        fake_supabase.auth.sign_in_with_otp.assert_not_called()

    def test_confirm_session_exchanges_code(self, remote_provider, remote_factory, fake_supabase,
                                            member):
        from fabstock_core.auth import AuthService

        fake_supabase.auth.exchange_code_for_session.return_value.user.email = "camille@fablab.com"

        confirmed = AuthService(remote_provider, remote_factory=remote_factory).confirm_session("abc")

        assert confirmed == member
        fake_supabase.auth.exchange_code_for_session.assert_called_once_with({"auth_code": "abc"})

    def test_confirm_session_ignores_non_members(self, remote_provider, remote_factory,
                                                 fake_supabase):
        from fabstock_core.auth import AuthService

        fake_supabase.auth.get_session.return_value.user.email = "intruder@example.com"

        assert AuthService(remote_provider, remote_factory=remote_factory).confirm_session() is None

    def test_confirm_session_is_noop_locally(self, provider, remote_factory):
        from fabstock_core.auth import AuthService

        assert AuthService(provider, remote_factory=remote_factory).confirm_session("abc") is None
        assert remote_factory.calls == []


class TestSessionHelpers:

    @pytest.fixture
    def st(self, fake_st, monkeypatch):
        monkeypatch.setattr("fabstock_core.auth.authentication.st", fake_st)
        return fake_st

    def test_login_then_logout(self, st, admin):
        from fabstock_core.auth import (
            get_current_user,
            initialize_session_state,
            logout_user,
            set_current_user,
        )

        initialize_session_state()
        assert get_current_user() is None

        set_current_user(admin)
        assert get_current_user() == admin

        logout_user()
        assert get_current_user() is None
        assert "current_user" not in st.session_state

    def test_logout_signs_out_remotely(self, st):
        from unittest.mock import MagicMock

        from fabstock_core.auth import logout_user

        auth = MagicMock()
        logout_user(auth)

        auth.logout.assert_called_once()

    def test_require_authentication_stops_anonymous(self, st):
        from fabstock_core.auth import require_authentication

        require_authentication()

        st.warning.assert_called_once()
        st.stop.assert_called_once()

    def test_require_authentication_returns_user(self, st, member):
        from fabstock_core.auth import require_authentication, set_current_user

        set_current_user(member)

        assert require_authentication() == member
        st.stop.assert_not_called()

    def test_failed_remote_sign_out_still_clears_session(self, st, admin):
        from unittest.mock import MagicMock

        from fabstock_core.auth import get_current_user, logout_user, set_current_user
        from fabstock_core.errors import RemoteError

        set_current_user(admin)
        auth = MagicMock()
        auth.logout.side_effect = RemoteError("Sign out failed")

        with pytest.raises(RemoteError):
            logout_user(auth)

        assert get_current_user() is None
