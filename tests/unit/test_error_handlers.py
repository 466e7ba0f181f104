# =============================================================================
# tests/unit/test_error_handlers.py
# Unit Tests for handle_error and ErrorContext
# =============================================================================

import pytest


@pytest.fixture
def st(fake_st, monkeypatch):
    import fabstock_core.errors.handlers as handlers
    monkeypatch.setattr(handlers, "st", fake_st)
    return fake_st


class TestErrorContext:

    def test_domain_error_is_shown_and_suppressed(self, st):
        from fabstock_core.errors import ErrorContext, ValidationError

        with ErrorContext("Updating item") as ctx:
            raise ValidationError("Item name is required", field="name")

        assert ctx.failed
        st.error.assert_called_once_with("Error: Item name is required")

    def test_unexpected_error_names_the_operation(self, st):
        from fabstock_core.errors import ErrorContext

        with ErrorContext("Signing out") as ctx:
            raise RuntimeError("boom")

        assert ctx.failed
        st.error.assert_called_once_with("Error: Error during: Signing out")

    def test_non_recoverable_context_reraises(self, st):
        from fabstock_core.errors import ErrorContext

        with pytest.raises(RuntimeError):
            with ErrorContext("Switching storage", recoverable=False):
                raise RuntimeError("boom")

    def test_success_message(self, st):
        from fabstock_core.errors import ErrorContext

        with ErrorContext("Downloading data", show_success=True) as ctx:
            pass

        assert not ctx.failed
        st.success.assert_called_once_with("Downloading data completed")


class TestHandleError:

    def test_configuration_error_points_to_settings(self, st):
        from fabstock_core.errors import ConfigurationError, handle_error

        handle_error(ConfigurationError("Supabase URL is missing", config_key="remoteUrl"))

        message = st.error.call_args[0][0]
        assert message.startswith("Configuration error: Supabase URL is missing")

    def test_silent_mode(self, st):
        from fabstock_core.errors import ValidationError, handle_error

        handle_error(ValidationError("bad"), show_user_message=False)

        st.error.assert_not_called()
