import streamlit as st

from fabstock_core.errors import ErrorContext
from fabstock_core.models import StorageMode
from fabstock_core.sync import DataProvider, ProviderStatus

MODE_LABELS = {
    StorageMode.LOCAL: "💾 Local (this device)",
    StorageMode.REMOTE: "☁️ Supabase (shared)",
}


def connection_form(provider: DataProvider, key: str = "connection"):
    """Storage mode and Supabase credentials; saving re-selects the backend."""
    settings = provider.settings
    with st.form(f"{key}_form"):
        mode = st.radio(
            "Storage mode",
            list(MODE_LABELS),
            index=list(MODE_LABELS).index(settings.mode),
            format_func=MODE_LABELS.get,
            horizontal=True,
        )
        url = st.text_input("Supabase URL", value=settings.remote_url,
                            placeholder="https://xyzcompany.supabase.co")
        api_key = st.text_input("Supabase anon key", value=settings.remote_key, type="password")
        submitted = st.form_submit_button("Save connection")

    if submitted:
        if mode is StorageMode.REMOTE and not (url.strip() and api_key.strip()):
            st.warning("Supabase mode needs both a URL and a key; local storage stays active.")
        with ErrorContext("Saving connection settings") as ctx:
            with st.spinner("Connecting..."):
                provider.update_settings({
                    "mode": mode,
                    "remote_url": url.strip(),
                    "remote_key": api_key.strip(),
                })
        if not ctx.failed:
            if provider.status is ProviderStatus.ERROR:
                st.error(provider.error)
            else:
                st.success(f"Connected ({provider.mode.value})")


def email_form(provider: DataProvider):
    """EmailJS keys used for team invitations."""
    settings = provider.settings
    with st.form("emailjs_form"):
        service_id = st.text_input("EmailJS service ID", value=settings.email_service_id)
        template_id = st.text_input("EmailJS template ID", value=settings.email_template_id)
        public_key = st.text_input("EmailJS public key", value=settings.email_public_key, type="password")
        st.caption("Template variables: {{to_name}}, {{to_email}}, {{invite_link}}")
        submitted = st.form_submit_button("Save email settings")

    if submitted:
        with ErrorContext("Saving email settings", show_success=True,
                          success_message="Email settings saved"):
            provider.update_settings({
                "email_service_id": service_id.strip(),
                "email_template_id": template_id.strip(),
                "email_public_key": public_key.strip(),
            })
