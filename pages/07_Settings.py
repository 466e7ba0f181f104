# =============================================================================
# 07_Settings.py - Storage backend, EmailJS and data migration
# =============================================================================
from __future__ import annotations
import streamlit as st

st.set_page_config(page_title="Settings - FabStock", page_icon="⚙️", layout="wide")

from fabstock_core.errors import ErrorContext
from fabstock_core.models.collections import ALL_COLLECTIONS
from fabstock_core.storage import schema_sql
from fabstock_core.ui import bootstrap_page, header
from fabstock_core.ui.settings_panel import connection_form, email_form

user, provider = bootstrap_page()

header("Settings", "Storage backend, email invitations and data migration", icon="⚙️")

tab_storage, tab_email, tab_migration = st.tabs(["Storage", "Email", "Migration"])

with tab_storage:
    connection_form(provider)
    st.caption(f"Status: {provider.status.value} · active mode: "
               f"{provider.mode.value if provider.mode else '-'}")
    if st.button("🔄 Reload data"):
        with st.spinner("Reloading..."):
            provider.initialize()
        st.rerun()
    with st.expander("Supabase table setup"):
        st.caption("Each table stores one row per record: an id and the record as JSON.")
        st.code(schema_sql(), language="sql")

with tab_email:
    email_form(provider)

with tab_migration:
    st.markdown(
        "Copy the data currently shown in the app to or from the Supabase project "
        "configured in the Storage tab. Records are merged by id; nothing is rolled back "
        "if a table fails halfway."
    )
    settings = provider.settings
    disabled = not (user.is_admin and settings.has_remote_credentials())
    if not settings.has_remote_credentials():
        st.info("Enter Supabase credentials in the Storage tab first.")

    c1, c2 = st.columns(2)
    if c1.button("⬆️ Upload local data to Supabase", disabled=disabled, use_container_width=True):
        with ErrorContext("Uploading local data to Supabase") as ctx:
            with st.spinner("Uploading..."):
                uploaded = provider.upload_local_to_remote(settings)
        if not ctx.failed:
            st.success("Uploaded: " + ", ".join(f"{c.value} ({n})" for c, n in uploaded.items())
                       if uploaded else "Nothing to upload.")

    if c2.button("⬇️ Download Supabase data to local", disabled=disabled, use_container_width=True):
        with ErrorContext("Downloading Supabase data") as ctx:
            with st.spinner("Downloading..."):
                downloaded = provider.download_remote_to_local(settings)
        if not ctx.failed:
            st.success("Downloaded: " + ", ".join(f"{c.value} ({n})" for c, n in downloaded.items()))

    st.subheader("Background saves")
    for collection in ALL_COLLECTIONS:
        failed = provider.pending_write_failed(collection)
        st.markdown(f"{'⚠️' if failed else '✅'} {collection.value}")
