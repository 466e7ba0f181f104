from __future__ import annotations
import streamlit as st

st.set_page_config(
    page_title="FabStock - Login",
    page_icon="🛠️",
    layout="centered",
)

from fabstock_core.auth import (
    check_authentication,
    get_current_user,
    initialize_session_state,
    set_current_user,
)
from fabstock_core.errors import ErrorContext
from fabstock_core.state import get_auth_service, get_data_provider, init_state
from fabstock_core.ui import apply_css, header, provider_banners, render_sidebar
from fabstock_core.ui.settings_panel import connection_form

init_state()
initialize_session_state()
apply_css()

provider = get_data_provider()
auth = get_auth_service()
render_sidebar(provider, auth)

header("FabStock Manager", "Inventory, machines and maintenance for the FabLab")
provider_banners(provider)

# ============================================================================
# RETURNING MAGIC LINK (Supabase mode)
# ============================================================================
if not check_authentication() and provider.settings.uses_remote():
    code = st.query_params.get("code")
    with ErrorContext("Confirming login") as ctx:
        member = auth.confirm_session(code)
    if code:
        st.query_params.clear()
    if not ctx.failed and member is not None:
        set_current_user(member)
        st.rerun()

# ============================================================================
# LOGGED IN
# ============================================================================
user = get_current_user()
if user is not None:
    st.success(f"Welcome, {user.name}!")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.page_link("pages/01_Dashboard.py", label="Dashboard", icon="📊")
        st.page_link("pages/02_Inventory.py", label="Inventory", icon="📦")
    with col2:
        st.page_link("pages/03_Machines.py", label="Machines", icon="🖨️")
        st.page_link("pages/04_Maintenance.py", label="Maintenance", icon="🔧")
    with col3:
        st.page_link("pages/05_Team.py", label="Team", icon="👥")
        st.page_link("pages/06_Assistant.py", label="Assistant", icon="🤖")
        st.page_link("pages/07_Settings.py", label="Settings", icon="⚙️")
    st.stop()

# ============================================================================
# LOGIN FORM
# ============================================================================
if st.session_state.get("magic_link_sent"):
    st.info("📧 Check your inbox: a login link has been sent. Open it in this browser.")

with st.form("login_form"):
    email = st.text_input("Email", placeholder="you@fablab.com")
    submitted = st.form_submit_button("Log in", use_container_width=True)

if submitted:
    with ErrorContext("Logging in") as ctx:
        result = auth.login(email)
    if not ctx.failed:
        if result.member is not None:
            set_current_user(result.member)
            st.rerun()
        elif result.magic_link_sent:
            st.session_state.magic_link_sent = True
            st.rerun()

with st.expander("⚙️ Storage settings"):
    connection_form(provider, key="welcome_connection")
