import streamlit as st

from fabstock_core.auth import get_current_user, logout_user
from fabstock_core.errors import ErrorContext
from fabstock_core.models import StorageMode, TeamMember
from fabstock_core.sync import DataProvider

from .theme import (PRIMARY_COLOR, SUCCESS_COLOR, WARNING_COLOR, TEXT_COLOR,
                    SUBTLE_TEXT, GRID_COLOR, CARD_BG_LIGHT, AVATAR_HEX)


def header(title: str, subtitle: str, icon: str = "🛠️"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:2.6rem;">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2rem; color:white;">{title}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1rem">{subtitle}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def metric_card(label: str, value: str, color: str = PRIMARY_COLOR):
    st.markdown(f"""
        <div class="metric-card" style="border-left: 4px solid {color};">
            <div class="label">{label}</div>
            <div class="value">{value}</div>
        </div>
    """, unsafe_allow_html=True)


def avatar(member: TeamMember) -> str:
    """HTML initial bubble in the member's avatar colour."""
    color = AVATAR_HEX.get(member.avatar_color, PRIMARY_COLOR)
    initial = (member.name[:1] or "?").upper()
    return f'<span class="avatar" style="background:{color}">{initial}</span>'


def mode_badge(provider: DataProvider) -> str:
    if provider.mode is StorageMode.REMOTE:
        return f'<span class="mode-badge" style="color:{SUCCESS_COLOR}">☁️ Supabase</span>'
    return f'<span class="mode-badge" style="color:{SUBTLE_TEXT}">💾 Local</span>'


def add_grid(fig):
    """Consistent plotly styling."""
    fig.update_xaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_yaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_layout(plot_bgcolor=CARD_BG_LIGHT, paper_bgcolor=CARD_BG_LIGHT,
                      font=dict(family="Inter, sans-serif", size=12, color=TEXT_COLOR),
                      margin=dict(l=10, r=10, t=40, b=10))
    return fig


def provider_banners(provider: DataProvider):
    """Persistent load error and failed background writes."""
    if provider.error:
        st.error(f"⚠️ {provider.error}")

    failed = [c.value for c, flag in provider.state.pending_write_failed.items() if flag]
    if failed:
        st.markdown(
            f'<div style="background:#fffbeb;border:1px solid {WARNING_COLOR};color:#92400e;'
            f'padding:.6rem 1rem;border-radius:8px;margin-bottom:1rem;">'
            f'Last save failed for: <b>{", ".join(failed)}</b>. '
            f'Changes are visible here but were not persisted.</div>',
            unsafe_allow_html=True,
        )


def render_sidebar(provider: DataProvider, auth=None):
    """Logged-in user, storage mode and logout button."""
    user = get_current_user()
    with st.sidebar:
        st.markdown("## 🛠️ FabStock")
        st.markdown(mode_badge(provider), unsafe_allow_html=True)
        if user is None:
            return
        st.markdown(
            f'{avatar(user)} <b>{user.name}</b><br>'
            f'<span style="color:{SUBTLE_TEXT};font-size:.8rem">{user.role.value}'
            f'{"" if user.can_manage_stock else " · read-only"}</span>',
            unsafe_allow_html=True,
        )
        if st.button("Log out", use_container_width=True):
            with ErrorContext("Signing out"):
                logout_user(auth)
            st.switch_page("Welcome.py")


def bootstrap_page():
    """
    Common preamble of every authenticated page.

    Returns:
        (current user, data provider)
    """
    from fabstock_core.auth import require_authentication
    from fabstock_core.state import get_auth_service, get_data_provider, init_state
    from .theme import apply_css

    init_state()
    user = require_authentication()
    provider = get_data_provider()
    apply_css()
    render_sidebar(provider, get_auth_service())
    provider_banners(provider)
    return user, provider
