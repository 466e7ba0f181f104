# =============================================================================
# 05_Team.py - Team roster and permissions
# =============================================================================
from __future__ import annotations
import streamlit as st

st.set_page_config(page_title="Team - FabStock", page_icon="👥", layout="wide")

from fabstock_core.errors import ErrorContext
from fabstock_core.models import MemberRole
from fabstock_core.services import TeamService
from fabstock_core.ui import avatar, bootstrap_page, header

user, provider = bootstrap_page()
team = TeamService(provider)

header("Team", "Members, roles and stock permissions", icon="👥")

if user.is_admin:
    with st.expander("➕ Invite a member"):
        with st.form("add_member_form", clear_on_submit=True):
            c1, c2, c3 = st.columns([2, 2, 1])
            name = c1.text_input("Name")
            email = c2.text_input("Email")
            role = c3.selectbox("Role", list(MemberRole), index=1, format_func=lambda r: r.value)
            submitted = st.form_submit_button("Add member")
        if submitted:
            with ErrorContext("Adding member") as ctx:
                result = team.add_member(name, email, role, user)
            if not ctx.failed:
                st.success(f"{result.member.name} added")
                if result.invitation.sent:
                    st.info(f"📧 Invitation sent to {result.member.email}")
                else:
                    st.warning(f"Invitation not sent: {result.invitation.error}")
else:
    st.info("Only administrators can manage the team.")

for member in provider.team_members:
    with st.container(border=True):
        c1, c2, c3, c4 = st.columns([4, 2, 2, 1])
        c1.markdown(f"{avatar(member)} **{member.name}**  \n{member.email}", unsafe_allow_html=True)
        c2.markdown(f"**{member.role.value}**")

        can_manage = c3.toggle(
            "Stock access", value=member.can_manage_stock, key=f"stock_{member.id}",
            disabled=not user.is_admin,
        )
        if can_manage != member.can_manage_stock:
            with ErrorContext("Updating permissions") as ctx:
                team.update_member(member.id, {"can_manage_stock": can_manage}, user)
            if not ctx.failed:
                st.rerun()

        if user.is_admin and member.id != user.id:
            if c4.button("🗑️", key=f"del_member_{member.id}"):
                with ErrorContext("Removing member") as ctx:
                    team.delete_member(member.id, user)
                if not ctx.failed:
                    st.rerun()
