# =============================================================================
# 04_Maintenance.py - Maintenance tickets
# =============================================================================
from __future__ import annotations
import streamlit as st

st.set_page_config(page_title="Maintenance - FabStock", page_icon="🔧", layout="wide")

from fabstock_core.errors import ErrorContext
from fabstock_core.models import MaintenanceType, TicketStatus
from fabstock_core.services import MaintenanceService
from fabstock_core.ui import bootstrap_page, header

user, provider = bootstrap_page()
maintenance = MaintenanceService(provider)

STATUS_ICON = {
    TicketStatus.OPEN: "🟠",
    TicketStatus.IN_PROGRESS: "🔵",
    TicketStatus.DONE: "✅",
}

header("Maintenance", "Requests, interventions and closure reports", icon="🔧")

machines = provider.machines
members = provider.team_members

# =============================================================================
# NEW TICKET
# =============================================================================
preselected = st.session_state.pop("ticket_machine_id", None)
with st.expander("➕ New ticket", expanded=preselected is not None):
    if not machines:
        st.info("Add a machine first.")
    else:
        machine_ids = [m.id for m in machines]
        with st.form("new_ticket_form", clear_on_submit=True):
            machine_id = st.selectbox(
                "Machine", machine_ids,
                index=machine_ids.index(preselected) if preselected in machine_ids else 0,
                format_func=lambda mid: next(m.name for m in machines if m.id == mid),
            )
            ticket_type = st.selectbox("Type", list(MaintenanceType), format_func=lambda t: t.value)
            description = st.text_area("Description")
            assignee = st.selectbox("Assign to", [None] + [m.id for m in members],
                                    format_func=lambda mid: "Unassigned" if mid is None
                                    else next(m.name for m in members if m.id == mid))
            submitted = st.form_submit_button("Create ticket")
        if submitted:
            with ErrorContext("Creating ticket", show_success=True, success_message="Ticket created"):
                maintenance.create_ticket(machine_id, ticket_type, description, assignee)

# =============================================================================
# TICKETS
# =============================================================================
filters = {"all": None, "open": TicketStatus.OPEN, "in_progress": TicketStatus.IN_PROGRESS,
           "done": TicketStatus.DONE}
choice = st.radio("Show", list(filters), horizontal=True, key="ticket_filter",
                  format_func=lambda k: "All" if k == "all" else filters[k].value)

tickets = maintenance.tickets_by_status(filters[choice])
if not tickets:
    st.info("No tickets.")

for ticket in tickets:
    with st.container(border=True):
        c1, c2 = st.columns([3, 1])
        machine = maintenance.machine_for(ticket)
        c1.markdown(
            f"{STATUS_ICON[ticket.status]} **{ticket.machine_name}** · {ticket.type.value}"
            f"{'' if machine else ' · (machine removed)'}"
        )
        c1.write(ticket.description)
        c1.caption(f"Created {ticket.date_created[:10]} · Assigned to {maintenance.assignee_name(ticket)}")
        c2.markdown(f"**{ticket.status.value}**")

        if ticket.status is TicketStatus.OPEN:
            if c2.button("▶️ Start", key=f"start_{ticket.id}"):
                with ErrorContext("Starting ticket") as ctx:
                    maintenance.start_ticket(ticket.id)
                if not ctx.failed:
                    st.rerun()

        if ticket.is_closed:
            st.caption(f"Closed {(ticket.resolution_date or '')[:10]} by {ticket.performed_by or '-'}")
            if ticket.notes:
                st.markdown(f"> {ticket.notes}")
        else:
            with st.expander("Close ticket"):
                with st.form(f"close_{ticket.id}"):
                    report = st.text_area("Closure report")
                    if st.form_submit_button("✅ Close"):
                        with ErrorContext("Closing ticket") as ctx:
                            maintenance.close_ticket(ticket.id, report, user)
                        if not ctx.failed:
                            st.rerun()
