# =============================================================================
# 03_Machines.py - Machine park
# =============================================================================
from __future__ import annotations
import streamlit as st
from dataclasses import replace

st.set_page_config(page_title="Machines - FabStock", page_icon="🖨️", layout="wide")

from fabstock_core.errors import ErrorContext
from fabstock_core.models import Machine, MachineStatus
from fabstock_core.services import MaintenanceService
from fabstock_core.ui import bootstrap_page, header

user, provider = bootstrap_page()
maintenance = MaintenanceService(provider)

STATUS_ICON = {
    MachineStatus.OPERATIONAL: "🟢",
    MachineStatus.MAINTENANCE_REQ: "🟠",
    MachineStatus.IN_MAINTENANCE: "🔧",
    MachineStatus.BROKEN: "🔴",
}
statuses = list(MachineStatus)

header("Machines", "3D printers, laser cutters, CNC and friends", icon="🖨️")

if user.can_manage_stock:
    with st.expander("➕ Add a machine"):
        with st.form("add_machine_form", clear_on_submit=True):
            c1, c2 = st.columns(2)
            name = c1.text_input("Name")
            model = c2.text_input("Model")
            serial = c1.text_input("Serial number")
            location = c2.text_input("Location")
            purchase_date = c1.date_input("Purchase date", value=None)
            status = c2.selectbox("Status", statuses, format_func=lambda s: s.value)
            notes = st.text_area("Notes")
            submitted = st.form_submit_button("Add machine")
        if submitted:
            with ErrorContext("Adding machine", show_success=True, success_message=f"{name} added"):
                maintenance.add_machine({
                    "name": name,
                    "model": model,
                    "serial_number": serial,
                    "location": location,
                    "purchase_date": purchase_date.isoformat() if purchase_date else None,
                    "status": status,
                    "notes": notes,
                })


def _edit_form(machine: Machine):
    with st.form(f"edit_machine_{machine.id}"):
        c1, c2 = st.columns(2)
        name = c1.text_input("Name", value=machine.name)
        model = c2.text_input("Model", value=machine.model)
        location = c1.text_input("Location", value=machine.location)
        status = c2.selectbox("Status", statuses, index=statuses.index(machine.status),
                              format_func=lambda s: s.value)
        notes = st.text_area("Notes", value=machine.notes or "")
        if st.form_submit_button("Save"):
            with ErrorContext("Updating machine") as ctx:
                maintenance.update_machine(replace(
                    machine, name=name.strip() or machine.name, model=model,
                    location=location, status=status, notes=notes or None,
                ))
            if not ctx.failed:
                st.rerun()


machines = provider.machines
if not machines:
    st.info("No machines registered yet.")

cols = st.columns(3)
for index, machine in enumerate(machines):
    with cols[index % 3].container(border=True):
        st.markdown(f"### {machine.name}")
        st.caption(f"{machine.model} · 📍 {machine.location or '-'}")
        st.markdown(f"{STATUS_ICON[machine.status]} {machine.status.value}")
        if machine.serial_number:
            st.caption(f"S/N {machine.serial_number}")

        b1, b2 = st.columns(2)
        if b1.button("🔧 Maintenance", key=f"req_{machine.id}"):
            st.session_state.ticket_machine_id = machine.id
            st.switch_page("pages/04_Maintenance.py")
        if b2.button("🗑️ Delete", key=f"del_{machine.id}", disabled=not user.can_manage_stock):
            with ErrorContext("Deleting machine") as ctx:
                maintenance.delete_machine(machine.id, user)
            if not ctx.failed:
                st.rerun()

        if user.can_manage_stock:
            with st.expander("Edit"):
                _edit_form(machine)
