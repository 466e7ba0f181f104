# =============================================================================
# fabstock_core/services/maintenance_service.py
# Machine park and maintenance ticket lifecycle
# =============================================================================
"""
MaintenanceService - machines and their maintenance tickets.

Ticket lifecycle is forward-only (Open -> In Progress -> Done). Opening a
ticket flags its machine MAINTENANCE_REQ, closing one sets it OPERATIONAL.
Both side effects are unconditional: closing one ticket clears the machine
even when other tickets on it are still open.
"""

from __future__ import annotations
from dataclasses import fields as dataclass_fields, replace
from typing import Any, List, Mapping, Optional

from fabstock_core.errors import ValidationError
from fabstock_core.models import (
    Machine,
    MachineStatus,
    MaintenanceTicket,
    MaintenanceType,
    TeamMember,
    TicketStatus,
)
from fabstock_core.sync import DataProvider

from .base_service import BaseService, new_id, now_iso

UNASSIGNED = "Unassigned"

_TICKET_FIELDS = {f.name for f in dataclass_fields(MaintenanceTicket)} - {"id"}


class MaintenanceService(BaseService):
    """Machine CRUD and ticket workflow."""

    def __init__(self, provider: DataProvider):
        super().__init__()
        self.provider = provider

    # =========================================================================
    # MACHINES
    # =========================================================================

    def get_machine(self, machine_id: str) -> Optional[Machine]:
        return next((m for m in self.provider.machines if m.id == machine_id), None)

    def add_machine(self, fields: Mapping[str, Any]) -> Machine:
        name = str(fields.get("name") or "").strip()
        if not name:
            raise ValidationError("Machine name is required", field="name")

        status = fields.get("status") or MachineStatus.OPERATIONAL
        machine = Machine(
            id=new_id("m"),
            name=name,
            model=str(fields.get("model") or ""),
            status=MachineStatus(status.value if isinstance(status, MachineStatus) else status),
            location=str(fields.get("location") or ""),
            serial_number=fields.get("serial_number") or None,
            purchase_date=fields.get("purchase_date") or None,
            image=fields.get("image") or None,
            notes=fields.get("notes") or None,
        )
        self.provider.set_machines(self.provider.machines + [machine])
        self.logger.info(f"Machine added: {machine.name} ({machine.id})")
        return machine

    def update_machine(self, machine: Machine) -> Machine:
        machines = self.provider.machines
        if not any(m.id == machine.id for m in machines):
            raise ValidationError(f"Unknown machine: {machine.id}", field="id")
        self.provider.set_machines([machine if m.id == machine.id else m for m in machines])
        return machine

    def delete_machine(self, machine_id: str, actor: Optional[TeamMember]) -> None:
        """Remove a machine; its tickets keep their snapshot name."""
        self.require_stock_permission(actor)
        remaining = [m for m in self.provider.machines if m.id != machine_id]
        self.provider.delete_machine(machine_id, remaining)

    def _set_machine_status(self, machine_id: str, status: MachineStatus) -> None:
        machines = self.provider.machines
        if not any(m.id == machine_id for m in machines):
            self.logger.warning(f"Ticket references missing machine {machine_id}")
            return
        self.provider.set_machines([
            replace(m, status=status) if m.id == machine_id else m for m in machines
        ])

    # =========================================================================
    # TICKETS
    # =========================================================================

    def get_ticket(self, ticket_id: str) -> MaintenanceTicket:
        for ticket in self.provider.maintenance_tickets:
            if ticket.id == ticket_id:
                return ticket
        raise ValidationError(f"Unknown ticket: {ticket_id}", field="id")

    def tickets_by_status(self, status: Optional[TicketStatus] = None) -> List[MaintenanceTicket]:
        tickets = self.provider.maintenance_tickets
        if status is None:
            return tickets
        return [t for t in tickets if t.status is status]

    def create_ticket(
        self,
        machine_id: str,
        type: MaintenanceType,
        description: str,
        assigned_to_id: Optional[str] = None,
    ) -> MaintenanceTicket:
        """Open a ticket on a machine and flag the machine for maintenance."""
        machine = self.get_machine(machine_id)
        if machine is None:
            raise ValidationError(f"Unknown machine: {machine_id}", field="machineId")
        if not description or not description.strip():
            raise ValidationError("A description is required", field="description")

        ticket = MaintenanceTicket(
            id=new_id("mt"),
            machine_id=machine.id,
            machine_name=machine.name,
            date_created=now_iso(),
            type=type,
            description=description.strip(),
            status=TicketStatus.OPEN,
            assigned_to_id=assigned_to_id or None,
        )

        with self.log_operation(f"Opening ticket on {machine.name}"):
            self.provider.set_maintenance_tickets([ticket] + self.provider.maintenance_tickets)
            self._set_machine_status(machine.id, MachineStatus.MAINTENANCE_REQ)
        return ticket

    def update_ticket(self, ticket_id: str, updates: Mapping[str, Any]) -> MaintenanceTicket:
        """
        Partial update of a ticket.

        Raises:
            ValidationError: unknown ticket or field, a backwards status move,
                or a move to Done without a closure report in ``notes``
        """
        ticket = self.get_ticket(ticket_id)

        unknown = set(updates) - _TICKET_FIELDS
        if unknown:
            raise ValidationError(f"Unknown ticket fields: {sorted(unknown)}")

        changes = dict(updates)
        if "status" in changes:
            target = changes["status"]
            target = target if isinstance(target, TicketStatus) else TicketStatus(target)
            if not ticket.status.can_move_to(target):
                raise ValidationError(
                    f"Cannot move ticket from {ticket.status.value} to {target.value}",
                    field="status",
                )
            changes["status"] = target

            if target is TicketStatus.DONE and not ticket.is_closed:
                notes = changes.get("notes", ticket.notes)
                if not notes or not str(notes).strip():
                    raise ValidationError("A closure report is required", field="notes")
                changes["notes"] = str(notes).strip()
                if not changes.get("resolution_date"):
                    changes["resolution_date"] = now_iso()

        updated = replace(ticket, **changes)
        tickets = self.provider.maintenance_tickets
        self.provider.set_maintenance_tickets([
            updated if t.id == ticket_id else t for t in tickets
        ])

        if updated.is_closed and not ticket.is_closed:
            self._set_machine_status(updated.machine_id, MachineStatus.OPERATIONAL)
            self.logger.info(f"Ticket {ticket_id} closed, {updated.machine_name} operational")
        return updated

    def start_ticket(self, ticket_id: str) -> MaintenanceTicket:
        return self.update_ticket(ticket_id, {"status": TicketStatus.IN_PROGRESS})

    def close_ticket(
        self,
        ticket_id: str,
        closure_report: str,
        actor: Optional[TeamMember],
    ) -> MaintenanceTicket:
        actor = self.require_actor(actor)
        if not closure_report or not closure_report.strip():
            raise ValidationError("A closure report is required", field="notes")

        return self.update_ticket(ticket_id, {
            "status": TicketStatus.DONE,
            "resolution_date": now_iso(),
            "notes": closure_report.strip(),
            "performed_by": actor.name,
        })

    # =========================================================================
    # REFERENCES
    # =========================================================================

    def assignee_name(self, ticket: MaintenanceTicket) -> str:
        """Name of the assigned member, ``Unassigned`` if none or dangling."""
        if not ticket.assigned_to_id:
            return UNASSIGNED
        member = next(
            (m for m in self.provider.team_members if m.id == ticket.assigned_to_id),
            None,
        )
        return member.name if member else UNASSIGNED

    def machine_for(self, ticket: MaintenanceTicket) -> Optional[Machine]:
        return self.get_machine(ticket.machine_id)
