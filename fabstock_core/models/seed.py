# =============================================================================
# fabstock_core/models/seed.py
# Built-in first-run dataset for local mode
# =============================================================================

from __future__ import annotations
from typing import List

from .entities import (
    Category,
    InventoryItem,
    Machine,
    MachineStatus,
    MaintenanceTicket,
    MaintenanceType,
    MemberRole,
    StockHistoryEntry,
    StockMovementType,
    TeamMember,
    TicketStatus,
)

SEED_TIMESTAMP = "2023-01-01T10:00:00.000Z"
SYSTEM_USER = "Système"


def _initial_history(item_id: str, qty: int) -> List[StockHistoryEntry]:
    return [
        StockHistoryEntry(
            id=f"hist_init_{item_id}",
            timestamp=SEED_TIMESTAMP,
            type=StockMovementType.CREATION,
            quantity_change=qty,
            remaining_quantity=qty,
            user=SYSTEM_USER,
        )
    ]


def default_inventory() -> List[InventoryItem]:
    rows = [
        ("1", "Arduino Uno R3", "Microcontrôleur standard pour prototypage.",
         Category.ELECTRONICS, 12, 5, "Armoire A, Étagère 2", "2023-10-25", 24.00),
        ("2", "PLA Blanc 1.75mm", "Filament PLA standard pour imprimantes Prusa.",
         Category.CONSUMABLES, 3, 4, "Stockage Sec", "2023-10-28", 19.99),
        ("4", "Contreplaqué Bouleau 3mm", "Plaque 600x400mm pour découpeuse laser.",
         Category.RAW_MATERIALS, 45, 20, "Rack Bois Vertical", "2023-10-29", 4.50),
        ("5", "Fer à souder Weller", "Station de soudage réglable (Main).",
         Category.TOOLS, 8, 8, "Zone Électronique", "2023-09-15", 120.00),
        ("6", "Vis M3 x 10mm", "Boite de 100 vis tête cylindrique.",
         Category.CONSUMABLES, 15, 5, "Organisateur Visserie", "2023-10-30", 3.20),
    ]
    return [
        InventoryItem(
            id=item_id,
            name=name,
            description=description,
            category=category,
            quantity=qty,
            min_quantity=min_qty,
            location=location,
            last_updated=updated,
            price_per_unit=price,
            history=_initial_history(item_id, qty),
        )
        for item_id, name, description, category, qty, min_qty, location, updated, price in rows
    ]


def default_machines() -> List[Machine]:
    return [
        Machine(
            id="m1",
            name="Prusa i3 MK3S+",
            model="MK3S+",
            status=MachineStatus.OPERATIONAL,
            location="Zone Impression 3D",
            serial_number="CZ-2023-5594",
        ),
        Machine(
            id="m2",
            name="Trotec Speedy 100",
            model="Speedy 100",
            status=MachineStatus.MAINTENANCE_REQ,
            location="Atelier Sale",
            notes="Le filtre commence à être saturé.",
        ),
        Machine(
            id="m3",
            name="CNC ShopBot",
            model="Desktop MAX",
            status=MachineStatus.OPERATIONAL,
            location="Grand Atelier",
        ),
    ]


def default_maintenance() -> List[MaintenanceTicket]:
    return [
        MaintenanceTicket(
            id="mt1",
            machine_id="m2",
            machine_name="Trotec Speedy 100",
            date_created="2023-10-20T10:00:00Z",
            status=TicketStatus.OPEN,
            type=MaintenanceType.PREVENTIVE,
            description="Remplacement du filtre charbon et nettoyage des miroirs.",
            assigned_to_id="u1",
        )
    ]


def default_team() -> List[TeamMember]:
    return [
        TeamMember(
            id="u1",
            name="Fab Admin",
            email="admin@fablab.com",
            role=MemberRole.ADMIN,
            can_manage_stock=True,
            avatar_color="bg-indigo-500",
        )
    ]
