# =============================================================================
# fabstock_core/models/__init__.py
# Domain Model for FabStock Manager
# =============================================================================

from .entities import (
    AVATAR_COLORS,
    Category,
    InventoryItem,
    ItemSuggestion,
    Machine,
    MachineStatus,
    MaintenanceTicket,
    MaintenanceType,
    MemberRole,
    Record,
    StockHistoryEntry,
    StockMovementType,
    StockStatus,
    TeamMember,
    TicketStatus,
)
from .settings import AppSettings, StorageMode
from .collections import Collection

__all__ = [
    "AVATAR_COLORS",
    "AppSettings",
    "Category",
    "Collection",
    "InventoryItem",
    "ItemSuggestion",
    "Machine",
    "MachineStatus",
    "MaintenanceTicket",
    "MaintenanceType",
    "MemberRole",
    "Record",
    "StockHistoryEntry",
    "StockMovementType",
    "StockStatus",
    "StorageMode",
    "TeamMember",
    "TicketStatus",
]
