# =============================================================================
# fabstock_core/models/collections.py
# The four entity collections and where each one is stored
# =============================================================================

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict, List, Type

from . import seed
from .entities import InventoryItem, Machine, MaintenanceTicket, Record, TeamMember

SETTINGS_KEY = "fabstock_settings"


class Collection(Enum):
    """Entity collections owned by the data provider."""
    INVENTORY = "inventory"
    MACHINES = "machines"
    MAINTENANCE = "maintenance"
    TEAM = "team"

    @property
    def table(self) -> str:
        """Supabase table name (rows shaped ``{id, data}``)."""
        return self.value

    @property
    def storage_key(self) -> str:
        """Local durable storage key."""
        return f"fabstock_{self.value}"

    @property
    def model(self) -> Type[Record]:
        return _MODELS[self]

    def default_records(self) -> List[Record]:
        """Fresh copy of the built-in first-run dataset."""
        return _SEEDS[self]()

    def parse(self, rows: List[Dict[str, Any]]) -> List[Record]:
        """Build records from stored JSON; raises on malformed content."""
        if not isinstance(rows, list):
            raise TypeError(f"{self.storage_key} must hold a list, got {type(rows).__name__}")
        return [self.model.from_dict(row) for row in rows]

    @staticmethod
    def serialize(records: List[Record]) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in records]


# Write order used by bulk migrations
ALL_COLLECTIONS = [
    Collection.INVENTORY,
    Collection.MACHINES,
    Collection.MAINTENANCE,
    Collection.TEAM,
]

_MODELS: Dict[Collection, Type[Record]] = {
    Collection.INVENTORY: InventoryItem,
    Collection.MACHINES: Machine,
    Collection.MAINTENANCE: MaintenanceTicket,
    Collection.TEAM: TeamMember,
}

_SEEDS: Dict[Collection, Callable[[], List[Record]]] = {
    Collection.INVENTORY: seed.default_inventory,
    Collection.MACHINES: seed.default_machines,
    Collection.MAINTENANCE: seed.default_maintenance,
    Collection.TEAM: seed.default_team,
}
