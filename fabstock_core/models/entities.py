# =============================================================================
# fabstock_core/models/entities.py
# Domain records for FabStock Manager
# =============================================================================
"""
Typed records for inventory, machines, maintenance tickets and team members.

Records are plain dataclasses. ``to_dict()`` / ``from_dict()`` use the camelCase
JSON shape that is stored in local storage and in the ``data`` column of the
Supabase tables, so existing data stays readable. Enum values are the stored
wire values.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar


class Category(Enum):
    """Fixed inventory categories."""
    ELECTRONICS = "Électronique"
    CONSUMABLES = "Consommables 3D/CNC"
    TOOLS = "Petit Outillage (Main)"
    RAW_MATERIALS = "Matières Premières"
    FURNITURE = "Mobilier"
    OTHER = "Autre"

    @classmethod
    def parse(cls, value: Any) -> Category:
        """Lenient lookup by value or member name; unknown values map to OTHER."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value or value == member.name:
                return member
        return cls.OTHER


class StockStatus(Enum):
    """Derived stock level of an item (never stored)."""
    IN_STOCK = "En stock"
    LOW_STOCK = "Stock faible"
    OUT_OF_STOCK = "Rupture"
    ORDERED = "Commandé"


class StockMovementType(Enum):
    CREATION = "Création"
    ADDITION = "Ajout"
    REMOVAL = "Retrait"
    ADJUSTMENT = "Ajustement"


class MachineStatus(Enum):
    OPERATIONAL = "Opérationnelle"
    MAINTENANCE_REQ = "Maintenance Requise"
    IN_MAINTENANCE = "En Maintenance"
    BROKEN = "Hors Service"


class MaintenanceType(Enum):
    PREVENTIVE = "Préventive"
    CORRECTIVE = "Corrective"
    UPGRADE = "Amélioration"


class TicketStatus(Enum):
    """Maintenance ticket lifecycle, forward-only: OPEN -> IN_PROGRESS -> DONE."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @property
    def rank(self) -> int:
        return _TICKET_ORDER.index(self)

    def can_move_to(self, target: TicketStatus) -> bool:
        """True if ``target`` is reachable without going backwards."""
        if self is TicketStatus.DONE:
            return target is TicketStatus.DONE
        return target.rank >= self.rank


_TICKET_ORDER = [TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.DONE]


class MemberRole(Enum):
    ADMIN = "Admin"
    MEMBER = "Membre"
    INTERN = "Stagiaire"


# =============================================================================
# SERIALIZATION HELPERS
# =============================================================================

R = TypeVar("R", bound="Record")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


class Record:
    """Mixin shared by all entity dataclasses."""

    id: str

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def from_dict(cls: Type[R], data: Dict[str, Any]) -> R:
        raise NotImplementedError

    def same_id(self, other: Record) -> bool:
        return self.id == other.id


# =============================================================================
# INVENTORY
# =============================================================================

@dataclass
class StockHistoryEntry(Record):
    """One stock movement; immutable once appended to an item."""
    id: str
    timestamp: str
    type: StockMovementType
    quantity_change: int
    remaining_quantity: int
    user: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.timestamp,
            "type": self.type.value,
            "quantityChange": self.quantity_change,
            "remainingQuantity": self.remaining_quantity,
            "user": self.user,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StockHistoryEntry:
        return cls(
            id=str(data["id"]),
            timestamp=data.get("date", ""),
            type=StockMovementType(data["type"]),
            quantity_change=int(data.get("quantityChange", 0)),
            remaining_quantity=max(0, int(data.get("remainingQuantity", 0))),
            user=data.get("user", ""),
        )


@dataclass
class InventoryItem(Record):
    """A consumable stock reference."""
    id: str
    name: str
    description: str = ""
    category: Category = Category.OTHER
    quantity: int = 0
    min_quantity: int = 0
    location: str = ""
    last_updated: str = ""
    price_per_unit: Optional[float] = None
    history: List[StockHistoryEntry] = field(default_factory=list)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "quantity": self.quantity,
            "minQuantity": self.min_quantity,
            "location": self.location,
            "lastUpdated": self.last_updated,
            "pricePerUnit": self.price_per_unit,
            "history": [entry.to_dict() for entry in self.history],
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> InventoryItem:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            category=Category.parse(data.get("category")),
            quantity=max(0, int(data.get("quantity", 0))),
            min_quantity=int(data.get("minQuantity", 0)),
            location=data.get("location", ""),
            last_updated=data.get("lastUpdated", ""),
            price_per_unit=_opt_float(data.get("pricePerUnit")),
            history=[StockHistoryEntry.from_dict(h) for h in data.get("history") or []],
        )


# =============================================================================
# MACHINES & MAINTENANCE
# =============================================================================

@dataclass
class Machine(Record):
    id: str
    name: str
    model: str = ""
    status: MachineStatus = MachineStatus.OPERATIONAL
    location: str = ""
    serial_number: Optional[str] = None
    purchase_date: Optional[str] = None
    image: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "serialNumber": self.serial_number,
            "purchaseDate": self.purchase_date,
            "status": self.status.value,
            "location": self.location,
            "image": self.image,
            "notes": self.notes,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Machine:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            model=data.get("model", ""),
            status=MachineStatus(data.get("status", MachineStatus.OPERATIONAL.value)),
            location=data.get("location", ""),
            serial_number=data.get("serialNumber"),
            purchase_date=data.get("purchaseDate"),
            image=data.get("image"),
            notes=data.get("notes"),
        )


@dataclass
class MaintenanceTicket(Record):
    """
    Maintenance request on a machine.

    ``machine_name`` is a snapshot taken at creation and is not kept in sync
    with later renames. ``assigned_to_id`` may dangle.
    """
    id: str
    machine_id: str
    machine_name: str
    date_created: str
    type: MaintenanceType
    description: str
    status: TicketStatus = TicketStatus.OPEN
    assigned_to_id: Optional[str] = None
    performed_by: Optional[str] = None
    parts_used: Optional[str] = None
    cost: Optional[float] = None
    resolution_date: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status is TicketStatus.DONE

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "machineId": self.machine_id,
            "machineName": self.machine_name,
            "dateCreated": self.date_created,
            "status": self.status.value,
            "type": self.type.value,
            "description": self.description,
            "assignedToId": self.assigned_to_id,
            "performedBy": self.performed_by,
            "partsUsed": self.parts_used,
            "cost": self.cost,
            "resolutionDate": self.resolution_date,
            "notes": self.notes,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MaintenanceTicket:
        return cls(
            id=str(data["id"]),
            machine_id=str(data["machineId"]),
            machine_name=data.get("machineName", ""),
            date_created=data.get("dateCreated", ""),
            type=MaintenanceType(data["type"]),
            description=data.get("description", ""),
            status=TicketStatus(data.get("status", TicketStatus.OPEN.value)),
            assigned_to_id=data.get("assignedToId") or None,
            performed_by=data.get("performedBy"),
            parts_used=data.get("partsUsed"),
            cost=_opt_float(data.get("cost")),
            resolution_date=data.get("resolutionDate"),
            notes=data.get("notes"),
        )


# =============================================================================
# TEAM
# =============================================================================

AVATAR_COLORS = [
    "bg-indigo-500",
    "bg-emerald-500",
    "bg-rose-500",
    "bg-amber-500",
    "bg-blue-500",
    "bg-purple-500",
]


@dataclass
class TeamMember(Record):
    id: str
    name: str
    email: str
    role: MemberRole = MemberRole.MEMBER
    can_manage_stock: bool = True
    avatar_color: str = AVATAR_COLORS[0]

    @property
    def is_admin(self) -> bool:
        return self.role is MemberRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "canManageStock": self.can_manage_stock,
            "avatarColor": self.avatar_color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TeamMember:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=MemberRole(data.get("role", MemberRole.MEMBER.value)),
            can_manage_stock=bool(data.get("canManageStock", False)),
            avatar_color=data.get("avatarColor", AVATAR_COLORS[0]),
        )


# =============================================================================
# AI EXTRACTION RESULT
# =============================================================================

@dataclass
class ItemSuggestion:
    """Structured item data extracted from free text by the assistant."""
    name: str
    category: Category
    suggested_quantity: int = 1
    description: str = ""
    suggested_min_quantity: int = 0
    location_suggestion: str = ""
    estimated_price: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ItemSuggestion:
        return cls(
            name=str(data.get("name", "")).strip(),
            category=Category.parse(data.get("category")),
            suggested_quantity=max(0, int(data.get("suggestedQuantity") or 1)),
            description=data.get("description") or "",
            suggested_min_quantity=max(0, int(data.get("suggestedMinQuantity") or 0)),
            location_suggestion=data.get("locationSuggestion") or "",
            estimated_price=_opt_float(data.get("estimatedPrice")),
        )
