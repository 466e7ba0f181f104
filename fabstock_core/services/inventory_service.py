# =============================================================================
# fabstock_core/services/inventory_service.py
# Inventory operations: stock movements, item CRUD and dashboard figures
# =============================================================================
"""
InventoryService - stock bookkeeping on top of the DataProvider.

Every effective quantity change appends exactly one history entry, whose
``quantity_change`` is the change actually applied after clamping at zero.

Usage:
    service = InventoryService(provider)
    service.adjust_quantity("2", -5, actor=current_user)
    stats = service.dashboard_stats()
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from fabstock_core.errors import ValidationError
from fabstock_core.models import (
    Category,
    InventoryItem,
    ItemSuggestion,
    StockHistoryEntry,
    StockMovementType,
    StockStatus,
    TeamMember,
)
from fabstock_core.sync import DataProvider

from .base_service import BaseService, new_id, now_iso, today_iso

ITEM_COLUMNS = [
    "id", "name", "category", "quantity", "min_quantity",
    "location", "price_per_unit", "last_updated",
]


@dataclass
class DashboardStats:
    """Headline figures for the dashboard."""
    total_references: int = 0
    total_units: int = 0
    low_stock_count: int = 0
    total_value: float = 0.0
    category_distribution: Dict[str, int] = field(default_factory=dict)


class InventoryService(BaseService):
    """Stock movements and item management."""

    def __init__(self, provider: DataProvider):
        super().__init__()
        self.provider = provider

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def _locate(self, items: List[InventoryItem], item_id: str) -> int:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        raise ValidationError(f"Unknown item: {item_id}", field="id")

    def get_item(self, item_id: str) -> InventoryItem:
        items = self.provider.items
        return items[self._locate(items, item_id)]

    @staticmethod
    def stock_status(item: InventoryItem) -> StockStatus:
        if item.quantity == 0:
            return StockStatus.OUT_OF_STOCK
        if item.is_low_stock:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def low_stock_items(self, limit: Optional[int] = 5) -> List[InventoryItem]:
        """Items at or below their minimum, in collection order."""
        low = [item for item in self.provider.items if item.is_low_stock]
        return low[:limit] if limit is not None else low

    def search(self, query: str = "", category: Optional[Category] = None) -> List[InventoryItem]:
        """Case-insensitive match on name, description or location."""
        needle = query.strip().lower()
        results = []
        for item in self.provider.items:
            if category is not None and item.category is not category:
                continue
            haystack = f"{item.name} {item.description} {item.location}".lower()
            if needle and needle not in haystack:
                continue
            results.append(item)
        return results

    # =========================================================================
    # STOCK MOVEMENTS
    # =========================================================================

    def adjust_quantity(
        self,
        item_id: str,
        delta: int,
        actor: Optional[TeamMember],
    ) -> InventoryItem:
        """
        Apply ``delta`` to an item's quantity, clamped at zero.

        Nothing is recorded or written when the clamped quantity is unchanged.

        Raises:
            PermissionDeniedError: actor cannot manage stock
            ValidationError: unknown item
        """
        actor = self.require_stock_permission(actor)
        items = self.provider.items
        index = self._locate(items, item_id)
        item = items[index]

        new_quantity = max(0, item.quantity + int(delta))
        change = new_quantity - item.quantity
        if change == 0:
            return item

        entry = StockHistoryEntry(
            id=new_id("hist"),
            timestamp=now_iso(),
            type=StockMovementType.ADDITION if change > 0 else StockMovementType.REMOVAL,
            quantity_change=change,
            remaining_quantity=new_quantity,
            user=actor.name,
        )
        updated = replace(
            item,
            quantity=new_quantity,
            last_updated=today_iso(),
            history=item.history + [entry],
        )
        items[index] = updated
        self.provider.set_items(items)

        self.logger.info(f"{actor.name}: {item.name} {change:+d} -> {new_quantity}")
        return updated

    # =========================================================================
    # ITEM CRUD
    # =========================================================================

    def add_item(self, fields: Mapping[str, Any], actor: Optional[TeamMember]) -> InventoryItem:
        """
        Create an item from form fields (attribute names) and prepend it.

        The creation is recorded as one CREATION entry equal to the initial
        quantity.
        """
        actor = self.require_actor(actor)
        name = str(fields.get("name") or "").strip()
        if not name:
            raise ValidationError("Item name is required", field="name")

        quantity = max(0, int(fields.get("quantity") or 0))
        price = fields.get("price_per_unit")

        item = InventoryItem(
            id=new_id(),
            name=name,
            description=str(fields.get("description") or ""),
            category=Category.parse(fields.get("category")),
            quantity=quantity,
            min_quantity=max(0, int(fields.get("min_quantity") or 0)),
            location=str(fields.get("location") or ""),
            last_updated=today_iso(),
            price_per_unit=float(price) if price not in (None, "") else None,
            history=[
                StockHistoryEntry(
                    id=new_id("hist"),
                    timestamp=now_iso(),
                    type=StockMovementType.CREATION,
                    quantity_change=quantity,
                    remaining_quantity=quantity,
                    user=actor.name,
                )
            ],
        )
        self.provider.set_items([item] + self.provider.items)
        self.logger.info(f"Item created: {item.name} ({item.id})")
        return item

    def add_item_from_suggestion(
        self,
        suggestion: ItemSuggestion,
        actor: Optional[TeamMember],
    ) -> InventoryItem:
        return self.add_item(
            {
                "name": suggestion.name,
                "description": suggestion.description,
                "category": suggestion.category,
                "quantity": suggestion.suggested_quantity,
                "min_quantity": suggestion.suggested_min_quantity,
                "location": suggestion.location_suggestion,
                "price_per_unit": suggestion.estimated_price,
            },
            actor,
        )

    def update_item_details(self, item: InventoryItem) -> InventoryItem:
        """
        Save the descriptive fields of ``item``.

        Quantity and history always come from the stored item; stock only
        moves through ``adjust_quantity``.
        """
        items = self.provider.items
        index = self._locate(items, item.id)
        if not item.name.strip():
            raise ValidationError("Item name is required", field="name")

        stored = items[index]
        updated = replace(
            item,
            quantity=stored.quantity,
            history=stored.history,
            last_updated=today_iso(),
        )
        items[index] = updated
        self.provider.set_items(items)
        return updated

    def delete_item(self, item_id: str, actor: Optional[TeamMember]) -> None:
        self.require_stock_permission(actor)
        remaining = [item for item in self.provider.items if item.id != item_id]
        self.provider.delete_item(item_id, remaining)

    # =========================================================================
    # REPORTING
    # =========================================================================

    def inventory_frame(self) -> pd.DataFrame:
        rows = [
            {
                "id": item.id,
                "name": item.name,
                "category": item.category.value,
                "quantity": item.quantity,
                "min_quantity": item.min_quantity,
                "location": item.location,
                "price_per_unit": item.price_per_unit,
                "last_updated": item.last_updated,
            }
            for item in self.provider.items
        ]
        return pd.DataFrame(rows, columns=ITEM_COLUMNS)

    def dashboard_stats(self) -> DashboardStats:
        df = self.inventory_frame()
        if df.empty:
            return DashboardStats()

        value = (df["quantity"] * df["price_per_unit"].fillna(0).astype(float)).sum()
        distribution = df["category"].value_counts()

        return DashboardStats(
            total_references=len(df),
            total_units=int(df["quantity"].sum()),
            low_stock_count=int((df["quantity"] <= df["min_quantity"]).sum()),
            total_value=round(float(value), 2),
            category_distribution={str(k): int(v) for k, v in distribution.items()},
        )

    def history_frame(self, item_id: str) -> pd.DataFrame:
        """Movements of one item, most recent first."""
        item = self.get_item(item_id)
        df = pd.DataFrame(
            [
                {
                    "date": entry.timestamp,
                    "type": entry.type.value,
                    "change": entry.quantity_change,
                    "remaining": entry.remaining_quantity,
                    "user": entry.user,
                }
                for entry in item.history
            ],
            columns=["date", "type", "change", "remaining", "user"],
        )
        return df.sort_values("date", ascending=False, kind="stable").reset_index(drop=True)
