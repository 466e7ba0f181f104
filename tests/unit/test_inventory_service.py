# =============================================================================
# tests/unit/test_inventory_service.py
# Unit Tests for InventoryService
# =============================================================================

import pytest


@pytest.fixture
def inventory(provider):
    from fabstock_core.services import InventoryService
    return InventoryService(provider)


class TestAdjustQuantity:

    def test_decrement_clamps_at_zero(self, inventory, admin):
        updated = inventory.adjust_quantity("2", -5, admin)

        assert updated.quantity == 0
        entry = updated.history[-1]
        assert entry.quantity_change == -3
        assert entry.remaining_quantity == 0
        assert entry.user == "Fab Admin"
        assert len(updated.history) == 2

    def test_increment_records_addition(self, inventory, member, provider):
        from fabstock_core.models import StockMovementType

        inventory.adjust_quantity("1", 3, member)

        item = next(i for i in provider.items if i.id == "1")
        assert item.quantity == 15
        assert item.history[-1].type is StockMovementType.ADDITION
        assert item.history[-1].quantity_change == 3

    def test_clamped_no_op_writes_nothing(self, inventory, admin, provider):
        inventory.adjust_quantity("2", -3, admin)
        writes = []
        provider.add_listener(writes.append)

        unchanged = inventory.adjust_quantity("2", -1, admin)

        assert unchanged.quantity == 0
        assert len(unchanged.history) == 2
        assert writes == []

    def test_member_without_stock_access_is_refused(self, inventory, intern, provider):
        from fabstock_core.errors import PermissionDeniedError

        with pytest.raises(PermissionDeniedError):
            inventory.adjust_quantity("1", 1, intern)

        assert next(i for i in provider.items if i.id == "1").quantity == 12

    def test_anonymous_is_refused(self, inventory):
        from fabstock_core.errors import PermissionDeniedError

        with pytest.raises(PermissionDeniedError):
            inventory.adjust_quantity("1", 1, None)

    def test_unknown_item(self, inventory, admin):
        from fabstock_core.errors import ValidationError

        with pytest.raises(ValidationError):
            inventory.adjust_quantity("missing", 1, admin)

    def test_history_replays_to_quantity(self, inventory, admin):
        for delta in (4, -10, 2, -1):
            item = inventory.adjust_quantity("6", delta, admin)

        assert sum(entry.quantity_change for entry in item.history) == item.quantity


class TestItemCrud:

    def test_add_item_is_prepended_with_creation_entry(self, inventory, intern, provider):
        from fabstock_core.models import Category, StockMovementType

        item = inventory.add_item(
            {"name": " Servo SG90 ", "category": "Électronique", "quantity": 20,
             "min_quantity": 5, "price_per_unit": "2.5"},
            intern,
        )

        assert provider.items[0] == item
        assert item.name == "Servo SG90"
        assert item.category is Category.ELECTRONICS
        assert item.price_per_unit == 2.5
        assert [(h.type, h.quantity_change, h.user) for h in item.history] == [
            (StockMovementType.CREATION, 20, "Léo"),
        ]

    def test_add_item_requires_name(self, inventory, admin):
        from fabstock_core.errors import ValidationError

        with pytest.raises(ValidationError):
            inventory.add_item({"name": "  "}, admin)

    def test_add_from_suggestion(self, inventory, admin):
        from fabstock_core.models import Category, ItemSuggestion

        suggestion = ItemSuggestion(
            name="Filament PETG Noir",
            category=Category.CONSUMABLES,
            suggested_quantity=2,
            suggested_min_quantity=1,
            location_suggestion="Stockage Sec",
            estimated_price=22.9,
        )

        item = inventory.add_item_from_suggestion(suggestion, admin)

        assert item.quantity == 2
        assert item.min_quantity == 1
        assert item.location == "Stockage Sec"
        assert item.price_per_unit == 22.9

    def test_update_details_keeps_history(self, inventory, provider):
        from dataclasses import replace

        item = replace(inventory.get_item("4"), location="Rack B")

        inventory.update_item_details(item)

        stored = inventory.get_item("4")
        assert stored.location == "Rack B"
        assert len(stored.history) == 1

    def test_update_details_cannot_change_quantity(self, inventory):
        from dataclasses import replace

        original = inventory.get_item("1")
        edited = replace(original, name="Arduino Uno R4", quantity=-4, history=[])

        inventory.update_item_details(edited)

        stored = inventory.get_item("1")
        assert stored.name == "Arduino Uno R4"
        assert stored.quantity == original.quantity
        assert stored.history == original.history

    def test_delete_item(self, inventory, admin, provider):
        inventory.delete_item("5", admin)

        assert "5" not in [i.id for i in provider.items]

    def test_delete_requires_stock_permission(self, inventory, intern, provider):
        from fabstock_core.errors import PermissionDeniedError

        with pytest.raises(PermissionDeniedError):
            inventory.delete_item("5", intern)
        assert len(provider.items) == 5


class TestReporting:

    def test_dashboard_stats_on_builtin_dataset(self, inventory):
        stats = inventory.dashboard_stats()

        assert stats.total_references == 5
        assert stats.total_units == 83
        assert stats.low_stock_count == 2
        assert stats.total_value == pytest.approx(1558.47)
        assert stats.category_distribution == {
            "Consommables 3D/CNC": 2,
            "Électronique": 1,
            "Matières Premières": 1,
            "Petit Outillage (Main)": 1,
        }

    def test_dashboard_stats_empty(self, inventory, provider):
        provider.set_items([])

        stats = inventory.dashboard_stats()

        assert stats.total_references == 0
        assert stats.total_value == 0.0

    def test_missing_price_counts_as_zero(self, inventory, provider):
        from fabstock_core.models import InventoryItem

        provider.set_items([InventoryItem(id="x", name="Gift", quantity=10)])

        assert inventory.dashboard_stats().total_value == 0.0

    def test_low_stock_items(self, inventory):
        assert [i.id for i in inventory.low_stock_items()] == ["2", "5"]
        assert len(inventory.low_stock_items(limit=1)) == 1

    def test_stock_status(self, inventory):
        from fabstock_core.models import InventoryItem, StockStatus

        assert inventory.stock_status(InventoryItem(id="a", name="a", quantity=0)) is StockStatus.OUT_OF_STOCK
        assert inventory.stock_status(inventory.get_item("5")) is StockStatus.LOW_STOCK
        assert inventory.stock_status(inventory.get_item("4")) is StockStatus.IN_STOCK

    def test_search_by_text_and_category(self, inventory):
        from fabstock_core.models import Category

        assert [i.id for i in inventory.search("stockage")] == ["2"]
        assert [i.id for i in inventory.search("", Category.CONSUMABLES)] == ["2", "6"]
        assert inventory.search("vis", Category.TOOLS) == []

    def test_history_frame_most_recent_first(self, inventory, admin):
        inventory.adjust_quantity("1", -2, admin)

        df = inventory.history_frame("1")

        assert list(df.columns) == ["date", "type", "change", "remaining", "user"]
        assert list(df["change"]) == [-2, 12]
        assert df.iloc[0]["remaining"] == 10
