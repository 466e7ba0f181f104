# =============================================================================
# tests/unit/test_models.py
# Unit Tests for domain records and collections
# =============================================================================

import pytest


class TestEnums:
    """Wire values and lenient parsing"""

    def test_category_parse_unknown_falls_back_to_other(self):
        from fabstock_core.models import Category

        assert Category.parse("Librairie / Documentation") is Category.OTHER
        assert Category.parse(None) is Category.OTHER

    def test_category_parse_accepts_value_and_name(self):
        from fabstock_core.models import Category

        assert Category.parse("Électronique") is Category.ELECTRONICS
        assert Category.parse("ELECTRONICS") is Category.ELECTRONICS

    @pytest.mark.parametrize("current,target,allowed", [
        ("Open", "In Progress", True),
        ("Open", "Done", True),
        ("In Progress", "Done", True),
        ("In Progress", "Open", False),
        ("Done", "Open", False),
        ("Done", "In Progress", False),
        ("Done", "Done", True),
    ])
    def test_ticket_status_is_forward_only(self, current, target, allowed):
        from fabstock_core.models import TicketStatus

        assert TicketStatus(current).can_move_to(TicketStatus(target)) is allowed


class TestInventoryItem:
    """camelCase JSON shape"""

    def test_from_dict_reads_stored_shape(self):
        from fabstock_core.models import Category, InventoryItem, StockMovementType

        item = InventoryItem.from_dict({
            "id": "7",
            "name": "LED 5mm",
            "description": "Rouge",
            "category": "Électronique",
            "quantity": 40,
            "minQuantity": 10,
            "location": "Tiroir 3",
            "lastUpdated": "2024-01-02",
            "pricePerUnit": 0.1,
            "history": [{
                "id": "h1", "date": "2024-01-02T10:00:00", "type": "Création",
                "quantityChange": 40, "remainingQuantity": 40, "user": "Fab Admin",
            }],
        })

        assert item.category is Category.ELECTRONICS
        assert item.min_quantity == 10
        assert item.history[0].type is StockMovementType.CREATION
        assert item.history[0].timestamp == "2024-01-02T10:00:00"

    def test_to_dict_omits_missing_price(self):
        from fabstock_core.models import InventoryItem

        data = InventoryItem(id="1", name="Colle").to_dict()

        assert "pricePerUnit" not in data
        assert data["minQuantity"] == 0
        assert data["history"] == []

    def test_negative_stored_quantity_is_clamped(self):
        from fabstock_core.models import InventoryItem

        item = InventoryItem.from_dict({"id": "1", "name": "Colle", "quantity": -3})

        assert item.quantity == 0

    def test_low_stock_includes_equality(self):
        from fabstock_core.models import InventoryItem

        assert InventoryItem(id="1", name="x", quantity=4, min_quantity=4).is_low_stock
        assert not InventoryItem(id="1", name="x", quantity=5, min_quantity=4).is_low_stock


class TestTicketAndMember:

    def test_ticket_empty_assignee_is_none(self):
        from fabstock_core.models import MaintenanceTicket, MaintenanceType

        ticket = MaintenanceTicket.from_dict({
            "id": "mt9", "machineId": "m1", "machineName": "Prusa",
            "dateCreated": "2024-01-01", "type": "Corrective",
            "description": "Buse bouchée", "status": "Open", "assignedToId": "",
        })

        assert ticket.assigned_to_id is None
        assert ticket.type is MaintenanceType.CORRECTIVE
        assert "assignedToId" not in ticket.to_dict()

    def test_member_serializes_role_value(self, intern):
        data = intern.to_dict()

        assert data["role"] == "Stagiaire"
        assert data["canManageStock"] is False


class TestItemSuggestion:

    def test_missing_numbers_default(self):
        from fabstock_core.models import Category, ItemSuggestion

        suggestion = ItemSuggestion.from_dict({"name": " Servo SG90 ", "category": "Robots"})

        assert suggestion.name == "Servo SG90"
        assert suggestion.category is Category.OTHER
        assert suggestion.suggested_quantity == 1
        assert suggestion.suggested_min_quantity == 0
        assert suggestion.estimated_price is None


class TestCollection:

    def test_storage_keys_and_tables(self):
        from fabstock_core.models import Collection

        assert Collection.INVENTORY.storage_key == "fabstock_inventory"
        assert Collection.TEAM.storage_key == "fabstock_team"
        assert Collection.MAINTENANCE.table == "maintenance"

    def test_parse_rejects_non_list(self):
        from fabstock_core.models import Collection

        with pytest.raises(TypeError):
            Collection.MACHINES.parse({"id": "m1"})

    def test_default_records_are_fresh_copies(self):
        from fabstock_core.models import Collection

        first = Collection.INVENTORY.default_records()
        first[0].quantity = 999

        assert Collection.INVENTORY.default_records()[0].quantity == 12
