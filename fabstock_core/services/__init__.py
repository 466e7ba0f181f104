# =============================================================================
# fabstock_core/services/__init__.py
# Service Layer for FabStock Manager
# Separates domain operations from UI presentation
# =============================================================================
"""
Service Layer for FabStock Manager

Services apply the domain rules (permissions, stock history, ticket
lifecycle) and hand the resulting collections to the DataProvider.

Usage Example:
-------------
    from fabstock_core.services import InventoryService, MaintenanceService

    inventory = InventoryService(provider)
    inventory.adjust_quantity(item_id, -2, actor=current_user)

    maintenance = MaintenanceService(provider)
    ticket = maintenance.create_ticket("m2", MaintenanceType.CORRECTIVE, "Nozzle clogged")
    maintenance.close_ticket(ticket.id, "Nozzle replaced", actor=current_user)

Pages that prefer result objects wrap calls with ``safe_execute``:

    result = inventory.safe_execute("Adjusting stock", inventory.adjust_quantity,
                                    item_id, 1, current_user)
    if not result:
        st.error(result.error)
"""

from .base_service import BaseService, ServiceResult
from .inventory_service import InventoryService, DashboardStats
from .maintenance_service import MaintenanceService, UNASSIGNED
from .team_service import TeamService, AddMemberResult, InvitationResult

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Inventory
    "InventoryService",
    "DashboardStats",
    # Machines & maintenance
    "MaintenanceService",
    "UNASSIGNED",
    # Team
    "TeamService",
    "AddMemberResult",
    "InvitationResult",
]
