# =============================================================================
# fabstock_core/sync/__init__.py
# Synchronization layer for FabStock Manager
# =============================================================================

from .data_provider import (
    DataProvider,
    InlineExecutor,
    ProviderState,
    ProviderStatus,
)

__all__ = [
    "DataProvider",
    "InlineExecutor",
    "ProviderState",
    "ProviderStatus",
]
