# =============================================================================
# fabstock_core/errors/__init__.py
# Centralized Error Handling for FabStock Manager
# =============================================================================

from .exceptions import (
    FabStockError,
    ConfigurationError,
    RemoteError,
    ValidationError,
    PermissionDeniedError,
    AuthenticationError,
    AssistantError,
)

from .handlers import (
    handle_error,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "FabStockError",
    "ConfigurationError",
    "RemoteError",
    "ValidationError",
    "PermissionDeniedError",
    "AuthenticationError",
    "AssistantError",
    # Handlers
    "handle_error",
    "ErrorContext",
]
