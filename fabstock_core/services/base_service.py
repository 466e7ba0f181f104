# =============================================================================
# fabstock_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
import uuid
from abc import ABC
from datetime import date, datetime
from typing import Optional, Dict, Any, Callable
from dataclasses import dataclass

from fabstock_core.logging import get_logger, LogContext
from fabstock_core.errors import handle_error, FabStockError, PermissionDeniedError
from fabstock_core.models import TeamMember


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Used by pages that prefer a result object over exceptions.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, FabStockError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
        )


def new_id(prefix: str = "") -> str:
    """Opaque unique identifier, optionally prefixed (``hist_...``)."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}_{token}" if prefix else token


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def today_iso() -> str:
    return date.today().isoformat()


class BaseService(ABC):
    """
    Abstract base class for the domain services.

    Provides common functionality:
    - Logging
    - Capability checks on the acting member
    - Result standardization

    Usage:
        class MyService(BaseService):
            def do_something(self) -> Machine:
                with self.log_operation("Doing something"):
                    ...
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Closing ticket"):
                ...
        """
        return LogContext(self.logger, operation)

    def require_actor(self, actor: Optional[TeamMember]) -> TeamMember:
        if actor is None:
            raise PermissionDeniedError("You must be logged in", capability="login")
        return actor

    def require_stock_permission(self, actor: Optional[TeamMember]) -> TeamMember:
        """Stock and machine mutations need ``can_manage_stock``."""
        actor = self.require_actor(actor)
        if not actor.can_manage_stock:
            raise PermissionDeniedError(
                f"{actor.name} is not allowed to manage stock",
                member=actor.id,
                capability="canManageStock",
            )
        return actor

    def require_admin(self, actor: Optional[TeamMember]) -> TeamMember:
        actor = self.require_actor(actor)
        if not actor.is_admin:
            raise PermissionDeniedError(
                "Only administrators can manage the team",
                member=actor.id,
                capability="admin",
            )
        return actor

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        Args:
            operation: Description of the operation
            func: Function to execute
            *args, **kwargs: Arguments to pass to func

        Returns:
            ServiceResult with success/failure status
        """
        with self.log_operation(operation):
            try:
                result = func(*args, **kwargs)
                return ServiceResult.ok(result)
            except FabStockError as e:
                handle_error(e, show_user_message=False)
                return ServiceResult.from_exception(e)
            except Exception as e:
                self.logger.error(f"{operation} failed: {e}", exc_info=True)
                return ServiceResult.fail(str(e))
