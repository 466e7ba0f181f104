# =============================================================================
# fabstock_core/errors/exceptions.py
# Custom Exception Hierarchy for FabStock Manager
# =============================================================================

from typing import Optional, Dict, Any


class FabStockError(Exception):
    """
    Base exception for all FabStock errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "REMOTE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "FS_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(FabStockError):
    """Raised when remote endpoint, credentials or API keys are missing/invalid"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )


# =============================================================================
# STORAGE / TRANSPORT EXCEPTIONS
# =============================================================================

class RemoteError(FabStockError):
    """Raised when the remote backend (or another external service) fails"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="REMOTE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class ValidationError(FabStockError):
    """Raised when required fields are missing or a transition is illegal"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field

        super().__init__(
            message=message,
            code="VALID_001",
            details=details,
            **kwargs,
        )


class PermissionDeniedError(FabStockError):
    """Raised when the acting member lacks the required capability"""

    def __init__(
        self,
        message: str,
        member: Optional[str] = None,
        capability: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if member:
            details["member"] = member
        if capability:
            details["capability"] = capability

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class AuthenticationError(FabStockError):
    """Raised when a login email does not resolve to a team member"""

    def __init__(self, message: str, email: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if email:
            details["email"] = email

        super().__init__(
            message=message,
            code="AUTH_002",
            details=details,
            **kwargs,
        )


class AssistantError(FabStockError):
    """Raised when the AI structured extraction fails"""

    def __init__(self, message: str, model: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if model:
            details["model"] = model

        super().__init__(
            message=message,
            code="AI_001",
            details=details,
            **kwargs,
        )
