"""Error hierarchy for every failure the core reports to its callers.

Each error carries a machine-readable ``code``, a ``category`` and the HTTP
status the API layer answers with. Services raise these and never return
sentinel values; ``taskboard.api.error_handlers`` turns them into JSON.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """High-level error categories used by the API envelope."""
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    EXTERNAL = "external"
    INTERNAL = "internal"


class TaskboardError(Exception):
    """Base exception for all Taskboard errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "timestamp": self.timestamp.isoformat(),
                "details": self.details,
            }
        }


class NotFoundError(TaskboardError):
    """Requested entity does not exist."""
    def __init__(self, resource_type: str, resource_id: Any = None, message: Optional[str] = None):
        if message is None:
            message = (
                f"{resource_type} '{resource_id}' not found"
                if resource_id is not None
                else f"{resource_type} not found"
            )
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.NOT_FOUND, 404,
            {"resource_type": resource_type},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(TaskboardError):
    """Caller lacks the membership or role the operation needs."""
    def __init__(self, message: str = "Not enough permissions"):
        super().__init__(message, "FORBIDDEN", ErrorCategory.FORBIDDEN, 403)


class ConflictError(TaskboardError):
    """Duplicate invitation, membership or email."""
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", ErrorCategory.CONFLICT, 409)


class InvalidAssigneeError(TaskboardError):
    """Assignee is not an active member of the task's project."""
    def __init__(self, assignee_id: Any):
        super().__init__(
            "The selected user is not an active member of this project",
            "INVALID_ASSIGNEE", ErrorCategory.VALIDATION, 400,
            {"assignee_id": str(assignee_id)},
        )
        self.assignee_id = assignee_id


class UnauthorizedError(TaskboardError):
    """Project-access token is missing, invalid, expired or of the wrong type."""
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, "UNAUTHORIZED", ErrorCategory.UNAUTHORIZED, 401)


class InternalError(TaskboardError):
    """Unexpected store failure or broken post-write consistency check."""
    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL, 500,
            {"operation": operation} if operation else None,
        )
        self.operation = operation


class EmailTransportError(TaskboardError):
    """Outbound mail could not be handed to the transport."""
    def __init__(self, message: str, recipient: Optional[str] = None):
        super().__init__(
            f"Email delivery failed: {message}",
            "EMAIL_TRANSPORT_ERROR", ErrorCategory.EXTERNAL, 502,
            {"recipient": recipient} if recipient else None,
        )
        self.recipient = recipient
