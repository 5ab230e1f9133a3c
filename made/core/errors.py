"""Error Hierarchy — typed, categorized exceptions for all ledger failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are recoverable; infrastructure errors are critical
    - to_response() produces the envelope handed to UI collaborators
    - A raised error inside a store cycle means nothing was persisted

Design Decisions:
    - Single hierarchy with MadeError base: callers catch one type and branch on code
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    AUTH = "auth"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    project_id: str | None = None
    contract_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class MadeError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING, ErrorSeverity.ERROR)

    def to_response(self) -> dict:
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "project_id": self.context.project_id,
                    "contract_id": self.context.contract_id,
                },
            }
        }


# ─── Domain Errors ──────────────────────────────────────────────

class NotFoundError(MadeError):
    """Referenced id is absent from its collection."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidTransitionError(MadeError):
    """Exchange action attempted from a disallowed state or by a disallowed actor."""
    def __init__(
        self,
        message: str,
        action: str,
        current_status: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context,
        )
        self.action = action
        self.current_status = current_status


class LedgerValidationError(MadeError):
    """Required input missing or malformed at the boundary."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )
        self.field = field


class InvalidInviteError(MadeError):
    """Invite code is not in the redemption set."""
    def __init__(self, code: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invite code '{code}' is not valid",
            "INVALID_INVITE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )
        self.invite_code = code


class DuplicateEntityError(MadeError):
    """An entity with the same id already exists in its collection."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "DUPLICATE_ENTITY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MessagingLockedError(MadeError):
    """Two users have no completed exchange between them yet."""
    def __init__(self, user_a: str, user_b: str, context: ErrorContext | None = None):
        super().__init__(
            f"Messaging between '{user_a}' and '{user_b}' requires a completed exchange",
            "MESSAGING_LOCKED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context,
        )


class OperatorAuthError(MadeError):
    """Operator credential missing or mismatched."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Operator authentication failed",
            "OPERATOR_AUTH_FAILED", ErrorCategory.AUTH,
            ErrorSeverity.WARNING, context,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class ConcurrencyError(MadeError):
    """Concurrent modification detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context,
        )


class DatabaseError(MadeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
