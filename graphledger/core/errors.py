"""Error Hierarchy: typed, categorized exceptions for every Graph Ledger failure mode.

Invariants:
    - Every error has a code, an ErrorCategory, an ErrorSeverity and an HTTP status
    - Domain errors (4xx) are raised before any write; DatabaseError (503) is raised
      after the transaction was rolled back
    - to_response() produces the REST envelope and leaks no internals

Design Decisions:
    - Subclasses declare code/category/severity/http_status as class attributes and
      only build their message; one FastAPI handler renders them all
    - ErrorContext carries observability fields without touching the logging setup
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PERMISSION = "permission"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    model_id: str | None = None
    request_id: str | None = None
    debug_info: dict[str, Any] | None = None


class GraphLedgerError(Exception):
    """Base exception: carries everything the HTTP layer needs to answer."""

    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        category: ErrorCategory | None = None,
        severity: ErrorSeverity | None = None,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.category = category or self.category
        self.severity = severity or self.severity
        self.http_status = http_status or self.http_status
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "user_id": ctx.user_id,
                    "model_id": ctx.model_id,
                    "request_id": ctx.request_id,
                },
            }
        }


# ─── Domain Errors (4xx) ────────────────────────────────────────

class BadRequestError(GraphLedgerError):
    """Malformed graph or edge reference, invalid sweep bounds, unknown node."""
    code = "BAD_REQUEST"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(
        self, message: str, code: str = "BAD_REQUEST",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code=code, context=context)


class NoPathFoundError(BadRequestError):
    def __init__(self, start: str, goal: str, context: ErrorContext | None = None):
        super().__init__(
            f"No path found from '{start}' to '{goal}'", "NO_PATH_FOUND", context,
        )
        self.start = start
        self.goal = goal


class InvalidAmountError(GraphLedgerError):
    """Token amount is non-finite, negative or (where required) not positive."""
    code = "INVALID_AMOUNT"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, context=context)


class InsufficientTokensError(GraphLedgerError):
    code = "INSUFFICIENT_TOKENS"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 402

    def __init__(
        self, required: object, available: object,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Insufficient tokens: {required} required, {available} available",
            context=context,
        )
        self.required = required
        self.available = available


class ResourceNotFoundError(GraphLedgerError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context=context)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(GraphLedgerError):
    """Caller lacks the role or ownership the operation requires."""
    code = "FORBIDDEN"
    category = ErrorCategory.PERMISSION
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, context=context)


class ConflictError(GraphLedgerError):
    """Concurrent modification, duplicate key, or a one-time transition already taken."""
    code = "CONFLICT"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, context=context)


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class DatabaseError(GraphLedgerError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context=context)
        self.operation = operation
