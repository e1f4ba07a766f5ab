"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Every error carries a closed ``ErrorCode`` so callers can branch on the
exact failure without matching message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PARTIAL_FAILURE = "partial_failure"
    INFRASTRUCTURE = "infrastructure"


class ErrorCode(str, Enum):
    # Input
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATUS = "INVALID_STATUS"

    # Roles and ownership
    NOT_GIVER = "NOT_GIVER"
    NOT_SELLER = "NOT_SELLER"
    NO_SHOP_OWNED = "NO_SHOP_OWNED"
    NOT_SELLER_OR_OWNER = "NOT_SELLER_OR_OWNER"
    CATEGORY_NOT_OWNED = "CATEGORY_NOT_OWNED"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Lookups
    OFFER_NOT_FOUND = "OFFER_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"

    # State machine and stock
    OFFER_STATUS = "OFFER_STATUS"
    INVALID_OFFER_STATE = "INVALID_OFFER_STATE"
    INVALID_ORDER_ITEM = "INVALID_ORDER_ITEM"
    MULTI_SHOP_UNSUPPORTED = "MULTI_SHOP_UNSUPPORTED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    RECEIPT_ALREADY_SET = "RECEIPT_ALREADY_SET"
    ITEM_STATUS = "ITEM_STATUS"
    SHOP_EXISTS = "SHOP_EXISTS"
    CATEGORY_EXISTS = "CATEGORY_EXISTS"

    # Partial success
    DRAFT_ITEM_FAILED = "DRAFT_ITEM_FAILED"

    # Persistence
    DATABASE = "DATABASE"
    LOG_STORE = "LOG_STORE"


class DomainException(Exception):
    """Base class for all domain errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION
    default_code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class ValidationError(DomainException):
    """Malformed or out-of-range input. Nothing was changed."""

    category = ErrorCategory.VALIDATION
    default_code = ErrorCode.INVALID_INPUT


class AuthorizationError(DomainException):
    """The caller's role or ownership does not permit the operation."""

    category = ErrorCategory.AUTHORIZATION
    default_code = ErrorCode.UNAUTHORIZED


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    category = ErrorCategory.NOT_FOUND
    default_code = ErrorCode.ITEM_NOT_FOUND


class ConflictError(DomainException):
    """The entity is in the wrong state for the requested transition."""

    category = ErrorCategory.CONFLICT
    default_code = ErrorCode.INVALID_TRANSITION


class PartialFailureError(DomainException):
    """A mutation committed but a dependent side effect failed.

    ``committed`` holds the entity that *was* persisted so the caller can
    reconcile instead of assuming full success or full failure.
    """

    category = ErrorCategory.PARTIAL_FAILURE
    default_code = ErrorCode.DRAFT_ITEM_FAILED

    def __init__(
        self,
        message: str,
        committed: Any,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code)
        self.committed = committed


class InfrastructureError(DomainException):
    """The persistence layer failed. Details are logged, not exposed."""

    category = ErrorCategory.INFRASTRUCTURE
    default_code = ErrorCode.DATABASE
