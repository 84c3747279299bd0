"""
Common Error Constants and Cart Exceptions

Centralized error messages plus the exception kinds raised by the cart core.
The HTTP layer maps each kind to a status code; nothing in core knows about HTTP.
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"

# Cart errors
ERROR_CART_NOT_FOUND = "Cart with id {cart_id} was not found"
ERROR_CART_RECOVERY_FAILED = "Cart {cart_id} could not be recovered"
ERROR_ITEM_NOT_FOUND = "Item with sku {sku} was not found in cart"

# Session errors
ERROR_SESSION_MISSING = "Session {session_id} is missing"
ERROR_SESSION_EXPIRED = "Session {session_id} has expired"

# Validation errors
ERROR_INVALID_SKU = "sku must be a non-empty string"
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"

# Generic errors
ERROR_INTERNAL = "Internal server error"


class CartError(Exception):
    """Base class for every error the cart core raises on purpose."""


class ValidationError(CartError, ValueError):
    """Input rejected before any store is touched."""


class UnauthorizedError(CartError):
    def __init__(self, message: str = ERROR_UNAUTHORIZED):
        super().__init__(message)


class CartNotFound(CartError):
    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        super().__init__(ERROR_CART_NOT_FOUND.format(cart_id=cart_id))


class ItemNotFound(CartError):
    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(ERROR_ITEM_NOT_FOUND.format(sku=sku))


class CartRecoveryFailed(CartError):
    """Terminal: the session layer rejected even a freshly created session."""

    def __init__(self, cart_id: str, message: str | None = None):
        self.cart_id = cart_id
        super().__init__(message or ERROR_CART_RECOVERY_FAILED.format(cart_id=cart_id))


class SessionFailure(CartError):
    """Session is gone. Never surfaced to callers of the orchestrator."""

    message_template = ERROR_SESSION_MISSING

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(self.message_template.format(session_id=session_id))


class SessionMissing(SessionFailure):
    message_template = ERROR_SESSION_MISSING


class SessionExpired(SessionFailure):
    message_template = ERROR_SESSION_EXPIRED


__all__ = [
    "ERROR_UNAUTHORIZED",
    "ERROR_CART_NOT_FOUND",
    "ERROR_CART_RECOVERY_FAILED",
    "ERROR_ITEM_NOT_FOUND",
    "ERROR_SESSION_MISSING",
    "ERROR_SESSION_EXPIRED",
    "ERROR_INVALID_SKU",
    "ERROR_INVALID_QUANTITY",
    "ERROR_INTERNAL",
    "CartError",
    "ValidationError",
    "UnauthorizedError",
    "CartNotFound",
    "ItemNotFound",
    "CartRecoveryFailed",
    "SessionFailure",
    "SessionMissing",
    "SessionExpired",
]
