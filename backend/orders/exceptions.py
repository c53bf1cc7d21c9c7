"""
Custom exceptions for order assembly.

Every exception here is user-presentable: it carries a stable ``code`` that
clients can switch on, a human readable message, and the HTTP status the API
layer should answer with. Anything that is not an ``OrderAssemblyError`` is
treated as an internal failure by ``core_backend.exceptions``.
"""


class OrderAssemblyError(Exception):
    """Base exception for order assembly failures."""

    code = "ORDER_ERROR"
    status_code = 400
    default_message = "The order could not be created."

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        payload = {
            "success": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ItemNotFoundError(OrderAssemblyError):
    """Raised when a menu item or addon is missing or soft-deleted."""

    code = "ITEM_NOT_FOUND"

    def __init__(self, item_id, kind="menu", message=None):
        self.item_id = item_id
        self.kind = kind
        if message is None:
            label = "Addon" if kind == "addon" else "Menu item"
            message = f"{label} {item_id} was not found"
        super().__init__(message, details={"itemId": str(item_id), "kind": kind})


class ItemUnavailableError(OrderAssemblyError):
    """Raised when an item exists but cannot currently be ordered."""

    code = "ITEM_UNAVAILABLE"

    def __init__(self, item_name, message=None):
        self.item_name = item_name
        if message is None:
            message = f"'{item_name}' is currently unavailable"
        super().__init__(message, details={"item": item_name})


class InsufficientStockError(OrderAssemblyError):
    """
    Raised when stock cannot cover the requested quantity.

    Raised both by the read-time pre-check and by the write-time conditional
    decrement; callers cannot tell the two apart.
    """

    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_name, message=None):
        self.item_name = item_name
        if message is None:
            message = f"Insufficient stock for '{item_name}'"
        super().__init__(message, details={"item": item_name})


class InvalidOrderTypeError(OrderAssemblyError):
    code = "INVALID_ORDER_TYPE"

    def __init__(self, order_type, message=None):
        self.order_type = order_type
        if message is None:
            message = f"Order type '{order_type}' is not available"
        super().__init__(message)


class InvalidQuantityError(OrderAssemblyError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity, message=None):
        self.quantity = quantity
        if message is None:
            message = f"Quantity must be a positive whole number (got {quantity})"
        super().__init__(message)


class EmptyCartError(OrderAssemblyError):
    code = "EMPTY_CART"
    default_message = "The order has no items."


class TableNumberRequiredError(OrderAssemblyError):
    code = "TABLE_NUMBER_REQUIRED"
    default_message = "A table number is required for dine-in orders."


class StoreClosedError(OrderAssemblyError):
    code = "STORE_CLOSED"
    default_message = "The store is closed at the requested time."


class ModeUnavailableError(OrderAssemblyError):
    code = "MODE_UNAVAILABLE"
    default_message = "The requested order type is unavailable at the requested time."


class MerchantNotFoundError(OrderAssemblyError):
    code = "MERCHANT_NOT_FOUND"
    status_code = 404
    default_message = "Merchant not found."


class OrderNotFoundError(OrderAssemblyError):
    code = "ORDER_NOT_FOUND"
    status_code = 404
    default_message = "Order not found."


# ============================================================================
# RESERVATION PRECONDITIONS
# ============================================================================

class ReservationNotFoundError(OrderAssemblyError):
    code = "RESERVATION_NOT_FOUND"
    status_code = 404
    default_message = "Reservation not found."


class ReservationNotPendingError(OrderAssemblyError):
    code = "RESERVATION_NOT_PENDING"
    default_message = "Reservation is not pending."


class ReservationTimePastError(OrderAssemblyError):
    code = "RESERVATION_TIME_PAST"
    default_message = "Reservation time is in the past."


# ============================================================================
# GROUP ORDER PRECONDITIONS
# ============================================================================

class SessionNotFoundError(OrderAssemblyError):
    code = "SESSION_NOT_FOUND"
    status_code = 404
    default_message = "Group order session not found."


class SessionNotOpenError(OrderAssemblyError):
    code = "SESSION_NOT_OPEN"
    default_message = "Group order session is no longer open."


class NotHostError(OrderAssemblyError):
    code = "NOT_HOST"
    status_code = 403
    default_message = "Only the host can submit the group order."


class NotEnoughParticipantsError(OrderAssemblyError):
    code = "NOT_ENOUGH_PARTICIPANTS"
    default_message = "A group order needs at least two participants."


class CustomerInfoRequiredError(OrderAssemblyError):
    code = "CUSTOMER_REQUIRED"
    default_message = "Customer name and an email or phone number are required."
