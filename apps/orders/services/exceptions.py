"""
Domain-specific exceptions for orders app.

These exceptions represent business rule violations and should be
caught in views and converted to envelope responses via their ``code``.
"""

from config.api import ErrorCode


class OrdersServiceError(Exception):
    """Base exception for all order service errors."""
    code = ErrorCode.BAD_REQUEST


class OrderNotFoundError(OrdersServiceError):
    code = ErrorCode.NOT_FOUND


class CustomerNotFoundError(OrdersServiceError):
    code = ErrorCode.NOT_FOUND


class OrderLineNotFoundError(OrdersServiceError):
    code = ErrorCode.NOT_FOUND


class InvalidOrderError(OrdersServiceError):
    """Raised for bad order input, stock shortages and rejected discounts."""
    code = ErrorCode.VALIDATION_ERROR


class InvalidOrderStateError(OrdersServiceError):
    """Raised when an operation is not allowed in the order's current status."""
    code = ErrorCode.VALIDATION_ERROR


class DiscountNotFoundError(OrdersServiceError):
    code = ErrorCode.NOT_FOUND


class PaymentError(OrdersServiceError):
    """Raised when a payment amount is rejected."""
    code = ErrorCode.VALIDATION_ERROR
