"""
Domain-specific exceptions for discounts app.
"""

from config.api import ErrorCode


class DiscountsServiceError(Exception):
    """Base exception for all discount service errors."""
    code = ErrorCode.BAD_REQUEST


class DiscountRuleNotFoundError(DiscountsServiceError):
    code = ErrorCode.NOT_FOUND


class DuplicateDiscountCodeError(DiscountsServiceError):
    code = ErrorCode.DUPLICATE_ENTRY


class InvalidDiscountError(DiscountsServiceError):
    """Raised when a discount code cannot be used; the message says why."""
    code = ErrorCode.VALIDATION_ERROR


class EmploymentNotFoundError(DiscountsServiceError):
    """Raised when an employee discount is requested for a non-employee."""
    code = ErrorCode.NOT_FOUND
