"""
Domain-specific exceptions for organisation app.
"""

from config.api import ErrorCode


class OrganisationServiceError(Exception):
    """Base exception for organisation service errors."""
    code = ErrorCode.BAD_REQUEST


class InvalidTaxRateError(OrganisationServiceError):
    """Raised when a tax rate falls outside 0..100."""
    code = ErrorCode.VALIDATION_ERROR


class InvalidExchangeRateError(OrganisationServiceError):
    """Raised for identical currencies, bad codes or a non-positive rate."""
    code = ErrorCode.VALIDATION_ERROR
