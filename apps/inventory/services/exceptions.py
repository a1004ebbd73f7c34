"""
Domain-specific exceptions for inventory app.

These exceptions represent business rule violations and should be
caught in views and converted to envelope responses via their ``code``.
"""

from config.api import ErrorCode


class InventoryServiceError(Exception):
    """Base exception for all inventory service errors."""
    code = ErrorCode.BAD_REQUEST


class InventoryItemNotFoundError(InventoryServiceError):
    """Raised when an inventory item does not exist."""
    code = ErrorCode.NOT_FOUND


class InsufficientStockError(InventoryServiceError):
    """Raised when a department holds less stock than requested."""
    code = ErrorCode.VALIDATION_ERROR


class InvalidTransferError(InventoryServiceError):
    """Raised when a transfer request fails input validation."""
    code = ErrorCode.VALIDATION_ERROR


class TransferNotFoundError(InventoryServiceError):
    """Raised when a transfer does not exist."""
    code = ErrorCode.NOT_FOUND


class InvalidTransferStateError(InventoryServiceError):
    """Raised when approving or rejecting a transfer that is no longer open."""
    code = ErrorCode.CONFLICT


class MissingTransferInputError(InvalidTransferError):
    """Raised when the destination or the item list is missing."""
    code = ErrorCode.INVALID_INPUT
