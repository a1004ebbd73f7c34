"""
Domain exceptions for housekeeping app.
"""
from config.api import ErrorCode


class HousekeepingError(Exception):
    """Base exception for housekeeping errors."""
    code = ErrorCode.BAD_REQUEST


class CleaningTaskNotFoundError(HousekeepingError):
    """Raised when a cleaning task does not exist."""
    code = ErrorCode.NOT_FOUND


class AssigneeNotFoundError(HousekeepingError):
    """Raised when assigning a task to an unknown or inactive user."""
    code = ErrorCode.NOT_FOUND


class InvalidTaskStateError(HousekeepingError):
    """Raised when a task is not in a status that allows the operation."""
    code = ErrorCode.VALIDATION_ERROR
