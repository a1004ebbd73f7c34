"""
Domain-specific exceptions for employees app.
"""

from config.api import ErrorCode


class EmployeesServiceError(Exception):
    """Base exception for all employee service errors."""
    code = ErrorCode.BAD_REQUEST


class UserNotFoundError(EmployeesServiceError):
    code = ErrorCode.NOT_FOUND


class EmploymentNotFoundError(EmployeesServiceError):
    code = ErrorCode.NOT_FOUND


class EmploymentExistsError(EmployeesServiceError):
    """Raised when creating employment data for a user that already has it."""
    code = ErrorCode.CONFLICT


class LeaveNotFoundError(EmployeesServiceError):
    code = ErrorCode.NOT_FOUND


class InvalidLeaveError(EmployeesServiceError):
    """Raised for bad leave dates or an invalid review."""
    code = ErrorCode.VALIDATION_ERROR


class ChargeNotFoundError(EmployeesServiceError):
    code = ErrorCode.NOT_FOUND


class InvalidChargePaymentError(EmployeesServiceError):
    """Raised when a paid amount is outside 0..amount."""
    code = ErrorCode.BAD_REQUEST


class AlreadyTerminatedError(EmployeesServiceError):
    code = ErrorCode.CONFLICT


class TerminationNotFoundError(EmployeesServiceError):
    code = ErrorCode.NOT_FOUND


class InvalidSalaryPaymentError(EmployeesServiceError):
    code = ErrorCode.VALIDATION_ERROR
