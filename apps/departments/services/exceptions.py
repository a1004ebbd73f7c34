"""
Domain-specific exceptions for departments app.

These exceptions represent business rule violations and should be
caught in views and converted to envelope responses via their ``code``.
"""

from config.api import ErrorCode


class DepartmentsServiceError(Exception):
    """Base exception for all departments service errors."""
    code = ErrorCode.BAD_REQUEST


class DepartmentNotFoundError(DepartmentsServiceError):
    """Raised when a department code does not resolve."""
    code = ErrorCode.NOT_FOUND


class SectionNotFoundError(DepartmentsServiceError):
    """Raised when a section slug or id does not resolve to an active section."""
    code = ErrorCode.NOT_FOUND


class DuplicateDepartmentError(DepartmentsServiceError):
    """Raised when creating a department with a code already in use."""
    code = ErrorCode.DUPLICATE_ENTRY


class DuplicateSectionError(DepartmentsServiceError):
    """Raised when a section slug already exists in the department."""
    code = ErrorCode.DUPLICATE_ENTRY
