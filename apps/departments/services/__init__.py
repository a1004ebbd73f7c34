"""
Departments app services layer.

Services contain business logic and orchestrate operations across models.
"""

from .exceptions import (
    DepartmentsServiceError,
    DepartmentNotFoundError,
    SectionNotFoundError,
    DuplicateDepartmentError,
    DuplicateSectionError,
)

from .department_management import (
    split_department_code,
    get_department,
    get_section,
    resolve_department_code,
    list_departments,
    create_department,
    update_department,
    deactivate_department,
    list_sections,
    create_section,
)


__all__ = [
    # Exceptions
    'DepartmentsServiceError',
    'DepartmentNotFoundError',
    'SectionNotFoundError',
    'DuplicateDepartmentError',
    'DuplicateSectionError',

    # Department Management
    'split_department_code',
    'get_department',
    'get_section',
    'resolve_department_code',
    'list_departments',
    'create_department',
    'update_department',
    'deactivate_department',
    'list_sections',
    'create_section',
]
