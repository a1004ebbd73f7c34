"""
Employees app services layer.
"""

from .exceptions import (
    EmployeesServiceError,
    UserNotFoundError,
    EmploymentNotFoundError,
    EmploymentExistsError,
    LeaveNotFoundError,
    InvalidLeaveError,
    ChargeNotFoundError,
    InvalidChargePaymentError,
    AlreadyTerminatedError,
    TerminationNotFoundError,
    InvalidSalaryPaymentError,
)

from .employment_management import (
    get_employment,
    list_employment,
    create_employment,
    update_employment,
    terminate_employee,
    get_termination,
    update_termination,
)

from .leave_management import (
    request_leave,
    list_leaves,
    review_leave,
)

from .charges import (
    list_charges,
    add_charge,
    update_charge_payment,
    delete_charge,
)

from .salary import (
    record_salary_payment,
    list_salary_payments,
)


__all__ = [
    # Exceptions
    'EmployeesServiceError',
    'UserNotFoundError',
    'EmploymentNotFoundError',
    'EmploymentExistsError',
    'LeaveNotFoundError',
    'InvalidLeaveError',
    'ChargeNotFoundError',
    'InvalidChargePaymentError',
    'AlreadyTerminatedError',
    'TerminationNotFoundError',
    'InvalidSalaryPaymentError',

    # Employment
    'get_employment',
    'list_employment',
    'create_employment',
    'update_employment',
    'terminate_employee',
    'get_termination',
    'update_termination',

    # Leaves
    'request_leave',
    'list_leaves',
    'review_leave',

    # Charges
    'list_charges',
    'add_charge',
    'update_charge_payment',
    'delete_charge',

    # Salary
    'record_salary_payment',
    'list_salary_payments',
]
