"""
Employment records and terminations.
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.employees.models import (
    EmploymentData,
    EmploymentStatus,
    EmployeeTermination,
)

from .exceptions import (
    UserNotFoundError,
    EmploymentNotFoundError,
    EmploymentExistsError,
    AlreadyTerminatedError,
    TerminationNotFoundError,
)

logger = logging.getLogger(__name__)


def get_employment(*, user_id) -> EmploymentData:
    """
    Raises:
        EmploymentNotFoundError: If the user has no employment record
    """
    employment = (
        EmploymentData.objects
        .select_related('user', 'reports_to')
        .filter(user_id=user_id)
        .first()
    )
    if employment is None:
        raise EmploymentNotFoundError(f"No employment record for user {user_id}")
    return employment


def list_employment(*, status: Optional[str] = None, department: Optional[str] = None) -> QuerySet:
    queryset = EmploymentData.objects.select_related('user', 'reports_to')
    if status:
        queryset = queryset.filter(employment_status=status)
    if department:
        queryset = queryset.filter(department__iexact=department)
    return queryset


@transaction.atomic
def create_employment(*, user_id, **fields) -> EmploymentData:
    """
    Create the employment record for a user.

    Raises:
        UserNotFoundError: If user doesn't exist
        EmploymentExistsError: If the user already has employment data
    """
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")
    if EmploymentData.objects.filter(user=user).exists():
        raise EmploymentExistsError(f"Employment data already exists for user {user_id}")

    employment = EmploymentData.objects.create(user=user, **fields)
    logger.info("Created employment record for %s", user.email)
    return employment


@transaction.atomic
def update_employment(*, user_id, **fields) -> EmploymentData:
    employment = get_employment(user_id=user_id)
    for name, value in fields.items():
        setattr(employment, name, value)
    employment.save()
    return employment


@transaction.atomic
def terminate_employee(
    *,
    user_id,
    termination_date,
    reason: str,
    details: str = '',
    final_settlement=None,
    notes: str = ''
) -> EmployeeTermination:
    """
    Terminate an employee.

    Creates the termination with a pending settlement and copies date,
    reason and notes onto the employment record.

    Raises:
        EmploymentNotFoundError: If the user has no employment record
        AlreadyTerminatedError: If the employee is already terminated
    """
    employment = get_employment(user_id=user_id)
    if (
        employment.employment_status == EmploymentStatus.TERMINATED
        or EmployeeTermination.objects.filter(employment=employment).exists()
    ):
        raise AlreadyTerminatedError(f"Employee {user_id} is already terminated")

    termination = EmployeeTermination.objects.create(
        employment=employment,
        termination_date=termination_date,
        reason=reason,
        details=details,
        final_settlement=final_settlement or 0,
        notes=notes
    )

    employment.employment_status = EmploymentStatus.TERMINATED
    employment.termination_date = termination_date
    employment.termination_reason = reason
    employment.termination_notes = notes or details
    employment.save()

    logger.info("Terminated employee %s on %s", employment.user.email, termination_date)
    return termination


def get_termination(*, user_id) -> Optional[EmployeeTermination]:
    """Termination of the employee, or None while they are not terminated."""
    employment = get_employment(user_id=user_id)
    return EmployeeTermination.objects.filter(employment=employment).first()


@transaction.atomic
def update_termination(
    *,
    user_id,
    settlement_status: Optional[str] = None,
    settlement_date=None,
    final_settlement=None,
    notes: Optional[str] = None
) -> EmployeeTermination:
    """
    Update settlement fields of a termination.

    Raises:
        TerminationNotFoundError: If the employee was never terminated
    """
    termination = get_termination(user_id=user_id)
    if termination is None:
        raise TerminationNotFoundError(f"No termination record for user {user_id}")

    if settlement_status is not None:
        termination.settlement_status = settlement_status
    if settlement_date is not None:
        termination.settlement_date = settlement_date
    if final_settlement is not None:
        termination.final_settlement = final_settlement
    if notes is not None:
        termination.notes = notes
    termination.save()

    logger.info("Termination of %s updated: settlement %s", user_id, termination.settlement_status)
    return termination
