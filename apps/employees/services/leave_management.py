"""
Leave requests and reviews.
"""

import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.employees.models import EmployeeLeave, LeaveStatus

from .employment_management import get_employment
from .exceptions import InvalidLeaveError, LeaveNotFoundError

logger = logging.getLogger(__name__)

REVIEW_STATUSES = (LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED)


@transaction.atomic
def request_leave(
    *,
    user_id,
    leave_type: str,
    start_date,
    end_date,
    number_of_days: Optional[int] = None,
    reason: str = '',
    notes: str = ''
) -> EmployeeLeave:
    """
    Record a leave request.

    ``number_of_days`` defaults to the inclusive span between the dates.

    Raises:
        EmploymentNotFoundError: If the user has no employment record
        InvalidLeaveError: If end_date precedes start_date or days < 1
    """
    employment = get_employment(user_id=user_id)
    if end_date < start_date:
        raise InvalidLeaveError('End date must be on or after start date')

    if number_of_days is None:
        number_of_days = (end_date - start_date).days + 1
    if number_of_days < 1:
        raise InvalidLeaveError('Number of days must be greater than zero')

    leave = EmployeeLeave.objects.create(
        employment=employment,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        number_of_days=number_of_days,
        reason=reason,
        notes=notes
    )
    logger.info("Leave requested by %s: %s to %s", employment.user.email, start_date, end_date)
    return leave


def list_leaves(*, user_id=None, status: Optional[str] = None) -> QuerySet:
    queryset = EmployeeLeave.objects.select_related('employment__user', 'approved_by')
    if user_id:
        queryset = queryset.filter(employment__user_id=user_id)
    if status:
        queryset = queryset.filter(status=status)
    return queryset


@transaction.atomic
def review_leave(
    *,
    leave_id,
    status: str,
    reviewer: User,
    notes: Optional[str] = None
) -> EmployeeLeave:
    """
    Approve, reject or cancel a leave request.

    Raises:
        LeaveNotFoundError: If leave doesn't exist
        InvalidLeaveError: If status is not a review outcome or the leave
            was already reviewed
    """
    try:
        leave = EmployeeLeave.objects.select_for_update().get(id=leave_id)
    except (EmployeeLeave.DoesNotExist, ValidationError):
        raise LeaveNotFoundError(f"Leave {leave_id} not found")

    if status not in REVIEW_STATUSES:
        raise InvalidLeaveError(f"Invalid review status: {status}")
    if leave.status != LeaveStatus.PENDING:
        raise InvalidLeaveError(f"Leave is already {leave.status}")

    leave.status = status
    if status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        leave.approved_by = reviewer
        leave.approval_date = timezone.now()
    if notes is not None:
        leave.notes = notes
    leave.save()

    logger.info("Leave %s %s by %s", leave.id, status, reviewer.email)
    return leave
