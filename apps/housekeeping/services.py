"""
Housekeeping Services Module
============================

Business logic for cleaning tasks: creation, assignment, the work log and
the inspection that closes a task.

Task lifecycle::

    PENDING -> IN_PROGRESS -> COMPLETED -> INSPECTED
                                       -> REJECTED -> IN_PROGRESS

A rejected task is started again by the cleaner.

Example:
    Turning over a room::

        from apps.housekeeping.services import CleaningService

        task = CleaningService.create_task(unit_number='204', task_type='turnover')
        CleaningService.assign_task(task_id=task.id, assigned_to_id=cleaner.id)
        CleaningService.start_task(task_id=task.id, user=cleaner)
        CleaningService.log_item(task_id=task.id, item_type='bathroom', status='done', user=cleaner)
        CleaningService.complete_task(task_id=task.id)
        CleaningService.inspect_task(task_id=task.id, approved=True, user=supervisor)
"""

import logging
import math
import uuid
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Case, When, IntegerField
from django.utils import timezone

from apps.accounts.models import User
from apps.departments.services import get_department, split_department_code
from .exceptions import (
    CleaningTaskNotFoundError,
    AssigneeNotFoundError,
    InvalidTaskStateError,
)
from .models import (
    CleaningTask,
    CleaningLog,
    CleaningTaskStatus,
    CleaningPriority,
)

logger = logging.getLogger(__name__)

STARTABLE_STATUSES = (CleaningTaskStatus.PENDING, CleaningTaskStatus.REJECTED)
OPEN_STATUSES = (CleaningTaskStatus.PENDING, CleaningTaskStatus.IN_PROGRESS)

PRIORITY_RANK = Case(
    When(priority=CleaningPriority.URGENT, then=0),
    When(priority=CleaningPriority.HIGH, then=1),
    When(priority=CleaningPriority.NORMAL, then=2),
    default=3,
    output_field=IntegerField(),
)


def generate_task_number():
    """``CLN-<yyyymmdd>-<4 upper-case hex>``"""
    return f"CLN-{timezone.localdate():%Y%m%d}-{uuid.uuid4().hex[:4].upper()}"


class CleaningService:
    """
    Cleaning task operations.

    Every method takes keyword arguments and raises a ``HousekeepingError``
    subclass on a rule violation.
    """

    @staticmethod
    def get_task(task_id):
        try:
            return (
                CleaningTask.objects
                .select_related('department', 'assigned_to', 'inspected_by')
                .get(id=task_id)
            )
        except (CleaningTask.DoesNotExist, ValidationError):
            raise CleaningTaskNotFoundError('Cleaning task not found')

    @staticmethod
    def _lock(task_id):
        try:
            return CleaningTask.objects.select_for_update().get(id=task_id)
        except (CleaningTask.DoesNotExist, ValidationError):
            raise CleaningTaskNotFoundError('Cleaning task not found')

    @staticmethod
    @transaction.atomic
    def create_task(
        *,
        unit_number,
        task_type,
        priority=CleaningPriority.NORMAL,
        notes='',
        department_code=None,
        user=None
    ):
        """
        Create a pending cleaning task.

        Args:
            unit_number (str): Room or unit to clean.
            task_type (str): One of CleaningTaskType.
            priority (str, optional): One of CleaningPriority. Defaults to normal.
            notes (str, optional): Free text.
            department_code (str, optional): Owning department, ``DEPT`` or
                ``DEPT:section`` (the section part is ignored).
            user (User, optional): Who created the task, for the log line.

        Returns:
            CleaningTask: The created task.

        Raises:
            DepartmentNotFoundError: If ``department_code`` doesn't resolve.
        """
        department = None
        if department_code:
            department = get_department(split_department_code(department_code)[0])

        task = CleaningTask.objects.create(
            task_number=generate_task_number(),
            unit_number=unit_number,
            task_type=task_type,
            priority=priority or CleaningPriority.NORMAL,
            department=department,
            notes=notes,
            status=CleaningTaskStatus.PENDING
        )
        logger.info(
            "Cleaning task %s created for unit %s by %s",
            task.task_number, unit_number, user.email if user else 'system'
        )
        return task

    @staticmethod
    @transaction.atomic
    def assign_task(*, task_id, assigned_to_id):
        """
        Assign a task to a staff member.

        Raises:
            CleaningTaskNotFoundError: If task doesn't exist.
            AssigneeNotFoundError: If the user doesn't exist or is inactive.
            InvalidTaskStateError: If the task was already inspected.
        """
        task = CleaningService._lock(task_id)
        if task.status == CleaningTaskStatus.INSPECTED:
            raise InvalidTaskStateError('Cannot reassign an inspected task')

        try:
            assignee = User.objects.get(id=assigned_to_id, is_active=True)
        except (User.DoesNotExist, ValidationError):
            raise AssigneeNotFoundError('Assignee not found')

        task.assigned_to = assignee
        task.save(update_fields=['assigned_to', 'updated_at'])
        logger.info("Cleaning task %s assigned to %s", task.task_number, assignee.email)
        return task

    @staticmethod
    @transaction.atomic
    def start_task(*, task_id, user=None):
        """
        Start work on a pending or rejected task.

        An unassigned task is assigned to the user starting it.

        Raises:
            CleaningTaskNotFoundError: If task doesn't exist.
            InvalidTaskStateError: If the task is not pending or rejected.
        """
        task = CleaningService._lock(task_id)
        if task.status not in STARTABLE_STATUSES:
            raise InvalidTaskStateError(f"Cannot start a task that is {task.status}")

        task.status = CleaningTaskStatus.IN_PROGRESS
        task.started_at = timezone.now()
        if task.assigned_to_id is None and user is not None:
            task.assigned_to = user
        task.save(update_fields=['status', 'started_at', 'assigned_to', 'updated_at'])
        logger.info("Cleaning task %s started", task.task_number)
        return task

    @staticmethod
    def log_item(*, task_id, item_type, status, notes='', photo_url='', user=None):
        """Record one checklist item of a task."""
        task = CleaningService.get_task(task_id)
        return CleaningLog.objects.create(
            task=task,
            item_type=item_type,
            status=status,
            notes=notes,
            photo_url=photo_url,
            logged_by=user
        )

    @staticmethod
    @transaction.atomic
    def complete_task(*, task_id, notes=''):
        """
        Mark an in-progress task completed and ready for inspection.

        Raises:
            CleaningTaskNotFoundError: If task doesn't exist.
            InvalidTaskStateError: If the task is not in progress.
        """
        task = CleaningService._lock(task_id)
        if task.status != CleaningTaskStatus.IN_PROGRESS:
            raise InvalidTaskStateError(f"Cannot complete a task that is {task.status}")

        task.status = CleaningTaskStatus.COMPLETED
        task.completed_at = timezone.now()
        if notes:
            task.notes = notes
        task.save(update_fields=['status', 'completed_at', 'notes', 'updated_at'])
        logger.info("Cleaning task %s completed", task.task_number)
        return task

    @staticmethod
    @transaction.atomic
    def inspect_task(*, task_id, approved, notes='', user=None):
        """
        Inspect a completed task.

        Approval closes the task as inspected. A rejected task goes back to
        the cleaner, who starts it again.

        Raises:
            CleaningTaskNotFoundError: If task doesn't exist.
            InvalidTaskStateError: If the task is not completed.
        """
        task = CleaningService._lock(task_id)
        if task.status != CleaningTaskStatus.COMPLETED:
            raise InvalidTaskStateError(f"Only completed tasks can be inspected (task is {task.status})")

        task.status = CleaningTaskStatus.INSPECTED if approved else CleaningTaskStatus.REJECTED
        task.inspected_at = timezone.now()
        task.inspected_by = user
        if notes:
            task.notes = notes
        task.save(update_fields=['status', 'inspected_at', 'inspected_by', 'notes', 'updated_at'])

        if approved:
            logger.info("Cleaning task %s passed inspection", task.task_number)
        else:
            logger.warning("Cleaning task %s rejected at inspection", task.task_number)
        return task

    @staticmethod
    def get_pending_tasks(department_code=None):
        """Pending and in-progress tasks, urgent first, then oldest."""
        queryset = (
            CleaningTask.objects
            .filter(status__in=OPEN_STATUSES)
            .select_related('department', 'assigned_to')
            .annotate(priority_rank=PRIORITY_RANK)
            .order_by('priority_rank', 'created_at')
        )
        if department_code:
            queryset = queryset.filter(department__code=split_department_code(department_code)[0])
        return queryset

    @staticmethod
    def get_tasks_by_unit(unit_number):
        """Cleaning history of a unit, newest first, with logs."""
        return (
            CleaningTask.objects
            .filter(unit_number=unit_number)
            .select_related('assigned_to', 'inspected_by')
            .prefetch_related('logs')
            .order_by('-created_at')
        )

    @staticmethod
    def get_average_turnaround_hours(days_back=30):
        """
        Average start-to-completion time in whole hours.

        Only inspected tasks completed in the last ``days_back`` days with
        both timestamps count. Returns 0 when there are none.
        """
        since = timezone.now() - timedelta(days=days_back)
        durations = [
            (completed_at - started_at).total_seconds() / 3600
            for started_at, completed_at in (
                CleaningTask.objects
                .filter(
                    status=CleaningTaskStatus.INSPECTED,
                    completed_at__gte=since,
                    started_at__isnull=False
                )
                .values_list('started_at', 'completed_at')
            )
        ]
        if not durations:
            return 0
        return math.floor(sum(durations) / len(durations) + 0.5)
