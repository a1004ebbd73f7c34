import re
import uuid
import pytest
from datetime import timedelta
from django.utils import timezone

from apps.housekeeping.exceptions import (
    CleaningTaskNotFoundError,
    AssigneeNotFoundError,
    InvalidTaskStateError,
)
from apps.housekeeping.models import (
    CleaningTask,
    CleaningTaskStatus,
    CleaningTaskType,
    CleaningPriority,
)
from apps.housekeeping.services import CleaningService
from apps.departments.services import DepartmentNotFoundError


@pytest.mark.django_db
class TestCreateTask:

    def test_defaults(self, task):
        assert task.status == CleaningTaskStatus.PENDING
        assert task.priority == CleaningPriority.NORMAL
        assert task.department is None
        assert re.fullmatch(r'CLN-\d{8}-[0-9A-F]{4}', task.task_number)

    def test_department_from_section_code(self, restaurant):
        task = CleaningService.create_task(
            unit_number='T1',
            task_type=CleaningTaskType.TOUCH_UP,
            department_code='RESTAURANT:terrace'
        )

        assert task.department == restaurant

    def test_unknown_department(self, db):
        with pytest.raises(DepartmentNotFoundError):
            CleaningService.create_task(
                unit_number='T1',
                task_type=CleaningTaskType.TOUCH_UP,
                department_code='NOWHERE'
            )


@pytest.mark.django_db
class TestLifecycle:

    def test_assign(self, task, staff_user):
        task = CleaningService.assign_task(task_id=task.id, assigned_to_id=staff_user.id)

        assert task.assigned_to == staff_user

    def test_assign_inactive_user(self, task, staff_user):
        staff_user.is_active = False
        staff_user.save()

        with pytest.raises(AssigneeNotFoundError):
            CleaningService.assign_task(task_id=task.id, assigned_to_id=staff_user.id)

    def test_start_assigns_unassigned_task(self, task, staff_user):
        task = CleaningService.start_task(task_id=task.id, user=staff_user)

        assert task.status == CleaningTaskStatus.IN_PROGRESS
        assert task.started_at is not None
        assert task.assigned_to == staff_user

    def test_start_keeps_existing_assignee(self, task, staff_user, manager_user):
        CleaningService.assign_task(task_id=task.id, assigned_to_id=staff_user.id)

        task = CleaningService.start_task(task_id=task.id, user=manager_user)

        assert task.assigned_to == staff_user

    def test_cannot_start_twice(self, started_task):
        with pytest.raises(InvalidTaskStateError):
            CleaningService.start_task(task_id=started_task.id)

    def test_cannot_complete_pending(self, task):
        with pytest.raises(InvalidTaskStateError):
            CleaningService.complete_task(task_id=task.id)

    def test_complete(self, started_task):
        task = CleaningService.complete_task(task_id=started_task.id, notes='All done')

        assert task.status == CleaningTaskStatus.COMPLETED
        assert task.completed_at is not None
        assert task.notes == 'All done'

    def test_inspect_approved(self, completed_task, manager_user):
        task = CleaningService.inspect_task(task_id=completed_task.id, approved=True, user=manager_user)

        assert task.status == CleaningTaskStatus.INSPECTED
        assert task.inspected_by == manager_user
        assert task.inspected_at is not None

    def test_rejected_task_can_restart(self, completed_task, staff_user):
        CleaningService.inspect_task(task_id=completed_task.id, approved=False, notes='Mirror streaks')

        task = CleaningService.start_task(task_id=completed_task.id, user=staff_user)

        assert task.status == CleaningTaskStatus.IN_PROGRESS
        assert task.notes == 'Mirror streaks'

    def test_inspect_requires_completed(self, started_task):
        with pytest.raises(InvalidTaskStateError, match='Only completed tasks'):
            CleaningService.inspect_task(task_id=started_task.id, approved=True)

    def test_cannot_reassign_inspected(self, completed_task, manager_user):
        CleaningService.inspect_task(task_id=completed_task.id, approved=True)

        with pytest.raises(InvalidTaskStateError):
            CleaningService.assign_task(task_id=completed_task.id, assigned_to_id=manager_user.id)

    def test_unknown_task(self, db):
        with pytest.raises(CleaningTaskNotFoundError):
            CleaningService.start_task(task_id=uuid.uuid4())

    def test_malformed_task_id(self, db):
        with pytest.raises(CleaningTaskNotFoundError):
            CleaningService.get_task('not-a-uuid')


@pytest.mark.django_db
class TestLogItem:

    def test_log_item(self, started_task, staff_user):
        log = CleaningService.log_item(
            task_id=started_task.id,
            item_type='bathroom',
            status='done',
            user=staff_user
        )

        assert log.task_id == started_task.id
        assert log.logged_by == staff_user
        assert started_task.logs.count() == 1


@pytest.mark.django_db
class TestQueries:

    def test_pending_excludes_completed(self, urgent_task, completed_task):
        pending = list(CleaningService.get_pending_tasks())

        assert pending == [urgent_task]

    def test_pending_priority_then_age(self, db):
        low = CleaningService.create_task(unit_number='1', task_type='turnover', priority='low')
        first_normal = CleaningService.create_task(unit_number='2', task_type='turnover')
        second_normal = CleaningService.create_task(unit_number='3', task_type='turnover')
        high = CleaningService.create_task(unit_number='4', task_type='turnover', priority='high')
        CleaningTask.objects.filter(id=first_normal.id).update(
            created_at=timezone.now() - timedelta(hours=1)
        )

        pending = list(CleaningService.get_pending_tasks())

        assert pending == [high, first_normal, second_normal, low]

    def test_pending_by_department(self, task, restaurant):
        in_restaurant = CleaningService.create_task(
            unit_number='T2',
            task_type='touch_up',
            department_code='RESTAURANT'
        )

        assert list(CleaningService.get_pending_tasks('RESTAURANT')) == [in_restaurant]

    def test_tasks_by_unit(self, task, urgent_task):
        second = CleaningService.create_task(unit_number='204', task_type='touch_up')
        CleaningTask.objects.filter(id=task.id).update(created_at=timezone.now() - timedelta(days=1))

        history = list(CleaningService.get_tasks_by_unit('204'))

        assert history == [second, task]

    def test_turnaround_without_tasks(self, db):
        assert CleaningService.get_average_turnaround_hours() == 0

    def test_turnaround_rounds_half_up(self, db):
        now = timezone.now()
        for hours in (1, 2):
            task = CleaningService.create_task(unit_number='5', task_type='turnover')
            CleaningTask.objects.filter(id=task.id).update(
                status=CleaningTaskStatus.INSPECTED,
                started_at=now - timedelta(hours=hours),
                completed_at=now
            )

        assert CleaningService.get_average_turnaround_hours() == 2

    def test_turnaround_ignores_old_and_uninspected(self, db):
        now = timezone.now()
        old = CleaningService.create_task(unit_number='6', task_type='turnover')
        CleaningTask.objects.filter(id=old.id).update(
            status=CleaningTaskStatus.INSPECTED,
            started_at=now - timedelta(days=40, hours=5),
            completed_at=now - timedelta(days=40)
        )
        completed = CleaningService.create_task(unit_number='7', task_type='turnover')
        CleaningTask.objects.filter(id=completed.id).update(
            status=CleaningTaskStatus.COMPLETED,
            started_at=now - timedelta(hours=9),
            completed_at=now
        )
        recent = CleaningService.create_task(unit_number='8', task_type='turnover')
        CleaningTask.objects.filter(id=recent.id).update(
            status=CleaningTaskStatus.INSPECTED,
            started_at=now - timedelta(hours=3),
            completed_at=now
        )

        assert CleaningService.get_average_turnaround_hours(days_back=30) == 3
