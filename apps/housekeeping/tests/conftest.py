import pytest

from apps.housekeeping.models import CleaningTaskType, CleaningPriority
from apps.housekeeping.services import CleaningService


@pytest.fixture
def task(db):
    return CleaningService.create_task(
        unit_number='204',
        task_type=CleaningTaskType.TURNOVER,
        notes='Late checkout'
    )


@pytest.fixture
def started_task(task, staff_user):
    return CleaningService.start_task(task_id=task.id, user=staff_user)


@pytest.fixture
def completed_task(started_task):
    return CleaningService.complete_task(task_id=started_task.id)


@pytest.fixture
def urgent_task(db):
    return CleaningService.create_task(
        unit_number='301',
        task_type=CleaningTaskType.DEEP_CLEAN,
        priority=CleaningPriority.URGENT
    )
