from django.db import models
import uuid


class CleaningPriority(models.TextChoices):
    LOW = 'low', 'Low'
    NORMAL = 'normal', 'Normal'
    HIGH = 'high', 'High'
    URGENT = 'urgent', 'Urgent'


class CleaningTaskStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In progress'
    COMPLETED = 'completed', 'Completed'
    INSPECTED = 'inspected', 'Inspected'
    REJECTED = 'rejected', 'Rejected'


class CleaningTaskType(models.TextChoices):
    TURNOVER = 'turnover', 'Turnover'
    DEEP_CLEAN = 'deep_clean', 'Deep clean'
    MAINTENANCE_CLEAN = 'maintenance_clean', 'Maintenance clean'
    TOUCH_UP = 'touch_up', 'Touch up'


class CleaningTask(models.Model):
    """Cleaning job for a room or unit, checked by an inspector when done."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # CLN-<yyyymmdd>-<4 hex>
    task_number = models.CharField(max_length=32, unique=True, db_index=True)
    unit_number = models.CharField(max_length=50, db_index=True)
    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cleaning_tasks'
    )

    task_type = models.CharField(
        max_length=30,
        choices=CleaningTaskType.choices,
        default=CleaningTaskType.TURNOVER
    )
    priority = models.CharField(
        max_length=10,
        choices=CleaningPriority.choices,
        default=CleaningPriority.NORMAL
    )
    status = models.CharField(
        max_length=20,
        choices=CleaningTaskStatus.choices,
        default=CleaningTaskStatus.PENDING
    )

    assigned_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cleaning_tasks'
    )
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    inspected_at = models.DateTimeField(null=True, blank=True)
    inspected_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cleaning_inspections'
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'cleaning_tasks'
        indexes = [
            models.Index(fields=['status', 'priority']),
            models.Index(fields=['unit_number', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.task_number} {self.unit_number} ({self.status})"


class CleaningLog(models.Model):
    """Checklist entry recorded while a task is worked on."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    task = models.ForeignKey(
        CleaningTask,
        on_delete=models.CASCADE,
        related_name='logs'
    )
    logged_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cleaning_logs'
    )
    item_type = models.CharField(max_length=100)
    status = models.CharField(max_length=50)
    notes = models.TextField(blank=True)
    photo_url = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cleaning_logs'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.item_type}: {self.status}"
