from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import (
    CleaningTask,
    CleaningLog,
    CleaningTaskStatus,
    CleaningTaskType,
    CleaningPriority,
)


class CleaningLogSerializer(serializers.ModelSerializer):

    logged_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = CleaningLog
        fields = ['id', 'item_type', 'status', 'notes', 'photo_url', 'logged_by', 'created_at']
        read_only_fields = ['id', 'logged_by', 'created_at']


class CleaningTaskSerializer(serializers.ModelSerializer):
    """Cleaning task as listed on the housekeeping board."""

    department_code = serializers.CharField(source='department.code', read_only=True, default=None)
    assigned_to = UserMinimalSerializer(read_only=True)
    inspected_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = CleaningTask
        fields = [
            'id',
            'task_number',
            'unit_number',
            'department_code',
            'task_type',
            'priority',
            'status',
            'assigned_to',
            'started_at',
            'completed_at',
            'inspected_at',
            'inspected_by',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CleaningTaskDetailSerializer(CleaningTaskSerializer):

    logs = CleaningLogSerializer(many=True, read_only=True)

    class Meta(CleaningTaskSerializer.Meta):
        fields = CleaningTaskSerializer.Meta.fields + ['logs']
        read_only_fields = fields


class CleaningTaskCreateSerializer(serializers.Serializer):
    unit_number = serializers.CharField(max_length=50)
    task_type = serializers.ChoiceField(choices=CleaningTaskType.choices)
    priority = serializers.ChoiceField(
        choices=CleaningPriority.choices,
        required=False,
        default=CleaningPriority.NORMAL
    )
    department_code = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class AssignTaskSerializer(serializers.Serializer):
    assigned_to_id = serializers.UUIDField()


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class InspectTaskSerializer(NotesSerializer):
    approved = serializers.BooleanField()


class TaskFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CleaningTaskStatus.choices, required=False)
    unit = serializers.CharField(required=False)
    assigned_to = serializers.UUIDField(required=False)


class TurnaroundFilterSerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, max_value=365, required=False, default=30)
