from django.contrib import admin
from apps.housekeeping.models import CleaningTask, CleaningLog


class CleaningLogInline(admin.TabularInline):
    model = CleaningLog
    extra = 0
    readonly_fields = ['created_at']


@admin.register(CleaningTask)
class CleaningTaskAdmin(admin.ModelAdmin):
    list_display = ['task_number', 'unit_number', 'task_type', 'priority', 'status', 'assigned_to', 'created_at']
    list_filter = ['status', 'priority', 'task_type']
    search_fields = ['task_number', 'unit_number']
    readonly_fields = ['task_number', 'created_at', 'updated_at']
    inlines = [CleaningLogInline]
