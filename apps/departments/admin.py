from django.contrib import admin
from apps.departments.models import Department, DepartmentSection


class DepartmentSectionInline(admin.TabularInline):
    model = DepartmentSection
    extra = 0
    fields = ['name', 'slug', 'is_active']


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    """Admin interface for departments."""

    list_display = ['code', 'name', 'type', 'tracks_inventory', 'is_active']
    list_filter = ['type', 'tracks_inventory', 'is_active']
    search_fields = ['code', 'name']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [DepartmentSectionInline]
