from django.contrib import admin
from apps.employees.models import (
    EmploymentData,
    EmployeeLeave,
    EmployeeCharge,
    EmployeeTermination,
    SalaryPayment,
)


class EmployeeLeaveInline(admin.TabularInline):
    model = EmployeeLeave
    extra = 0
    fields = ['leave_type', 'start_date', 'end_date', 'number_of_days', 'status']
    readonly_fields = ['status']


class EmployeeChargeInline(admin.TabularInline):
    model = EmployeeCharge
    extra = 0
    fields = ['charge_type', 'amount', 'paid_amount', 'status', 'date']


@admin.register(EmploymentData)
class EmploymentDataAdmin(admin.ModelAdmin):
    """Admin interface for employment records."""

    list_display = ['user', 'position', 'department', 'employment_status', 'salary', 'total_charges']
    list_filter = ['employment_status', 'department', 'contract_type']
    search_fields = ['user__email', 'user__display_name', 'position']
    readonly_fields = ['total_charges', 'created_at', 'updated_at']
    inlines = [EmployeeLeaveInline, EmployeeChargeInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user')


@admin.register(EmployeeTermination)
class EmployeeTerminationAdmin(admin.ModelAdmin):
    list_display = ['employment', 'termination_date', 'reason', 'settlement_status']
    list_filter = ['settlement_status']


@admin.register(SalaryPayment)
class SalaryPaymentAdmin(admin.ModelAdmin):
    list_display = ['user', 'payment_date', 'gross_salary', 'deductions', 'net_salary', 'status']
    list_filter = ['status', 'payment_date']
    search_fields = ['user__email']
    date_hierarchy = 'payment_date'
