from django.contrib import admin
from apps.discounts.models import DiscountRule


@admin.register(DiscountRule)
class DiscountRuleAdmin(admin.ModelAdmin):
    """Admin interface for discount rules."""

    list_display = ['code', 'name', 'type', 'value', 'current_usage', 'max_total_usage', 'is_active', 'end_date']
    list_filter = ['type', 'is_active']
    search_fields = ['code', 'name']
    readonly_fields = ['current_usage', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('code', 'name', 'description', 'type', 'value')
        }),
        ('Limits', {
            'fields': ('max_usage_per_customer', 'max_total_usage', 'current_usage',
                       'min_order_amount', 'applicable_departments')
        }),
        ('Availability', {
            'fields': ('is_active', 'start_date', 'end_date')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['deactivate_rules']

    def deactivate_rules(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {updated} discount rules")
    deactivate_rules.short_description = "Deactivate selected rules"
