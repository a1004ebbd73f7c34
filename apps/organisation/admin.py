from django.contrib import admin
from apps.organisation.models import TaxSettings, ExchangeRate


@admin.register(TaxSettings)
class TaxSettingsAdmin(admin.ModelAdmin):
    list_display = ['tax_rate', 'enabled', 'applied_to_subtotal', 'updated_by', 'updated_at']
    readonly_fields = ['updated_at']

    def has_add_permission(self, request):
        """Single row."""
        return not TaxSettings.objects.exists()


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ['from_currency', 'to_currency', 'rate', 'updated_at']
    list_filter = ['from_currency']
    search_fields = ['from_currency', 'to_currency']
