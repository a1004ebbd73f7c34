from django.contrib import admin
from apps.inventory.models import (
    InventoryItem,
    DepartmentInventory,
    InventoryMovement,
    InventoryReservation,
    DepartmentTransfer,
    DepartmentTransferItem,
)


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    """Admin interface for inventory items."""

    list_display = ['name', 'sku', 'category', 'quantity', 'reorder_level', 'unit_price', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name', 'sku', 'supplier']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['name']


@admin.register(DepartmentInventory)
class DepartmentInventoryAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'department', 'section', 'quantity', 'unit_price']
    list_filter = ['department']
    search_fields = ['inventory_item__name', 'department__code']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('inventory_item', 'department', 'section')


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'movement_type', 'quantity', 'reason', 'reference', 'created_at']
    list_filter = ['movement_type', 'created_at']
    search_fields = ['inventory_item__name', 'reference']
    date_hierarchy = 'created_at'
    readonly_fields = ['created_at']


@admin.register(InventoryReservation)
class InventoryReservationAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'order', 'quantity', 'status', 'reserved_at']
    list_filter = ['status']


class DepartmentTransferItemInline(admin.TabularInline):
    model = DepartmentTransferItem
    extra = 0
    fields = ['product_type', 'inventory_item', 'quantity']


@admin.register(DepartmentTransfer)
class DepartmentTransferAdmin(admin.ModelAdmin):
    """Admin interface for department transfers."""

    list_display = ['id', 'from_department', 'destination_code', 'status', 'created_by', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['destination_code', 'from_department__code']
    readonly_fields = ['created_at', 'updated_at', 'completed_at']
    inlines = [DepartmentTransferItemInline]
    date_hierarchy = 'created_at'
