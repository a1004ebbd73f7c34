from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import (
    InventoryItem,
    DepartmentInventory,
    InventoryMovement,
    DepartmentTransfer,
    DepartmentTransferItem,
    TransferStatus,
)


# =============================================================================
# Inventory items
# =============================================================================

class InventoryItemSerializer(serializers.ModelSerializer):
    """Full inventory item."""

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id',
            'name',
            'description',
            'sku',
            'category',
            'item_type',
            'quantity',
            'reorder_level',
            'max_quantity',
            'unit_price',
            'location',
            'supplier',
            'is_active',
            'is_low_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'is_low_stock', 'created_at', 'updated_at']


class InventoryItemMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'sku', 'category', 'unit_price']
        read_only_fields = fields


class AdjustQuantitySerializer(serializers.Serializer):
    """Signed quantity change for an item."""

    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=100, required=False, default='adjustment')


class DepartmentInventorySerializer(serializers.ModelSerializer):
    """Stock row of a department or section."""

    inventory_item = InventoryItemMinimalSerializer(read_only=True)
    section = serializers.SerializerMethodField()

    class Meta:
        model = DepartmentInventory
        fields = ['id', 'inventory_item', 'section', 'quantity', 'unit_price', 'updated_at']
        read_only_fields = fields

    def get_section(self, obj):
        return obj.section.slug if obj.section_id else None


# =============================================================================
# Movements
# =============================================================================

class InventoryMovementSerializer(serializers.ModelSerializer):

    inventory_item = InventoryItemMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = InventoryMovement
        fields = [
            'id',
            'inventory_item',
            'movement_type',
            'quantity',
            'reason',
            'reference',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


# =============================================================================
# Transfers
# =============================================================================

class TransferItemInputSerializer(serializers.Serializer):
    """Shape only; limits are enforced by create_transfer."""
    type = serializers.CharField()
    id = serializers.CharField()
    quantity = serializers.IntegerField()


class TransferCreateSerializer(serializers.Serializer):
    """Input for POST /api/departments/{code}/transfer/."""

    to_department_code = serializers.CharField(required=False, allow_blank=True, default='')
    items = TransferItemInputSerializer(many=True, required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class TransferRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class TransferFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TransferStatus.choices, required=False)
    department = serializers.CharField(required=False)


class DepartmentTransferItemSerializer(serializers.ModelSerializer):

    inventory_item = InventoryItemMinimalSerializer(read_only=True)

    class Meta:
        model = DepartmentTransferItem
        fields = ['id', 'product_type', 'inventory_item', 'quantity']
        read_only_fields = fields


class DepartmentTransferSerializer(serializers.ModelSerializer):
    """Transfer with its items."""

    from_department = serializers.CharField(source='from_department.code', read_only=True)
    to_department = serializers.CharField(source='to_department.code', read_only=True)
    to_section = serializers.SerializerMethodField()
    items = DepartmentTransferItemSerializer(many=True, read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    approved_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = DepartmentTransfer
        fields = [
            'id',
            'from_department',
            'to_department',
            'to_section',
            'destination_code',
            'status',
            'notes',
            'items',
            'created_by',
            'approved_by',
            'completed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_to_section(self, obj):
        return obj.to_section.slug if obj.to_section_id else None
