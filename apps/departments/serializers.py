from rest_framework import serializers

from apps.orders.models import OrderStatus
from .models import Department, DepartmentSection


class DepartmentSectionSerializer(serializers.ModelSerializer):

    code = serializers.CharField(read_only=True)

    class Meta:
        model = DepartmentSection
        fields = ['id', 'name', 'slug', 'code', 'metadata', 'is_active', 'created_at']
        read_only_fields = ['id', 'code', 'is_active', 'created_at']
        extra_kwargs = {'slug': {'required': False, 'allow_blank': True}}
        # Uniqueness per department is checked by create_section
        validators = []


class DepartmentSerializer(serializers.ModelSerializer):
    """Department with its active sections."""

    sections = serializers.SerializerMethodField()

    class Meta:
        model = Department
        fields = [
            'id',
            'code',
            'name',
            'description',
            'slug',
            'type',
            'icon',
            'image',
            'reference_type',
            'reference_id',
            'metadata',
            'tracks_inventory',
            'is_active',
            'sections',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'is_active', 'sections', 'created_at', 'updated_at']
        extra_kwargs = {'code': {'validators': []}}

    def get_sections(self, obj):
        sections = [section for section in obj.sections.all() if section.is_active]
        return DepartmentSectionSerializer(sections, many=True).data


class DepartmentUpdateSerializer(serializers.ModelSerializer):
    """Mutable department fields. The code never changes."""

    class Meta:
        model = Department
        fields = [
            'name',
            'description',
            'type',
            'icon',
            'image',
            'reference_type',
            'reference_id',
            'metadata',
            'tracks_inventory',
        ]


class DepartmentFulfillmentSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class CompleteLineSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, required=False)


class PendingItemSerializer(serializers.Serializer):
    """A line still to be served by a department."""

    id = serializers.UUIDField()
    order_id = serializers.UUIDField()
    order_number = serializers.CharField(source='order.order_number')
    line_number = serializers.IntegerField()
    department_code = serializers.CharField()
    section = serializers.SlugRelatedField(slug_field='slug', read_only=True)
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
