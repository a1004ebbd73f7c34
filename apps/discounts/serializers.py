from rest_framework import serializers

from .models import DiscountRule, DiscountRuleType


class DiscountRuleSerializer(serializers.ModelSerializer):
    """Full discount rule, used for output and for create/update input."""

    class Meta:
        model = DiscountRule
        fields = [
            'id',
            'code',
            'name',
            'description',
            'type',
            'value',
            'max_usage_per_customer',
            'max_total_usage',
            'current_usage',
            'min_order_amount',
            'applicable_departments',
            'is_active',
            'start_date',
            'end_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'current_usage', 'created_at', 'updated_at']
        # Uniqueness is checked by the service so duplicates map to DUPLICATE_ENTRY
        extra_kwargs = {'code': {'validators': []}}

    def validate_applicable_departments(self, value):
        if not isinstance(value, list) or not all(isinstance(code, str) for code in value):
            raise serializers.ValidationError('Must be a list of department codes.')
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date must be after start date.'})

        rule_type = attrs.get('type', getattr(self.instance, 'type', None))
        value = attrs.get('value', getattr(self.instance, 'value', None))
        if rule_type != DiscountRuleType.FIXED and value is not None and value > 100:
            raise serializers.ValidationError({'value': 'Percentage cannot exceed 100.'})
        return attrs


class DiscountFilterSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    type = serializers.ChoiceField(choices=DiscountRuleType.choices, required=False)


class ValidateDiscountSerializer(serializers.Serializer):
    """Input for POST /api/discounts/validate/."""

    code = serializers.CharField(max_length=50)
    order_total = serializers.IntegerField(min_value=0)
    customer_id = serializers.UUIDField()
    department_code = serializers.CharField(required=False, allow_blank=True)
