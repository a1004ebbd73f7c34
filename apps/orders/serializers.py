from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import (
    Customer,
    OrderHeader,
    OrderLine,
    OrderDepartment,
    OrderDiscount,
    OrderPayment,
    OrderFulfillment,
    OrderStatus,
    DiscountType,
    PaymentMethod,
)


# =============================================================================
# Customers
# =============================================================================

class CustomerSerializer(serializers.ModelSerializer):

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            'id',
            'first_name',
            'last_name',
            'full_name',
            'email',
            'phone',
            'nationality',
            'street',
            'city',
            'state',
            'zip',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class CustomerMinimalSerializer(serializers.ModelSerializer):

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'full_name', 'email']


# =============================================================================
# Order rows
# =============================================================================

class OrderLineSerializer(serializers.ModelSerializer):

    section = serializers.SlugRelatedField(slug_field='slug', read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            'id',
            'line_number',
            'department_code',
            'section',
            'product_id',
            'product_type',
            'product_name',
            'quantity',
            'unit_price',
            'unit_discount',
            'line_total',
            'status',
        ]
        read_only_fields = fields


class OrderDepartmentSerializer(serializers.ModelSerializer):

    department_code = serializers.CharField(source='department.code', read_only=True)
    department_name = serializers.CharField(source='department.name', read_only=True)

    class Meta:
        model = OrderDepartment
        fields = ['department_code', 'department_name', 'status', 'updated_at']
        read_only_fields = fields


class OrderDiscountSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderDiscount
        fields = ['id', 'discount_rule', 'discount_type', 'discount_code', 'discount_amount', 'created_at']
        read_only_fields = fields


class OrderPaymentSerializer(serializers.ModelSerializer):

    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = OrderPayment
        fields = [
            'id',
            'amount',
            'payment_method',
            'status',
            'transaction_reference',
            'processed_at',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class OrderFulfillmentSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderFulfillment
        fields = ['id', 'line', 'status', 'fulfilled_quantity', 'fulfilled_at', 'notes']
        read_only_fields = fields


# =============================================================================
# Orders
# =============================================================================

class OrderSerializer(serializers.ModelSerializer):
    """Order as shown in lists."""

    customer = CustomerMinimalSerializer(read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = OrderHeader
        fields = [
            'id',
            'order_number',
            'customer',
            'status',
            'payment_status',
            'subtotal',
            'discount_total',
            'tax',
            'total',
            'item_count',
            'created_at',
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return len(obj.lines.all())


class OrderDetailSerializer(OrderSerializer):
    """Order with every row needed for a receipt."""

    lines = OrderLineSerializer(many=True, read_only=True)
    departments = OrderDepartmentSerializer(many=True, read_only=True)
    discounts = OrderDiscountSerializer(many=True, read_only=True)
    payments = OrderPaymentSerializer(many=True, read_only=True)
    fulfillments = OrderFulfillmentSerializer(many=True, read_only=True)
    created_by = UserMinimalSerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + [
            'notes',
            'lines',
            'departments',
            'discounts',
            'payments',
            'fulfillments',
            'created_by',
            'updated_at',
        ]
        read_only_fields = fields


# =============================================================================
# Input
# =============================================================================

class OrderItemInputSerializer(serializers.Serializer):
    """One item of a new order. Prices are cents."""

    product_id = serializers.CharField(max_length=128)
    product_type = serializers.CharField(max_length=50, required=False, default='')
    product_name = serializers.CharField(max_length=200)
    department_code = serializers.CharField(max_length=200)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.IntegerField(min_value=0)


class OrderCreateSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    discounts = serializers.ListField(
        child=serializers.CharField(max_length=128),
        required=False,
        default=list
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderFilterSerializer(serializers.Serializer):
    customer = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    department = serializers.CharField(required=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class ApplyDiscountSerializer(serializers.Serializer):
    """
    Percentage and bulk discounts name a rule by ``discount_code``.
    Fixed and employee discounts carry ``discount_amount`` in cents.
    """

    discount_type = serializers.ChoiceField(choices=DiscountType.choices)
    discount_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    discount_amount = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        if attrs['discount_type'] in (DiscountType.PERCENTAGE, DiscountType.BULK):
            if not attrs.get('discount_code'):
                raise serializers.ValidationError({'discount_code': 'Required for rule based discounts'})
        elif attrs.get('discount_amount') is None:
            raise serializers.ValidationError({'discount_amount': 'Required for manual discounts'})
        return attrs


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    transaction_reference = serializers.CharField(
        max_length=200,
        required=False,
        allow_blank=True,
        default=''
    )


# =============================================================================
# Settlement
# =============================================================================

class SettleSerializer(PaymentCreateSerializer):
    order_id = serializers.UUIDField()


class BatchSettleSerializer(serializers.Serializer):
    payments = SettleSerializer(many=True, allow_empty=False)


class OpenOrdersFilterSerializer(serializers.Serializer):
    department = serializers.CharField(required=False)
    customer = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=200, required=False, default=50)
    offset = serializers.IntegerField(min_value=0, required=False, default=0)


class SettlementReportFilterSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
