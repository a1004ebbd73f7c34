from django.contrib import admin
from apps.orders.models import (
    Customer,
    OrderHeader,
    OrderLine,
    OrderDepartment,
    OrderDiscount,
    OrderPayment,
)


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    fields = ['line_number', 'department_code', 'product_name', 'quantity', 'unit_price', 'line_total', 'status']
    readonly_fields = fields


class OrderDepartmentInline(admin.TabularInline):
    model = OrderDepartment
    extra = 0


class OrderDiscountInline(admin.TabularInline):
    model = OrderDiscount
    extra = 0
    readonly_fields = ['discount_rule', 'discount_type', 'discount_code', 'discount_amount']


class OrderPaymentInline(admin.TabularInline):
    model = OrderPayment
    extra = 0
    readonly_fields = ['amount', 'payment_method', 'status', 'transaction_reference', 'processed_at']


@admin.register(OrderHeader)
class OrderHeaderAdmin(admin.ModelAdmin):
    """Admin interface for POS orders."""

    list_display = ['order_number', 'customer', 'status', 'payment_status', 'total', 'created_at']
    list_filter = ['status', 'payment_status', 'created_at']
    search_fields = ['order_number', 'customer__first_name', 'customer__last_name', 'customer__email']
    readonly_fields = ['order_number', 'subtotal', 'discount_total', 'tax', 'total', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    inlines = [OrderLineInline, OrderDepartmentInline, OrderDiscountInline, OrderPaymentInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('customer')


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'nationality', 'created_at']
    search_fields = ['first_name', 'last_name', 'email', 'phone']
