from django.db import models
from django.core.validators import MinValueValidator
import uuid


class Customer(models.Model):
    """Guest or walk-in customer that orders are billed to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    nationality = models.CharField(max_length=100, blank=True)
    street = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip = models.CharField(max_length=20, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    FULFILLED = 'fulfilled', 'Fulfilled'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    REFUNDED = 'refunded', 'Refunded'


class PaymentStatus(models.TextChoices):
    UNPAID = 'unpaid', 'Unpaid'
    PARTIAL = 'partial', 'Partially paid'
    PAID = 'paid', 'Paid'
    REFUNDED = 'refunded', 'Refunded'


class OrderHeader(models.Model):
    """
    POS order.

    All money fields are integer minor units (cents).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # ORD-<epoch ms>-<9 upper alnum>
    order_number = models.CharField(max_length=40, unique=True, db_index=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='orders'
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )

    subtotal = models.PositiveIntegerField(default=0)
    discount_total = models.PositiveIntegerField(default=0)
    tax = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField(default=0)

    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders_created'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_headers'
        indexes = [
            models.Index(fields=['status', 'created_at']),
            models.Index(fields=['customer', 'status']),
            models.Index(fields=['payment_status']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number} ({self.status})"


class LineStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    FULFILLED = 'fulfilled', 'Fulfilled'
    CANCELLED = 'cancelled', 'Cancelled'
    REFUNDED = 'refunded', 'Refunded'


class OrderLine(models.Model):
    """One product sold on an order, served by a department or section."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        OrderHeader,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    line_number = models.PositiveIntegerField()

    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.PROTECT,
        related_name='order_lines'
    )
    section = models.ForeignKey(
        'departments.DepartmentSection',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_lines'
    )
    # Code as sent by the terminal, e.g. "RESTAURANT:terrace"
    department_code = models.CharField(max_length=200)

    # Inventory item id for tracked departments, free reference otherwise
    product_id = models.CharField(max_length=128)
    product_type = models.CharField(max_length=50)
    product_name = models.CharField(max_length=200)

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.PositiveIntegerField()
    unit_discount = models.PositiveIntegerField(default=0)
    line_total = models.PositiveIntegerField()

    status = models.CharField(
        max_length=20,
        choices=LineStatus.choices,
        default=LineStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_lines'
        unique_together = [['order', 'line_number']]
        indexes = [
            models.Index(fields=['department', 'status']),
        ]
        ordering = ['order', 'line_number']

    def __str__(self):
        return f"{self.order.order_number}#{self.line_number} {self.quantity} x {self.product_name}"


class OrderDepartment(models.Model):
    """Per-department progress of an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        OrderHeader,
        on_delete=models.CASCADE,
        related_name='departments'
    )
    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.PROTECT,
        related_name='order_departments'
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_departments'
        unique_together = [['order', 'department']]
        indexes = [
            models.Index(fields=['department', 'status']),
        ]

    def __str__(self):
        return f"{self.order.order_number} @ {self.department.code} ({self.status})"


class DiscountType(models.TextChoices):
    PERCENTAGE = 'percentage', 'Percentage'
    FIXED = 'fixed', 'Fixed'
    BULK = 'bulk', 'Bulk'
    EMPLOYEE = 'employee', 'Employee'


class OrderDiscount(models.Model):
    """Discount applied to an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        OrderHeader,
        on_delete=models.CASCADE,
        related_name='discounts'
    )
    discount_rule = models.ForeignKey(
        'discounts.DiscountRule',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='applications'
    )
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_code = models.CharField(max_length=50, blank=True)
    discount_amount = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_discounts'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.discount_type} {self.discount_amount} on {self.order.order_number}"


class PaymentRecordStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    CARD = 'card', 'Card'
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    ROOM_CHARGE = 'room_charge', 'Room charge'
    MOBILE = 'mobile', 'Mobile payment'
    OTHER = 'other', 'Other'


class OrderPayment(models.Model):
    """Payment recorded against an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        OrderHeader,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=20,
        choices=PaymentRecordStatus.choices,
        default=PaymentRecordStatus.PENDING
    )
    transaction_reference = models.CharField(max_length=200, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_recorded'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_payments'
        indexes = [
            models.Index(fields=['order', 'status']),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.amount} via {self.payment_method} ({self.status})"


class FulfillmentStatus(models.TextChoices):
    IN_PROGRESS = 'in_progress', 'In progress'
    FULFILLED = 'fulfilled', 'Fulfilled'
    CANCELLED = 'cancelled', 'Cancelled'
    REFUNDED = 'refunded', 'Refunded'


class OrderFulfillment(models.Model):
    """Work record of a department serving an order line."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        OrderHeader,
        on_delete=models.CASCADE,
        related_name='fulfillments'
    )
    line = models.ForeignKey(
        OrderLine,
        on_delete=models.CASCADE,
        related_name='fulfillments'
    )
    status = models.CharField(
        max_length=20,
        choices=FulfillmentStatus.choices,
        default=FulfillmentStatus.IN_PROGRESS
    )
    fulfilled_quantity = models.PositiveIntegerField(default=0)
    fulfilled_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'order_fulfillments'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.line} ({self.status})"
