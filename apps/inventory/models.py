from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class InventoryItem(models.Model):
    """Stock keeping item (a bottle, a food ingredient, a supply)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    category = models.CharField(max_length=50, blank=True, db_index=True)
    item_type = models.CharField(max_length=50, blank=True)

    # Global (warehouse) quantity; per-department stock lives in DepartmentInventory
    quantity = models.PositiveIntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=10)
    max_quantity = models.PositiveIntegerField(null=True, blank=True)

    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    location = models.CharField(max_length=200, blank=True)
    supplier = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        indexes = [
            models.Index(fields=['category']),
            models.Index(fields=['quantity', 'reorder_level']),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.quantity})"

    @property
    def is_low_stock(self):
        return self.quantity <= self.reorder_level


class DepartmentInventory(models.Model):
    """Stock of an item held by a department, or by one of its sections."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.CASCADE,
        related_name='inventory'
    )
    # Null means department-level stock
    section = models.ForeignKey(
        'departments.DepartmentSection',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='inventory'
    )
    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='department_stock'
    )
    quantity = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'department_inventories'
        constraints = [
            models.UniqueConstraint(
                fields=['department', 'inventory_item'],
                condition=models.Q(section__isnull=True),
                name='uniq_department_level_stock',
            ),
            models.UniqueConstraint(
                fields=['department', 'section', 'inventory_item'],
                condition=models.Q(section__isnull=False),
                name='uniq_section_level_stock',
            ),
        ]
        indexes = [
            models.Index(fields=['department', 'inventory_item']),
        ]
        ordering = ['department', 'inventory_item__name']

    def __str__(self):
        where = self.section.code if self.section_id else self.department.code
        return f"{self.inventory_item.name} @ {where}: {self.quantity}"


class MovementType(models.TextChoices):
    IN = 'in', 'In'
    OUT = 'out', 'Out'
    ADJUSTMENT = 'adjustment', 'Adjustment'
    LOSS = 'loss', 'Loss'


class InventoryMovement(models.Model):
    """Audit row for every stock change."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='movements'
    )
    movement_type = models.CharField(max_length=20, choices=MovementType.choices)
    quantity = models.PositiveIntegerField()
    reason = models.CharField(max_length=100, blank=True)
    # Id of the order or transfer that caused the movement
    reference = models.CharField(max_length=128, blank=True, db_index=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inventory_movements'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'inventory_movements'
        indexes = [
            models.Index(fields=['inventory_item', 'created_at']),
            models.Index(fields=['movement_type']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.movement_type} {self.quantity} x {self.inventory_item.name} ({self.reason})"


class ReservationStatus(models.TextChoices):
    RESERVED = 'reserved', 'Reserved'
    CONSUMED = 'consumed', 'Consumed'
    RELEASED = 'released', 'Released'


class InventoryReservation(models.Model):
    """Stock held for a pending order until it is paid or cancelled."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='reservations'
    )
    order = models.ForeignKey(
        'orders.OrderHeader',
        on_delete=models.CASCADE,
        related_name='reservations'
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=ReservationStatus.choices,
        default=ReservationStatus.RESERVED
    )
    reserved_at = models.DateTimeField(auto_now_add=True)
    consumed_at = models.DateTimeField(null=True, blank=True)
    released_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'inventory_reservations'
        indexes = [
            models.Index(fields=['order', 'status']),
            models.Index(fields=['inventory_item', 'status']),
        ]
        ordering = ['reserved_at']

    def __str__(self):
        return f"{self.quantity} x {self.inventory_item.name} for {self.order_id} ({self.status})"


class TransferStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    COMPLETED = 'completed', 'Completed'
    REJECTED = 'rejected', 'Rejected'
    FAILED = 'failed', 'Failed'


class TransferProductType(models.TextChoices):
    DRINK = 'drink', 'Drink'
    INVENTORY_ITEM = 'inventoryItem', 'Inventory item'


class DepartmentTransfer(models.Model):
    """Request to move stock from one department to another department or section."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Source is always department-level stock
    from_department = models.ForeignKey(
        'departments.Department',
        on_delete=models.CASCADE,
        related_name='outgoing_transfers'
    )
    to_department = models.ForeignKey(
        'departments.Department',
        on_delete=models.CASCADE,
        related_name='incoming_transfers'
    )
    to_section = models.ForeignKey(
        'departments.DepartmentSection',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='incoming_transfers'
    )
    # Destination as requested, e.g. "RESTAURANT" or "RESTAURANT:terrace"
    destination_code = models.CharField(max_length=200)

    status = models.CharField(
        max_length=20,
        choices=TransferStatus.choices,
        default=TransferStatus.PENDING
    )
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transfers_created'
    )
    approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transfers_approved'
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'department_transfers'
        indexes = [
            models.Index(fields=['status', 'created_at']),
            models.Index(fields=['from_department', 'status']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.from_department.code} -> {self.destination_code} ({self.status})"


class DepartmentTransferItem(models.Model):
    """One product line of a transfer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    transfer = models.ForeignKey(
        DepartmentTransfer,
        on_delete=models.CASCADE,
        related_name='items'
    )
    product_type = models.CharField(max_length=20, choices=TransferProductType.choices)
    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='transfer_items'
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        db_table = 'department_transfer_items'

    def __str__(self):
        return f"{self.quantity} x {self.inventory_item.name}"
