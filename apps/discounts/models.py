from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class DiscountRuleType(models.TextChoices):
    PERCENTAGE = 'percentage', 'Percentage'
    FIXED = 'fixed', 'Fixed amount'
    TIERED = 'tiered', 'Tiered'


class DiscountRule(models.Model):
    """
    Promo code configuration.

    ``value`` is a percentage for percentage/tiered rules and an amount in
    cents for fixed rules. ``min_order_amount`` is in cents.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=50, unique=True, db_index=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    type = models.CharField(max_length=20, choices=DiscountRuleType.choices)
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )

    max_usage_per_customer = models.PositiveIntegerField(null=True, blank=True)
    max_total_usage = models.PositiveIntegerField(null=True, blank=True)
    current_usage = models.PositiveIntegerField(default=0)

    min_order_amount = models.PositiveIntegerField(default=0)
    # Department codes the rule is limited to; empty means all departments
    applicable_departments = models.JSONField(default=list, blank=True)

    is_active = models.BooleanField(default=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'discount_rules'
        indexes = [
            models.Index(fields=['is_active', 'start_date', 'end_date']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.code} ({self.type} {self.value})"

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)
