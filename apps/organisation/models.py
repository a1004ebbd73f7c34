from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class TaxSettings(models.Model):
    """
    Hotel-wide tax configuration. Single row, always ``pk=1``.

    Use ``apps.organisation.services.get_tax_settings`` to load it.
    """

    enabled = models.BooleanField(default=True)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('10.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    applied_to_subtotal = models.BooleanField(default=True)
    updated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tax_settings'
        verbose_name_plural = 'tax settings'

    def __str__(self):
        state = 'enabled' if self.enabled else 'disabled'
        return f"Tax {self.tax_rate}% ({state})"

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def defaults(cls):
        return {'tax_rate': Decimal(str(settings.DEFAULT_TAX_RATE))}


class ExchangeRate(models.Model):
    """Conversion rate from one currency to another."""

    from_currency = models.CharField(max_length=3)
    to_currency = models.CharField(max_length=3)
    rate = models.DecimalField(
        max_digits=18,
        decimal_places=8,
        validators=[MinValueValidator(Decimal('0.00000001'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'exchange_rates'
        unique_together = [['from_currency', 'to_currency']]
        ordering = ['from_currency', 'to_currency']

    def __str__(self):
        return f"1 {self.from_currency} = {self.rate} {self.to_currency}"
