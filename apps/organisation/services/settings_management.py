"""
Tax settings and exchange rates.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.organisation.models import TaxSettings, ExchangeRate

from .exceptions import InvalidTaxRateError, InvalidExchangeRateError

logger = logging.getLogger(__name__)


def get_tax_settings() -> TaxSettings:
    """Load the tax settings row, creating it with defaults on first use."""
    tax_settings, created = TaxSettings.objects.get_or_create(
        pk=1,
        defaults=TaxSettings.defaults()
    )
    if created:
        logger.info("Initialised tax settings at %s%%", tax_settings.tax_rate)
    return tax_settings


@transaction.atomic
def update_tax_settings(
    *,
    user: Optional[User] = None,
    enabled: Optional[bool] = None,
    tax_rate: Optional[Decimal] = None,
    applied_to_subtotal: Optional[bool] = None
) -> TaxSettings:
    """
    Update tax settings. Omitted fields keep their value.

    Raises:
        InvalidTaxRateError: If tax_rate is outside 0..100
    """
    tax_settings = get_tax_settings()

    if tax_rate is not None:
        tax_rate = Decimal(str(tax_rate))
        if tax_rate < 0 or tax_rate > 100:
            raise InvalidTaxRateError('Tax rate must be between 0 and 100')
        tax_settings.tax_rate = tax_rate
    if enabled is not None:
        tax_settings.enabled = enabled
    if applied_to_subtotal is not None:
        tax_settings.applied_to_subtotal = applied_to_subtotal

    tax_settings.updated_by = user
    tax_settings.save()

    logger.info(
        "Tax settings updated: %s%% enabled=%s",
        tax_settings.tax_rate, tax_settings.enabled
    )
    return tax_settings


def calculate_tax(amount: int) -> int:
    """
    Tax in cents for a taxable amount in cents.

    Rounds half up to the nearest cent. Returns 0 when tax is disabled.
    """
    tax_settings = get_tax_settings()
    if not tax_settings.enabled or amount <= 0:
        return 0
    tax = (Decimal(amount) * tax_settings.tax_rate / Decimal(100))
    return int(tax.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def list_exchange_rates(*, base_currency: Optional[str] = None) -> dict:
    base = (base_currency or settings.DEFAULT_CURRENCY).upper()
    rates = ExchangeRate.objects.filter(from_currency=base)
    return {
        'base_currency': base,
        'rates': {rate.to_currency: rate.rate for rate in rates},
    }


@transaction.atomic
def upsert_exchange_rate(*, from_currency: str, to_currency: str, rate) -> ExchangeRate:
    """
    Create or update the rate for a currency pair.

    Raises:
        InvalidExchangeRateError: If the currencies are identical or
            not 3-letter codes, or the rate is not positive
    """
    from_currency = from_currency.strip().upper()
    to_currency = to_currency.strip().upper()

    if len(from_currency) != 3 or len(to_currency) != 3:
        raise InvalidExchangeRateError('Currency codes must have 3 letters')
    if from_currency == to_currency:
        raise InvalidExchangeRateError('From and to currencies must differ')

    rate = Decimal(str(rate))
    if rate <= 0:
        raise InvalidExchangeRateError('Rate must be greater than zero')

    exchange_rate, _ = ExchangeRate.objects.update_or_create(
        from_currency=from_currency,
        to_currency=to_currency,
        defaults={'rate': rate}
    )
    logger.info("Exchange rate %s/%s set to %s", from_currency, to_currency, rate)
    return exchange_rate
