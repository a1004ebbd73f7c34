import pytest
from decimal import Decimal
from apps.organisation.models import TaxSettings, ExchangeRate


@pytest.fixture
def tax_settings(db):
    """Tax enabled at 10%."""
    return TaxSettings.objects.create(enabled=True, tax_rate=Decimal('10.00'))


@pytest.fixture
def usd_eur_rate(db):
    return ExchangeRate.objects.create(
        from_currency='USD',
        to_currency='EUR',
        rate=Decimal('0.92')
    )
