"""
Organisation services: tax settings and exchange rates.
"""

from .exceptions import (
    OrganisationServiceError,
    InvalidTaxRateError,
    InvalidExchangeRateError,
)

from .settings_management import (
    get_tax_settings,
    update_tax_settings,
    calculate_tax,
    list_exchange_rates,
    upsert_exchange_rate,
)


__all__ = [
    # Exceptions
    'OrganisationServiceError',
    'InvalidTaxRateError',
    'InvalidExchangeRateError',

    # Settings
    'get_tax_settings',
    'update_tax_settings',
    'calculate_tax',
    'list_exchange_rates',
    'upsert_exchange_rate',
]
