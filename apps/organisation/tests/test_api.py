import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.organisation.models import TaxSettings, ExchangeRate


@pytest.mark.django_db
class TestTaxSettingsEndpoint:
    """Tests for /api/settings/tax/"""

    def test_staff_can_read(self, staff_client, tax_settings):
        response = staff_client.get(reverse('organisation:tax-settings'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['data']['tax_rate'] == '10.00'

    def test_admin_can_update(self, admin_client, tax_settings):
        response = admin_client.put(
            reverse('organisation:tax-settings'),
            {'tax_rate': '8.50', 'enabled': True}
        )

        assert response.status_code == status.HTTP_200_OK
        assert TaxSettings.objects.get(pk=1).tax_rate == Decimal('8.50')

    def test_manager_cannot_update(self, manager_client, tax_settings):
        response = manager_client.put(reverse('organisation:tax-settings'), {'tax_rate': '5'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'FORBIDDEN'

    def test_out_of_range_rate(self, admin_client, tax_settings):
        response = admin_client.put(reverse('organisation:tax-settings'), {'tax_rate': '150'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('organisation:tax-settings'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'UNAUTHORIZED'


@pytest.mark.django_db
class TestExchangeRatesEndpoint:
    """Tests for /api/settings/exchange-rates/"""

    def test_list(self, staff_client, usd_eur_rate):
        response = staff_client.get(reverse('organisation:exchange-rates'), {'base': 'USD'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['base_currency'] == 'USD'
        assert 'EUR' in response.data['data']['rates']

    def test_admin_upsert(self, admin_client):
        response = admin_client.post(
            reverse('organisation:exchange-rates'),
            {'from_currency': 'usd', 'to_currency': 'gbp', 'rate': '0.79'}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert ExchangeRate.objects.filter(from_currency='USD', to_currency='GBP').exists()

    def test_identical_currencies(self, admin_client):
        response = admin_client.post(
            reverse('organisation:exchange-rates'),
            {'from_currency': 'USD', 'to_currency': 'USD', 'rate': '1'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_staff_cannot_upsert(self, staff_client):
        response = staff_client.post(
            reverse('organisation:exchange-rates'),
            {'from_currency': 'USD', 'to_currency': 'GBP', 'rate': '0.79'}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
