import uuid
import pytest
from django.urls import reverse
from rest_framework import status

from apps.discounts.models import DiscountRule


@pytest.mark.django_db
class TestDiscountRuleEndpoints:
    """Tests for /api/discounts/"""

    def test_admin_creates_rule(self, admin_client):
        response = admin_client.post(reverse('discounts:discount-list'), {
            'code': 'spring15',
            'name': 'Spring',
            'type': 'percentage',
            'value': '15',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['code'] == 'SPRING15'

    def test_manager_cannot_create(self, manager_client):
        response = manager_client.post(reverse('discounts:discount-list'), {
            'code': 'X', 'name': 'X', 'type': 'fixed', 'value': '100',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_percentage_above_100(self, admin_client):
        response = admin_client.post(reverse('discounts:discount-list'), {
            'code': 'HUGE', 'name': 'Huge', 'type': 'percentage', 'value': '120',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_duplicate_code(self, admin_client, percent_rule):
        response = admin_client.post(reverse('discounts:discount-list'), {
            'code': 'SUMMER10', 'name': 'Again', 'type': 'percentage', 'value': '10',
        })

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'DUPLICATE_ENTRY'

    def test_manager_lists(self, manager_client, percent_rule, expired_rule):
        response = manager_client.get(reverse('discounts:discount-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['meta']['total'] == 2

    def test_filter_inactive(self, manager_client, percent_rule, expired_rule):
        expired_rule.is_active = False
        expired_rule.save()

        response = manager_client.get(reverse('discounts:discount-list'), {'is_active': 'false'})

        codes = [rule['code'] for rule in response.data['data']['items']]
        assert codes == ['OLDPROMO']

    def test_destroy_deactivates(self, admin_client, percent_rule):
        url = reverse('discounts:discount-detail', kwargs={'pk': percent_rule.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert DiscountRule.objects.get(id=percent_rule.id).is_active is False

    def test_active(self, manager_client, percent_rule, expired_rule):
        response = manager_client.get(reverse('discounts:discount-active'))

        assert [rule['code'] for rule in response.data['data']] == ['SUMMER10']


@pytest.mark.django_db
class TestValidateEndpoint:
    """Tests for /api/discounts/validate/"""

    def test_valid_code(self, staff_client, percent_rule):
        response = staff_client.post(reverse('discounts:discount-validate'), {
            'code': 'summer10',
            'order_total': 2500,
            'customer_id': str(uuid.uuid4()),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['valid'] is True
        assert response.data['data']['discount_amount'] == 250

    def test_invalid_code_is_not_an_error(self, staff_client, expired_rule):
        response = staff_client.post(reverse('discounts:discount-validate'), {
            'code': 'OLDPROMO',
            'order_total': 2500,
            'customer_id': str(uuid.uuid4()),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data'] == {'valid': False, 'error': 'Discount code has expired'}

    def test_missing_customer(self, staff_client, percent_rule):
        response = staff_client.post(reverse('discounts:discount-validate'), {
            'code': 'SUMMER10',
            'order_total': 2500,
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'customer_id' in response.data['errors']


@pytest.mark.django_db
class TestEmployeeDiscountEndpoint:

    def test_no_employment(self, manager_client, staff_user):
        url = reverse('discounts:discount-employee', kwargs={'user_id': staff_user.id})
        response = manager_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'NOT_FOUND'
