import pytest
from django.urls import reverse
from rest_framework import status

from apps.inventory.models import InventoryItem, TransferStatus


@pytest.mark.django_db
class TestInventoryItemEndpoints:
    """Tests for /api/inventory/items/"""

    def test_list_is_paginated(self, staff_client, gin, low_item):
        response = staff_client.get(reverse('inventory:item-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['meta']['total'] == 2

    def test_staff_cannot_create(self, staff_client):
        response = staff_client.post(reverse('inventory:item-list'), {'name': 'Rum'})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_creates(self, manager_client):
        response = manager_client.post(
            reverse('inventory:item-list'),
            {'name': 'Rum', 'sku': 'RUM-001', 'quantity': 12, 'unit_price': '9.00'}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['name'] == 'Rum'

    def test_destroy_deactivates(self, manager_client, gin):
        response = manager_client.delete(reverse('inventory:item-detail', args=[gin.id]))

        assert response.status_code == status.HTTP_200_OK
        assert InventoryItem.objects.get(id=gin.id).is_active is False

    def test_adjust(self, manager_client, gin):
        response = manager_client.post(
            reverse('inventory:item-adjust', args=[gin.id]),
            {'delta': -5, 'reason': 'breakage'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['quantity'] == 35

    def test_low_stock(self, staff_client, gin, low_item):
        response = staff_client.get(reverse('inventory:item-low-stock'))

        assert [row['name'] for row in response.data['data']] == ['Lime']

    def test_stats(self, staff_client, gin):
        response = staff_client.get(reverse('inventory:item-stats'))

        assert response.data['data']['total_items'] == 1


@pytest.mark.django_db
class TestTransferEndpoints:
    """Tests for /api/inventory/transfers/"""

    def test_list(self, staff_client, pending_transfer):
        response = staff_client.get(reverse('inventory:transfer-list'), {'status': 'pending'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['meta']['total'] == 1

    def test_staff_cannot_approve(self, staff_client, pending_transfer):
        response = staff_client.post(reverse('inventory:transfer-approve', args=[pending_transfer.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_approve(self, manager_client, pending_transfer):
        response = manager_client.post(reverse('inventory:transfer-approve', args=[pending_transfer.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['status'] == TransferStatus.COMPLETED

    def test_reject_twice_conflicts(self, manager_client, pending_transfer):
        url = reverse('inventory:transfer-reject', args=[pending_transfer.id])
        manager_client.post(url, {'reason': 'No'})
        response = manager_client.post(url, {'reason': 'No'})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'CONFLICT'

    def test_movements_audit_trail(self, manager_client, pending_transfer):
        manager_client.post(reverse('inventory:transfer-approve', args=[pending_transfer.id]))
        response = manager_client.get(reverse('inventory:movement-list'))

        assert response.data['data']['meta']['total'] == 2
