from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'items', views.InventoryItemViewSet, basename='item')
router.register(r'movements', views.InventoryMovementViewSet, basename='movement')
router.register(r'transfers', views.DepartmentTransferViewSet, basename='transfer')

urlpatterns = [
    # GET    /api/inventory/items/                 - List items
    # POST   /api/inventory/items/                 - Create item (manager)
    # GET    /api/inventory/items/{id}/            - Item detail
    # PATCH  /api/inventory/items/{id}/            - Update item (manager)
    # DELETE /api/inventory/items/{id}/            - Deactivate item (manager)
    # POST   /api/inventory/items/{id}/adjust/     - Adjust quantity (manager)
    # GET    /api/inventory/items/low-stock/       - Items at or below reorder level
    # GET    /api/inventory/items/stats/           - Totals and stock value
    # GET    /api/inventory/movements/             - Movement audit trail
    # GET    /api/inventory/transfers/             - List transfers
    # POST   /api/inventory/transfers/{id}/approve/ - Execute transfer (manager)
    # POST   /api/inventory/transfers/{id}/reject/  - Reject transfer (manager)
    path('', include(router.urls)),
]
