from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'customers', views.CustomerViewSet, basename='customer')
router.register(r'settle', views.SettlementViewSet, basename='settle')
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/orders/customers/                 - List customers
    # POST   /api/orders/customers/                 - Create customer
    # GET    /api/orders/customers/{id}/balance/    - Outstanding balance
    #
    # GET    /api/orders/settle/                    - Open orders
    # POST   /api/orders/settle/                    - Settle an order
    # GET    /api/orders/settle/summary/            - Settlement summary
    # POST   /api/orders/settle/batch/              - Batch settlement
    # GET    /api/orders/settle/report/             - Daily report
    #
    # GET    /api/orders/                           - List orders
    # POST   /api/orders/                           - Create order
    # GET    /api/orders/stats/                     - Order statistics
    # GET    /api/orders/{id}/                      - Order detail
    # POST   /api/orders/{id}/status/               - Change status (manager)
    # POST   /api/orders/{id}/cancel/               - Cancel (manager)
    # POST   /api/orders/{id}/refund/               - Refund (manager)
    # POST   /api/orders/{id}/discounts/            - Apply discount
    # POST   /api/orders/{id}/lines/                - Add line
    # DELETE /api/orders/{id}/lines/{line_id}/      - Remove line
    # GET    /api/orders/{id}/payments/             - Payment summary
    # POST   /api/orders/{id}/payments/             - Record payment (cashier)
    path('', include(router.urls)),
]
