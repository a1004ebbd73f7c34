from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'departments'

router = DefaultRouter()
router.register(r'', views.DepartmentViewSet, basename='department')

urlpatterns = [
    # GET    /api/departments/                               - List departments
    # POST   /api/departments/                               - Create (manager)
    # GET    /api/departments/{code}/                        - Detail
    # PATCH  /api/departments/{code}/                        - Update (manager)
    # DELETE /api/departments/{code}/                        - Deactivate (manager)
    # GET/POST /api/departments/{code}/sections/             - Sections
    # GET    /api/departments/{code}/stats/                  - Order counts (manager)
    # GET    /api/departments/{code}/orders/                 - Orders routed here
    # GET    /api/departments/{code}/pending-items/          - Lines still to serve
    # POST   /api/departments/{code}/fulfillment/            - Set department status on an order
    # POST   /api/departments/{code}/lines/{line_id}/start/  - Start a line
    # POST   /api/departments/{code}/lines/{line_id}/complete/ - Complete a line
    # GET    /api/departments/{code}/inventory/              - Department stock
    # POST   /api/departments/{code}/transfer/               - Request transfer (manager)
    path('', include(router.urls)),
]
