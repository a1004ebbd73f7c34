from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'discounts'

router = DefaultRouter()
router.register(r'', views.DiscountRuleViewSet, basename='discount')

urlpatterns = [
    # GET    /api/discounts/                      - List rules (manager)
    # POST   /api/discounts/                      - Create rule (admin)
    # GET    /api/discounts/{id}/                 - Rule detail (manager)
    # PATCH  /api/discounts/{id}/                 - Update rule (admin)
    # DELETE /api/discounts/{id}/                 - Deactivate rule (admin)
    # POST   /api/discounts/validate/             - Validate a code (staff)
    # GET    /api/discounts/active/               - Rules usable now (manager)
    # GET    /api/discounts/stats/                - Usage statistics (manager)
    # GET    /api/discounts/employee/{user_id}/   - Employee discount (manager)
    path('', include(router.urls)),
]
