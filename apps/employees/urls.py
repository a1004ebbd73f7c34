from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'employees'

router = DefaultRouter()
router.register(r'', views.EmployeeViewSet, basename='employee')

urlpatterns = [
    # POST /api/employees/leaves/{id}/review/        - Review leave request
    path('leaves/<uuid:leave_id>/review/', views.review_leave_view, name='leave-review'),

    # GET/POST /api/employees/salary-payments/       - Salary payments
    path('salary-payments/', views.salary_payments, name='salary-payments'),

    # GET    /api/employees/                          - List employment records
    # POST   /api/employees/                          - Create employment record
    # GET    /api/employees/{user_id}/                - Employment detail
    # PATCH  /api/employees/{user_id}/                - Update employment
    # GET/POST /api/employees/{user_id}/leaves/       - Leaves
    # GET/POST /api/employees/{user_id}/charges/      - Charges
    # PATCH/DELETE /api/employees/{user_id}/charges/{charge_id}/ - Charge payment / removal
    # GET/POST/PUT /api/employees/{user_id}/termination/ - Termination
    path('', include(router.urls)),
]
