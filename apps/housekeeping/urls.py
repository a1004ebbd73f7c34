from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'housekeeping'

router = DefaultRouter()
router.register(r'tasks', views.CleaningTaskViewSet, basename='task')

urlpatterns = [
    # GET    /api/housekeeping/tasks/                     - List tasks
    # POST   /api/housekeeping/tasks/                     - Create task (manager)
    # GET    /api/housekeeping/tasks/{id}/                - Task with logs
    # POST   /api/housekeeping/tasks/{id}/assign/         - Assign (manager)
    # POST   /api/housekeeping/tasks/{id}/start/          - Start
    # GET/POST /api/housekeeping/tasks/{id}/logs/         - Work log
    # POST   /api/housekeeping/tasks/{id}/complete/       - Complete
    # POST   /api/housekeeping/tasks/{id}/inspect/        - Inspect (manager)
    # GET    /api/housekeeping/tasks/pending/             - Open tasks, urgent first
    # GET    /api/housekeeping/tasks/turnaround/          - Average turnaround hours
    # GET    /api/housekeeping/tasks/unit/{unit_number}/  - Unit history
    path('', include(router.urls)),
]
