"""
URL configuration for the hotel operations API.

Every app is mounted under ``/api/<app>/``; see each app's ``urls.py``
for the individual routes.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from config.views import health_check

urlpatterns = [
    # Health check (for Render)
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # API endpoints
    path('api/departments/', include('apps.departments.urls')),
    path('api/inventory/', include('apps.inventory.urls')),
    path('api/orders/', include('apps.orders.urls')),
    path('api/discounts/', include('apps.discounts.urls')),
    path('api/employees/', include('apps.employees.urls')),
    path('api/housekeeping/', include('apps.housekeeping.urls')),
    path('api/settings/', include('apps.organisation.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
