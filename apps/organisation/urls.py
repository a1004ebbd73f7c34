from django.urls import path
from . import views

app_name = 'organisation'

urlpatterns = [
    # GET /api/settings/tax/             - Tax settings (staff)
    # PUT /api/settings/tax/             - Update tax settings (admin)
    path('tax/', views.tax_settings, name='tax-settings'),

    # GET  /api/settings/exchange-rates/ - Rates for ?base= (staff)
    # POST /api/settings/exchange-rates/ - Create or update a rate (admin)
    path('exchange-rates/', views.exchange_rates, name='exchange-rates'),
]
