"""
URL configuration for the BookMe barbershop booking API.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('accounts/', include('apps.accounts.urls', namespace='accounts')),
    path('barbers/', include('apps.barbers.urls', namespace='barbers')),
    path('services/', include('apps.services.urls', namespace='services')),
    path('appointments/', include('apps.appointments.urls', namespace='appointments')),
    path('settings/', include('apps.core.urls', namespace='core')),
    path('invoices/', include('apps.invoices.urls', namespace='invoices')),
]

# JSON error handlers
handler400 = 'apps.core.views.error_400'
handler403 = 'apps.core.views.error_403'
handler404 = 'apps.core.views.error_404'
handler500 = 'apps.core.views.error_500'

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
