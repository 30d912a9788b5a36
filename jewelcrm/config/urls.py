"""
URL configuration for the jewelcrm project.

Every app mounts its routes under ``api/``; the admin stays at ``admin/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Jewel CRM Administration"
admin.site.site_title = "Jewel CRM Admin Portal"
admin.site.index_title = "Welcome to the Jewel CRM back office"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('jewelcrm.core.urls')),
    path('api/', include('jewelcrm.locations.urls')),
    path('api/', include('jewelcrm.inventory.urls')),
    path('api/', include('jewelcrm.audits.urls')),
    path('api/', include('jewelcrm.suppliers.urls')),
    path('api/', include('jewelcrm.production.urls')),
    path('api/', include('jewelcrm.integrations.urls')),
]
