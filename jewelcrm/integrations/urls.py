from django.urls import re_path
from .views import marketplace_list_create, integration_builder, endpoint_list

# Trailing slashes are optional on these routes
urlpatterns = [
    re_path(r'^integrations/marketplace/?$', marketplace_list_create, name='integration-marketplace'),
    re_path(r'^integrations/builder/?$', integration_builder, name='integration-builder'),
    re_path(r'^integrations/endpoints/?$', endpoint_list, name='integration-endpoints'),
]
