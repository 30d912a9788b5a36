from django.urls import re_path
from .views import (
    inventory_list_create, inventory_detail, inventory_bulk_delete,
    inventory_archive, inventory_duplicate, inventory_export, inventory_metrics,
    product_list_create
)

# Trailing slashes are optional on these routes
urlpatterns = [
    re_path(r'^inventory/?$', inventory_list_create, name='inventory-list-create'),
    re_path(r'^inventory/bulk-delete/?$', inventory_bulk_delete, name='inventory-bulk-delete'),
    re_path(r'^inventory/export/?$', inventory_export, name='inventory-export'),
    re_path(r'^inventory/metrics/?$', inventory_metrics, name='inventory-metrics'),
    re_path(r'^inventory/(?P<pk>\d+)/?$', inventory_detail, name='inventory-detail'),
    re_path(r'^inventory/(?P<pk>\d+)/archive/?$', inventory_archive, name='inventory-archive'),
    re_path(r'^inventory/(?P<pk>\d+)/duplicate/?$', inventory_duplicate, name='inventory-duplicate'),
    re_path(r'^products/?$', product_list_create, name='product-list-create'),
]
