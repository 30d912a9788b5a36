from django.urls import path
from .views import location_list_create, location_detail, location_tree

urlpatterns = [
    path('locations/', location_list_create, name='location-list-create'),
    path('locations/tree/', location_tree, name='location-tree'),
    path('locations/<int:pk>/', location_detail, name='location-detail'),
]
