from django.urls import path
from .views import work_order_list, work_order_detail

urlpatterns = [
    path('work-orders/', work_order_list, name='work-order-list'),
    path('work-orders/<int:pk>/', work_order_detail, name='work-order-detail'),
]
