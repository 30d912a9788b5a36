from django.urls import path
from .views import (
    supplier_list_create, supplier_detail, supplier_orders, supplier_scorecard,
    supplier_spend, supplier_performance
)

urlpatterns = [
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/spend/', supplier_spend, name='supplier-spend'),
    path('suppliers/performance/', supplier_performance, name='supplier-performance'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
    path('suppliers/<int:pk>/orders/', supplier_orders, name='supplier-orders'),
    path('suppliers/<int:pk>/scorecard/', supplier_scorecard, name='supplier-scorecard'),
]
