from django.contrib import admin
from .models import Supplier, SupplierOrder


class SupplierOrderInline(admin.TabularInline):
    model = SupplierOrder
    extra = 0
    fields = ['order_number', 'category', 'amount', 'ordered_on', 'expected_on', 'delivered_on', 'quality_score']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'category', 'contact_person', 'phone', 'email', 'is_active']
    list_filter = ['category', 'is_active', 'created_at']
    search_fields = ['name', 'code', 'contact_person', 'email']
    ordering = ['name']
    inlines = [SupplierOrderInline]


@admin.register(SupplierOrder)
class SupplierOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'supplier', 'category', 'amount', 'ordered_on', 'expected_on', 'delivered_on', 'quality_score']
    list_filter = ['category', 'ordered_on']
    search_fields = ['order_number', 'supplier__name']
    date_hierarchy = 'ordered_on'
