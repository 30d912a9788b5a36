from django.contrib import admin
from .models import InventoryItem, Product


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'metal', 'purity', 'quantity', 'price', 'status', 'location', 'vendor']
    list_filter = ['status', 'category', 'metal', 'location']
    search_fields = ['sku', 'name', 'description']
    list_select_related = ['location', 'vendor']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'unit_price', 'unit_cost', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['sku', 'name']
