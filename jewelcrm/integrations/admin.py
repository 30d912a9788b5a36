from django.contrib import admin
from .models import MarketplaceIntegration, CustomIntegration


@admin.register(MarketplaceIntegration)
class MarketplaceIntegrationAdmin(admin.ModelAdmin):
    list_display = ['name', 'developer', 'category', 'pricing_model', 'rating', 'download_count', 'is_published', 'is_verified']
    list_filter = ['category', 'pricing_model', 'is_published', 'is_verified']
    search_fields = ['name', 'developer', 'description']


@admin.register(CustomIntegration)
class CustomIntegrationAdmin(admin.ModelAdmin):
    list_display = ['name', 'template', 'is_active', 'created_by', 'created_at']
    list_filter = ['template', 'is_active']
    search_fields = ['name', 'description']
    readonly_fields = ['generated_code', 'created_at', 'updated_at']
