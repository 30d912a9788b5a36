from django.contrib import admin
from .models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'location_type', 'parent', 'security_level', 'capacity', 'is_active']
    list_filter = ['location_type', 'security_level', 'is_active']
    search_fields = ['name', 'code']
    ordering = ['name']
