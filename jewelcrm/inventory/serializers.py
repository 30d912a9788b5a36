from rest_framework import serializers
from .models import InventoryItem, Product


class InventoryItemSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, default=None)
    location_code = serializers.CharField(source='location.code', read_only=True, default=None)
    location_name = serializers.CharField(source='location.name', read_only=True, default=None)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    margin = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, allow_null=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'sku', 'name', 'description', 'category', 'metal', 'purity', 'primary_stone',
            'carat_weight', 'weight', 'quantity', 'cost', 'price', 'status',
            'vendor', 'vendor_name', 'location', 'location_code', 'location_name',
            'image', 'tags', 'notes', 'total_value', 'margin', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            # SKU is generated when omitted
            'sku': {'required': False},
        }

    def validate_name(self, value):
        if len(value.strip()) < 3:
            raise serializers.ValidationError('Name must be at least 3 characters')
        return value.strip()

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise serializers.ValidationError('Tags must be a list of strings')
        return value


class ProductSerializer(serializers.ModelSerializer):
    inventory_sku = serializers.CharField(source='inventory_item.sku', read_only=True, default=None)

    class Meta:
        model = Product
        fields = ['id', 'sku', 'name', 'category', 'description', 'unit_price', 'unit_cost',
                  'inventory_item', 'inventory_sku', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'sku': {'required': False},
        }
