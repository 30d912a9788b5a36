from rest_framework import serializers
from .models import Supplier, SupplierOrder


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'code', 'category', 'contact_person', 'phone', 'email', 'address',
                  'payment_terms', 'notes', 'is_active', 'created_at', 'updated_at']


class SupplierOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    on_time = serializers.BooleanField(read_only=True, allow_null=True)

    class Meta:
        model = SupplierOrder
        fields = ['id', 'supplier', 'supplier_name', 'order_number', 'category', 'amount', 'ordered_on',
                  'expected_on', 'delivered_on', 'on_time', 'quality_score', 'notes', 'created_at']
        read_only_fields = ['supplier', 'created_at']

    def validate(self, attrs):
        ordered_on = attrs.get('ordered_on', getattr(self.instance, 'ordered_on', None))
        for field in ('expected_on', 'delivered_on'):
            value = attrs.get(field)
            if value and ordered_on and value < ordered_on:
                raise serializers.ValidationError({field: 'Cannot be earlier than the order date.'})
        return attrs
