from rest_framework import serializers
from .models import Location


class LocationSerializer(serializers.ModelSerializer):
    parent_code = serializers.CharField(source='parent.code', read_only=True, default=None)
    path = serializers.CharField(read_only=True)

    class Meta:
        model = Location
        fields = ['id', 'code', 'name', 'location_type', 'parent', 'parent_code', 'path', 'description',
                  'capacity', 'security_level', 'is_active', 'created_at', 'updated_at']

    def validate(self, attrs):
        parent = attrs.get('parent')
        if parent is not None and self.instance is not None:
            # Walk up from the new parent; reaching ourselves would create a cycle
            node = parent
            while node is not None:
                if node.pk == self.instance.pk:
                    raise serializers.ValidationError({'parent': 'A location cannot be nested inside itself.'})
                node = node.parent
        return attrs
