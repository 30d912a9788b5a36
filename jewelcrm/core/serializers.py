from rest_framework import serializers
from .models import User, AuditLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'username', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']


class DateRangeSerializer(serializers.Serializer):
    """``date_from``/``date_to`` query parameters (YYYY-MM-DD, both optional)"""
    date_from = serializers.DateField(required=False, allow_null=True, default=None)
    date_to = serializers.DateField(required=False, allow_null=True, default=None)

    def to_internal_value(self, data):
        # Blank query values mean "no bound"
        data = {key: data.get(key) or None for key in ('date_from', 'date_to')}
        return super().to_internal_value(data)

    def validate(self, attrs):
        if attrs['date_from'] and attrs['date_to'] and attrs['date_to'] < attrs['date_from']:
            raise serializers.ValidationError({'date_to': 'End date cannot be before the start date.'})
        return attrs
