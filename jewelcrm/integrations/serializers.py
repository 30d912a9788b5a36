from rest_framework import serializers
from .models import MarketplaceIntegration, CustomIntegration, default_error_handling

TRIGGER_TYPES = ['webhook', 'schedule', 'database_change', 'api_call']
ACTION_TYPES = ['http_request', 'database_operation', 'file_operation', 'notification', 'data_transform']
OPERATORS = ['equals', 'not_equals', 'contains', 'greater_than', 'less_than', 'regex']


def _string_list(value, label):
    if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
        raise serializers.ValidationError(f'{label} must be a list of strings')
    return value


class MarketplaceIntegrationSerializer(serializers.ModelSerializer):
    pricing_label = serializers.CharField(read_only=True)

    class Meta:
        model = MarketplaceIntegration
        fields = [
            'id', 'name', 'description', 'developer', 'developer_email', 'category',
            'pricing_model', 'pricing_amount', 'currency', 'billing_cycle', 'pricing_label',
            'features', 'requirements', 'tags', 'documentation', 'support_email', 'support_url',
            'version', 'is_published', 'is_verified', 'rating', 'review_count', 'download_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['is_verified', 'rating', 'review_count', 'download_count', 'created_at', 'updated_at']

    def validate_features(self, value):
        return _string_list(value, 'Features')

    def validate_requirements(self, value):
        return _string_list(value, 'Requirements')

    def validate_tags(self, value):
        return _string_list(value, 'Tags')

    def validate(self, attrs):
        model = attrs.get('pricing_model', getattr(self.instance, 'pricing_model', 'free'))
        amount = attrs.get('pricing_amount', getattr(self.instance, 'pricing_amount', None))
        if model in ('one_time', 'subscription', 'usage_based') and amount is None:
            raise serializers.ValidationError({'pricing_amount': 'Required for paid pricing models'})
        if model == 'subscription' and not attrs.get('billing_cycle', getattr(self.instance, 'billing_cycle', '')):
            raise serializers.ValidationError({'billing_cycle': 'Required for subscriptions'})
        return attrs


class TriggerSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TRIGGER_TYPES)
    config = serializers.DictField(required=False, default=dict)


class ActionSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=ACTION_TYPES)
    config = serializers.DictField(required=False, default=dict)


class ConditionSerializer(serializers.Serializer):
    field = serializers.CharField()
    operator = serializers.ChoiceField(choices=OPERATORS)
    value = serializers.JSONField(required=False, allow_null=True, default=None)


class ErrorHandlingSerializer(serializers.Serializer):
    retryCount = serializers.IntegerField(min_value=0, max_value=10, default=3)
    retryDelay = serializers.IntegerField(min_value=0, default=5000)
    fallbackAction = serializers.CharField(allow_blank=True, required=False, default='')


class ConfigurationSerializer(serializers.Serializer):
    triggers = TriggerSerializer(many=True, required=False, default=list)
    actions = ActionSerializer(many=True, required=False, default=list)
    conditions = ConditionSerializer(many=True, required=False, default=list)
    dataMapping = serializers.DictField(child=serializers.CharField(), required=False, default=dict)
    errorHandling = ErrorHandlingSerializer(required=False)

    def validate(self, attrs):
        if 'errorHandling' not in attrs:
            attrs['errorHandling'] = default_error_handling()
        return attrs


class ScheduleSerializer(serializers.Serializer):
    enabled = serializers.BooleanField(default=False)
    cronExpression = serializers.CharField(allow_blank=True, required=False, default='')
    timezone = serializers.CharField(required=False, default='UTC')

    def validate(self, attrs):
        if attrs['enabled'] and len(attrs['cronExpression'].split()) != 5:
            raise serializers.ValidationError({'cronExpression': 'Enabled schedules need a five-field cron expression'})
        return attrs


class MetadataSerializer(serializers.Serializer):
    version = serializers.CharField(required=False, default='1.0.0')
    author = serializers.CharField(allow_blank=True, required=False, default='')
    tags = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    category = serializers.CharField(allow_blank=True, required=False, default='')


class CustomIntegrationSerializer(serializers.Serializer):
    """Builder payload in, saved integration out (camelCase both ways)"""
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(allow_blank=True, required=False, default='')
    template = serializers.ChoiceField(choices=CustomIntegration.TEMPLATE_CHOICES)
    configuration = ConfigurationSerializer(required=False)
    isActive = serializers.BooleanField(source='is_active', required=False, default=False)
    schedule = ScheduleSerializer(required=False)
    permissions = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    metadata = MetadataSerializer(required=False)
    generatedCode = serializers.CharField(source='generated_code', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name is required')
        return value.strip()

    def create(self, validated_data):
        return CustomIntegration.objects.create(**validated_data)
