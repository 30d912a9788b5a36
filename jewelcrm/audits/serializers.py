from rest_framework import serializers

from .wizard import FILTER_MODES, DISCREPANCY_TYPES, DISCREPANCY_STATUSES, SORT_FIELDS, SORT_ORDERS, RESOLUTIONS


class AuditDataPatchSerializer(serializers.Serializer):
    """Editable auditData fields; every field is optional for shallow merging"""
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    locations = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    assignedUsers = serializers.ListField(child=serializers.CharField(max_length=150), required=False)
    isBlindCount = serializers.BooleanField(required=False)
    startDate = serializers.DateTimeField(required=False, allow_null=True)
    expectedEndDate = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        start = attrs.get('startDate')
        end = attrs.get('expectedEndDate')
        if start and end and end < start:
            raise serializers.ValidationError({'expectedEndDate': 'Expected end date cannot be before the start date.'})
        return attrs


class CountSerializer(serializers.Serializer):
    itemId = serializers.CharField()
    actualQuantity = serializers.IntegerField(min_value=0)
    foundLocation = serializers.CharField(required=False, allow_blank=True)


class ResolveSerializer(serializers.Serializer):
    resolution = serializers.ChoiceField(choices=RESOLUTIONS, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class StepSerializer(serializers.Serializer):
    step = serializers.IntegerField()


class DiscrepancyQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=DISCREPANCY_TYPES, required=False, default='all')
    location = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=DISCREPANCY_STATUSES, required=False, default='all')
    sort = serializers.ChoiceField(choices=SORT_FIELDS, required=False, default='difference')
    order = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default='desc')


class ItemsQuerySerializer(serializers.Serializer):
    filter = serializers.ChoiceField(choices=FILTER_MODES, required=False, default='all')
