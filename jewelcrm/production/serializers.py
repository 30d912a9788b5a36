from rest_framework import serializers
from .models import WorkOrder, WorkOrderStone, WorkOrderStage


class WorkOrderStoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = WorkOrderStone
        fields = ['id', 'code', 'stone_type', 'shape', 'size', 'color', 'clarity', 'quantity', 'placement', 'status']


class WorkOrderStageSerializer(serializers.ModelSerializer):
    stage_display = serializers.CharField(source='get_stage_display', read_only=True)
    duration_days = serializers.IntegerField(read_only=True)

    class Meta:
        model = WorkOrderStage
        fields = ['id', 'stage', 'stage_display', 'started_on', 'completed_on', 'duration_days',
                  'completed_by', 'notes', 'quality_passed', 'quality_checked_by']


class WorkOrderListSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    stage_display = serializers.CharField(source='get_current_stage_display', read_only=True)
    days_until_due = serializers.IntegerField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = WorkOrder
        fields = ['id', 'number', 'status', 'status_display', 'priority', 'current_stage', 'stage_display',
                  'progress', 'customer_name', 'assigned_to', 'item_name', 'due_date', 'days_until_due',
                  'is_overdue']


class WorkOrderDetailSerializer(WorkOrderListSerializer):
    stones = WorkOrderStoneSerializer(many=True, read_only=True)
    timeline = WorkOrderStageSerializer(many=True, read_only=True)

    class Meta(WorkOrderListSerializer.Meta):
        fields = WorkOrderListSerializer.Meta.fields + [
            'sales_order_number', 'customer_email', 'customer_phone', 'item_description',
            'metal_type', 'metal_purity', 'metal_finish', 'estimated_weight', 'actual_weight',
            'instructions', 'stones', 'timeline', 'created_at', 'updated_at'
        ]
