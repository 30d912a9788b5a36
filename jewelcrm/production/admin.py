from django.contrib import admin
from .models import WorkOrder, WorkOrderStone, WorkOrderStage


class WorkOrderStoneInline(admin.TabularInline):
    model = WorkOrderStone
    extra = 0


class WorkOrderStageInline(admin.TabularInline):
    model = WorkOrderStage
    extra = 0


@admin.register(WorkOrder)
class WorkOrderAdmin(admin.ModelAdmin):
    list_display = ['number', 'item_name', 'customer_name', 'status', 'current_stage', 'priority', 'progress', 'due_date']
    list_filter = ['status', 'current_stage', 'priority']
    search_fields = ['number', 'item_name', 'customer_name', 'sales_order_number']
    ordering = ['due_date']
    inlines = [WorkOrderStoneInline, WorkOrderStageInline]
