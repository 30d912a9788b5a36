import logging
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from jewelcrm.core.responses import success, paginate
from .models import WorkOrder
from .serializers import WorkOrderListSerializer, WorkOrderDetailSerializer

logger = logging.getLogger('jewelcrm.production')

ORDERING_FIELDS = {'due_date', '-due_date', 'number', '-number', 'progress', '-progress', 'created_at', '-created_at'}


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def work_order_list(request):
    """List work orders (status, stage, priority, search, overdue)"""
    queryset = WorkOrder.objects.all()
    params = request.query_params

    status_filter = params.get('status')
    if status_filter:
        queryset = queryset.filter(status__in=status_filter.split(','))

    stage = params.get('stage')
    if stage:
        queryset = queryset.filter(current_stage=stage)

    priority = params.get('priority')
    if priority:
        queryset = queryset.filter(priority=priority)

    search = params.get('search')
    if search:
        queryset = queryset.filter(
            Q(number__icontains=search) | Q(customer_name__icontains=search) |
            Q(item_name__icontains=search) | Q(sales_order_number__icontains=search)
        )

    if params.get('overdue', '').lower() == 'true':
        queryset = queryset.filter(due_date__lt=timezone.localdate()).exclude(status__in=['completed', 'cancelled'])

    ordering = params.get('ordering')
    if ordering not in ORDERING_FIELDS:
        ordering = 'due_date'
    queryset = queryset.order_by(ordering, 'id')

    return paginate(request, queryset, WorkOrderListSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def work_order_detail(request, pk):
    work_order = get_object_or_404(
        WorkOrder.objects.prefetch_related('stones', 'timeline'), pk=pk
    )
    logger.debug(f"Work order {work_order.number} viewed by {request.user.username}")
    return success(WorkOrderDetailSerializer(work_order).data)
