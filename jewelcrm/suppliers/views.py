import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.core.cache import cache
from django.db import IntegrityError
from django.db.models import Q
from django.shortcuts import get_object_or_404

from jewelcrm.core.cache_utils import make_versioned_key
from jewelcrm.core.responses import success, failure, validation_failure, paginate
from jewelcrm.core.serializers import DateRangeSerializer
from jewelcrm.core.utils import create_audit_log
from . import analytics
from .models import Supplier, SupplierOrder
from .serializers import SupplierSerializer, SupplierOrderSerializer

logger = logging.getLogger('jewelcrm.suppliers')

ANALYTICS_CACHE_TTL = 300
ANALYTICS_NAMESPACE = 'supplier_analytics'


def _split_param(value):
    """'a,b, c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [part.strip() for part in value.split(',') if part.strip()]


def _analytics_filters(request):
    """Parsed analytics filters, or ``(None, errors)`` when the date range is invalid"""
    params = request.query_params
    dates = DateRangeSerializer(data=params)
    if not dates.is_valid():
        return None, dates.errors
    supplier_ids = []
    for raw in _split_param(params.get('suppliers')):
        if raw.isdigit():
            supplier_ids.append(int(raw))
    return {
        'date_from': dates.validated_data['date_from'],
        'date_to': dates.validated_data['date_to'],
        'supplier_ids': supplier_ids,
        'categories': _split_param(params.get('categories')),
    }, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List suppliers (search, category, is_active) or create a supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all()

        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(code__icontains=search) |
                Q(contact_person__icontains=search) | Q(email__icontains=search)
            )

        category = request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)

        is_active = request.query_params.get('is_active')
        if is_active is not None and is_active != '':
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        return paginate(request, queryset.order_by('name', 'id'), SupplierSerializer)

    serializer = SupplierSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Supplier creation validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)
    try:
        supplier = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError creating supplier: {str(e)}", exc_info=True)
        return failure('A supplier with this code already exists')

    create_audit_log(request, 'create', 'Supplier', supplier.id, object_name=supplier.name, object_reference=supplier.code)
    logger.info(f"Supplier '{supplier.name}' created by {request.user.username}")
    return success(SupplierSerializer(supplier).data, status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        return success(SupplierSerializer(supplier).data)

    if request.method == 'DELETE':
        logger.info(f"User {request.user.username} deleting supplier {pk} ({supplier.name})")
        supplier.delete()
        create_audit_log(request, 'delete', 'Supplier', pk, object_name=supplier.name, object_reference=supplier.code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return validation_failure(serializer.errors)
    serializer.save()
    create_audit_log(request, 'update', 'Supplier', pk, changes=dict(request.data), object_name=supplier.name, object_reference=supplier.code)
    return success(serializer.data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_orders(request, pk):
    """List or record orders placed with a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        orders = supplier.orders.select_related('supplier')
        return paginate(request, orders, SupplierOrderSerializer)

    serializer = SupplierOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failure(serializer.errors)
    try:
        order = serializer.save(supplier=supplier)
    except IntegrityError:
        return failure('An order with this number already exists')

    create_audit_log(request, 'create', 'SupplierOrder', order.id, object_name=supplier.name, object_reference=order.order_number)
    logger.info(f"Order {order.order_number} recorded for supplier {supplier.name}")
    return success(SupplierOrderSerializer(order).data, status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_scorecard(request, pk):
    """Delivery/quality metrics, KPI targets and monthly trend for one supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)
    filters, errors = _analytics_filters(request)
    if errors:
        return validation_failure(errors)
    filters['supplier_ids'] = [supplier.id]

    cache_key = make_versioned_key(ANALYTICS_NAMESPACE, 'scorecard', supplier.id, **filters)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache hit for supplier {pk} scorecard")
        return success(cached)

    orders = analytics.filter_orders(SupplierOrder.objects.all(), **filters)
    data = analytics.supplier_scorecard(supplier, orders)
    cache.set(cache_key, data, ANALYTICS_CACHE_TTL)
    return success(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_spend(request):
    """Spend by category, supplier and month (filters: date_from, date_to, suppliers, categories)"""
    filters, errors = _analytics_filters(request)
    if errors:
        return validation_failure(errors)
    cache_key = make_versioned_key(ANALYTICS_NAMESPACE, 'spend', **filters)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for supplier spend analysis")
        return success(cached)

    orders = analytics.filter_orders(SupplierOrder.objects.all(), **filters)
    data = analytics.spend_analysis(orders)
    cache.set(cache_key, data, ANALYTICS_CACHE_TTL)
    return success(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_performance(request):
    """Suppliers ranked by overall score"""
    filters, errors = _analytics_filters(request)
    if errors:
        return validation_failure(errors)
    cache_key = make_versioned_key(ANALYTICS_NAMESPACE, 'performance', **filters)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for supplier performance ranking")
        return success(cached)

    suppliers = Supplier.objects.filter(is_active=True)
    if filters['supplier_ids']:
        suppliers = suppliers.filter(id__in=filters['supplier_ids'])
    if filters['categories']:
        suppliers = suppliers.filter(category__in=filters['categories'])
    orders = analytics.filter_orders(SupplierOrder.objects.all(), **filters)

    data = analytics.performance_ranking(suppliers, orders)
    cache.set(cache_key, data, ANALYTICS_CACHE_TTL)
    return success(data)
