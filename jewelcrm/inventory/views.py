import logging
from decimal import Decimal

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.core.cache import cache
from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Sum, Count, F, Q, DecimalField, ExpressionWrapper
from django.shortcuts import get_object_or_404

from jewelcrm.core.cache_signals import suspend_cache_signals, invalidate_inventory_cache
from jewelcrm.core.cache_utils import make_versioned_key
from jewelcrm.core.exports import select_columns, csv_response, UnknownColumnError
from jewelcrm.core.responses import success, failure, validation_failure, paginate
from jewelcrm.core.utils import create_audit_log
from .filters import InventoryItemFilter
from .models import InventoryItem, Product
from .serializers import InventoryItemSerializer, ProductSerializer
from .utils import generate_sku, low_stock_threshold, EXPORT_COLUMNS, export_row

logger = logging.getLogger('jewelcrm.inventory')

INVENTORY_METRICS_NAMESPACE = 'inventory_metrics'

ORDERING_FIELDS = {'sku', 'name', 'category', 'quantity', 'price', 'cost', 'created_at', 'updated_at', 'status'}


def filtered_inventory(request):
    """Apply list filters and ordering; archived items are hidden unless asked for"""
    queryset = InventoryItem.objects.select_related('vendor', 'location')

    params = request.query_params
    include_archived = params.get('include_archived', 'false').lower() == 'true'
    if not include_archived and not params.get('status'):
        queryset = queryset.exclude(status='archived')

    filterset = InventoryItemFilter(params, queryset=queryset)
    if not filterset.is_valid():
        return None, {field: list(messages) for field, messages in filterset.errors.items()}
    queryset = filterset.qs

    ordering = params.get('ordering', '-created_at')
    if ordering.lstrip('-') in ORDERING_FIELDS:
        queryset = queryset.order_by(ordering, '-id')
    return queryset, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List inventory (filtered, paginated) or create an inventory item"""
    if request.method == 'GET':
        queryset, errors = filtered_inventory(request)
        if errors:
            return validation_failure(errors)
        return paginate(request, queryset, InventoryItemSerializer)

    serializer = InventoryItemSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Inventory item validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)

    extra = {}
    if not serializer.validated_data.get('sku'):
        extra['sku'] = generate_sku()
    try:
        item = serializer.save(**extra)
    except IntegrityError as e:
        logger.error(f"IntegrityError creating inventory item: {str(e)}", exc_info=True)
        return failure('An item with this SKU already exists')

    create_audit_log(request, 'create', 'InventoryItem', item.id, object_name=item.name, object_reference=item.sku)
    logger.info(f"Inventory item {item.sku} created by {request.user.username}")
    return success(InventoryItemSerializer(item).data, status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem.objects.select_related('vendor', 'location'), pk=pk)

    if request.method == 'GET':
        return success(InventoryItemSerializer(item).data)

    if request.method == 'DELETE':
        logger.info(f"User {request.user.username} deleting inventory item {pk} ({item.sku})")
        item.delete()
        create_audit_log(request, 'delete', 'InventoryItem', pk, object_name=item.name, object_reference=item.sku)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        logger.warning(f"Inventory item {pk} update validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)
    try:
        item = serializer.save()
    except IntegrityError:
        return failure('An item with this SKU already exists')

    create_audit_log(request, 'update', 'InventoryItem', pk, changes=dict(request.data), object_name=item.name, object_reference=item.sku)
    return success(InventoryItemSerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_bulk_delete(request):
    """Delete several items at once; body ``{"ids": [...]}``"""
    ids = request.data.get('ids')
    if not isinstance(ids, list) or not ids:
        return failure('ids must be a non-empty list')
    try:
        ids = sorted({int(pk) for pk in ids})
    except (TypeError, ValueError):
        return failure('ids must be integers')

    with transaction.atomic():
        items = list(InventoryItem.objects.filter(id__in=ids).values('id', 'sku'))
        found = [row['id'] for row in items]
        # One invalidation after the batch instead of one per row
        with suspend_cache_signals():
            InventoryItem.objects.filter(id__in=found).delete()
    invalidate_inventory_cache()

    found_ids = set(found)
    not_found = [pk for pk in ids if pk not in found_ids]
    create_audit_log(request, 'bulk_delete', 'InventoryItem', ','.join(str(pk) for pk in found) or '-',
                     changes={'skus': [row['sku'] for row in items], 'not_found': not_found})
    logger.info(f"User {request.user.username} bulk deleted {len(found)} inventory items")
    return success({'deleted': found, 'not_found': not_found})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_archive(request, pk):
    item = get_object_or_404(InventoryItem, pk=pk)
    if item.status == 'archived':
        return failure('Item is already archived')

    previous = item.status
    item.status = 'archived'
    item.save(update_fields=['status', 'updated_at'])
    create_audit_log(request, 'archive', 'InventoryItem', item.id, changes={'status': [previous, 'archived']},
                     object_name=item.name, object_reference=item.sku)
    logger.info(f"Inventory item {item.sku} archived by {request.user.username}")
    return success(InventoryItemSerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_duplicate(request, pk):
    """Copy an item under a freshly generated SKU"""
    source = get_object_or_404(InventoryItem, pk=pk)
    original_sku = source.sku

    copy = source
    copy.pk = None
    copy._state.adding = True
    copy.sku = generate_sku()
    copy.tags = list(source.tags or [])
    copy.save()

    create_audit_log(request, 'duplicate', 'InventoryItem', copy.id, changes={'source_sku': original_sku},
                     object_name=copy.name, object_reference=copy.sku)
    logger.info(f"Inventory item {original_sku} duplicated as {copy.sku}")
    return success(InventoryItemSerializer(copy).data, status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_export(request):
    """
    Export the filtered inventory list as CSV.

    ``columns`` is a comma separated list of column keys; the file contains
    exactly those columns in that order (all columns when omitted).
    """
    requested = [c.strip() for c in request.query_params.get('columns', '').split(',') if c.strip()]
    try:
        columns = select_columns(EXPORT_COLUMNS, requested)
    except UnknownColumnError as e:
        return failure(str(e), details={'available': [key for key, _ in EXPORT_COLUMNS]})

    queryset, errors = filtered_inventory(request)
    if errors:
        return validation_failure(errors)

    rows = [export_row(item) for item in queryset]
    create_audit_log(request, 'export', 'InventoryItem', 'export', changes={'columns': [key for key, _ in columns], 'rows': len(rows)})
    logger.info(f"User {request.user.username} exported {len(rows)} inventory rows")
    return csv_response('inventory.csv', columns, rows)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_metrics(request):
    """Headline inventory numbers and per-category breakdown (archived items excluded)"""
    threshold = low_stock_threshold()
    cache_key = make_versioned_key(INVENTORY_METRICS_NAMESPACE, threshold)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for inventory metrics")
        return success(cached)

    queryset = InventoryItem.objects.exclude(status='archived')
    line_value = ExpressionWrapper(F('price') * F('quantity'), output_field=DecimalField(max_digits=16, decimal_places=2))
    line_cost = ExpressionWrapper(F('cost') * F('quantity'), output_field=DecimalField(max_digits=16, decimal_places=2))

    totals = queryset.aggregate(
        total_items=Count('id'),
        total_units=Sum('quantity'),
        total_value=Sum(line_value),
        total_cost=Sum(line_cost),
        low_stock=Count('id', filter=Q(quantity__gt=0, quantity__lte=threshold)),
        out_of_stock=Count('id', filter=Q(quantity=0)),
    )

    by_category = [
        {
            'category': row['category'] or 'Uncategorized',
            'items': row['items'],
            'units': row['units'] or 0,
            'value': str(row['value'] or Decimal('0.00')),
        }
        for row in queryset.values('category')
        .annotate(items=Count('id'), units=Sum('quantity'), value=Sum(line_value))
        .order_by('-value', 'category')
    ]
    by_status = {
        row['status']: row['count']
        for row in queryset.values('status').annotate(count=Count('id')).order_by('status')
    }

    data = {
        'total_items': totals['total_items'],
        'total_units': totals['total_units'] or 0,
        'total_value': str(totals['total_value'] or Decimal('0.00')),
        'total_cost': str(totals['total_cost'] or Decimal('0.00')),
        'low_stock': totals['low_stock'],
        'out_of_stock': totals['out_of_stock'],
        'low_stock_threshold': threshold,
        'by_category': by_category,
        'by_status': by_status,
    }
    cache.set(cache_key, data, getattr(settings, 'INVENTORY_METRICS_CACHE_TTL', 300))
    return success(data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List catalogue products or create one"""
    if request.method == 'GET':
        queryset = Product.objects.select_related('inventory_item')
        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(sku__icontains=search))
        category = request.query_params.get('category')
        if category:
            queryset = queryset.filter(category__iexact=category)
        return paginate(request, queryset.order_by('name', 'id'), ProductSerializer)

    serializer = ProductSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failure(serializer.errors)

    extra = {}
    if not serializer.validated_data.get('sku'):
        item = serializer.validated_data.get('inventory_item')
        extra['sku'] = item.sku if item and not Product.objects.filter(sku=item.sku).exists() else generate_sku()
    try:
        product = serializer.save(**extra)
    except IntegrityError:
        return failure('A product with this SKU already exists')

    create_audit_log(request, 'create', 'Product', product.id, object_name=product.name, object_reference=product.sku)
    logger.info(f"Product {product.sku} created by {request.user.username}")
    return success(ProductSerializer(product).data, status.HTTP_201_CREATED)
