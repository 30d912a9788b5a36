import django_filters
from django.db.models import Q

from jewelcrm.locations.hierarchy import descendant_codes
from .models import InventoryItem
from .utils import low_stock_threshold


class InventoryItemFilter(django_filters.FilterSet):
    """
    Inventory list filters. Every supplied filter narrows the result further,
    so combining them always means "match all".
    """

    # Basic search - sku, name, description, category, stone
    search = django_filters.CharFilter(method='filter_search', label='Search')

    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    status = django_filters.MultipleChoiceFilter(choices=InventoryItem.STATUS_CHOICES)
    metal = django_filters.CharFilter(field_name='metal', lookup_expr='iexact')
    purity = django_filters.CharFilter(field_name='purity', lookup_expr='iexact')
    vendor = django_filters.NumberFilter(field_name='vendor_id', lookup_expr='exact')

    # Location code; includes everything stored underneath it
    location = django_filters.CharFilter(method='filter_location', label='Location code')

    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')
    min_quantity = django_filters.NumberFilter(field_name='quantity', lookup_expr='gte')
    max_quantity = django_filters.NumberFilter(field_name='quantity', lookup_expr='lte')
    min_carat = django_filters.NumberFilter(field_name='carat_weight', lookup_expr='gte')
    max_carat = django_filters.NumberFilter(field_name='carat_weight', lookup_expr='lte')

    low_stock = django_filters.BooleanFilter(method='filter_low_stock', label='Low Stock')
    out_of_stock = django_filters.BooleanFilter(method='filter_out_of_stock', label='Out of Stock')

    class Meta:
        model = InventoryItem
        fields = ['search', 'category', 'status', 'metal', 'purity', 'vendor', 'location',
                  'min_price', 'max_price', 'min_quantity', 'max_quantity', 'min_carat', 'max_carat',
                  'low_stock', 'out_of_stock']

    def filter_search(self, queryset, name, value):
        search = value.strip() if value else ''
        if not search:
            return queryset
        return queryset.filter(
            Q(sku__icontains=search) |
            Q(name__icontains=search) |
            Q(description__icontains=search) |
            Q(category__icontains=search) |
            Q(primary_stone__icontains=search)
        )

    def filter_location(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(location__code__in=descendant_codes([value]))

    def filter_low_stock(self, queryset, name, value):
        if value is None:
            return queryset
        low = Q(quantity__gt=0, quantity__lte=low_stock_threshold())
        return queryset.filter(low) if value else queryset.exclude(low)

    def filter_out_of_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(quantity=0) if value else queryset.exclude(quantity=0)
