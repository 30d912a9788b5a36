"""Database lookups feeding the audit wizard"""
from jewelcrm.inventory.models import InventoryItem
from jewelcrm.locations.hierarchy import descendant_codes

# Items in these states are not on the shelves to be counted
UNCOUNTED_STATUSES = ('sold', 'archived')


def candidate_items(location_codes):
    """
    Expected-item snapshot for the selected locations, including everything
    stored underneath them.
    """
    if not location_codes:
        return []
    codes = descendant_codes(location_codes)
    items = (
        InventoryItem.objects.select_related('location')
        .filter(location__code__in=codes)
        .exclude(status__in=UNCOUNTED_STATUSES)
        .order_by('location__name', 'sku')
    )
    return [
        {
            'id': item.id,
            'sku': item.sku,
            'name': item.name,
            'category': item.category,
            'location': item.location.name,
            'locationCode': item.location.code,
            'expectedQuantity': item.quantity,
            'unitValue': float(item.price),
            'status': 'pending',
        }
        for item in items
    ]
