import random

from django.conf import settings

from .models import InventoryItem, Product

SKU_PREFIX = 'JWL'


def generate_sku():
    """Generate a unique ``JWL-#####`` SKU not used by any item or product"""
    sku = f"{SKU_PREFIX}-{random.randint(10000, 99999)}"

    # Ensure uniqueness
    while InventoryItem.objects.filter(sku=sku).exists() or Product.objects.filter(sku=sku).exists():
        sku = f"{SKU_PREFIX}-{random.randint(10000, 99999)}"

    return sku


def low_stock_threshold():
    return getattr(settings, 'LOW_STOCK_THRESHOLD', 5)


# Columns available to list views and CSV export, in default display order
EXPORT_COLUMNS = [
    ('sku', 'SKU'),
    ('name', 'Name'),
    ('category', 'Category'),
    ('metal', 'Metal'),
    ('purity', 'Purity'),
    ('primary_stone', 'Primary Stone'),
    ('carat_weight', 'Carat Weight'),
    ('weight', 'Weight (g)'),
    ('quantity', 'Quantity'),
    ('cost', 'Cost'),
    ('price', 'Price'),
    ('location', 'Location'),
    ('vendor', 'Vendor'),
    ('status', 'Status'),
    ('created_at', 'Created'),
]


def export_row(item):
    return {
        'sku': item.sku,
        'name': item.name,
        'category': item.category,
        'metal': item.metal,
        'purity': item.purity,
        'primary_stone': item.primary_stone,
        'carat_weight': item.carat_weight if item.carat_weight is not None else '',
        'weight': item.weight if item.weight is not None else '',
        'quantity': item.quantity,
        'cost': item.cost,
        'price': item.price,
        'location': item.location.name if item.location else '',
        'vendor': item.vendor.name if item.vendor else '',
        'status': item.get_status_display(),
        'created_at': item.created_at.strftime('%Y-%m-%d') if item.created_at else '',
    }
