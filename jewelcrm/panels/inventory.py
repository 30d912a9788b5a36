import logging

from .base import CrudPanel, REMOTE_ERRORS, error_text, as_number, text_search, equals, at_least, at_most
from .samples import SAMPLE_INVENTORY

logger = logging.getLogger('jewelcrm.panels')

LOW_STOCK_THRESHOLD = 5


def _low_stock(item, flag):
    quantity = as_number(item.get('quantity'))
    is_low = quantity is not None and 0 < quantity <= LOW_STOCK_THRESHOLD
    return is_low if flag else not is_low


def _vendor(item, value):
    return str(value) in (str(item.get('vendor')), str(item.get('vendor_name')))


class InventoryPanel(CrudPanel):
    resource = '/inventory'
    label = 'inventory item'
    plural = 'inventory items'
    sample_data = SAMPLE_INVENTORY
    columns = [
        ('sku', 'SKU'),
        ('name', 'Name'),
        ('category', 'Category'),
        ('metal', 'Metal'),
        ('primary_stone', 'Stone'),
        ('carat_weight', 'Carat'),
        ('quantity', 'Quantity'),
        ('price', 'Price'),
        ('cost', 'Cost'),
        ('status', 'Status'),
        ('location_code', 'Location'),
        ('vendor_name', 'Vendor'),
    ]

    def predicates(self):
        return {
            'search': text_search('sku', 'name', 'description'),
            'category': equals('category'),
            'status': equals('status', case_sensitive=True),
            'metal': equals('metal'),
            'vendor': _vendor,
            'location': equals('location_code'),
            'min_price': at_least('price'),
            'max_price': at_most('price'),
            'min_quantity': at_least('quantity'),
            'max_quantity': at_most('quantity'),
            'min_carat': at_least('carat_weight'),
            'max_carat': at_most('carat_weight'),
            'low_stock': _low_stock,
        }

    def product_payload(self, item):
        return {
            'sku': item.get('sku'),
            'name': item.get('name'),
            'category': item.get('category') or 'general',
            'description': item.get('description') or '',
            'unit_price': item.get('price'),
            'unit_cost': item.get('cost'),
            'inventory_item': item.get('id'),
        }

    def create(self, payload):
        """Create the inventory item, then its catalogue product"""
        try:
            body = self.client.post(self.list_path(), payload)
        except REMOTE_ERRORS as e:
            logger.warning(f"Creating inventory item failed: {e}")
            item = self.build_local(payload)
            self.items.insert(0, item)
            self.notify('success', 'Inventory item added (local only - API connection failed)')
            return item

        item = body['data']
        self.items.insert(0, item)
        try:
            self.client.post('/products', self.product_payload(item))
        except REMOTE_ERRORS as e:
            self.notify('warning', f"Inventory item added, but the product listing failed: {e}")
            return item
        self.notify('success', 'Inventory item added.')
        return item

    def _replace(self, item):
        position = self._index(item['id'])
        if position is not None:
            self.items[position] = item

    def archive(self, item_id):
        try:
            body = self.client.post(f"/inventory/{item_id}/archive/")
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, 'Failed to archive item.'))
            return None
        self._replace(body['data'])
        self.notify('success', 'Inventory item archived.')
        return body['data']

    def duplicate(self, item_id):
        try:
            body = self.client.post(f"/inventory/{item_id}/duplicate/")
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, 'Failed to duplicate item.'))
            return None
        self.items.insert(0, body['data'])
        self.notify('success', f"Inventory item duplicated as {body['data']['sku']}.")
        return body['data']

    def metrics(self):
        """Server metrics, or the same figures computed from the local list"""
        try:
            return self.client.get('/inventory/metrics/')['data']
        except REMOTE_ERRORS as e:
            logger.warning(f"Loading inventory metrics failed: {e}")
        quantities = [as_number(item.get('quantity')) or 0 for item in self.items]
        return {
            'total_items': len(self.items),
            'total_units': int(sum(quantities)),
            'total_value': round(sum(
                (as_number(item.get('price')) or 0) * (as_number(item.get('quantity')) or 0) for item in self.items
            ), 2),
            'low_stock': len([q for q in quantities if 0 < q <= LOW_STOCK_THRESHOLD]),
            'out_of_stock': len([q for q in quantities if q == 0]),
        }
