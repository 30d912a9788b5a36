"""
Comprehensive test suite for the Inventory module
Tests: CRUD, conjunctive filtering, bulk delete, archive/duplicate, CSV export, metrics and products
"""
import csv
import io
import re
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from jewelcrm.core.models import AuditLog
from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.inventory.models import InventoryItem, Product
from jewelcrm.inventory.utils import generate_sku


def result_skus(response):
    return sorted(row['sku'] for row in response.data['data'])


class InventoryModelTests(TestCase):
    def test_total_value_and_margin(self):
        item = TestDataFactory.create_inventory_item(quantity=3, price=Decimal('200.00'), cost=Decimal('150.00'))
        self.assertEqual(item.total_value, Decimal('600.00'))
        self.assertEqual(item.margin, Decimal('25.00'))

    def test_generated_sku_format_and_uniqueness(self):
        sku = generate_sku()
        self.assertRegex(sku, r'^JWL-\d{5}$')
        self.assertFalse(InventoryItem.objects.filter(sku=sku).exists())


class InventoryAPITests(TestCase):
    """Test inventory CRUD endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_generates_sku_when_missing(self):
        response = self.client.post('/api/inventory', {
            'name': 'Diamond Tennis Bracelet', 'category': 'Bracelets', 'quantity': 2,
            'price': '4200.00', 'cost': '2100.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertRegex(response.data['data']['sku'], r'^JWL-\d{5}$')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='InventoryItem').exists())

    def test_create_validates_name(self):
        response = self.client.post('/api/inventory/', {'sku': 'X-1', 'name': 'ab'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data['details'])

    def test_duplicate_sku_rejected(self):
        TestDataFactory.create_inventory_item(sku='JR-001')
        response = self.client.post('/api/inventory', {'sku': 'JR-001', 'name': 'Another Ring'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        item = TestDataFactory.create_inventory_item(sku='JR-002')
        response = self.client.patch(f'/api/inventory/{item.id}', {'quantity': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['quantity'], 7)

        response = self.client.delete(f'/api/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryItem.objects.filter(pk=item.pk).exists())

    def test_missing_item_is_404_envelope(self):
        response = self.client.get('/api/inventory/999999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_archived_items_hidden_by_default(self):
        TestDataFactory.create_inventory_item(sku='LIVE-1')
        TestDataFactory.create_inventory_item(sku='OLD-1', status='archived')

        self.assertEqual(result_skus(self.client.get('/api/inventory')), ['LIVE-1'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'include_archived': 'true'})), ['LIVE-1', 'OLD-1'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'status': 'archived'})), ['OLD-1'])

    def test_pagination(self):
        for index in range(5):
            TestDataFactory.create_inventory_item(sku=f'PG-{index}')
        response = self.client.get('/api/inventory', {'limit': 2, 'page': 2})
        pagination = response.data['pagination']
        self.assertEqual(len(response.data['data']), 2)
        self.assertEqual(pagination['count'], 5)
        self.assertEqual(pagination['total_pages'], 3)
        self.assertEqual(pagination['previous'], 1)
        self.assertEqual(pagination['next'], 3)


class InventoryFilterTests(TestCase):
    """Filter predicates are conjunctive: every supplied filter must hold"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.store = TestDataFactory.create_location(code='store1')
        self.case = TestDataFactory.create_location(code='case1', location_type='case', parent=self.store)
        self.vendor = TestDataFactory.create_supplier()

        TestDataFactory.create_inventory_item(sku='R-CHEAP', category='Rings', price=Decimal('100.00'), quantity=3)
        TestDataFactory.create_inventory_item(sku='R-DEAR', category='Rings', price=Decimal('900.00'), quantity=3,
                                              location=self.case, vendor=self.vendor, carat_weight=Decimal('1.500'))
        TestDataFactory.create_inventory_item(sku='N-DEAR', category='Necklaces', price=Decimal('900.00'), quantity=0,
                                              location=self.store, metal='Platinum')

    def test_category_and_price_are_combined(self):
        response = self.client.get('/api/inventory', {'category': 'rings', 'min_price': '500'})
        self.assertEqual(result_skus(response), ['R-DEAR'])

    def test_each_filter_alone_matches_more(self):
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'category': 'Rings'})), ['R-CHEAP', 'R-DEAR'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'min_price': '500'})), ['N-DEAR', 'R-DEAR'])

    def test_location_includes_descendants(self):
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'location': 'store1'})), ['N-DEAR', 'R-DEAR'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'location': 'case1'})), ['R-DEAR'])

    def test_stock_filters(self):
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'low_stock': 'true'})), ['R-CHEAP', 'R-DEAR'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'out_of_stock': 'true'})), ['N-DEAR'])

    def test_vendor_metal_and_carat(self):
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'vendor': self.vendor.id})), ['R-DEAR'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'metal': 'platinum'})), ['N-DEAR'])
        self.assertEqual(result_skus(self.client.get('/api/inventory', {'min_carat': '1', 'max_carat': '2'})), ['R-DEAR'])

    def test_search_with_quantity_range(self):
        response = self.client.get('/api/inventory', {'search': 'DEAR', 'max_quantity': '0'})
        self.assertEqual(result_skus(response), ['N-DEAR'])

    def test_invalid_filter_value(self):
        response = self.client.get('/api/inventory', {'min_price': 'cheap'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('min_price', response.data['details'])


class InventoryBulkOperationTests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.items = [TestDataFactory.create_inventory_item(sku=f'BD-{n}') for n in range(4)]

    def test_bulk_delete_removes_exactly_selected_ids(self):
        selected = [self.items[2].id, self.items[0].id]
        response = self.client.post('/api/inventory/bulk-delete', {'ids': selected + [999999]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(response.data['data']['deleted']), sorted(selected))
        self.assertEqual(response.data['data']['not_found'], [999999])
        remaining = sorted(InventoryItem.objects.values_list('sku', flat=True))
        self.assertEqual(remaining, ['BD-1', 'BD-3'])

    def test_bulk_delete_validates_ids(self):
        response = self.client.post('/api/inventory/bulk-delete/', {'ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/inventory/bulk-delete/', {'ids': ['abc']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_archive(self):
        item = self.items[0]
        response = self.client.post(f'/api/inventory/{item.id}/archive')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'archived')

        response = self.client.post(f'/api/inventory/{item.id}/archive')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_gets_new_sku(self):
        source = self.items[1]
        source.tags = ['bridal']
        source.save()
        response = self.client.post(f'/api/inventory/{source.id}/duplicate/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        copy = response.data['data']
        self.assertNotEqual(copy['id'], source.id)
        self.assertRegex(copy['sku'], r'^JWL-\d{5}$')
        self.assertEqual(copy['tags'], ['bridal'])
        source.refresh_from_db()
        self.assertEqual(source.sku, 'BD-1')


class InventoryExportTests(TestCase):
    """CSV export contains exactly the requested columns, in the requested order"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        TestDataFactory.create_inventory_item(sku='EX-1', name='Opal Ring', price=Decimal('120.00'))

    def read_csv(self, response):
        return list(csv.reader(io.StringIO(response.content.decode())))

    def test_export_selected_columns(self):
        response = self.client.get('/api/inventory/export', {'columns': 'price,sku,name'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn('attachment', response['Content-Disposition'])
        rows = self.read_csv(response)
        self.assertEqual(rows[0], ['Price', 'SKU', 'Name'])
        self.assertEqual(rows[1], ['120.00', 'EX-1', 'Opal Ring'])

    def test_export_unknown_column(self):
        response = self.client.get('/api/inventory/export', {'columns': 'sku,colour'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sku', response.data['details']['available'])


class InventoryMetricsTests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        TestDataFactory.create_inventory_item(category='Rings', quantity=2, price=Decimal('100.00'))
        TestDataFactory.create_inventory_item(category='Rings', quantity=0, price=Decimal('50.00'))
        TestDataFactory.create_inventory_item(category='Watches', quantity=10, price=Decimal('10.00'))
        TestDataFactory.create_inventory_item(category='Watches', quantity=4, status='archived')

    def test_metrics(self):
        response = self.client.get('/api/inventory/metrics')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['total_items'], 3)
        self.assertEqual(data['total_units'], 12)
        self.assertEqual(Decimal(data['total_value']), Decimal('300.00'))
        self.assertEqual(data['low_stock'], 1)
        self.assertEqual(data['out_of_stock'], 1)
        self.assertEqual({row['category'] for row in data['by_category']}, {'Rings', 'Watches'})

    def test_metrics_refresh_after_inventory_change(self):
        first = self.client.get('/api/inventory/metrics').data['data']
        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_inventory_item(quantity=1)
        second = self.client.get('/api/inventory/metrics').data['data']
        self.assertEqual(second['total_items'], first['total_items'] + 1)

    def test_metrics_refresh_after_bulk_delete(self):
        first = self.client.get('/api/inventory/metrics').data['data']
        item = InventoryItem.objects.filter(quantity=10).first()
        self.client.post('/api/inventory/bulk-delete', {'ids': [item.id]}, format='json')
        second = self.client.get('/api/inventory/metrics').data['data']
        self.assertEqual(second['total_items'], first['total_items'] - 1)


class ProductAPITests(TestCase):
    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_product_for_inventory_item(self):
        item = TestDataFactory.create_inventory_item(sku='JR-100')
        response = self.client.post('/api/products', {
            'name': 'Solitaire Ring', 'category': 'Rings', 'unit_price': '999.00', 'inventory_item': item.id
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['sku'], 'JR-100')
        self.assertEqual(response.data['data']['inventory_sku'], 'JR-100')

    def test_product_sku_generated_when_item_sku_taken(self):
        item = TestDataFactory.create_inventory_item(sku='JR-200')
        TestDataFactory.create_product(sku='JR-200')
        response = self.client.post('/api/products/', {'name': 'Second Listing', 'inventory_item': item.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(re.match(r'^JWL-\d{5}$', response.data['data']['sku']))
        self.assertEqual(Product.objects.count(), 2)

    def test_list_products(self):
        TestDataFactory.create_product(name='Pearl Earrings')
        response = self.client.get('/api/products', {'search': 'pearl'})
        self.assertEqual(response.data['pagination']['count'], 1)


class LoadSampleInventoryCommandTests(TestCase):
    def test_command_loads_items_suppliers_and_locations(self):
        call_command('load_sample_inventory', stdout=StringIO())
        self.assertTrue(InventoryItem.objects.filter(sku='JR-001').exists())
        self.assertTrue(InventoryItem.objects.filter(location__isnull=False).exists())
        count = InventoryItem.objects.count()
        call_command('load_sample_inventory', stdout=StringIO())
        self.assertEqual(InventoryItem.objects.count(), count)
