"""
Tests for the client-side panels: API client errors, sample-data fallback,
local creates, parallel bulk delete, conjunctive filters and CSV export
"""
import csv
import io
import json
import random
import time
from unittest import mock

import requests
from django.test import SimpleTestCase

from jewelcrm.core.exports import UnknownColumnError
from jewelcrm.panels import (
    CrmApiClient, ApiError, PanelError, InventoryPanel, SupplierPanel, WorkOrderPanel, MarketplacePanel
)
from jewelcrm.panels.samples import SAMPLE_INVENTORY, SAMPLE_WORK_ORDERS


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b''
    return response


def mock_client():
    return mock.Mock(spec=CrmApiClient)


ITEMS = [
    {'id': 1, 'sku': 'JR-001', 'name': 'Diamond Ring', 'category': 'Rings', 'metal': '18K White Gold',
     'quantity': 3, 'price': '2499.99', 'status': 'in_stock', 'vendor': 7, 'vendor_name': 'Golden Metals Co.',
     'location_code': 'case1', 'carat_weight': '1.00'},
    {'id': 2, 'sku': 'JR-002', 'name': 'Gold Band', 'category': 'Rings', 'metal': '14K Yellow Gold',
     'quantity': 12, 'price': '450.00', 'status': 'in_stock', 'vendor': 7, 'vendor_name': 'Golden Metals Co.',
     'location_code': 'case1', 'carat_weight': None},
    {'id': 3, 'sku': 'JN-003', 'name': 'Pearl Necklace', 'category': 'Necklaces', 'metal': '14K Yellow Gold',
     'quantity': 0, 'price': '899.00', 'status': 'reserved', 'vendor': 9, 'vendor_name': 'Ocean Pearl Traders',
     'location_code': 'case2', 'carat_weight': None},
]


class CrmApiClientTests(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.session.headers = {}
        self.client = CrmApiClient('http://crm.example.com/api/', token='abc', session=self.session)

    def test_bearer_token_header(self):
        self.assertEqual(self.session.headers['Authorization'], 'Bearer abc')

    def test_request_joins_url_and_returns_body(self):
        self.session.request.return_value = make_response(200, {'data': [1, 2]})
        self.assertEqual(self.client.get('/inventory', params={'page': 2}), {'data': [1, 2]})
        self.session.request.assert_called_once_with(
            'GET', 'http://crm.example.com/api/inventory', params={'page': 2}, timeout=10
        )

    def test_error_envelope_raises_api_error(self):
        self.session.request.return_value = make_response(400, {'error': 'sku: already exists', 'details': {'sku': ['x']}})
        with self.assertRaises(ApiError) as ctx:
            self.client.post('/inventory', {'sku': 'JR-001'})
        self.assertEqual(ctx.exception.message, 'sku: already exists')
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.details, {'sku': ['x']})

    def test_error_without_body(self):
        self.session.request.return_value = make_response(502)
        with self.assertRaises(ApiError) as ctx:
            self.client.delete('/inventory/1/')
        self.assertEqual(ctx.exception.message, 'Request failed with status 502')

    def test_no_content(self):
        self.session.request.return_value = make_response(204)
        self.assertEqual(self.client.delete('/inventory/1/'), {})

    def test_authenticate_sets_access_token(self):
        self.session.post.return_value = make_response(200, {'access': 'new-token', 'refresh': 'r'})
        self.client.authenticate('casey', 'secret')
        self.assertEqual(self.session.headers['Authorization'], 'Bearer new-token')

    def test_authenticate_failure(self):
        self.session.post.return_value = make_response(401, {'error': 'Invalid credentials'})
        with self.assertRaises(ApiError) as ctx:
            self.client.authenticate('casey', 'wrong')
        self.assertEqual(ctx.exception.status_code, 401)


class PanelLoadTests(SimpleTestCase):
    def test_load_uses_api_data(self):
        client = mock_client()
        client.get.return_value = {'data': ITEMS}
        panel = InventoryPanel(client)
        self.assertEqual(panel.load(), ITEMS)
        self.assertFalse(panel.using_sample_data)
        self.assertEqual(panel.notifications, [])

    def test_load_follows_pagination(self):
        client = mock_client()
        client.get.side_effect = [
            {'data': ITEMS[:2], 'pagination': {'count': 3, 'page': 1, 'next': 2, 'previous': None}},
            {'data': ITEMS[2:], 'pagination': {'count': 3, 'page': 2, 'next': None, 'previous': 1}},
        ]
        panel = InventoryPanel(client)
        self.assertEqual(panel.load(status='in_stock'), ITEMS)

        params = [call.kwargs['params'] for call in client.get.call_args_list]
        self.assertEqual(params, [{'status': 'in_stock'}, {'status': 'in_stock', 'page': 2}])

    def test_load_falls_back_to_sample_data(self):
        client = mock_client()
        client.get.side_effect = requests.ConnectionError('refused')
        panel = InventoryPanel(client)
        items = panel.load()

        self.assertEqual(items, SAMPLE_INVENTORY)
        self.assertIsNot(items, SAMPLE_INVENTORY)
        self.assertTrue(panel.using_sample_data)
        self.assertEqual(panel.last_notification.level, 'warning')
        self.assertEqual(panel.last_notification.message, 'Using sample data - API connection failed')

    def test_failed_reload_keeps_current_items(self):
        client = mock_client()
        client.get.return_value = {'data': ITEMS}
        panel = InventoryPanel(client)
        panel.load()
        client.get.side_effect = ApiError('Server error', 500)
        self.assertEqual(panel.load(), ITEMS)
        self.assertFalse(panel.using_sample_data)


class PanelWriteTests(SimpleTestCase):
    def setUp(self):
        self.client = mock_client()
        self.panel = SupplierPanel(self.client)
        self.panel.items = [{'id': 1, 'name': 'Golden Metals Co.'}, {'id': 2, 'name': 'Precision Gems'}]

    def test_create_prepends_server_record(self):
        self.client.post.return_value = {'data': {'id': 3, 'name': 'Swift Courier'}}
        self.panel.create({'name': 'Swift Courier'})
        self.assertEqual([s['id'] for s in self.panel.items], [3, 1, 2])
        self.assertEqual(self.panel.last_notification.message, 'Supplier added.')

    def test_create_keeps_record_locally_when_offline(self):
        self.client.post.side_effect = requests.Timeout('slow')
        item = self.panel.create({'name': 'Swift Courier'})
        self.assertTrue(item['id'].startswith('local-'))
        self.assertEqual(self.panel.items[0], item)
        self.assertEqual(self.panel.last_notification.level, 'success')

    def test_update_failure_leaves_list_unchanged(self):
        self.client.put.side_effect = ApiError('code: already exists', 400)
        before = list(self.panel.items)
        self.assertIsNone(self.panel.update(1, {'code': 'SUP-GEMS'}))
        self.assertEqual(self.panel.items, before)
        self.assertEqual(self.panel.last_notification, ('error', 'code: already exists'))

    def test_partial_update_replaces_record(self):
        self.client.patch.return_value = {'data': {'id': 2, 'name': 'Precision Gems Ltd'}}
        self.panel.update(2, {'name': 'Precision Gems Ltd'}, partial=True)
        self.client.patch.assert_called_once_with('/suppliers/2/', {'name': 'Precision Gems Ltd'})
        self.assertEqual(self.panel.items[1]['name'], 'Precision Gems Ltd')

    def test_delete_failure_keeps_item(self):
        self.client.delete.side_effect = requests.ConnectionError('down')
        self.assertFalse(self.panel.delete(1))
        self.assertEqual([s['id'] for s in self.panel.items], [1, 2])
        self.assertEqual(self.panel.last_notification, ('error', 'Failed to delete supplier.'))

    def test_delete_removes_item(self):
        self.client.delete.return_value = {}
        self.assertTrue(self.panel.delete('2'))
        self.assertEqual([s['id'] for s in self.panel.items], [1])


class BulkDeleteTests(SimpleTestCase):
    def setUp(self):
        self.client = mock_client()
        self.panel = InventoryPanel(self.client)
        self.panel.items = [{'id': n, 'sku': f'SKU-{n}'} for n in range(1, 11)]

    def delete_with(self, failing):
        rng = random.Random(11)
        delays = {f'/inventory/{n}/': rng.random() / 100 for n in range(1, 11)}

        def fake_delete(path):
            # Finish in a scrambled order
            time.sleep(delays[path])
            if path in {f'/inventory/{n}/' for n in failing}:
                raise ApiError('Item not found', 404)
            return {}
        self.client.delete.side_effect = fake_delete

    def test_removes_exactly_the_confirmed_ids(self):
        self.delete_with(failing={4, 7})
        result = self.panel.bulk_delete([2, 4, 6, 7, 9])

        self.assertEqual(result, {'deleted': [2, 6, 9], 'failed': [4, 7]})
        self.assertEqual([item['id'] for item in self.panel.items], [1, 3, 4, 5, 7, 8, 10])
        self.assertEqual(self.panel.last_notification, ('error', 'Failed to delete 2 of 5 selected inventory items.'))

    def test_all_succeed(self):
        self.delete_with(failing=set())
        result = self.panel.bulk_delete([1, 10, 1])
        self.assertEqual(result['deleted'], [1, 10])
        self.assertEqual(len(self.panel.items), 8)
        self.assertEqual(self.panel.last_notification.level, 'success')

    def test_empty_selection(self):
        self.assertEqual(self.panel.bulk_delete([]), {'deleted': [], 'failed': []})
        self.client.delete.assert_not_called()


class FilterAndExportTests(SimpleTestCase):
    def setUp(self):
        self.panel = InventoryPanel(mock_client())
        self.panel.items = [dict(item) for item in ITEMS]

    def skus(self, **criteria):
        return [item['sku'] for item in self.panel.filter_items(**criteria)]

    def test_criteria_combine_with_and(self):
        self.assertEqual(self.skus(category='rings', metal='14k yellow gold'), ['JR-002'])
        self.assertEqual(self.skus(category='Rings', min_price=1000), ['JR-001'])
        self.assertEqual(self.skus(metal='14K Yellow Gold', max_quantity=5), ['JN-003'])

    def test_empty_criteria_are_ignored(self):
        self.assertEqual(self.skus(category='all', status='', search=None), ['JR-001', 'JR-002', 'JN-003'])

    def test_search_vendor_and_low_stock(self):
        self.assertEqual(self.skus(search='pearl'), ['JN-003'])
        self.assertEqual(self.skus(vendor=7, low_stock=True), ['JR-001'])
        self.assertEqual(self.skus(min_carat=0.5), ['JR-001'])

    def test_unknown_criterion(self):
        with self.assertRaises(PanelError):
            self.panel.filter_items(colour='red')

    def test_export_uses_visible_columns_in_order(self):
        visible = self.panel.filter_items(category='Rings')
        text = self.panel.export_csv(['price', 'sku'], visible)
        rows = list(csv.reader(io.StringIO(text)))
        self.assertEqual(rows, [['Price', 'SKU'], ['2499.99', 'JR-001'], ['450.00', 'JR-002']])

    def test_export_defaults_and_unknown_columns(self):
        rows = list(csv.reader(io.StringIO(self.panel.export_csv())))
        self.assertEqual(rows[0][0], 'SKU')
        self.assertEqual(len(rows), 4)
        with self.assertRaises(UnknownColumnError):
            self.panel.export_csv(['sku', 'margin'])


class InventoryPanelTests(SimpleTestCase):
    def setUp(self):
        self.client = mock_client()
        self.panel = InventoryPanel(self.client)

    def test_create_also_lists_product(self):
        self.client.post.side_effect = [
            {'data': {'id': 5, 'sku': 'JR-005', 'name': 'Ruby Ring', 'price': '300.00', 'cost': '120.00'}},
            {'data': {'id': 1}},
        ]
        self.panel.create({'sku': 'JR-005', 'name': 'Ruby Ring'})
        path, payload = self.client.post.call_args_list[1][0]
        self.assertEqual(path, '/products')
        self.assertEqual(payload['inventory_item'], 5)
        self.assertEqual(payload['unit_price'], '300.00')
        self.assertEqual(self.panel.last_notification.message, 'Inventory item added.')

    def test_product_failure_is_a_warning(self):
        self.client.post.side_effect = [{'data': {'id': 5, 'sku': 'JR-005'}}, ApiError('sku: already exists', 400)]
        item = self.panel.create({'sku': 'JR-005'})
        self.assertEqual(item['id'], 5)
        self.assertEqual(self.panel.items, [item])
        self.assertEqual(self.panel.last_notification.level, 'warning')

    def test_metrics_fall_back_to_local_figures(self):
        self.client.get.side_effect = requests.ConnectionError('down')
        self.panel.items = [dict(item) for item in ITEMS]
        metrics = self.panel.metrics()
        self.assertEqual(metrics['total_items'], 3)
        self.assertEqual(metrics['total_units'], 15)
        self.assertEqual(metrics['low_stock'], 1)
        self.assertEqual(metrics['out_of_stock'], 1)
        self.assertEqual(metrics['total_value'], round(3 * 2499.99 + 12 * 450.0, 2))


class WorkOrderPanelTests(SimpleTestCase):
    def test_writes_are_rejected(self):
        client = mock_client()
        panel = WorkOrderPanel(client)
        with self.assertRaises(PanelError):
            panel.create({'number': 'WO-1'})
        with self.assertRaises(PanelError):
            panel.delete(1)
        with self.assertRaises(PanelError):
            panel.bulk_delete([1, 2])
        client.post.assert_not_called()
        client.delete.assert_not_called()

    def test_overdue_filter_on_sample_data(self):
        client = mock_client()
        client.get.side_effect = requests.ConnectionError('down')
        panel = WorkOrderPanel(client)
        panel.load()
        self.assertEqual(panel.items, SAMPLE_WORK_ORDERS)
        self.assertEqual([wo['number'] for wo in panel.filter_items(overdue=True)], ['WO-12347'])


class MarketplacePanelTests(SimpleTestCase):
    def setUp(self):
        self.client = mock_client()
        self.panel = MarketplacePanel(self.client)

    def test_build_requires_name_and_template(self):
        self.assertIsNone(self.panel.build({'name': 'Sync'}))
        self.assertEqual(self.panel.last_notification, ('error', 'Please fill in all required fields'))
        self.client.post.assert_not_called()

    def test_build_posts_to_builder(self):
        self.client.post.return_value = {'data': {'id': 4, 'name': 'Sync', 'generatedCode': '"""Sync"""'}}
        saved = self.panel.build({'name': 'Sync', 'template': 'data_sync'})
        self.client.post.assert_called_once_with('/integrations/builder', {'name': 'Sync', 'template': 'data_sync'})
        self.assertEqual(saved['generatedCode'], '"""Sync"""')
        self.assertEqual(self.panel.last_notification.level, 'success')

    def test_sort_and_search_on_samples(self):
        self.client.get.side_effect = requests.ConnectionError('down')
        self.panel.load()
        by_downloads = self.panel.sorted_items(sort_by='download_count', order='asc')
        counts = [item['download_count'] for item in by_downloads]
        self.assertEqual(counts, sorted(counts))
        self.assertEqual([item['name'] for item in self.panel.filter_items(search='3D')], ['CAD Design Sync'])

    def test_listings_are_not_editable(self):
        with self.assertRaises(NotImplementedError):
            self.panel.delete(1)
