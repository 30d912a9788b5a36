"""
Tests for authentication, activity logs, global search and shared helpers
"""
from django.core.cache import cache
from django.test import TestCase, SimpleTestCase, RequestFactory
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from jewelcrm.core.cache_utils import make_versioned_key, invalidate_namespace
from jewelcrm.core.exports import select_columns, rows_to_csv, UnknownColumnError
from jewelcrm.core.models import AuditLog
from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.core.utils import create_audit_log, get_client_ip


class AuthAPITests(TestCase):
    """Test JWT login, refresh and the current-user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='casey', password='s3cret-pass')
        self.client = APIClient()

    def test_login_returns_token_pair(self):
        response = self.client.post('/api/auth/login/', {'username': 'casey', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_with_bad_password_uses_error_envelope(self):
        response = self.client.post('/api/auth/login/', {'username': 'casey', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_refresh_issues_new_access_token(self):
        login = self.client.post('/api/auth/login/', {'username': 'casey', 'password': 's3cret-pass'}, format='json')
        response = self.client.post('/api/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_me_returns_current_user(self):
        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['username'], 'casey')
        self.assertEqual(response.data['data']['groups'], [])


class AuditLogAPITests(TestCase):
    """Test activity log listing and visibility"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.own_log = create_audit_log(action='create', model_name='InventoryItem', object_id=1,
                                        user=self.user, object_reference='JR-001')
        self.other_log = create_audit_log(action='delete', model_name='Supplier', object_id=2, user=self.other)
        self.client = AuthenticatedAPIClient()

    def test_non_staff_sees_only_own_logs(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [entry['id'] for entry in response.data['data']]
        self.assertEqual(ids, [self.own_log.id])
        self.assertEqual(response.data['pagination']['count'], 1)

    def test_staff_sees_all_logs_and_can_filter(self):
        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.data['pagination']['count'], 2)

        response = self.client.get('/api/audit-logs/', {'action': 'delete'})
        self.assertEqual([entry['id'] for entry in response.data['data']], [self.other_log.id])

        response = self.client.get('/api/audit-logs/', {'reference': 'JR-001'})
        self.assertEqual([entry['id'] for entry in response.data['data']], [self.own_log.id])

    def test_date_range_filter(self):
        self.client.authenticate_user(self.staff)
        today = timezone.localdate().isoformat()
        response = self.client.get('/api/audit-logs/', {'date_from': today, 'date_to': today})
        self.assertEqual(response.data['pagination']['count'], 2)
        response = self.client.get('/api/audit-logs/', {'date_to': '2000-01-01'})
        self.assertEqual(response.data['pagination']['count'], 0)

    def test_malformed_dates_are_rejected(self):
        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/audit-logs/', {'date_from': 'not-a-date'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_from', response.data['details'])

        response = self.client.get('/api/audit-logs/', {'date_from': '2024-03-02', 'date_to': '2024-03-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_to', response.data['details'])

    def test_detail_denied_for_other_users_log(self):
        self.client.authenticate_user(self.user)
        response = self.client.get(f'/api/audit-logs/{self.other_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Permission denied')

    def test_detail_missing_log_is_404_envelope(self):
        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/audit-logs/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)


class AuditLogUtilityTests(TestCase):
    """Test create_audit_log and client IP extraction"""

    def test_missing_fields_skip_logging(self):
        self.assertIsNone(create_audit_log(action='create', model_name=None, object_id=1))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_request_user_and_ip_are_recorded(self):
        user = TestDataFactory.create_user()
        request = RequestFactory().post('/api/inventory', HTTP_X_FORWARDED_FOR='10.0.0.7, 172.16.0.1')
        request.user = user
        log = create_audit_log(request, 'update', 'InventoryItem', 5, changes={'quantity': 3})
        self.assertEqual(log.user, user)
        self.assertEqual(log.ip_address, '10.0.0.7')
        self.assertEqual(log.object_id, '5')

    def test_client_ip_falls_back_to_remote_addr(self):
        request = RequestFactory().get('/', REMOTE_ADDR='192.168.1.20')
        self.assertEqual(get_client_ip(request), '192.168.1.20')
        self.assertIsNone(get_client_ip(None))


class GlobalSearchAPITests(TestCase):
    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_search_spans_resources(self):
        TestDataFactory.create_inventory_item(sku='EMR-100', name='Emerald Pendant')
        TestDataFactory.create_supplier(name='Emerald Isle Gems')
        TestDataFactory.create_work_order(item_name='Emerald Drop Earrings')
        TestDataFactory.create_location(code='emerald_case', name='Emerald Case')
        TestDataFactory.create_inventory_item(sku='RBY-200', name='Ruby Ring')

        response = self.client.get('/api/search/', {'q': 'emerald'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual([item['sku'] for item in data['inventory']], ['EMR-100'])
        self.assertEqual(len(data['suppliers']), 1)
        self.assertEqual(len(data['work_orders']), 1)
        self.assertEqual(len(data['locations']), 1)

    def test_blank_query_returns_empty_groups(self):
        response = self.client.get('/api/search/', {'q': '  '})
        self.assertEqual(response.data['data'], {'inventory': [], 'suppliers': [], 'work_orders': [], 'locations': []})


class ExportHelperTests(SimpleTestCase):
    """CSV export must contain exactly the visible columns, in the listed order"""

    COLUMNS = [('sku', 'SKU'), ('name', 'Name'), ('price', 'Price'), ('status', 'Status')]

    def test_requested_columns_keep_requested_order(self):
        selected = select_columns(self.COLUMNS, ['status', 'sku'])
        self.assertEqual(selected, [('status', 'Status'), ('sku', 'SKU')])

    def test_no_request_means_all_columns(self):
        self.assertEqual(select_columns(self.COLUMNS, None), self.COLUMNS)

    def test_duplicate_columns_collapse(self):
        self.assertEqual(select_columns(self.COLUMNS, ['name', 'name']), [('name', 'Name')])

    def test_unknown_column_rejected(self):
        with self.assertRaises(UnknownColumnError) as ctx:
            select_columns(self.COLUMNS, ['sku', 'colour'])
        self.assertEqual(ctx.exception.columns, ['colour'])

    def test_csv_contains_only_visible_columns(self):
        rows = [{'sku': 'JR-001', 'name': 'Ring, gold', 'price': '10.00', 'status': 'in_stock'}]
        text = rows_to_csv([('name', 'Name'), ('sku', 'SKU')], rows)
        lines = text.splitlines()
        self.assertEqual(lines[0], 'Name,SKU')
        self.assertEqual(lines[1], '"Ring, gold",JR-001')
        self.assertEqual(len(lines), 2)


class CacheUtilsTests(SimpleTestCase):
    def setUp(self):
        cache.clear()

    def test_invalidate_namespace_changes_keys(self):
        before = make_versioned_key('inventory_metrics', 'summary')
        self.assertEqual(before, make_versioned_key('inventory_metrics', 'summary'))
        invalidate_namespace('inventory_metrics')
        self.assertNotEqual(before, make_versioned_key('inventory_metrics', 'summary'))

    def test_namespaces_are_independent(self):
        inventory_key = make_versioned_key('inventory_metrics')
        invalidate_namespace('supplier_analytics')
        self.assertEqual(inventory_key, make_versioned_key('inventory_metrics'))
