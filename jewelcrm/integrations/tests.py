"""
Tests for the developer portal: marketplace listings, the integration builder and the endpoint browser
"""
from decimal import Decimal

from django.test import TestCase, SimpleTestCase
from rest_framework import status

from jewelcrm.core.models import AuditLog
from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.integrations.codegen import generate_code
from jewelcrm.integrations.models import MarketplaceIntegration, CustomIntegration, default_configuration


def create_listing(name, **fields):
    values = {
        'description': f'{name} for jewelers',
        'developer': 'Gem Labs', 'developer_email': 'dev@gemlabs.example',
        'category': 'design_tools',
        'is_published': True,
    }
    values.update(fields)
    return MarketplaceIntegration.objects.create(name=name, **values)


class CodegenTests(SimpleTestCase):
    def render(self, **overrides):
        data = {
            'name': 'Low Stock Alert',
            'description': 'Notify buyers when rings run low',
            'template': 'notification_sender',
            'configuration': default_configuration(),
        }
        data.update(overrides)
        return generate_code(data)

    def test_header_and_defaults(self):
        code = self.render()
        self.assertIn('Low Stock Alert (Notification Sender)', code)
        self.assertIn('Module: low_stock_alert', code)
        self.assertIn('RETRY_COUNT = 3', code)
        self.assertIn('RETRY_DELAY_MS = 5000', code)
        self.assertNotIn('SCHEDULE =', code)

    def test_generated_module_runs(self):
        configuration = default_configuration()
        configuration['conditions'] = [
            {'field': 'quantity', 'operator': 'less_than', 'value': 3},
            {'field': 'sku', 'operator': 'regex', 'value': '^JR-'},
        ]
        configuration['dataMapping'] = {'sku': 'itemSku'}
        namespace = {}
        exec(compile(self.render(configuration=configuration), 'integration', 'exec'), namespace)

        self.assertEqual(namespace['handle']({'sku': 'JR-001', 'quantity': 1}), {'skipped': False, 'results': []})
        self.assertTrue(namespace['handle']({'sku': 'JR-001', 'quantity': 5})['skipped'])
        self.assertTrue(namespace['handle']({'sku': 'JN-002', 'quantity': 1})['skipped'])
        self.assertEqual(namespace['map_fields']({'sku': 'JR-001', 'quantity': 1}), {'itemSku': 'JR-001'})

    def test_unregistered_action_raises(self):
        configuration = default_configuration()
        configuration['actions'] = [{'type': 'notification', 'config': {'channel': 'email'}}]
        namespace = {}
        exec(compile(self.render(configuration=configuration), 'integration', 'exec'), namespace)
        with self.assertRaises(NotImplementedError):
            namespace['handle']({'sku': 'JR-001'})

    def test_quotes_in_text_fields_stay_inside_the_docstring(self):
        name = 'Alert"""\nINJECTED = True\n"""'
        description = 'Ends with a backslash \\'
        namespace = {}
        code = self.render(name=name, description=description, metadata={'version': '2"""'})
        exec(compile(code, 'integration', 'exec'), namespace)

        self.assertNotIn('INJECTED', namespace)
        self.assertTrue(namespace['__doc__'].startswith(f'\n{name} (Notification Sender)'))
        self.assertIn(description, namespace['__doc__'])
        self.assertIn('version 2"""', namespace['__doc__'])
        self.assertIn('handle', namespace)

    def test_control_characters_are_escaped(self):
        namespace = {}
        exec(compile(self.render(description='tab\there\rnull\x00'), 'integration', 'exec'), namespace)
        self.assertIn('tab\there\rnull\x00', namespace['__doc__'])

    def test_schedule_and_permissions_emitted(self):
        code = self.render(schedule={'enabled': True, 'cronExpression': '0 6 * * *', 'timezone': 'UTC'},
                           permissions=['inventory:read'])
        self.assertIn("'cron': '0 6 * * *'", code)
        self.assertIn("PERMISSIONS = ['inventory:read']", code)


class MarketplaceAPITests(TestCase):
    """Test marketplace listing and submission"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

        create_listing('CAD Studio', rating=Decimal('4.8'), download_count=900, tags=['cad', '3d'])
        create_listing('Ledger Sync', category='accounting_finance', pricing_model='subscription',
                       pricing_amount=Decimal('29.00'), billing_cycle='month', rating=Decimal('4.2'),
                       download_count=1500, tags=['quickbooks'])
        create_listing('Gem Grader', category='certification_systems', pricing_model='one_time',
                       pricing_amount=Decimal('199.00'), rating=Decimal('4.5'), download_count=300)
        create_listing('Draft Tool', is_published=False)

    def names(self, response):
        return [row['name'] for row in response.data['data']]

    def test_lists_published_by_rating(self):
        response = self.client.get('/api/integrations/marketplace')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.names(response), ['CAD Studio', 'Gem Grader', 'Ledger Sync'])
        self.assertEqual(response.data['count'], 3)

    def test_trailing_slash_is_optional(self):
        response = self.client.get('/api/integrations/marketplace/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_filters_and_sort(self):
        response = self.client.get('/api/integrations/marketplace', {'category': 'accounting_finance'})
        self.assertEqual(self.names(response), ['Ledger Sync'])
        self.assertEqual(response.data['data'][0]['pricing_label'], '$29.00/month')

        response = self.client.get('/api/integrations/marketplace', {'pricing': 'free'})
        self.assertEqual(self.names(response), ['CAD Studio'])

        response = self.client.get('/api/integrations/marketplace', {'sort': 'downloadCount', 'order': 'asc'})
        self.assertEqual(self.names(response), ['Gem Grader', 'CAD Studio', 'Ledger Sync'])

    def test_search_covers_tags(self):
        response = self.client.get('/api/integrations/marketplace', {'search': 'QuickBooks'})
        self.assertEqual(self.names(response), ['Ledger Sync'])
        response = self.client.get('/api/integrations/marketplace', {'search': 'grader'})
        self.assertEqual(self.names(response), ['Gem Grader'])

    def test_staff_can_include_unpublished(self):
        response = self.client.get('/api/integrations/marketplace', {'include_unpublished': 'true'})
        self.assertNotIn('Draft Tool', self.names(response))

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/integrations/marketplace', {'include_unpublished': 'true'})
        self.assertIn('Draft Tool', self.names(response))

    def test_submission_stays_unpublished_for_non_staff(self):
        response = self.client.post('/api/integrations/marketplace', {
            'name': 'Ring Sizer', 'description': 'Sizing helper', 'developer': 'Fit Co', 'developer_email': 'dev@fitco.example',
            'category': 'customer_management', 'is_published': True, 'tags': ['sizing'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['data']['is_published'])
        self.assertTrue(AuditLog.objects.filter(model_name='MarketplaceIntegration', action='create').exists())

    def test_staff_submission_can_publish(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/integrations/marketplace', {
            'name': 'Metal Ticker', 'description': 'Spot prices', 'developer': 'Gem Labs', 'developer_email': 'dev@gemlabs.example',
            'category': 'pricing_calculators', 'is_published': True,
        }, format='json')
        self.assertTrue(response.data['data']['is_published'])

    def test_paid_listing_requires_amount(self):
        response = self.client.post('/api/integrations/marketplace', {
            'name': 'Paid Thing', 'description': 'x', 'developer': 'y', 'developer_email': 'y@example.com', 'pricing_model': 'subscription',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('pricing_amount', response.data['details'])

    def test_tags_must_be_strings(self):
        response = self.client.post('/api/integrations/marketplace', {
            'name': 'Bad Tags', 'description': 'x', 'developer': 'y', 'developer_email': 'y@example.com', 'tags': [1, 2],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class IntegrationBuilderAPITests(TestCase):
    """Test saving builder integrations"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_fills_defaults_and_generates_code(self):
        response = self.client.post('/api/integrations/builder', {
            'name': '  Order Webhook ',
            'template': 'webhook_receiver',
            'configuration': {
                'triggers': [{'type': 'webhook', 'config': {'path': '/orders'}}],
                'actions': [{'type': 'http_request', 'config': {'url': 'https://example.com/hook'}}],
            },
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['name'], 'Order Webhook')
        self.assertFalse(data['isActive'])
        self.assertEqual(data['configuration']['errorHandling'],
                         {'retryCount': 3, 'retryDelay': 5000, 'fallbackAction': ''})
        self.assertIn('Order Webhook (Webhook Receiver)', data['generatedCode'])
        self.assertIn("'url': 'https://example.com/hook'", data['generatedCode'])

        integration = CustomIntegration.objects.get(pk=data['id'])
        self.assertEqual(integration.created_by, self.user)
        self.assertEqual(integration.configuration['triggers'][0]['type'], 'webhook')

    def test_create_without_configuration(self):
        response = self.client.post('/api/integrations/builder/', {
            'name': 'Nightly Sync', 'template': 'data_sync',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        integration = CustomIntegration.objects.get(pk=response.data['data']['id'])
        self.assertEqual(integration.configuration, default_configuration())
        self.assertIn('RETRY_COUNT = 3', integration.generated_code)

    def test_name_and_template_required(self):
        response = self.client.post('/api/integrations/builder', {'template': 'data_sync'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/integrations/builder', {'name': '   ', 'template': 'data_sync'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/integrations/builder', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('template', response.data['details'])

    def test_enabled_schedule_needs_cron(self):
        response = self.client.post('/api/integrations/builder', {
            'name': 'Report', 'template': 'scheduled_task',
            'schedule': {'enabled': True, 'cronExpression': 'every day'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post('/api/integrations/builder', {
            'name': 'Report', 'template': 'scheduled_task',
            'schedule': {'enabled': True, 'cronExpression': '0 6 * * 1'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['schedule']['cronExpression'], '0 6 * * 1')

    def test_invalid_condition_operator(self):
        response = self.client.post('/api/integrations/builder', {
            'name': 'Filter', 'template': 'event_trigger',
            'configuration': {'conditions': [{'field': 'status', 'operator': 'like', 'value': 'sold'}]},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_shows_only_own_integrations(self):
        self.client.post('/api/integrations/builder', {'name': 'Mine', 'template': 'data_sync'}, format='json')
        other = TestDataFactory.create_user()
        CustomIntegration.objects.create(name='Theirs', template='data_sync', created_by=other)

        response = self.client.get('/api/integrations/builder')
        self.assertEqual([row['name'] for row in response.data['data']], ['Mine'])
        self.assertEqual(response.data['pagination']['count'], 1)


class EndpointListAPITests(TestCase):
    def setUp(self):
        self.client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())

    def test_lists_api_routes_with_methods(self):
        response = self.client.get('/api/integrations/endpoints')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        endpoints = {endpoint['path']: endpoint for endpoint in response.data['data']}

        inventory = endpoints['/api/inventory/']
        self.assertEqual(inventory['methods'], ['GET', 'POST'])
        self.assertTrue(inventory['description'].startswith('List inventory'))
        self.assertIn('/api/inventory/<pk>/', endpoints)
        self.assertTrue(all(path.startswith('/api/') for path in endpoints))
        self.assertEqual(response.data['count'], len(endpoints))

    def test_search(self):
        response = self.client.get('/api/integrations/endpoints', {'search': 'work-orders'})
        paths = [endpoint['path'] for endpoint in response.data['data']]
        self.assertEqual(paths, ['/api/work-orders/', '/api/work-orders/<int:pk>/'])
