"""
Tests for production work orders: due-date properties, list filters, detail and sample data
"""
from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.production.models import WorkOrder, WorkOrderStage


class WorkOrderModelTests(TestCase):
    def setUp(self):
        self.today = timezone.localdate()

    def test_days_until_due(self):
        work_order = TestDataFactory.create_work_order(due_date=self.today + timedelta(days=4))
        self.assertEqual(work_order.days_until_due, 4)
        self.assertFalse(work_order.is_overdue)

    def test_past_due_is_overdue_until_finished(self):
        work_order = TestDataFactory.create_work_order(due_date=self.today - timedelta(days=1))
        self.assertTrue(work_order.is_overdue)
        work_order.status = 'completed'
        self.assertFalse(work_order.is_overdue)

    def test_no_due_date(self):
        work_order = TestDataFactory.create_work_order()
        self.assertIsNone(work_order.days_until_due)
        self.assertFalse(work_order.is_overdue)

    def test_stage_duration(self):
        work_order = TestDataFactory.create_work_order()
        stage = WorkOrderStage.objects.create(work_order=work_order, stage='casting',
                                              started_on=self.today - timedelta(days=5),
                                              completed_on=self.today - timedelta(days=2))
        self.assertEqual(stage.duration_days, 3)
        self.assertEqual(stage.get_stage_display(), 'Casting')


class WorkOrderAPITests(TestCase):
    """Test work order API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        today = timezone.localdate()

        self.ring = TestDataFactory.create_work_order(
            number='WO-1001', status='in_production', priority='high', current_stage='stone_setting',
            due_date=today + timedelta(days=10), customer_name='Emma Thompson', item_name='Diamond Ring', stones=2
        )
        self.band = TestDataFactory.create_work_order(
            number='WO-1002', status='pending', priority='medium', current_stage='design',
            due_date=today + timedelta(days=30), customer_name='James Rodriguez', item_name='Sapphire Band'
        )
        self.earrings = TestDataFactory.create_work_order(
            number='WO-1003', status='quality_check', priority='urgent', current_stage='quality_control',
            due_date=today - timedelta(days=2), customer_name='Olivia Park', item_name='Emerald Earrings'
        )
        TestDataFactory.create_work_order(
            number='WO-0999', status='completed', current_stage='packaging',
            due_date=today - timedelta(days=20), item_name='Gold Chain'
        )

    def numbers(self, response):
        return [row['number'] for row in response.data['data']]

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/work-orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_orders_by_due_date(self):
        response = self.client.get('/api/work-orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.numbers(response), ['WO-0999', 'WO-1003', 'WO-1001', 'WO-1002'])
        self.assertEqual(response.data['pagination']['count'], 4)

    def test_status_filter_accepts_list(self):
        response = self.client.get('/api/work-orders/', {'status': 'pending,quality_check'})
        self.assertEqual(self.numbers(response), ['WO-1003', 'WO-1002'])

    def test_stage_and_priority_filters(self):
        response = self.client.get('/api/work-orders/', {'stage': 'stone_setting'})
        self.assertEqual(self.numbers(response), ['WO-1001'])
        response = self.client.get('/api/work-orders/', {'priority': 'urgent'})
        self.assertEqual(self.numbers(response), ['WO-1003'])

    def test_search(self):
        response = self.client.get('/api/work-orders/', {'search': 'emma'})
        self.assertEqual(self.numbers(response), ['WO-1001'])
        response = self.client.get('/api/work-orders/', {'search': 'sapphire'})
        self.assertEqual(self.numbers(response), ['WO-1002'])

    def test_overdue_excludes_finished_orders(self):
        response = self.client.get('/api/work-orders/', {'overdue': 'true'})
        self.assertEqual(self.numbers(response), ['WO-1003'])
        self.assertTrue(response.data['data'][0]['is_overdue'])
        self.assertEqual(response.data['data'][0]['days_until_due'], -2)

    def test_ordering_whitelist(self):
        response = self.client.get('/api/work-orders/', {'ordering': '-number'})
        self.assertEqual(self.numbers(response), ['WO-1003', 'WO-1002', 'WO-1001', 'WO-0999'])
        response = self.client.get('/api/work-orders/', {'ordering': 'customer_email'})
        self.assertEqual(self.numbers(response)[0], 'WO-0999')

    def test_detail_includes_stones_and_timeline(self):
        WorkOrderStage.objects.create(work_order=self.ring, stage='design',
                                      started_on=timezone.localdate() - timedelta(days=9),
                                      completed_on=timezone.localdate() - timedelta(days=6),
                                      completed_by='Sarah Johnson')
        response = self.client.get(f'/api/work-orders/{self.ring.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['status_display'], 'In Production')
        self.assertEqual(data['stage_display'], 'Stone Setting')
        self.assertEqual([stone['code'] for stone in data['stones']], ['ST-001', 'ST-002'])
        self.assertEqual(data['timeline'][0]['stage_display'], 'Design/CAD')
        self.assertEqual(data['timeline'][0]['duration_days'], 3)

    def test_detail_not_found(self):
        response = self.client.get('/api/work-orders/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_work_orders_are_read_only(self):
        response = self.client.post('/api/work-orders/', {'number': 'WO-2000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        response = self.client.delete(f'/api/work-orders/{self.ring.id}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertTrue(WorkOrder.objects.filter(pk=self.ring.pk).exists())


class LoadSampleWorkOrdersCommandTests(TestCase):
    def test_loads_samples_idempotently(self):
        out = StringIO()
        call_command('load_sample_work_orders', stdout=out)
        call_command('load_sample_work_orders', stdout=out)

        self.assertEqual(WorkOrder.objects.count(), 3)
        ring = WorkOrder.objects.get(number='WO-12345')
        self.assertEqual(ring.customer_name, 'Emma Thompson')
        self.assertEqual(list(ring.stones.values_list('code', flat=True)), ['ST-001', 'ST-002'])
        self.assertEqual(ring.timeline.count(), 3)
        self.assertTrue(WorkOrder.objects.get(number='WO-12347').is_overdue)
        self.assertIn('Loaded 3 work orders', out.getvalue())

    def test_clear_removes_other_orders(self):
        TestDataFactory.create_work_order(number='WO-OLD')
        call_command('load_sample_work_orders', '--clear', stdout=StringIO())
        self.assertFalse(WorkOrder.objects.filter(number='WO-OLD').exists())
