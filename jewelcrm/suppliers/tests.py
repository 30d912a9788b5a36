"""
Tests for suppliers, their orders and the spend/performance analytics
"""
from datetime import date, timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.suppliers import analytics
from jewelcrm.suppliers.models import Supplier, SupplierOrder


class ScoreOrdersTests(TestCase):
    """Test delivery/quality metrics computed from orders"""

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier()
        start = date(2024, 3, 1)
        for delivered_after, quality in ((5, 5), (5, 4), (5, 4), (9, 4)):
            TestDataFactory.create_supplier_order(
                supplier=self.supplier,
                ordered_on=start,
                expected_on=start + timedelta(days=7),
                delivered_on=start + timedelta(days=delivered_after),
                quality_score=quality,
                amount=Decimal('100.00'),
            )
        # Still open, unscored
        TestDataFactory.create_supplier_order(supplier=self.supplier, ordered_on=start, amount=Decimal('50.00'))

    def test_metrics(self):
        metrics = analytics.score_orders(SupplierOrder.objects.all())
        self.assertEqual(metrics['orders'], 5)
        self.assertEqual(metrics['delivered_orders'], 4)
        self.assertEqual(metrics['open_orders'], 1)
        self.assertEqual(metrics['on_time_rate'], 75.0)
        self.assertEqual(metrics['average_quality'], 4.25)
        self.assertEqual(metrics['quality_acceptance_rate'], 100.0)
        self.assertEqual(metrics['average_lead_time_days'], 6.0)
        self.assertEqual(metrics['overall_score'], 4.0)
        self.assertEqual(Decimal(metrics['total_spend']), Decimal('450.00'))

    def test_no_orders(self):
        metrics = analytics.score_orders([])
        self.assertIsNone(metrics['on_time_rate'])
        self.assertIsNone(metrics['overall_score'])

    def test_kpis_compare_with_targets(self):
        rows = analytics.kpis(analytics.score_orders(SupplierOrder.objects.all()))
        by_name = {row['name']: row for row in rows}
        self.assertFalse(by_name['On-Time Delivery']['meets_target'])
        self.assertTrue(by_name['Quality Acceptance']['meets_target'])

    def test_ranking_puts_unscored_suppliers_last(self):
        weaker = TestDataFactory.create_supplier(name='Weaker Metals')
        TestDataFactory.create_supplier_order(supplier=weaker, quality_score=2)
        idle = TestDataFactory.create_supplier(name='Idle Findings')

        ranking = analytics.performance_ranking(Supplier.objects.all(), SupplierOrder.objects.all())
        self.assertEqual([row['supplier_id'] for row in ranking], [self.supplier.id, weaker.id, idle.id])
        self.assertEqual([row['rank'] for row in ranking], [1, 2, 3])
        self.assertIsNone(ranking[-1]['overall_score'])


class SpendAnalysisTests(TestCase):
    def setUp(self):
        self.gold = TestDataFactory.create_supplier(name='Gold Co', category='metal')
        self.gems = TestDataFactory.create_supplier(name='Gem Co', category='stone')
        TestDataFactory.create_supplier_order(supplier=self.gold, amount=Decimal('300.00'), ordered_on=date(2024, 1, 10))
        TestDataFactory.create_supplier_order(supplier=self.gold, amount=Decimal('100.00'), ordered_on=date(2024, 2, 3))
        TestDataFactory.create_supplier_order(supplier=self.gems, amount=Decimal('600.00'), ordered_on=date(2024, 2, 20))

    def test_breakdowns(self):
        spend = analytics.spend_analysis(SupplierOrder.objects.all())
        self.assertEqual(Decimal(spend['total_spend']), Decimal('1000.00'))
        self.assertEqual(spend['order_count'], 3)
        self.assertEqual([row['category'] for row in spend['by_category']], ['stone', 'metal'])
        self.assertEqual(spend['by_category'][0]['percentage'], 60.0)
        self.assertEqual([row['month'] for row in spend['by_month']], ['2024-01', '2024-02'])
        self.assertEqual(Decimal(spend['by_month'][1]['amount']), Decimal('700.00'))

    def test_filters_are_combined(self):
        orders = analytics.filter_orders(
            SupplierOrder.objects.all(), date_from='2024-02-01', supplier_ids=[self.gold.id]
        )
        self.assertEqual(orders.count(), 1)
        orders = analytics.filter_orders(SupplierOrder.objects.all(), categories=['stone'], date_to='2024-01-31')
        self.assertEqual(orders.count(), 0)


class SupplierAPITests(TestCase):
    """Test Supplier API endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(name='Golden Metals', code='SUP-GOLD')

    def test_list_search_and_pagination(self):
        TestDataFactory.create_supplier(name='Precision Gems', category='stone')
        response = self.client.get('/api/suppliers/', {'search': 'golden'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['code'] for row in response.data['data']], ['SUP-GOLD'])
        self.assertEqual(response.data['pagination']['count'], 1)

        response = self.client.get('/api/suppliers/', {'category': 'stone'})
        self.assertEqual(response.data['data'][0]['name'], 'Precision Gems')

    def test_create_and_duplicate_code(self):
        response = self.client.post('/api/suppliers/', {'name': 'Ocean Pearls', 'code': 'SUP-PEARL', 'category': 'stone'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post('/api/suppliers/', {'name': 'Other', 'code': 'SUP-PEARL'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_record_order(self):
        response = self.client.post(f'/api/suppliers/{self.supplier.id}/orders/', {
            'order_number': 'PO-1001', 'category': 'metal', 'amount': '2500.00',
            'ordered_on': '2024-04-01', 'expected_on': '2024-04-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['supplier'], self.supplier.id)

    def test_order_dates_validated(self):
        response = self.client.post(f'/api/suppliers/{self.supplier.id}/orders/', {
            'order_number': 'PO-1002', 'category': 'metal', 'amount': '10.00',
            'ordered_on': '2024-04-10', 'expected_on': '2024-04-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('expected_on', response.data['details'])

    def test_scorecard(self):
        TestDataFactory.create_supplier_order(supplier=self.supplier, ordered_on=date(2024, 1, 5),
                                              expected_on=date(2024, 1, 10), delivered_on=date(2024, 1, 9),
                                              quality_score=5)
        response = self.client.get(f'/api/suppliers/{self.supplier.id}/scorecard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['metrics']['on_time_rate'], 100.0)
        self.assertEqual(data['trend'], [{'month': '2024-01', 'score': 5.0}])

    def test_spend_cache_invalidated_by_new_order(self):
        TestDataFactory.create_supplier_order(supplier=self.supplier, amount=Decimal('100.00'))
        response = self.client.get('/api/suppliers/spend/')
        self.assertEqual(Decimal(response.data['data']['total_spend']), Decimal('100.00'))

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_supplier_order(supplier=self.supplier, amount=Decimal('50.00'))

        response = self.client.get('/api/suppliers/spend/')
        self.assertEqual(Decimal(response.data['data']['total_spend']), Decimal('150.00'))

    def test_performance_filters_by_category(self):
        TestDataFactory.create_supplier(name='Swift Courier', category='shipping')
        response = self.client.get('/api/suppliers/performance/', {'categories': 'shipping'})
        self.assertEqual([row['supplier_name'] for row in response.data['data']], ['Swift Courier'])

    def test_analytics_reject_malformed_dates(self):
        for url in ('/api/suppliers/spend/', '/api/suppliers/performance/',
                    f'/api/suppliers/{self.supplier.id}/scorecard/'):
            response = self.client.get(url, {'date_from': 'not-a-date'})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, url)
            self.assertIn('date_from', response.data['details'])

        response = self.client.get('/api/suppliers/spend/', {'date_from': '2024-05-01', 'date_to': '2024-04-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_to', response.data['details'])

    def test_analytics_accept_blank_dates(self):
        response = self.client.get('/api/suppliers/spend/', {'date_from': '', 'date_to': '2024-12-31'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_supplier(self):
        response = self.client.delete(f'/api/suppliers/{self.supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Supplier.objects.filter(pk=self.supplier.pk).exists())
