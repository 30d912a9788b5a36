"""
Test suite for the physical inventory audit wizard
Tests: step navigation, auditData patching, counting, discrepancy review, completion reports and the REST flow
"""
import csv
import io
import random
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, SimpleTestCase
from rest_framework import status

from jewelcrm.audits import reports
from jewelcrm.audits.exceptions import AuditError, StepError, ItemNotFound, AuditSessionNotFound
from jewelcrm.audits.store import AuditSessionStore
from jewelcrm.audits.wizard import AuditWizard, build_discrepancy, FIRST_STEP, LAST_STEP
from jewelcrm.core.models import AuditLog
from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient


def sample_inventory():
    return [
        {'id': 1, 'sku': 'JR-001', 'name': 'Diamond Ring', 'category': 'Rings', 'location': 'Case A',
         'locationCode': 'case1', 'expectedQuantity': 3, 'unitValue': 100.0, 'status': 'pending'},
        {'id': 2, 'sku': 'JN-002', 'name': 'Pearl Necklace', 'category': 'Necklaces', 'location': 'Case B',
         'locationCode': 'case2', 'expectedQuantity': 1, 'unitValue': 250.0, 'status': 'pending'},
        {'id': 3, 'sku': 'JE-003', 'name': 'Sapphire Studs', 'category': 'Earrings', 'location': 'Case A',
         'locationCode': 'case1', 'expectedQuantity': 2, 'unitValue': 80.0, 'status': 'pending'},
    ]


def counted_wizard():
    """One shortage (JR-001), one excess (JN-002) and one match found in the wrong case (JE-003)"""
    wizard = AuditWizard(created_by=1, inventory=sample_inventory())
    wizard.record_count(1, 1, scanned_by='casey')
    wizard.record_count(2, 3, scanned_by='casey')
    wizard.record_count(3, 2, scanned_by='casey', found_location='Case B')
    return wizard


class WizardNavigationTests(SimpleTestCase):
    def test_step_never_leaves_bounds(self):
        wizard = AuditWizard()
        rng = random.Random(7)
        for _ in range(200):
            if rng.random() < 0.5:
                wizard.next_step()
            else:
                wizard.previous_step()
            self.assertGreaterEqual(wizard.current_step, FIRST_STEP)
            self.assertLessEqual(wizard.current_step, LAST_STEP)

    def test_clamping_at_both_ends(self):
        wizard = AuditWizard()
        self.assertEqual(wizard.previous_step(), 1)
        for _ in range(10):
            wizard.next_step()
        self.assertEqual(wizard.current_step, 5)
        self.assertEqual(wizard.step_name, 'completion')

    def test_go_to_rejects_out_of_range(self):
        wizard = AuditWizard()
        self.assertEqual(wizard.go_to(3), 3)
        for step in (0, 6, 'two'):
            with self.assertRaises(StepError):
                wizard.go_to(step)
        self.assertEqual(wizard.current_step, 3)

    def test_restored_step_is_clamped(self):
        self.assertEqual(AuditWizard(current_step=9).current_step, 5)


class WizardUpdateTests(SimpleTestCase):
    def test_shallow_merge_keeps_other_keys(self):
        wizard = AuditWizard()
        wizard.update({'name': 'Q1 count', 'description': 'Front cases'})
        wizard.update({'name': 'Q1 full count'})
        self.assertEqual(wizard.audit_data['name'], 'Q1 full count')
        self.assertEqual(wizard.audit_data['description'], 'Front cases')

    def test_set_keys_are_deduplicated_in_order(self):
        wizard = AuditWizard()
        wizard.update({'locations': ['case2', 'case1', 'case2'], 'assignedUsers': ['sam', 'sam']})
        self.assertEqual(wizard.audit_data['locations'], ['case2', 'case1'])
        self.assertEqual(wizard.audit_data['assignedUsers'], ['sam'])

    def test_unknown_and_derived_keys_rejected(self):
        wizard = AuditWizard()
        with self.assertRaises(AuditError):
            wizard.update({'colour': 'red'})
        with self.assertRaises(AuditError):
            wizard.update({'scannedItems': []})

    def test_dates_stored_as_iso_strings(self):
        wizard = AuditWizard()
        start = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc)
        wizard.update({'startDate': start})
        self.assertEqual(wizard.audit_data['startDate'], '2024-03-01T09:00:00+00:00')


class WizardCountingTests(SimpleTestCase):
    def setUp(self):
        self.wizard = AuditWizard(created_by=1, inventory=sample_inventory())

    def test_difference_and_type_follow_the_count(self):
        for expected in range(4):
            for actual in range(4):
                if actual == expected:
                    continue
                entry = build_discrepancy({'id': 9, 'sku': 'X', 'name': 'X', 'expectedQuantity': expected,
                                           'actualQuantity': actual, 'unitValue': 10.0})
                self.assertEqual(entry['difference'], actual - expected)
                self.assertEqual(entry['discrepancyType'], 'shortage' if actual < expected else 'excess')
                self.assertEqual(entry['totalValue'], abs(actual - expected) * 10.0)

    def test_count_creates_discrepancy(self):
        record = self.wizard.record_count(1, 1, scanned_by='casey')
        self.assertEqual(record['status'], 'discrepancy')
        self.assertEqual(record['scannedBy'], 'casey')
        [entry] = self.wizard.audit_data['discrepancies']
        self.assertEqual(entry['difference'], -2)
        self.assertEqual(entry['discrepancyType'], 'shortage')
        self.assertEqual(entry['totalValue'], 200.0)

    def test_recount_replaces_record_and_clears_discrepancy(self):
        self.wizard.record_count(1, 1)
        self.wizard.record_count('1', 3)
        self.assertEqual(len(self.wizard.audit_data['scannedItems']), 1)
        self.assertEqual(self.wizard.audit_data['scannedItems'][0]['status'], 'scanned')
        self.assertEqual(self.wizard.audit_data['discrepancies'], [])

    def test_count_validation(self):
        with self.assertRaises(AuditError):
            self.wizard.record_count(1, -1)
        with self.assertRaises(AuditError):
            self.wizard.record_count(1, True)
        with self.assertRaises(ItemNotFound):
            self.wizard.record_count(99, 1)

    def test_find_item_is_case_insensitive_exact(self):
        self.assertEqual(self.wizard.find_item('jr-001')['id'], 1)
        self.assertEqual(self.wizard.find_item(' 2 ')['sku'], 'JN-002')
        with self.assertRaises(ItemNotFound):
            self.wizard.find_item('JR-00')

    def test_simulated_scan_picks_a_candidate(self):
        item = self.wizard.simulate_scan(random.Random(3))
        self.assertIn(item['sku'], {'JR-001', 'JN-002', 'JE-003'})
        with self.assertRaises(ItemNotFound):
            AuditWizard().simulate_scan()

    def test_counting_filters(self):
        self.wizard.record_count(1, 1)
        self.wizard.record_count(3, 2)
        self.assertEqual([i['id'] for i in self.wizard.counting_items('all')], [1, 2, 3])
        self.assertEqual([i['id'] for i in self.wizard.counting_items('pending')], [2])
        self.assertEqual([i['id'] for i in self.wizard.counting_items('scanned')], [3])
        self.assertEqual([i['id'] for i in self.wizard.counting_items('discrepancy')], [1])
        self.assertEqual(self.wizard.progress(), {'scanned': 2, 'total': 3, 'percent': 66.7})
        with self.assertRaises(AuditError):
            self.wizard.counting_items('everything')

    def test_blind_count_hides_expected_quantities(self):
        self.wizard.update({'isBlindCount': True})
        record = self.wizard.record_count(1, 1)
        view = self.wizard.counting_view(record)
        self.assertNotIn('expectedQuantity', view)
        self.assertEqual(view['status'], 'scanned')
        self.assertTrue(all('expectedQuantity' not in item for item in self.wizard.counting_items('all')))
        with self.assertRaises(AuditError):
            self.wizard.counting_items('discrepancy')

    def test_reselecting_locations_prunes_counts(self):
        self.wizard.record_count(1, 1)
        self.wizard.record_count(2, 3)
        self.wizard.set_candidates([item for item in sample_inventory() if item['id'] == 2])
        self.assertEqual([r['id'] for r in self.wizard.audit_data['scannedItems']], [2])
        self.assertEqual([d['id'] for d in self.wizard.audit_data['discrepancies']], [2])


class WizardReviewTests(SimpleTestCase):
    def setUp(self):
        self.wizard = counted_wizard()

    def test_filter_by_type_and_search(self):
        self.assertEqual([d['sku'] for d in self.wizard.filter_discrepancies(discrepancy_type='shortage')], ['JR-001'])
        self.assertEqual([d['sku'] for d in self.wizard.filter_discrepancies(search='pearl')], ['JN-002'])
        self.assertEqual([d['sku'] for d in self.wizard.filter_discrepancies(search='case a')], ['JR-001'])

    def test_sort_by_value(self):
        desc = self.wizard.filter_discrepancies(sort_field='totalValue', sort_order='desc')
        asc = self.wizard.filter_discrepancies(sort_field='totalValue', sort_order='asc')
        self.assertEqual([d['sku'] for d in desc], ['JN-002', 'JR-001'])
        self.assertEqual([d['sku'] for d in asc], ['JR-001', 'JN-002'])

    def test_invalid_filter_arguments(self):
        with self.assertRaises(AuditError):
            self.wizard.filter_discrepancies(discrepancy_type='missing')
        with self.assertRaises(AuditError):
            self.wizard.filter_discrepancies(sort_field='name')

    def test_resolve_defaults_to_adjust(self):
        entry = self.wizard.resolve(1, resolved_by='casey')
        self.assertEqual(entry['status'], 'resolved')
        self.assertEqual(entry['resolution'], 'adjust')
        self.assertEqual(entry['notes'], 'Inventory adjusted to match physical count')
        self.assertEqual(entry['resolvedBy'], 'casey')
        self.assertEqual([d['sku'] for d in self.wizard.filter_discrepancies(status='pending')], ['JN-002'])

    def test_resolve_with_explicit_resolution(self):
        entry = self.wizard.resolve('2', resolution='recount', notes='Check back stock')
        self.assertEqual(entry['resolution'], 'recount')
        self.assertEqual(entry['notes'], 'Check back stock')
        with self.assertRaises(AuditError):
            self.wizard.resolve(2, resolution='shrug')
        with self.assertRaises(ItemNotFound):
            self.wizard.resolve(3)

    def test_review_summary_value_impact(self):
        self.wizard.resolve(1)
        summary = self.wizard.review_summary()
        self.assertEqual(summary['shortages'], 1)
        self.assertEqual(summary['excess'], 1)
        self.assertEqual(summary['resolved'], 1)
        self.assertEqual(summary['pending'], 1)
        # -200 for the shortage, +500 for the excess
        self.assertEqual(summary['valueImpact'], 300.0)

    def test_blind_snapshot_hides_expectations_until_review(self):
        self.wizard.update({'isBlindCount': True})
        self.wizard.go_to(3)
        data = self.wizard.snapshot()['auditData']
        self.assertEqual(data['discrepancies'], [])
        self.assertTrue(all('expectedQuantity' not in record for record in data['scannedItems']))
        self.assertEqual({record['status'] for record in data['scannedItems']}, {'scanned'})
        with self.assertRaises(StepError):
            self.wizard.ensure_review_allowed()
        # Internal state is untouched
        self.assertEqual(len(self.wizard.audit_data['discrepancies']), 2)

        self.wizard.go_to(4)
        self.wizard.ensure_review_allowed()
        data = self.wizard.snapshot()['auditData']
        self.assertEqual([d['sku'] for d in data['discrepancies']], ['JR-001', 'JN-002'])
        self.assertEqual(data['scannedItems'][0]['expectedQuantity'], 3)

    def test_final_step_required(self):
        with self.assertRaises(StepError):
            self.wizard.ensure_final_step()
        self.wizard.go_to(5)
        self.wizard.ensure_final_step()

    def test_serialization_preserves_state(self):
        restored = AuditWizard.from_dict(self.wizard.to_dict())
        self.assertEqual(restored.session_id, self.wizard.session_id)
        self.assertEqual(restored.audit_data, self.wizard.audit_data)
        self.assertEqual(restored.review_summary(), self.wizard.review_summary())


class CompletionReportTests(SimpleTestCase):
    def test_format_duration(self):
        self.assertEqual(reports.format_duration(timedelta(days=6, hours=4, minutes=10)), '6 days, 4 hours')
        self.assertEqual(reports.format_duration(timedelta(hours=1)), '1 hour')
        self.assertEqual(reports.format_duration(timedelta(minutes=5)), '5 minutes')
        self.assertEqual(reports.format_duration(timedelta(days=1, minutes=30)), '1 day')

    def test_completion_summary(self):
        wizard = counted_wizard()
        wizard.update({'startDate': datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc), 'assignedUsers': ['alex']})
        wizard.resolve(1, resolved_by='casey')
        summary = reports.completion_summary(wizard, now=datetime(2024, 3, 7, 13, 0, tzinfo=dt_timezone.utc))

        self.assertEqual(summary['totalItems'], 3)
        self.assertEqual(summary['scannedItems'], 3)
        self.assertEqual(summary['completionRate'], 100.0)
        self.assertEqual(summary['totalDiscrepancies'], 2)
        self.assertEqual(summary['resolvedDiscrepancies'], 1)
        self.assertEqual(summary['discrepancyRate'], 66.67)
        self.assertEqual(summary['valueImpact'], 300.0)
        self.assertEqual(summary['duration'], '6 days, 4 hours')
        self.assertEqual(summary['participants'], ['alex', 'casey'])

    def test_completion_reports(self):
        result = reports.completion_reports(counted_wizard())
        self.assertEqual([row['sku'] for row in result['missingItems']], ['JR-001'])
        self.assertEqual([row['sku'] for row in result['extraItems']], ['JN-002'])
        self.assertEqual(result['locationMismatches'], [
            {'sku': 'JE-003', 'name': 'Sapphire Studs', 'expectedLocation': 'Case A', 'actualLocation': 'Case B'}
        ])
        variances = {row['category']: row['difference'] for row in result['valueVariances']}
        self.assertEqual(variances, {'Necklaces': 500.0, 'Rings': -200.0})


class AuditSessionStoreTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.store = AuditSessionStore(ttl=60)

    def test_save_load_delete(self):
        wizard = counted_wizard()
        self.store.save(wizard)
        loaded = self.store.load(wizard.session_id)
        self.assertEqual(loaded.audit_data, wizard.audit_data)
        self.store.delete(wizard.session_id)
        with self.assertRaises(AuditSessionNotFound):
            self.store.load(wizard.session_id)

    def test_list_for_user_skips_expired_sessions(self):
        first = self.store.save(AuditWizard(created_by=5))
        second = self.store.save(AuditWizard(created_by=5))
        self.store.save(AuditWizard(created_by=6))
        cache.delete(f'audit_session:{first.session_id}')
        self.assertEqual([w.session_id for w in self.store.list_for_user(5)], [second.session_id])


class AuditAPITests(TestCase):
    """End-to-end audit flow over the REST API"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user(username='casey')
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

        store = TestDataFactory.create_location(code='store1', name='Main Store')
        case = TestDataFactory.create_location(code='case1', name='Case A', location_type='case', parent=store)
        shelf = TestDataFactory.create_location(code='shelf1', name='Top Shelf', location_type='shelf', parent=case)
        other = TestDataFactory.create_location(code='safe1', name='Safe', location_type='safe', parent=store)

        self.ring = TestDataFactory.create_inventory_item(sku='JR-001', name='Diamond Ring', quantity=3,
                                                          price=Decimal('100.00'), location=case)
        self.studs = TestDataFactory.create_inventory_item(sku='JE-003', name='Sapphire Studs', quantity=2,
                                                           price=Decimal('80.00'), location=shelf)
        TestDataFactory.create_inventory_item(sku='SOLD-1', status='sold', location=case)
        TestDataFactory.create_inventory_item(sku='SAFE-1', location=other)

    def start(self, **audit_data):
        payload = {'name': 'Case A count', 'locations': ['case1']}
        payload.update(audit_data)
        response = self.client.post('/api/audits/', {'auditData': payload}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data['data']['id']

    def test_start_snapshots_items_in_selected_locations(self):
        session_id = self.start()
        response = self.client.get(f'/api/audits/{session_id}/items/')
        self.assertEqual(sorted(item['sku'] for item in response.data['data']), ['JE-003', 'JR-001'])
        self.assertEqual(response.data['progress']['total'], 2)
        self.assertTrue(AuditLog.objects.filter(action='audit_start', object_id=session_id).exists())

    def test_navigation(self):
        session_id = self.start()
        response = self.client.post(f'/api/audits/{session_id}/previous/')
        self.assertEqual(response.data['data']['currentStep'], 1)
        for _ in range(6):
            response = self.client.post(f'/api/audits/{session_id}/next/')
        self.assertEqual(response.data['data']['currentStep'], 5)
        response = self.client.post(f'/api/audits/{session_id}/step/', {'step': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_patch_rejects_unknown_and_derived_fields(self):
        session_id = self.start()
        response = self.client.patch(f'/api/audits/{session_id}/', {'colour': 'red'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/audits/{session_id}/', {'scannedItems': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/audits/{session_id}/', {
            'startDate': '2024-03-02T09:00:00Z', 'expectedEndDate': '2024-03-01T09:00:00Z'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_count_review_and_complete(self):
        session_id = self.start()
        response = self.client.get(f'/api/audits/{session_id}/find/', {'q': 'jr-001'})
        self.assertEqual(response.data['data']['id'], self.ring.id)

        response = self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'discrepancy')
        self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.studs.id, 'actualQuantity': 2}, format='json')

        response = self.client.get(f'/api/audits/{session_id}/discrepancies/', {'type': 'shortage'})
        self.assertEqual([d['sku'] for d in response.data['data']], ['JR-001'])
        self.assertEqual(response.data['summary']['valueImpact'], -200.0)

        response = self.client.post(f'/api/audits/{session_id}/discrepancies/{self.ring.id}/resolve/', {}, format='json')
        self.assertEqual(response.data['data']['resolution'], 'adjust')
        self.assertEqual(response.data['data']['resolvedBy'], 'casey')

        response = self.client.post(f'/api/audits/{session_id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        self.client.post(f'/api/audits/{session_id}/step/', {'step': 5}, format='json')
        response = self.client.post(f'/api/audits/{session_id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['data']['summary']
        self.assertEqual(summary['scannedItems'], 2)
        self.assertEqual(summary['resolvedDiscrepancies'], 1)
        self.assertEqual(summary['discrepancyRate'], 50.0)
        self.assertEqual(response.data['data']['reports']['missingItems'][0]['sku'], 'JR-001')
        self.assertTrue(AuditLog.objects.filter(action='audit_complete', object_id=session_id).exists())

    def test_count_for_item_outside_selection(self):
        session_id = self.start()
        response = self.client.post(f'/api/audits/{session_id}/count/', {'itemId': 999999, 'actualQuantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': -2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blind_count_over_api(self):
        session_id = self.start(isBlindCount=True)
        response = self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': 1}, format='json')
        self.assertNotIn('expectedQuantity', response.data['data'])
        response = self.client.get(f'/api/audits/{session_id}/items/', {'filter': 'discrepancy'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blind_session_state_hides_expectations_until_review(self):
        session_id = self.start(isBlindCount=True)
        self.client.post(f'/api/audits/{session_id}/step/', {'step': 3}, format='json')
        self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': 1}, format='json')

        response = self.client.get(f'/api/audits/{session_id}/')
        data = response.data['data']['auditData']
        self.assertNotIn('expectedQuantity', data['scannedItems'][0])
        self.assertEqual(data['scannedItems'][0]['status'], 'scanned')
        self.assertEqual(data['discrepancies'], [])
        listed = self.client.get('/api/audits/').data['data'][0]['auditData']
        self.assertEqual(listed['discrepancies'], [])

        for url in ('discrepancies/', 'review-summary/', 'summary/', 'export/'):
            response = self.client.get(f'/api/audits/{session_id}/{url}')
            self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, url)
        response = self.client.post(f'/api/audits/{session_id}/discrepancies/{self.ring.id}/resolve/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        self.client.post(f'/api/audits/{session_id}/step/', {'step': 4}, format='json')
        response = self.client.get(f'/api/audits/{session_id}/discrepancies/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d['sku'] for d in response.data['data']], ['JR-001'])
        data = self.client.get(f'/api/audits/{session_id}/').data['data']['auditData']
        self.assertEqual(data['scannedItems'][0]['expectedQuantity'], 3)

    def test_export_selected_columns(self):
        session_id = self.start()
        self.client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': 5}, format='json')
        response = self.client.get(f'/api/audits/{session_id}/export/', {'columns': 'sku,difference,discrepancyType'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows, [['SKU', 'Difference', 'Type'], ['JR-001', '2', 'excess']])

    def test_sessions_are_private_to_creator(self):
        session_id = self.start()
        intruder = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = intruder.get(f'/api/audits/{session_id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        staff = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(is_staff=True))
        self.assertEqual(staff.get(f'/api/audits/{session_id}/').status_code, status.HTTP_200_OK)

    def test_assigned_users_can_work_the_session(self):
        counter = TestDataFactory.create_user(username='jordan')
        session_id = self.start(assignedUsers=['jordan'])
        client = AuthenticatedAPIClient().authenticate_user(counter)
        self.assertEqual(client.get(f'/api/audits/{session_id}/').status_code, status.HTTP_200_OK)
        response = client.post(f'/api/audits/{session_id}/count/', {'itemId': self.ring.id, 'actualQuantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['scannedBy'], 'jordan')

        self.client.patch(f'/api/audits/{session_id}/', {'assignedUsers': []}, format='json')
        self.assertEqual(client.get(f'/api/audits/{session_id}/').status_code, status.HTTP_403_FORBIDDEN)

    def test_list_and_discard(self):
        session_id = self.start()
        response = self.client.get('/api/audits/')
        self.assertEqual([s['id'] for s in response.data['data']], [session_id])

        response = self.client.delete(f'/api/audits/{session_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.get(f'/api/audits/{session_id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/audits/').data['data'], [])

    def test_save_draft_only_logs(self):
        session_id = self.start()
        response = self.client.post(f'/api/audits/{session_id}/save-draft/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(AuditLog.objects.filter(action='audit_draft', object_id=session_id).exists())
