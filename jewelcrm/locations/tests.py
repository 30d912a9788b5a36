"""
Tests for the location hierarchy: CRUD, tree building and descendant expansion
"""
from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from io import StringIO

from jewelcrm.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from jewelcrm.locations.hierarchy import descendant_codes, build_tree
from jewelcrm.locations.models import Location


class HierarchyTests(TestCase):
    """Test descendant expansion and tree nesting"""

    def setUp(self):
        self.store = TestDataFactory.create_location(code='store1', name='Main Store')
        self.showroom = TestDataFactory.create_location(code='showroom1', name='Showroom', location_type='showroom', parent=self.store)
        self.case = TestDataFactory.create_location(code='case1', name='Case A', location_type='case', parent=self.showroom)
        self.shelf = TestDataFactory.create_location(code='shelf1', name='Top Shelf', location_type='shelf', parent=self.case)
        self.safe = TestDataFactory.create_location(code='safe1', name='Safe', location_type='safe', parent=self.store)

    def test_path_walks_to_root(self):
        self.assertEqual(self.shelf.path, 'Main Store / Showroom / Case A / Top Shelf')

    def test_descendants_include_whole_subtree(self):
        self.assertEqual(set(descendant_codes(['showroom1'])), {'showroom1', 'case1', 'shelf1'})
        self.assertEqual(set(descendant_codes(['store1'])), {'store1', 'showroom1', 'case1', 'shelf1', 'safe1'})

    def test_descendants_keep_unknown_codes_and_drop_duplicates(self):
        codes = descendant_codes(['case1', 'Back Room', 'shelf1'])
        self.assertEqual(codes[0], 'case1')
        self.assertIn('Back Room', codes)
        self.assertEqual(codes.count('shelf1'), 1)

    def test_tree_nests_children(self):
        tree = build_tree()
        self.assertEqual([node['code'] for node in tree], ['store1'])
        store = tree[0]
        self.assertEqual({child['code'] for child in store['children']}, {'showroom1', 'safe1'})
        showroom = next(child for child in store['children'] if child['code'] == 'showroom1')
        self.assertEqual(showroom['children'][0]['code'], 'case1')
        self.assertEqual(showroom['children'][0]['children'][0]['code'], 'shelf1')

    def test_inactive_parent_promotes_children(self):
        Location.objects.filter(pk=self.showroom.pk).update(is_active=False)
        codes = {node['code'] for node in build_tree()}
        self.assertEqual(codes, {'store1', 'case1'})


class LocationAPITests(TestCase):
    """Test Location API endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient()
        self.store = TestDataFactory.create_location(code='store1', name='Main Store')

    def test_list_filters_by_parent(self):
        TestDataFactory.create_location(code='case9', location_type='case', parent=self.store)
        self.client.authenticate_user(self.user)

        response = self.client.get('/api/locations/', {'parent': 'root'})
        self.assertEqual([row['code'] for row in response.data['data']], ['store1'])

        response = self.client.get('/api/locations/', {'parent': 'store1'})
        self.assertEqual([row['code'] for row in response.data['data']], ['case9'])
        self.assertEqual(response.data['data'][0]['parent_code'], 'store1')

    def test_create_requires_admin(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/locations/', {'code': 'x1', 'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_location(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/locations/', {
            'code': 'showroom2', 'name': 'Back Showroom', 'location_type': 'showroom', 'parent': self.store.id
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['path'], 'Main Store / Back Showroom')

    def test_duplicate_code_rejected(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/locations/', {'code': 'store1', 'name': 'Again'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_cannot_nest_location_inside_itself(self):
        child = TestDataFactory.create_location(code='child1', parent=self.store)
        self.client.authenticate_user(self.admin)
        response = self.client.patch(f'/api/locations/{self.store.id}/', {'parent': child.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent', response.data['details'])

    def test_delete_with_children_conflicts(self):
        TestDataFactory.create_location(code='child1', parent=self.store)
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/locations/{self.store.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Location.objects.filter(pk=self.store.pk).exists())

    def test_delete_leaf(self):
        leaf = TestDataFactory.create_location(code='leaf1', parent=self.store)
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/locations/{leaf.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Location.objects.filter(pk=leaf.pk).exists())

    def test_tree_is_refreshed_after_location_change(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/locations/tree/')
        self.assertEqual(len(response.data['data']), 1)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_location(code='store2', name='Second Store')

        response = self.client.get('/api/locations/tree/')
        self.assertEqual({node['code'] for node in response.data['data']}, {'store1', 'store2'})


class LoadLocationHierarchyCommandTests(TestCase):
    def test_command_is_idempotent(self):
        call_command('load_location_hierarchy', stdout=StringIO())
        count = Location.objects.count()
        call_command('load_location_hierarchy', stdout=StringIO())
        self.assertEqual(Location.objects.count(), count)
        self.assertEqual(Location.objects.get(code='position1').path,
                         'Main Store / Front Showroom / Display Case A / Top Shelf / Position 1')
