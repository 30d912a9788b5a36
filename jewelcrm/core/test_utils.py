"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from jewelcrm.locations.models import Location
from jewelcrm.suppliers.models import Supplier, SupplierOrder
from jewelcrm.inventory.models import InventoryItem, Product
from jewelcrm.production.models import WorkOrder, WorkOrderStone
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_location(code=None, name=None, location_type='store', parent=None, capacity=None):
        """Create a test location"""
        if not code:
            code = f'loc_{TestDataFactory.random_string(6).lower()}'
        return Location.objects.create(
            code=code,
            name=name or f'Location {code}',
            location_type=location_type,
            parent=parent,
            capacity=capacity
        )

    @staticmethod
    def create_supplier(name=None, code=None, category='metal', is_active=True):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        if not code:
            code = f'SUP-{TestDataFactory.random_string(6).upper()}'
        return Supplier.objects.create(
            name=name,
            code=code,
            category=category,
            email=f'{code.lower()}@test.com',
            is_active=is_active
        )

    @staticmethod
    def create_supplier_order(supplier=None, amount=Decimal('1000.00'), category=None, ordered_on=None,
                              expected_on=None, delivered_on=None, quality_score=None, order_number=None):
        """Create a test supplier order"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if not order_number:
            order_number = f'PO-{TestDataFactory.random_string(8).upper()}'
        if not ordered_on:
            ordered_on = timezone.localdate()
        return SupplierOrder.objects.create(
            supplier=supplier,
            order_number=order_number,
            category=category or supplier.category,
            amount=amount,
            ordered_on=ordered_on,
            expected_on=expected_on,
            delivered_on=delivered_on,
            quality_score=quality_score
        )

    @staticmethod
    def create_inventory_item(sku=None, name=None, category='Rings', quantity=10, price=Decimal('500.00'),
                              cost=Decimal('250.00'), status='in_stock', location=None, vendor=None, **extra):
        """Create a test inventory item"""
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        if not name:
            name = f'Item {sku}'
        return InventoryItem.objects.create(
            sku=sku,
            name=name,
            category=category,
            quantity=quantity,
            price=price,
            cost=cost,
            status=status,
            location=location,
            vendor=vendor,
            **extra
        )

    @staticmethod
    def create_product(sku=None, name=None, inventory_item=None, unit_price=Decimal('500.00')):
        """Create a test catalogue product"""
        if not sku:
            sku = f'PRD-{TestDataFactory.random_string(8).upper()}'
        return Product.objects.create(
            sku=sku,
            name=name or f'Product {sku}',
            unit_price=unit_price,
            inventory_item=inventory_item
        )

    @staticmethod
    def create_work_order(number=None, status='in_production', priority='medium', current_stage='design',
                          due_date=None, customer_name='Emma Thompson', item_name='Custom Ring', stones=0):
        """Create a test work order with ``stones`` stone rows"""
        if not number:
            number = f'WO-{random.randint(10000, 99999)}-{TestDataFactory.random_string(4)}'
        work_order = WorkOrder.objects.create(
            number=number,
            status=status,
            priority=priority,
            current_stage=current_stage,
            due_date=due_date,
            customer_name=customer_name,
            item_name=item_name
        )
        for index in range(stones):
            WorkOrderStone.objects.create(
                work_order=work_order,
                code=f'ST-{index + 1:03d}',
                stone_type='Diamond',
                quantity=1
            )
        return work_order


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
