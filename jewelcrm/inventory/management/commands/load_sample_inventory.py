"""
Management command to seed sample suppliers, supplier orders and jewelry inventory
"""
from datetime import date, timedelta
from decimal import Decimal

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction

from jewelcrm.core.cache_signals import (
    suspend_cache_signals, invalidate_inventory_cache, invalidate_supplier_analytics_cache
)
from jewelcrm.inventory.models import InventoryItem
from jewelcrm.locations.models import Location
from jewelcrm.suppliers.models import Supplier, SupplierOrder


SAMPLE_SUPPLIERS = [
    ('SUP-GOLD', 'GoldCraft Suppliers', 'metal'),
    ('SUP-DIAM', 'Diamond District Gems', 'stone'),
    ('SUP-CAST', 'Precision Casting Co.', 'casting'),
    ('SUP-ENGR', 'Master Engravers Guild', 'engraving'),
    ('SUP-PLAT', 'Shine Plating Services', 'plating'),
    ('SUP-CRFT', 'Elite Craftspeople', 'contractors'),
    ('SUP-SHIP', 'Swift Shipping Partners', 'shipping'),
    ('SUP-PRL', 'Pearl Perfection', 'stone'),
]

# sku, name, category, metal, purity, stone, carat, quantity, cost, price, location code, vendor code
SAMPLE_ITEMS = [
    ('JR-001', 'Diamond Ring', 'Rings', 'White Gold', '18K', 'Diamond', '1.000', 3, '1450.00', '2999.00', 'case1', 'SUP-DIAM'),
    ('JN-002', 'Gold Necklace', 'Necklaces', 'Yellow Gold', '14K', '', None, 2, '420.00', '899.00', 'case1', 'SUP-GOLD'),
    ('JE-003', 'Pearl Earrings', 'Earrings', 'Silver', '925', 'Pearl', None, 5, '60.00', '149.00', 'case2', 'SUP-PRL'),
    ('JB-004', 'Sapphire Bracelet', 'Bracelets', 'Platinum', '950', 'Sapphire', '2.500', 1, '1800.00', '3499.00', 'case2', 'SUP-DIAM'),
    ('JP-005', 'Diamond Pendant', 'Pendants', 'White Gold', '18K', 'Diamond', '0.750', 2, '900.00', '1899.00', 'safe1', 'SUP-DIAM'),
    ('JR-006', 'Emerald Eternity Band', 'Rings', 'Yellow Gold', '18K', 'Emerald', '1.200', 0, '1100.00', '2399.00', 'shelf1', 'SUP-DIAM'),
    ('JW-007', 'Gold Signet Ring', 'Rings', 'Yellow Gold', '22K', '', None, 4, '380.00', '749.00', 'position1', 'SUP-GOLD'),
]


class Command(BaseCommand):
    help = "Seeds sample suppliers, supplier orders and jewelry inventory items"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing inventory items and supplier orders first',
        )

    def handle(self, *args, **options):
        if not Location.objects.filter(code='case1').exists():
            self.stdout.write("Location hierarchy missing, loading it first...")
            call_command('load_location_hierarchy', stdout=self.stdout)

        with transaction.atomic(), suspend_cache_signals():
            if options['clear']:
                self.stdout.write(self.style.WARNING("Clearing inventory items and supplier orders..."))
                InventoryItem.objects.all().delete()
                SupplierOrder.objects.all().delete()

            suppliers = self._load_suppliers()
            self._load_orders(suppliers)
            self._load_items(suppliers)

        invalidate_inventory_cache()
        invalidate_supplier_analytics_cache()
        self.stdout.write(self.style.SUCCESS("Sample inventory loaded."))

    def _load_suppliers(self):
        suppliers = {}
        for code, name, category in SAMPLE_SUPPLIERS:
            supplier, created = Supplier.objects.get_or_create(
                code=code,
                defaults={'name': name, 'category': category, 'payment_terms': 'Net 30'}
            )
            suppliers[code] = supplier
            if created:
                self.stdout.write(self.style.SUCCESS(f"  ✓ Supplier: {name}"))
        return suppliers

    def _load_orders(self, suppliers):
        today = date.today()
        created_count = 0
        for index, (code, supplier) in enumerate(suppliers.items()):
            # Six monthly orders per supplier; every third one arrives late
            for month in range(6):
                ordered_on = today - timedelta(days=30 * (6 - month) + index)
                expected_on = ordered_on + timedelta(days=14)
                late = (month + index) % 3 == 0
                _, created = SupplierOrder.objects.get_or_create(
                    order_number=f"PO-{code[4:]}-{month + 1:03d}",
                    defaults={
                        'supplier': supplier,
                        'category': supplier.category,
                        'amount': Decimal(1000 + 250 * index + 125 * month),
                        'ordered_on': ordered_on,
                        'expected_on': expected_on,
                        'delivered_on': expected_on + timedelta(days=3 if late else -1),
                        'quality_score': 3 if late else 5 - (index % 2),
                    }
                )
                created_count += int(created)
        self.stdout.write(f"  Supplier orders created: {created_count}")

    def _load_items(self, suppliers):
        locations = {location.code: location for location in Location.objects.all()}
        created_count = 0
        for (sku, name, category, metal, purity, stone, carat, quantity,
             cost, price, location_code, vendor_code) in SAMPLE_ITEMS:
            _, created = InventoryItem.objects.get_or_create(
                sku=sku,
                defaults={
                    'name': name,
                    'category': category,
                    'metal': metal,
                    'purity': purity,
                    'primary_stone': stone,
                    'carat_weight': Decimal(carat) if carat else None,
                    'quantity': quantity,
                    'cost': Decimal(cost),
                    'price': Decimal(price),
                    'location': locations.get(location_code),
                    'vendor': suppliers.get(vendor_code),
                }
            )
            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f"  ✓ Item: {sku} {name}"))
        self.stdout.write(f"  Inventory items created: {created_count}")
