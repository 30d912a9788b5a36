"""
Management command to load sample production work orders
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from jewelcrm.production.models import WorkOrder, WorkOrderStone, WorkOrderStage


SAMPLE_WORK_ORDERS = [
    {
        'number': 'WO-12345',
        'sales_order_number': 'SO-7890',
        'status': 'in_production',
        'priority': 'high',
        'current_stage': 'stone_setting',
        'progress': 65,
        'customer_name': 'Emma Thompson',
        'customer_email': 'emma.thompson@example.com',
        'customer_phone': '(555) 123-4567',
        'assigned_to': 'Michael Chen',
        'item_name': 'Custom Diamond Engagement Ring',
        'item_description': '18K White Gold Solitaire with Pavé Band',
        'metal_type': '18K White Gold',
        'metal_purity': '750',
        'metal_finish': 'Polished',
        'estimated_weight': Decimal('5.20'),
        'actual_weight': Decimal('5.40'),
        'instructions': (
            'Center stone to be set in a 4-prong setting. Pavé diamonds should extend halfway down the band. '
            'Customer requested a comfort fit band. Engrave "Forever Yours" on the inside of the band.'
        ),
        'due_in_days': 10,
        'stones': [
            ('ST-001', 'Diamond', 'Round Brilliant', '1.25ct', 'F', 'VS1', 1, 'Center', 'set'),
            ('ST-002', 'Diamond', 'Round Brilliant', '0.05ct', 'F', 'VS2', 12, 'Pavé Band', 'set'),
        ],
        # (stage, started days ago, completed days ago or None, completed by, notes)
        'timeline': [
            ('design', 20, 17, 'Sarah Johnson', 'CAD approved by customer'),
            ('casting', 16, 14, 'David Wilson', 'Cast in 18K white gold'),
            ('stone_setting', 13, None, 'Michael Chen', 'Center stone set, pavé in progress'),
        ],
    },
    {
        'number': 'WO-12346',
        'sales_order_number': 'SO-7891',
        'status': 'pending',
        'priority': 'medium',
        'current_stage': 'design',
        'progress': 5,
        'customer_name': 'James Rodriguez',
        'customer_email': 'james.rodriguez@example.com',
        'assigned_to': 'Sarah Johnson',
        'item_name': 'Sapphire Anniversary Band',
        'item_description': 'Platinum eternity band with channel-set sapphires',
        'metal_type': 'Platinum',
        'metal_purity': '950',
        'metal_finish': 'Brushed',
        'estimated_weight': Decimal('6.80'),
        'due_in_days': 30,
        'stones': [
            ('ST-003', 'Sapphire', 'Princess', '0.10ct', 'Blue', 'VS', 20, 'Channel', 'pending'),
        ],
        'timeline': [
            ('design', 2, None, 'Sarah Johnson', ''),
        ],
    },
    {
        'number': 'WO-12347',
        'sales_order_number': 'SO-7880',
        'status': 'quality_check',
        'priority': 'urgent',
        'current_stage': 'quality_control',
        'progress': 90,
        'customer_name': 'Olivia Park',
        'customer_email': 'olivia.park@example.com',
        'assigned_to': 'David Wilson',
        'item_name': 'Emerald Drop Earrings',
        'item_description': '14K yellow gold drops with pear emeralds',
        'metal_type': '14K Yellow Gold',
        'metal_purity': '585',
        'metal_finish': 'High Polish',
        'estimated_weight': Decimal('4.10'),
        'actual_weight': Decimal('4.05'),
        'due_in_days': -2,
        'stones': [
            ('ST-004', 'Emerald', 'Pear', '0.75ct', 'Green', 'VS1', 2, 'Drop', 'set'),
        ],
        'timeline': [
            ('design', 25, 22, 'Sarah Johnson', ''),
            ('casting', 21, 19, 'David Wilson', ''),
            ('stone_setting', 18, 12, 'Michael Chen', ''),
            ('polishing', 11, 8, 'David Wilson', ''),
            ('quality_control', 7, None, 'Lisa Brown', 'Checking clasp tension'),
        ],
    },
]


class Command(BaseCommand):
    help = "Loads sample production work orders with stones and stage timeline"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing work orders before loading samples',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write(self.style.WARNING("Clearing existing work orders..."))
            WorkOrder.objects.all().delete()

        today = timezone.localdate()
        for sample in SAMPLE_WORK_ORDERS:
            sample = dict(sample)
            stones = sample.pop('stones')
            timeline = sample.pop('timeline')
            sample['due_date'] = today + timedelta(days=sample.pop('due_in_days'))

            work_order, created = WorkOrder.objects.update_or_create(number=sample['number'], defaults=sample)
            work_order.stones.all().delete()
            work_order.timeline.all().delete()

            for code, stone_type, shape, size, color, clarity, quantity, placement, status in stones:
                WorkOrderStone.objects.create(
                    work_order=work_order, code=code, stone_type=stone_type, shape=shape, size=size,
                    color=color, clarity=clarity, quantity=quantity, placement=placement, status=status
                )

            for stage, started_ago, completed_ago, completed_by, notes in timeline:
                WorkOrderStage.objects.create(
                    work_order=work_order,
                    stage=stage,
                    started_on=today - timedelta(days=started_ago),
                    completed_on=today - timedelta(days=completed_ago) if completed_ago is not None else None,
                    completed_by=completed_by,
                    notes=notes,
                )

            label = "Created" if created else "Updated"
            self.stdout.write(self.style.SUCCESS(f"  ✓ {label}: {work_order.number} ({work_order.item_name})"))

        self.stdout.write(self.style.SUCCESS(f"Loaded {len(SAMPLE_WORK_ORDERS)} work orders"))
