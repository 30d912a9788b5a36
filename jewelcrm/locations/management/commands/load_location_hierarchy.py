"""
Management command to seed the sample store location hierarchy
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from jewelcrm.locations.models import Location


# (code, name, type, parent code, capacity, security level)
SAMPLE_HIERARCHY = [
    ('store1', 'Main Store', 'store', None, 1000, 'medium'),
    ('showroom1', 'Front Showroom', 'showroom', 'store1', 500, 'medium'),
    ('case1', 'Display Case A', 'case', 'showroom1', 50, 'high'),
    ('shelf1', 'Top Shelf', 'shelf', 'case1', 10, 'high'),
    ('position1', 'Position 1', 'position', 'shelf1', 1, 'high'),
    ('case2', 'Display Case B', 'case', 'showroom1', 50, 'high'),
    ('backoffice1', 'Back Office', 'showroom', 'store1', 200, 'high'),
    ('safe1', 'Safe 1', 'safe', 'backoffice1', 100, 'high'),
    ('workshop1', 'Workshop', 'workshop', 'store1', 300, 'medium'),
]


class Command(BaseCommand):
    help = "Seeds the sample store location hierarchy (store > showroom > case > shelf > position)"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete the sample locations before loading them again',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write(self.style.WARNING("Clearing sample locations..."))
            # Children first so PROTECT on parent never fires
            for code, *_ in reversed(SAMPLE_HIERARCHY):
                Location.objects.filter(code=code).delete()

        created_count = 0
        updated_count = 0
        for code, name, location_type, parent_code, capacity, security_level in SAMPLE_HIERARCHY:
            parent = Location.objects.get(code=parent_code) if parent_code else None
            _, created = Location.objects.update_or_create(
                code=code,
                defaults={
                    'name': name,
                    'location_type': location_type,
                    'parent': parent,
                    'capacity': capacity,
                    'security_level': security_level,
                    'is_active': True,
                }
            )
            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f"  ✓ Created: {code} ({name})"))
            else:
                updated_count += 1
                self.stdout.write(f"  ↻ Updated: {code} ({name})")

        self.stdout.write(self.style.SUCCESS(f"Locations created: {created_count}, updated: {updated_count}"))
