"""Completion summary, variance reports and CSV export for an audit session"""
from collections import OrderedDict
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_datetime

DISCREPANCY_COLUMNS = [
    ('sku', 'SKU'),
    ('name', 'Item'),
    ('category', 'Category'),
    ('location', 'Location'),
    ('expectedQuantity', 'Expected'),
    ('actualQuantity', 'Actual'),
    ('difference', 'Difference'),
    ('discrepancyType', 'Type'),
    ('totalValue', 'Value Impact'),
    ('status', 'Status'),
    ('resolution', 'Resolution'),
    ('notes', 'Notes'),
    ('resolvedBy', 'Resolved By'),
]


def _parse(value):
    if value is None or isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    if parsed is not None and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def _plural(count, unit):
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_duration(delta):
    """'6 days, 4 hours' style; minutes only when under an hour"""
    seconds = max(int(delta.total_seconds()), 0)
    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    if not days and not hours:
        return _plural(remainder // 60, 'minute')
    parts = []
    if days:
        parts.append(_plural(days, 'day'))
    if hours:
        parts.append(_plural(hours, 'hour'))
    return ', '.join(parts)


def participants(wizard):
    """Assigned users plus everyone who counted or resolved, in order of appearance"""
    names = []
    data = wizard.audit_data
    candidates = list(data['assignedUsers'])
    candidates += [r.get('scannedBy') for r in data['scannedItems']]
    candidates += [d.get('resolvedBy') for d in data['discrepancies']]
    for name in candidates:
        if name and name not in names:
            names.append(name)
    return names


def completion_summary(wizard, now=None):
    now = now or timezone.now()
    data = wizard.audit_data
    total_items = len(wizard.inventory)
    scanned_items = len(data['scannedItems'])
    discrepancies = data['discrepancies']
    resolved = len([d for d in discrepancies if d['status'] == 'resolved'])

    start = _parse(data.get('startDate')) or _parse(wizard.created_at)
    return {
        'totalItems': total_items,
        'scannedItems': scanned_items,
        'completionRate': round(scanned_items * 100 / total_items, 2) if total_items else 0.0,
        'totalDiscrepancies': len(discrepancies),
        'resolvedDiscrepancies': resolved,
        'discrepancyRate': round(len(discrepancies) * 100 / total_items, 2) if total_items else 0.0,
        'valueImpact': wizard.review_summary()['valueImpact'],
        'startDate': start.isoformat() if start else None,
        'completionDate': now.isoformat(),
        'duration': format_duration(now - start) if start else None,
        'participants': participants(wizard),
    }


def completion_reports(wizard):
    data = wizard.audit_data
    discrepancies = data['discrepancies']

    def line(entry):
        return {
            'sku': entry['sku'],
            'name': entry['name'],
            'location': entry['location'],
            'expected': entry['expectedQuantity'],
            'actual': entry['actualQuantity'],
            'value': entry['totalValue'],
        }

    location_mismatches = [
        {
            'sku': record['sku'],
            'name': record['name'],
            'expectedLocation': record['location'],
            'actualLocation': record['foundLocation'],
        }
        for record in data['scannedItems']
        if record.get('foundLocation') and record['foundLocation'] != record['location']
    ]

    by_category = OrderedDict()
    for record in sorted(data['scannedItems'], key=lambda r: r.get('category') or ''):
        unit_value = record.get('unitValue') or 0
        bucket = by_category.setdefault(record.get('category') or 'Uncategorized', {'expected': 0, 'actual': 0})
        bucket['expected'] += record['expectedQuantity'] * unit_value
        bucket['actual'] += record['actualQuantity'] * unit_value

    value_variances = []
    for category, totals in by_category.items():
        difference = round(totals['actual'] - totals['expected'], 2)
        if difference:
            value_variances.append({
                'category': category,
                'expectedValue': round(totals['expected'], 2),
                'actualValue': round(totals['actual'], 2),
                'difference': difference,
            })

    return {
        'missingItems': [line(d) for d in discrepancies if d['discrepancyType'] == 'shortage'],
        'extraItems': [line(d) for d in discrepancies if d['discrepancyType'] == 'excess'],
        'locationMismatches': location_mismatches,
        'valueVariances': value_variances,
    }
