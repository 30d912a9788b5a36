"""
Supplier spend and performance analytics.

Aggregations that the database does well (sums, monthly buckets) are done
with the ORM; per-order delivery and quality metrics are computed in Python
so they behave the same on SQLite and PostgreSQL.
"""
from collections import OrderedDict
from decimal import Decimal

from django.db.models import Sum, Count
from django.db.models.functions import TruncMonth

from .models import SUPPLY_CATEGORY_CHOICES

CATEGORY_LABELS = dict(SUPPLY_CATEGORY_CHOICES)

ON_TIME_TARGET = 95.0
QUALITY_ACCEPTANCE_TARGET = 98.0
# Scores at or above this count as accepted on inspection
ACCEPTABLE_QUALITY = 3


def filter_orders(queryset, date_from=None, date_to=None, supplier_ids=None, categories=None):
    if date_from:
        queryset = queryset.filter(ordered_on__gte=date_from)
    if date_to:
        queryset = queryset.filter(ordered_on__lte=date_to)
    if supplier_ids:
        queryset = queryset.filter(supplier_id__in=supplier_ids)
    if categories:
        queryset = queryset.filter(category__in=categories)
    return queryset


def _percentage(part, whole):
    if not whole:
        return 0.0
    return round(float(part) * 100 / float(whole), 1)


def spend_analysis(orders):
    """Total spend with breakdowns by category, supplier and month"""
    totals = orders.aggregate(total=Sum('amount'), count=Count('id'))
    total_spend = totals['total'] or Decimal('0.00')

    by_category = [
        {
            'category': row['category'],
            'label': CATEGORY_LABELS.get(row['category'], row['category']),
            'amount': str(row['amount']),
            'percentage': _percentage(row['amount'], total_spend),
        }
        for row in orders.values('category').annotate(amount=Sum('amount')).order_by('-amount')
    ]

    by_supplier = [
        {
            'supplier_id': row['supplier_id'],
            'supplier_name': row['supplier__name'],
            'amount': str(row['amount']),
            'orders': row['orders'],
            'percentage': _percentage(row['amount'], total_spend),
        }
        for row in orders.values('supplier_id', 'supplier__name')
        .annotate(amount=Sum('amount'), orders=Count('id'))
        .order_by('-amount')
    ]

    by_month = [
        {'month': row['month'].strftime('%Y-%m'), 'amount': str(row['amount'])}
        for row in orders.annotate(month=TruncMonth('ordered_on'))
        .values('month')
        .annotate(amount=Sum('amount'))
        .order_by('month')
    ]

    return {
        'total_spend': str(total_spend),
        'order_count': totals['count'],
        'by_category': by_category,
        'by_supplier': by_supplier,
        'by_month': by_month,
    }


def score_orders(orders):
    """
    Delivery and quality metrics for a collection of orders.

    ``overall_score`` is on a 0-5 scale: the mean of the delivery score
    (on-time rate mapped to 0-5) and the average quality score, using
    whichever of the two is available.
    """
    orders = list(orders)
    delivered = [o for o in orders if o.delivered_on is not None]
    with_due_date = [o for o in delivered if o.expected_on is not None]
    on_time = [o for o in with_due_date if o.delivered_on <= o.expected_on]
    scores = [o.quality_score for o in orders if o.quality_score is not None]

    on_time_rate = _percentage(len(on_time), len(with_due_date)) if with_due_date else None
    average_quality = round(sum(scores) / len(scores), 2) if scores else None
    quality_acceptance = (
        _percentage(len([s for s in scores if s >= ACCEPTABLE_QUALITY]), len(scores)) if scores else None
    )
    lead_times = [(o.delivered_on - o.ordered_on).days for o in delivered]
    average_lead_time = round(sum(lead_times) / len(lead_times), 1) if lead_times else None

    components = []
    if on_time_rate is not None:
        components.append(on_time_rate / 20)
    if average_quality is not None:
        components.append(average_quality)
    overall = round(sum(components) / len(components), 2) if components else None

    return {
        'orders': len(orders),
        'delivered_orders': len(delivered),
        'open_orders': len(orders) - len(delivered),
        'total_spend': str(sum((o.amount for o in orders), Decimal('0.00'))),
        'on_time_rate': on_time_rate,
        'average_quality': average_quality,
        'quality_acceptance_rate': quality_acceptance,
        'average_lead_time_days': average_lead_time,
        'overall_score': overall,
    }


def kpis(metrics):
    """Compare headline metrics with their targets"""
    rows = []
    for name, key, target in (
        ('On-Time Delivery', 'on_time_rate', ON_TIME_TARGET),
        ('Quality Acceptance', 'quality_acceptance_rate', QUALITY_ACCEPTANCE_TARGET),
    ):
        value = metrics.get(key)
        rows.append({
            'name': name,
            'value': value,
            'target': target,
            'unit': '%',
            'meets_target': value is not None and value >= target,
        })
    return rows


def monthly_trend(orders):
    """Average quality score per order month, oldest first"""
    buckets = OrderedDict()
    for order in sorted(orders, key=lambda o: o.ordered_on):
        if order.quality_score is None:
            continue
        buckets.setdefault(order.ordered_on.strftime('%Y-%m'), []).append(order.quality_score)
    return [
        {'month': month, 'score': round(sum(values) / len(values), 2)}
        for month, values in buckets.items()
    ]


def supplier_scorecard(supplier, orders):
    orders = list(orders)
    metrics = score_orders(orders)
    return {
        'supplier': {'id': supplier.id, 'name': supplier.name, 'category': supplier.category},
        'metrics': metrics,
        'kpis': kpis(metrics),
        'trend': monthly_trend(orders),
    }


def performance_ranking(suppliers, orders):
    """Rank suppliers by overall score; suppliers without scored orders go last"""
    by_supplier = {}
    for order in orders:
        by_supplier.setdefault(order.supplier_id, []).append(order)

    ranking = []
    for supplier in suppliers:
        metrics = score_orders(by_supplier.get(supplier.id, []))
        ranking.append({
            'supplier_id': supplier.id,
            'supplier_name': supplier.name,
            'category': supplier.category,
            **metrics,
        })

    ranking.sort(key=lambda row: (row['overall_score'] is None, -(row['overall_score'] or 0), row['supplier_name']))
    for position, row in enumerate(ranking, start=1):
        row['rank'] = position
    return ranking
