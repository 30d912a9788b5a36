from .base import CrudPanel, REMOTE_ERRORS, error_text, text_search, equals
from .samples import SAMPLE_WORK_ORDERS


def _overdue(item, flag):
    return bool(item.get('is_overdue')) == bool(flag)


class WorkOrderPanel(CrudPanel):
    """Production work orders; the API exposes them read-only"""
    resource = '/work-orders/'
    label = 'work order'
    plural = 'work orders'
    read_only = True
    sample_data = SAMPLE_WORK_ORDERS
    columns = [
        ('number', 'Work Order'),
        ('item_name', 'Item'),
        ('customer_name', 'Customer'),
        ('status_display', 'Status'),
        ('stage_display', 'Stage'),
        ('priority', 'Priority'),
        ('progress', 'Progress'),
        ('assigned_to', 'Assigned To'),
        ('due_date', 'Due'),
    ]

    def predicates(self):
        return {
            'search': text_search('number', 'customer_name', 'item_name'),
            'status': equals('status', case_sensitive=True),
            'stage': equals('current_stage', case_sensitive=True),
            'priority': equals('priority'),
            'overdue': _overdue,
        }

    def detail(self, work_order_id):
        try:
            return self.client.get(self.detail_path(work_order_id))['data']
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, 'Failed to load work order.'))
            return None
