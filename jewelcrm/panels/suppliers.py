
from .base import CrudPanel, REMOTE_ERRORS, error_text, text_search, equals
from .samples import SAMPLE_SUPPLIERS


def _active(item, flag):
    if isinstance(flag, str):
        flag = flag.lower() == 'true'
    return bool(item.get('is_active')) == flag


class SupplierPanel(CrudPanel):
    resource = '/suppliers/'
    label = 'supplier'
    plural = 'suppliers'
    sample_data = SAMPLE_SUPPLIERS
    columns = [
        ('code', 'Code'),
        ('name', 'Name'),
        ('category', 'Category'),
        ('contact_person', 'Contact'),
        ('email', 'Email'),
        ('phone', 'Phone'),
        ('payment_terms', 'Payment Terms'),
        ('is_active', 'Active'),
    ]

    def predicates(self):
        return {
            'search': text_search('name', 'code', 'contact_person', 'email'),
            'category': equals('category'),
            'is_active': _active,
        }

    def _analytics(self, path, params=None):
        try:
            return self.client.get(path, params=params)['data']
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, 'Failed to load supplier analytics.'))
            return None

    def scorecard(self, supplier_id, **filters):
        return self._analytics(f"/suppliers/{supplier_id}/scorecard/", filters or None)

    def spend(self, **filters):
        return self._analytics('/suppliers/spend/', filters or None)

    def performance(self, **filters):
        return self._analytics('/suppliers/performance/', filters or None)
