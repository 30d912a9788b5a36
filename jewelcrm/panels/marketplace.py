from .base import CrudPanel, REMOTE_ERRORS, error_text, as_number, equals
from .samples import SAMPLE_MARKETPLACE

NUMERIC_SORT_FIELDS = {'rating', 'review_count', 'download_count'}


def _search(item, query):
    query = str(query).lower()
    return (
        query in (item.get('name') or '').lower()
        or query in (item.get('description') or '').lower()
        or any(query in tag.lower() for tag in item.get('tags') or [])
    )


class MarketplacePanel(CrudPanel):
    """Integration marketplace browser plus the custom integration builder"""
    resource = '/integrations/marketplace'
    label = 'integration'
    plural = 'integrations'
    sample_data = SAMPLE_MARKETPLACE
    columns = [
        ('name', 'Name'),
        ('developer', 'Developer'),
        ('category', 'Category'),
        ('pricing_model', 'Pricing'),
        ('rating', 'Rating'),
        ('download_count', 'Downloads'),
    ]

    def predicates(self):
        return {
            'search': _search,
            'category': equals('category', case_sensitive=True),
            'pricing': equals('pricing_model', case_sensitive=True),
        }

    def sorted_items(self, items=None, sort_by='rating', order='desc'):
        items = list(self.items if items is None else items)

        def key(item):
            value = item.get(sort_by)
            if sort_by in NUMERIC_SORT_FIELDS:
                number = as_number(value)
                return number if number is not None else 0
            return str(value or '').lower()

        return sorted(items, key=key, reverse=(order != 'asc'))

    def update(self, item_id, payload, partial=False):
        raise NotImplementedError('Marketplace listings are edited by staff in the admin')

    def delete(self, item_id):
        raise NotImplementedError('Marketplace listings are edited by staff in the admin')

    def bulk_delete(self, ids):
        raise NotImplementedError('Marketplace listings are edited by staff in the admin')

    def build(self, integration):
        """Save a builder integration; returns the saved record with ``generatedCode``"""
        if not integration.get('name') or not integration.get('template'):
            self.notify('error', 'Please fill in all required fields')
            return None
        try:
            body = self.client.post('/integrations/builder', integration)
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, 'Failed to save integration'))
            return None
        self.notify('success', 'Integration saved successfully!')
        return body['data']
