"""
Physical inventory audit wizard.

The wizard walks through five steps (setup, location selection, scanning,
discrepancy review, completion) while accumulating an ``auditData`` record.
It is plain Python state: sessions are kept by ``AuditSessionStore`` and
nothing here touches the database.

``auditData`` keys are camelCase because the record is exchanged with the
dashboard as-is.
"""
import copy
import random
import uuid

from django.utils import timezone

from .exceptions import AuditError, StepError, ItemNotFound

FIRST_STEP = 1
REVIEW_STEP = 4
LAST_STEP = 5

STEP_NAMES = {
    1: 'setup',
    2: 'locations',
    3: 'scanning',
    4: 'review',
    5: 'completion',
}

# Keys a client may patch directly; scannedItems/discrepancies only change
# through record_count() and resolve()
EDITABLE_KEYS = ('name', 'description', 'locations', 'assignedUsers', 'isBlindCount', 'startDate', 'expectedEndDate')
SET_KEYS = ('locations', 'assignedUsers')
DERIVED_KEYS = ('scannedItems', 'discrepancies')

FILTER_MODES = ('all', 'pending', 'scanned', 'discrepancy')
DISCREPANCY_TYPES = ('all', 'shortage', 'excess')
DISCREPANCY_STATUSES = ('all', 'pending', 'resolved')
SORT_FIELDS = ('difference', 'value', 'totalValue')
SORT_ORDERS = ('asc', 'desc')
RESOLUTIONS = ('adjust', 'recount', 'investigate', 'ignore')

DEFAULT_RESOLUTION = 'adjust'
DEFAULT_RESOLUTION_NOTES = 'Inventory adjusted to match physical count'


def empty_audit_data():
    return {
        'name': '',
        'description': '',
        'locations': [],
        'assignedUsers': [],
        'isBlindCount': False,
        'startDate': None,
        'expectedEndDate': None,
        'scannedItems': [],
        'discrepancies': [],
    }


def _isoformat(value):
    if value is None or isinstance(value, str):
        return value
    return value.isoformat()


def _unique(values):
    """De-duplicate while keeping the order of first appearance"""
    seen = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def _same_id(left, right):
    return str(left).lower() == str(right).lower()


def _upsert(records, record):
    """Replace the record with the same id in place, or append it"""
    for index, existing in enumerate(records):
        if _same_id(existing['id'], record['id']):
            return records[:index] + [record] + records[index + 1:]
    return records + [record]


def build_discrepancy(record):
    """
    Derive the discrepancy entry for a counted record.

    difference = actual - expected; shortage when negative, excess otherwise.
    """
    difference = record['actualQuantity'] - record['expectedQuantity']
    unit_value = record.get('unitValue') or 0
    return {
        'id': record['id'],
        'sku': record['sku'],
        'name': record['name'],
        'category': record.get('category', ''),
        'location': record.get('location', ''),
        'expectedQuantity': record['expectedQuantity'],
        'actualQuantity': record['actualQuantity'],
        'difference': difference,
        'discrepancyType': 'shortage' if difference < 0 else 'excess',
        'unitValue': unit_value,
        'totalValue': round(abs(difference) * unit_value, 2),
        'status': 'pending',
        'resolution': '',
        'notes': '',
        'resolvedAt': None,
        'resolvedBy': None,
    }


class AuditWizard:
    """Step controller plus the operations each step performs on ``auditData``"""

    def __init__(self, session_id=None, created_by=None, current_step=FIRST_STEP,
                 audit_data=None, inventory=None, created_at=None, updated_at=None):
        self.session_id = session_id or uuid.uuid4().hex
        self.created_by = created_by
        self.current_step = min(max(int(current_step), FIRST_STEP), LAST_STEP)
        self.audit_data = empty_audit_data()
        if audit_data:
            self.audit_data.update(copy.deepcopy(audit_data))
        # Snapshot of the items expected in the selected locations
        self.inventory = list(inventory or [])
        now = timezone.now().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    # --- Step navigation ---

    @property
    def step_name(self):
        return STEP_NAMES[self.current_step]

    def next_step(self):
        self.current_step = min(self.current_step + 1, LAST_STEP)
        self._touch()
        return self.current_step

    def previous_step(self):
        self.current_step = max(self.current_step - 1, FIRST_STEP)
        self._touch()
        return self.current_step

    def go_to(self, step):
        try:
            step = int(step)
        except (TypeError, ValueError):
            raise StepError(f"Invalid step: {step}")
        if step < FIRST_STEP or step > LAST_STEP:
            raise StepError(f"Step must be between {FIRST_STEP} and {LAST_STEP}")
        self.current_step = step
        self._touch()
        return self.current_step

    # --- auditData patching ---

    def update(self, patch):
        """Shallow-merge editable keys into auditData; returns the changed key names"""
        derived = [key for key in patch if key in DERIVED_KEYS]
        if derived:
            raise AuditError(f"{', '.join(derived)} can only change by counting or resolving items")
        unknown = [key for key in patch if key not in EDITABLE_KEYS]
        if unknown:
            raise AuditError(f"Unknown audit fields: {', '.join(sorted(unknown))}")

        for key, value in patch.items():
            if key in SET_KEYS:
                value = _unique(str(v) for v in (value or []))
            elif key in ('startDate', 'expectedEndDate'):
                value = _isoformat(value)
            elif key == 'isBlindCount':
                value = bool(value)
            self.audit_data[key] = value
        self._touch()
        return list(patch.keys())

    @property
    def is_blind(self):
        return bool(self.audit_data.get('isBlindCount'))

    @property
    def expectations_hidden(self):
        """Blind counts keep expected quantities and discrepancies back until review"""
        return self.is_blind and self.current_step < REVIEW_STEP

    def set_candidates(self, items):
        """
        Replace the expected-item snapshot. Counts for items that are no
        longer in scope are dropped together with their discrepancies.
        """
        self.inventory = list(items)
        keep = {str(item['id']) for item in self.inventory}
        self.audit_data['scannedItems'] = [
            r for r in self.audit_data['scannedItems'] if str(r['id']) in keep
        ]
        self.audit_data['discrepancies'] = [
            d for d in self.audit_data['discrepancies'] if str(d['id']) in keep
        ]
        self._touch()

    # --- Scanning ---

    def _scanned(self, item_id):
        for record in self.audit_data['scannedItems']:
            if _same_id(record['id'], item_id):
                return record
        return None

    def _candidate(self, item_id):
        for item in self.inventory:
            if _same_id(item['id'], item_id):
                return item
        raise ItemNotFound(f"Item {item_id} is not in the selected locations")

    def counting_view(self, item):
        """What a counter may see of an item; blind counts hide expectations"""
        view = dict(item)
        if self.is_blind:
            view.pop('expectedQuantity', None)
            if view.get('status') == 'discrepancy':
                view['status'] = 'scanned'
        return view

    def find_item(self, query):
        """Case-insensitive exact match on SKU or id among the expected items"""
        query = (query or '').strip().lower()
        if not query:
            raise ItemNotFound("Enter a SKU to search for")
        for item in self.inventory:
            if item['sku'].lower() == query or str(item['id']).lower() == query:
                return self.counting_view(self._scanned(item['id']) or item)
        raise ItemNotFound("Item not found. Please check the SKU and try again.")

    def simulate_scan(self, rng=random):
        """Stand-in for a barcode scanner: pick a random expected item"""
        if not self.inventory:
            raise ItemNotFound("No items to scan in the selected locations")
        item = rng.choice(self.inventory)
        return self.counting_view(self._scanned(item['id']) or item)

    def record_count(self, item_id, actual_quantity, scanned_by=None, found_location=None):
        """
        Store a count for an expected item and refresh its discrepancy.

        A recount replaces the earlier record; if it now matches, the stale
        discrepancy is removed.
        """
        if isinstance(actual_quantity, bool):
            raise AuditError("actualQuantity must be a whole number")
        if isinstance(actual_quantity, str) and actual_quantity.strip().isdigit():
            actual_quantity = int(actual_quantity)
        if not isinstance(actual_quantity, int) or actual_quantity < 0:
            raise AuditError("actualQuantity must be a whole number of at least 0")

        item = self._candidate(item_id)
        record = dict(item)
        record.update({
            'actualQuantity': actual_quantity,
            'status': 'scanned' if actual_quantity == item['expectedQuantity'] else 'discrepancy',
            'scannedAt': timezone.now().isoformat(),
            'scannedBy': scanned_by,
        })
        if found_location:
            record['foundLocation'] = found_location

        self.audit_data['scannedItems'] = _upsert(self.audit_data['scannedItems'], record)
        if record['status'] == 'discrepancy':
            self.audit_data['discrepancies'] = _upsert(self.audit_data['discrepancies'], build_discrepancy(record))
        else:
            self.audit_data['discrepancies'] = [
                d for d in self.audit_data['discrepancies'] if not _same_id(d['id'], item['id'])
            ]
        self._touch()
        return record

    def counting_items(self, filter_mode='all'):
        if filter_mode not in FILTER_MODES:
            raise AuditError(f"filter must be one of: {', '.join(FILTER_MODES)}")
        if filter_mode == 'discrepancy' and self.is_blind:
            raise AuditError("Discrepancies are hidden during a blind count")

        scanned = self.audit_data['scannedItems']
        if filter_mode == 'pending':
            items = [item for item in self.inventory if self._scanned(item['id']) is None]
        elif filter_mode == 'scanned':
            items = [r for r in scanned if r['status'] == 'scanned' or self.is_blind]
        elif filter_mode == 'discrepancy':
            items = [r for r in scanned if r['status'] == 'discrepancy']
        else:
            items = [self._scanned(item['id']) or item for item in self.inventory]
        return [self.counting_view(item) for item in items]

    def progress(self):
        total = len(self.inventory)
        scanned = len(self.audit_data['scannedItems'])
        return {
            'scanned': scanned,
            'total': total,
            'percent': round(scanned * 100 / total, 1) if total else 0.0,
        }

    # --- Discrepancy review ---

    def filter_discrepancies(self, search='', discrepancy_type='all', location=None, status='all',
                             sort_field='difference', sort_order='desc'):
        if discrepancy_type not in DISCREPANCY_TYPES:
            raise AuditError(f"type must be one of: {', '.join(DISCREPANCY_TYPES)}")
        if status not in DISCREPANCY_STATUSES:
            raise AuditError(f"status must be one of: {', '.join(DISCREPANCY_STATUSES)}")
        if sort_field not in SORT_FIELDS:
            raise AuditError(f"sort must be one of: {', '.join(SORT_FIELDS)}")
        if sort_order not in SORT_ORDERS:
            raise AuditError("order must be asc or desc")

        results = list(self.audit_data['discrepancies'])
        query = (search or '').strip().lower()
        if query:
            results = [
                d for d in results
                if query in d['sku'].lower() or query in d['name'].lower() or query in (d.get('location') or '').lower()
            ]
        if discrepancy_type != 'all':
            results = [d for d in results if d['discrepancyType'] == discrepancy_type]
        if location:
            results = [d for d in results if (d.get('location') or '').lower() == location.lower()]
        if status != 'all':
            results = [d for d in results if d['status'] == status]

        def sort_key(entry):
            if sort_field == 'difference':
                return abs(entry['difference'])
            return entry['totalValue']

        return sorted(results, key=sort_key, reverse=sort_order == 'desc')

    def resolve(self, item_id, resolution=None, notes=None, resolved_by=None):
        if resolution is None:
            resolution = DEFAULT_RESOLUTION
            if notes is None:
                notes = DEFAULT_RESOLUTION_NOTES
        if resolution not in RESOLUTIONS:
            raise AuditError(f"resolution must be one of: {', '.join(RESOLUTIONS)}")

        for entry in self.audit_data['discrepancies']:
            if _same_id(entry['id'], item_id):
                entry.update({
                    'status': 'resolved',
                    'resolution': resolution,
                    'notes': notes or '',
                    'resolvedAt': timezone.now().isoformat(),
                    'resolvedBy': resolved_by,
                })
                self._touch()
                return entry
        raise ItemNotFound(f"No discrepancy recorded for item {item_id}")

    def review_summary(self):
        """Counts by type and the signed value impact (shortages subtract)"""
        discrepancies = self.audit_data['discrepancies']
        value_impact = 0
        for entry in discrepancies:
            if entry['discrepancyType'] == 'shortage':
                value_impact -= entry['totalValue']
            else:
                value_impact += entry['totalValue']
        resolved = len([d for d in discrepancies if d['status'] == 'resolved'])
        return {
            'totalDiscrepancies': len(discrepancies),
            'shortages': len([d for d in discrepancies if d['discrepancyType'] == 'shortage']),
            'excess': len([d for d in discrepancies if d['discrepancyType'] == 'excess']),
            'resolved': resolved,
            'pending': len(discrepancies) - resolved,
            'valueImpact': round(value_impact, 2),
        }

    def ensure_review_allowed(self):
        if self.expectations_hidden:
            raise StepError(f"Discrepancies of a blind count are available from step {REVIEW_STEP} "
                            f"({STEP_NAMES[REVIEW_STEP]})")

    # --- Completion ---

    def ensure_final_step(self):
        if self.current_step != LAST_STEP:
            raise StepError(f"The audit can only be completed on step {LAST_STEP} ({STEP_NAMES[LAST_STEP]})")

    # --- Serialization ---

    def snapshot(self):
        """Client-facing state; a blind count shows counts only until the review step"""
        audit_data = copy.deepcopy(self.audit_data)
        if self.expectations_hidden:
            audit_data['scannedItems'] = [self.counting_view(record) for record in audit_data['scannedItems']]
            audit_data['discrepancies'] = []
        return {
            'id': self.session_id,
            'currentStep': self.current_step,
            'stepName': self.step_name,
            'auditData': audit_data,
            'progress': self.progress(),
            'createdBy': self.created_by,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def to_dict(self):
        return {
            'id': self.session_id,
            'createdBy': self.created_by,
            'currentStep': self.current_step,
            'auditData': copy.deepcopy(self.audit_data),
            'inventory': copy.deepcopy(self.inventory),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            session_id=data['id'],
            created_by=data.get('createdBy'),
            current_step=data.get('currentStep', FIRST_STEP),
            audit_data=data.get('auditData'),
            inventory=data.get('inventory'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def _touch(self):
        self.updated_at = timezone.now().isoformat()
