"""
Client-side list panels.

A panel owns a local list of records fetched from one REST resource. Every
remote failure is caught and turned into a notification: loads fall back to
sample data, creates are kept locally, updates and deletes leave the list
unchanged. Nothing is retried.
"""
import copy
import logging
import uuid
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import requests

from jewelcrm.core.exports import select_columns, rows_to_csv
from .client import ApiError

logger = logging.getLogger('jewelcrm.panels')

Notification = namedtuple('Notification', ['level', 'message'])

REMOTE_ERRORS = (ApiError, requests.RequestException)

# Filter values that mean "no filter"
EMPTY_FILTER_VALUES = (None, '', 'all')


class PanelError(Exception):
    pass


def error_text(error, fallback):
    if isinstance(error, ApiError) and error.message:
        return error.message
    return fallback


class CrudPanel:
    resource = None
    label = 'item'
    plural = 'items'
    id_field = 'id'
    read_only = False
    columns = []
    sample_data = []
    max_workers = 8

    def __init__(self, client):
        self.client = client
        self.items = []
        self.notifications = []
        self.using_sample_data = False

    # Notifications

    def notify(self, level, message):
        self.notifications.append(Notification(level, message))
        log = logger.error if level == 'error' else logger.info
        log(f"[{self.__class__.__name__}] {message}")

    @property
    def last_notification(self):
        return self.notifications[-1] if self.notifications else None

    # Paths

    def list_path(self):
        return self.resource

    def detail_path(self, item_id):
        return f"{self.resource.rstrip('/')}/{item_id}/"

    def _ensure_writable(self):
        if self.read_only:
            raise PanelError(f"{self.plural.capitalize()} are read-only")

    def _index(self, item_id):
        for position, item in enumerate(self.items):
            if str(item.get(self.id_field)) == str(item_id):
                return position
        return None

    # CRUD

    def load(self, **params):
        """
        Fetch the whole list, following ``pagination.next`` page by page.

        On failure keep what we have or fall back to sample data.
        """
        query = {k: v for k, v in params.items() if v is not None}
        try:
            items = self._fetch_pages(query)
        except REMOTE_ERRORS as e:
            logger.warning(f"Loading {self.plural} failed: {e}")
            if not self.items:
                self.items = copy.deepcopy(self.sample_data)
                self.using_sample_data = True
            self.notify('warning', 'Using sample data - API connection failed')
            return self.items

        self.items = items
        self.using_sample_data = False
        return self.items

    def _fetch_pages(self, query):
        items = []
        seen = set()
        while True:
            body = self.client.get(self.list_path(), params=query)
            items.extend(body.get('data') or [])
            next_page = (body.get('pagination') or {}).get('next')
            if not next_page or next_page in seen:
                return items
            seen.add(next_page)
            query = {**query, 'page': next_page}

    def build_local(self, payload):
        item = dict(payload)
        item.setdefault(self.id_field, f"local-{uuid.uuid4().hex[:12]}")
        return item

    def create(self, payload):
        self._ensure_writable()
        try:
            body = self.client.post(self.list_path(), payload)
        except REMOTE_ERRORS as e:
            logger.warning(f"Creating {self.label} failed: {e}")
            item = self.build_local(payload)
            self.items.insert(0, item)
            self.notify('success', f"{self.label.capitalize()} added (local only - API connection failed)")
            return item

        item = body['data']
        self.items.insert(0, item)
        self.notify('success', f"{self.label.capitalize()} added.")
        return item

    def update(self, item_id, payload, partial=False):
        self._ensure_writable()
        try:
            if partial:
                body = self.client.patch(self.detail_path(item_id), payload)
            else:
                body = self.client.put(self.detail_path(item_id), payload)
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, f"Failed to update {self.label}."))
            return None

        item = body['data']
        position = self._index(item_id)
        if position is not None:
            self.items[position] = item
        self.notify('success', f"{self.label.capitalize()} updated.")
        return item

    def delete(self, item_id):
        self._ensure_writable()
        try:
            self.client.delete(self.detail_path(item_id))
        except REMOTE_ERRORS as e:
            self.notify('error', error_text(e, f"Failed to delete {self.label}."))
            return False

        position = self._index(item_id)
        if position is not None:
            del self.items[position]
        self.notify('success', f"{self.label.capitalize()} deleted.")
        return True

    def bulk_delete(self, ids):
        """
        Delete ``ids`` with parallel requests and wait for all of them.

        Local state changes once, after every request has finished: exactly
        the ids the server confirmed are removed, whatever order the requests
        completed in.
        """
        self._ensure_writable()
        ids = list(dict.fromkeys(ids))
        if not ids:
            return {'deleted': [], 'failed': []}

        def remove(item_id):
            self.client.delete(self.detail_path(item_id))
            return item_id

        outcomes = {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(ids))) as executor:
            futures = {item_id: executor.submit(remove, item_id) for item_id in ids}
            for item_id, future in futures.items():
                try:
                    future.result()
                    outcomes[item_id] = None
                except REMOTE_ERRORS as e:
                    outcomes[item_id] = e

        deleted = [item_id for item_id in ids if outcomes[item_id] is None]
        failed = [item_id for item_id in ids if outcomes[item_id] is not None]
        deleted_keys = {str(item_id) for item_id in deleted}
        self.items = [item for item in self.items if str(item.get(self.id_field)) not in deleted_keys]

        if failed:
            self.notify('error', f"Failed to delete {len(failed)} of {len(ids)} selected {self.plural}.")
        else:
            self.notify('success', f"Selected {self.plural} deleted.")
        return {'deleted': deleted, 'failed': failed}

    # Local views

    def predicates(self):
        """``{criterion: predicate(item, value)}`` for :meth:`filter_items`"""
        return {}

    def filter_items(self, **criteria):
        """Items matching every given criterion (AND); empty criteria are ignored"""
        available = self.predicates()
        unknown = [name for name in criteria if name not in available]
        if unknown:
            raise PanelError(f"Unknown filter(s): {', '.join(sorted(unknown))}")

        active = [(available[name], value) for name, value in criteria.items() if value not in EMPTY_FILTER_VALUES]
        return [item for item in self.items if all(predicate(item, value) for predicate, value in active)]

    def export_csv(self, columns=None, items=None):
        """CSV of ``items`` (default: the whole list) with exactly the visible ``columns``"""
        selected = select_columns(self.columns, columns)
        rows = self.items if items is None else items
        return rows_to_csv(selected, rows)


def as_number(value):
    """API decimals arrive as strings; missing values compare as None"""
    if value in (None, ''):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def text_search(*fields):
    def predicate(item, query):
        query = str(query).lower()
        return any(query in str(item.get(field) or '').lower() for field in fields)
    return predicate


def equals(field, case_sensitive=False):
    def predicate(item, value):
        actual = item.get(field)
        if case_sensitive or not isinstance(actual, str):
            return str(actual) == str(value)
        return actual.lower() == str(value).lower()
    return predicate


def at_least(field):
    def predicate(item, bound):
        number = as_number(item.get(field))
        return number is not None and number >= float(bound)
    return predicate


def at_most(field):
    def predicate(item, bound):
        number = as_number(item.get(field))
        return number is not None and number <= float(bound)
    return predicate
