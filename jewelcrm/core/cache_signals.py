"""
Cache invalidation signals
Automatically invalidate cached aggregates when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_namespace

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals.
    Used by bulk operations, which invalidate once manually afterwards.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


# --- Manual Invalidation Helpers ---

def invalidate_inventory_cache():
    invalidate_namespace('inventory_metrics')
    logger.info("Invalidated inventory metrics cache")


def invalidate_supplier_analytics_cache():
    invalidate_namespace('supplier_analytics')
    logger.info("Invalidated supplier analytics cache")


def invalidate_location_tree_cache():
    invalidate_namespace('locations_tree')
    logger.info("Invalidated location tree cache")


# --- Signal Handlers ---

@receiver([post_save, post_delete])
def invalidate_inventory_on_change(sender, instance, **kwargs):
    """Invalidate inventory metrics when items change"""
    if is_suspended() or sender.__name__ != 'InventoryItem':
        return
    # After commit, so a concurrent read cannot re-cache pre-commit data
    transaction.on_commit(invalidate_inventory_cache)


@receiver([post_save, post_delete])
def invalidate_supplier_analytics_on_change(sender, instance, **kwargs):
    """Invalidate spend/scorecard caches when suppliers or their orders change"""
    if is_suspended() or sender.__name__ not in ('Supplier', 'SupplierOrder'):
        return
    transaction.on_commit(invalidate_supplier_analytics_cache)


@receiver([post_save, post_delete])
def invalidate_locations_on_change(sender, instance, **kwargs):
    """Invalidate the cached location tree when locations change"""
    if is_suspended() or sender.__name__ != 'Location':
        return
    transaction.on_commit(invalidate_location_tree_cache)
