"""
Caching helpers for expensive aggregate queries

Keys are namespaced and versioned: bumping a namespace version makes every
key built under the old version unreachable, which works on any cache
backend. With django-redis the stale keys are also deleted eagerly.
"""
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

VERSION_KEY_PREFIX = 'cache_version:'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def get_namespace_version(namespace):
    version = cache.get(f"{VERSION_KEY_PREFIX}{namespace}")
    if version is None:
        version = 1
        cache.set(f"{VERSION_KEY_PREFIX}{namespace}", version, None)
    return version


def make_versioned_key(namespace, *args, **kwargs):
    """Cache key that is invalidated by ``invalidate_namespace``"""
    version = get_namespace_version(namespace)
    return make_cache_key(f"{namespace}:v{version}", *args, **kwargs)


def invalidate_namespace(namespace):
    """Invalidate all keys built with ``make_versioned_key`` for a namespace"""
    version_key = f"{VERSION_KEY_PREFIX}{namespace}"
    try:
        cache.incr(version_key)
    except ValueError:
        # Version key missing or evicted
        cache.set(version_key, 2, None)

    # django-redis exposes delete_pattern; other backends rely on the version bump
    if hasattr(cache, 'delete_pattern'):
        try:
            deleted = cache.delete_pattern(f"{namespace}:*")
            logger.debug(f"Deleted {deleted} stale keys for namespace '{namespace}'")
        except Exception as e:
            logger.warning(f"Pattern invalidation failed for '{namespace}': {e}")
    logger.debug(f"Invalidated cache namespace '{namespace}'")
