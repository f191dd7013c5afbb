from typing import Any, Optional

from django.core.cache import cache


def generate_cache_key(cache_prefix: str, **kwargs):
    """Create cache key, uses cache_prefix for unique entries and kwargs for unique properties"""

    unique_items = [str(value) for value in kwargs.values()]

    return ":".join([cache_prefix, *unique_items])


def set_cache(value, cache_prefix: str, timeout: Optional[int] = None, **kwargs):
    """Set cache for related cache pair, entries do not expire unless timeout is given."""
    cache_key = generate_cache_key(cache_prefix, **kwargs)
    cache.set(cache_key, value, timeout=timeout)


def check_cache(cache_prefix: str, **kwargs) -> Optional[Any]:
    """Check if pair exists in cache, returns None if it doesn't"""
    cache_key = generate_cache_key(cache_prefix, **kwargs)
    return cache.get(cache_key)


def clear_cache(cache_prefix: str, **kwargs):
    """Clear a cache entry before you repopulate"""
    cache_key = generate_cache_key(cache_prefix, **kwargs)
    cache.delete(cache_key)
