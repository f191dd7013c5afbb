"""
Select which backend client the portal talks to.

The remote backend is checked once per process with a short timeout,
if it cannot be reached the portal falls back to the demo dataset.
"""

import logging
import threading
from typing import Optional, Protocol

from django.conf import settings
from django.core.cache import cache

from core.mock.backend import DemoClient
from lib.supabase import SupabaseClient, SupabaseError, TableQuery

logger = logging.getLogger(__name__)


class BackendClient(Protocol):
    """Table and auth surface shared by the remote and demo clients."""

    offline: bool
    name: str
    auth: object

    def table(self, name: str, access_token: Optional[str] = None) -> TableQuery: ...

    def run_query(self, query: TableQuery) -> list[dict]: ...

    def ping(self, timeout: Optional[float] = None): ...


_client: Optional[BackendClient] = None
_lock = threading.Lock()


def bootstrap_client(timeout: Optional[float] = None) -> BackendClient:
    """Connect to remote backend, or fall back to demo mode."""

    if settings.BACKEND_DEMO_MODE:
        return DemoClient()

    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        logger.warning("Backend is not configured, using offline mode.")
        return DemoClient()

    client = SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.BACKEND_REQUEST_TIMEOUT,
    )

    try:
        client.ping(timeout=timeout or settings.BACKEND_BOOTSTRAP_TIMEOUT)
    except SupabaseError as e:
        logger.warning("Error initializing backend, using offline mode: %s", e)
        return DemoClient()

    return client


def get_client() -> BackendClient:
    """Get the client for this process, bootstrap if needed."""
    global _client

    if _client is None:
        with _lock:
            if _client is None:
                _client = bootstrap_client()

    return _client


def set_client(client: BackendClient):
    """Replace the process wide client, clears mirrored data."""
    global _client

    with _lock:
        _client = client

    cache.clear()


def reset_client():
    """Forget current client, next access bootstraps again."""
    global _client

    with _lock:
        _client = None


def enable_demo_mode():
    """Switch to demo dataset at runtime."""

    logger.warning("Switching to offline mode.")
    set_client(DemoClient())


def is_offline() -> bool:
    return get_client().offline
