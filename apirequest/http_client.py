"""HTTP transport factories shared by requesters."""

import threading

import httpx

from apirequest.settings import Settings

_default_transport: httpx.Client | None = None
_default_lock = threading.Lock()


def create_transport(settings: Settings) -> httpx.Client:
    """
    Build a Client configured from Settings.

    Retries, connection pooling and TLS are left to httpx.
    """
    return httpx.Client(timeout=settings.api_timeout, follow_redirects=True)


def create_async_transport(settings: Settings) -> httpx.AsyncClient:
    """Async counterpart of ``create_transport``."""
    return httpx.AsyncClient(timeout=settings.api_timeout, follow_redirects=True)


def default_transport() -> httpx.Client:
    """Return the process-wide Client used by requesters built without one."""
    global _default_transport
    with _default_lock:
        if _default_transport is None or _default_transport.is_closed:
            _default_transport = httpx.Client(follow_redirects=True)
        return _default_transport
