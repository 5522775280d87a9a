"""HTTP transport manager with connection pooling and lifecycle management.

This module provides a singleton manager that creates, caches and closes
the ``httpx.Client`` instances used as the default transport by
:class:`~idm_client.utils.http.client.HttpClient`. Clients are reused
whenever the timeout and connection limits match, so many logical API
clients share one connection pool.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class HTTPClientManager:
    """Manages shared synchronous HTTP clients with connection pooling."""

    _instance: Optional["HTTPClientManager"] = None
    _lock = threading.Lock()

    def __new__(cls):
        """Ensure singleton pattern - only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "_initialized"):
            self._clients: Dict[Tuple, httpx.Client] = {}
            self._default_timeout = create_timeout()
            self._default_limits = create_limits()
            self._initialized = True

    def get_client(
        self,
        timeout: Optional[httpx.Timeout] = None,
        limits: Optional[httpx.Limits] = None,
        follow_redirects: bool = False,
    ) -> httpx.Client:
        """Get or create an HTTP client for the given configuration.

        :param timeout: Optional custom timeout configuration
        :type timeout: Optional[httpx.Timeout]
        :param limits: Optional custom connection limits
        :type limits: Optional[httpx.Limits]
        :param follow_redirects: Whether the client follows redirects
        :type follow_redirects: bool
        :return: Configured HTTP client instance
        :rtype: httpx.Client
        """
        timeout = timeout or self._default_timeout
        limits = limits or self._default_limits
        cache_key = (
            (timeout.connect, timeout.read, timeout.write, timeout.pool),
            (
                limits.max_keepalive_connections,
                limits.max_connections,
                limits.keepalive_expiry,
            ),
            follow_redirects,
        )

        with self._lock:
            client = self._clients.get(cache_key)
            if client is None or client.is_closed:
                client = httpx.Client(
                    timeout=timeout,
                    limits=limits,
                    follow_redirects=follow_redirects,
                )
                self._clients[cache_key] = client
                logger.debug("Created new HTTP client for %s", cache_key)
        return client

    def close_all(self) -> None:
        """Close every managed HTTP client."""
        with self._lock:
            if not self._clients:
                logger.debug("No HTTP clients to close")
                return
            logger.info("Closing %d HTTP client(s)...", len(self._clients))
            for cache_key, client in list(self._clients.items()):
                try:
                    client.close()
                except httpx.HTTPError as e:
                    logger.warning("Error closing HTTP client %s: %s", cache_key, e)
            self._clients.clear()


def create_timeout(
    connect: float = 5.0,
    read: float = 30.0,
    write: float = 10.0,
    pool: float = 5.0,
) -> httpx.Timeout:
    """Create a timeout configuration object.

    :param connect: Connection timeout in seconds
    :type connect: float
    :param read: Read timeout in seconds
    :type read: float
    :param write: Write timeout in seconds
    :type write: float
    :param pool: Pool timeout in seconds
    :type pool: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(connect=connect, read=read, write=write, pool=pool)


def create_limits(
    max_keepalive_connections: int = 10,
    max_connections: int = 20,
    keepalive_expiry: float = 30.0,
) -> httpx.Limits:
    """Create a connection limits configuration object.

    :param max_keepalive_connections: Maximum number of keepalive connections
    :type max_keepalive_connections: int
    :param max_connections: Maximum total number of connections
    :type max_connections: int
    :param keepalive_expiry: Keepalive connection expiry time in seconds
    :type keepalive_expiry: float
    :return: Configured limits object
    :rtype: httpx.Limits
    """
    return httpx.Limits(
        max_keepalive_connections=max_keepalive_connections,
        max_connections=max_connections,
        keepalive_expiry=keepalive_expiry,
    )


http_client_manager = HTTPClientManager()


def get_http_client(timeout: Optional[float] = None, **kwargs) -> httpx.Client:
    """Get a shared HTTP client from the global manager.

    :param timeout: Optional read timeout in seconds
    :type timeout: Optional[float]
    :param **kwargs: Additional options passed to ``HTTPClientManager.get_client``
    :return: Configured HTTP client instance
    :rtype: httpx.Client
    """
    if timeout is not None and "timeout" not in kwargs:
        kwargs["timeout"] = create_timeout(read=timeout)
    return http_client_manager.get_client(**kwargs)
