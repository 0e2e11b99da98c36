"""Shared HTTP client manager for planner_lite.

Keeps one pooled httpx.AsyncClient per client id so concurrent batch writes
reuse connections instead of opening one client per request.
"""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

_shared_clients: dict[str, httpx.AsyncClient] = {}
_client_lock = asyncio.Lock()

DEFAULT_LIMITS = httpx.Limits(
    max_connections=10,  # one batch is at most 30 writes
    max_keepalive_connections=5,
)

DEFAULT_TIMEOUT = httpx.Timeout(
    connect=10.0,
    read=30.0,
    write=10.0,
    pool=30.0,
)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "planner-lite/0.1",
    "Accept": "application/json",
}


def build_timeout(seconds: float) -> httpx.Timeout:
    """Timeout with the given read budget and the default connect/write/pool budgets."""
    return httpx.Timeout(connect=10.0, read=seconds, write=10.0, pool=30.0)


async def get_shared_client(
    client_id: str = "default",
    limits: Optional[httpx.Limits] = None,
    timeout: Optional[httpx.Timeout] = None,
) -> httpx.AsyncClient:
    """Get or create a shared HTTP client with connection pooling.

    Args:
        client_id: Identifier for the client (allows multiple clients if needed)
        limits: Custom connection limits
        timeout: Custom timeout configuration

    Returns:
        Shared httpx.AsyncClient

    Raises:
        RuntimeError: If client creation fails
    """
    async with _client_lock:
        if client_id not in _shared_clients or _shared_clients[client_id].is_closed:
            effective_limits = limits or DEFAULT_LIMITS
            try:
                logger.debug(
                    "Creating shared HTTP client '%s' with limits: max_connections=%d, max_keepalive=%d",
                    client_id,
                    effective_limits.max_connections,
                    effective_limits.max_keepalive_connections,
                )
                _shared_clients[client_id] = httpx.AsyncClient(
                    limits=effective_limits,
                    timeout=timeout or DEFAULT_TIMEOUT,
                    headers=DEFAULT_HEADERS,
                    follow_redirects=True,
                )
                logger.info("Created shared HTTP client '%s'", client_id)
            except Exception as e:
                logger.exception("Failed to create shared HTTP client '%s'", client_id)
                raise RuntimeError(f"Failed to create shared HTTP client: {e}") from e

        return _shared_clients[client_id]


async def close_all_clients() -> None:
    """Close all shared HTTP clients.

    Call during shutdown to release pooled connections.
    """
    async with _client_lock:
        for client_id, client in _shared_clients.items():
            try:
                if not client.is_closed:
                    await client.aclose()
                    logger.debug("Closed shared HTTP client '%s'", client_id)
            except Exception as e:
                logger.warning("Error closing shared HTTP client '%s': %s", client_id, e)

        _shared_clients.clear()
        logger.debug("All shared HTTP clients closed")
