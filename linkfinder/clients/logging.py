"""
Logging Hooks for Link Store Requests

These httpx event hooks log every request sent to the link store.
They capture:
- Request method and path
- Response status code
- Round trip time

Design Decisions:
- Uses httpx event hooks so the client code itself stays free of logging
- Logs to standard Python logging (can be configured to send to external services)
"""

import logging
import time

import httpx

logger = logging.getLogger("linkfinder.http")

_START_KEY = "linkfinder_start"


async def _on_request(request: httpx.Request) -> None:
    """Record the start time on the request."""
    request.extensions[_START_KEY] = time.perf_counter()


async def _on_response(response: httpx.Response) -> None:
    """
    Log request details once the response headers arrive.

    Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS
    """
    request = response.request
    started = request.extensions.get(_START_KEY)
    elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0

    logger.info(
        f"{request.method} {request.url.path} "
        f"{response.status_code} {elapsed_ms:.2f}ms"
    )


def add_logging_hooks(client: httpx.AsyncClient) -> httpx.AsyncClient:
    """
    Add request/response logging hooks to an httpx client.

    Args:
        client: The client to instrument

    Returns:
        The same client, for chaining
    """
    hooks = client.event_hooks
    hooks["request"] = [*hooks.get("request", []), _on_request]
    hooks["response"] = [*hooks.get("response", []), _on_response]
    client.event_hooks = hooks
    return client
