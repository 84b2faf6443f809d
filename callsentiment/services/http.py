"""Shared httpx helpers for the REST service clients."""

from __future__ import annotations

from typing import Any, Callable

import httpx

from .errors import PipelineError

ErrorFactory = Callable[..., PipelineError]


def create_async_client(
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Open a per-call client; remote calls are never timed out."""

    return httpx.AsyncClient(transport=transport, timeout=None)


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    error: ErrorFactory,
    contact_id: str,
    **kwargs: Any,
) -> httpx.Response:
    """Issue a request and raise ``error`` unless the response is a 2xx."""

    try:
        response = await client.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        raise error(contact_id, f"Request failed: {exc!r}") from exc

    if not response.is_success:
        raise error(
            contact_id,
            f"Response status: {response.status_code} {response.reason_phrase}".rstrip(),
            status_code=response.status_code,
        )
    return response


def read_json(
    response: httpx.Response,
    *,
    error: ErrorFactory,
    contact_id: str,
) -> Any:
    """Decode a JSON body, mapping malformed payloads onto ``error``."""

    try:
        return response.json()
    except ValueError as exc:
        raise error(
            contact_id,
            f"Invalid JSON response: {exc}",
            status_code=response.status_code,
        ) from exc


__all__ = ["create_async_client", "send_request", "read_json"]
