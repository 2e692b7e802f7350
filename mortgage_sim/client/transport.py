"""httpx transport that answers requests from the virtual services instead of the network."""

from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

from mortgage_sim.routing import RequestDispatcher


def transport_decode_body(content: bytes) -> Any:
    """Decode a request body as JSON; empty or invalid bodies decode to `{}`.

    Args:
        content: Raw request body bytes.

    Returns:
        Any: Decoded JSON value.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not content.strip():
        return {}
    try:
        return json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("request body is not valid JSON; dispatching empty body")
        return {}


class VirtualServiceTransport(httpx.AsyncBaseTransport):
    """Async transport routing every `httpx.AsyncClient` request into the dispatcher.

    Host and scheme are ignored; only method, path, query, headers and JSON
    body reach the virtual services. Responses always carry a JSON envelope.
    """

    def __init__(self, dispatcher: RequestDispatcher):
        if dispatcher is None:
            raise ValueError("dispatcher must not be None")
        self._dispatcher = dispatcher

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        content = await request.aread()
        result = await self._dispatcher.dispatcher_dispatch(
            request.method,
            request.url.path,
            query=dict(request.url.params.items()),
            body=transport_decode_body(content),
            headers=dict(request.headers.items()),
        )
        return httpx.Response(status_code=result.status_code, json=result.envelope, request=request)
