"""Transporte por defecto basado en httpx.

Por qué un wrapper:
- Estandariza headers y políticas del `httpx.AsyncClient` en un solo sitio.
- Expone una función estilo `fetch` (`(url, init) -> httpx.Response`) que el
  pipeline puede sustituir por un stub en tests.

Nota: un `AsyncClient` por request (sin pooling). El timeout lo controla el
pipeline; el cliente httpx se crea sin timeout propio.
"""

from __future__ import annotations

from typing import Any

import httpx

from sutils.core.config import AppSettings
from sutils.core.domain.models import MultipartForm, RequestInit, TransportFn


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    timeout_seconds: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    `timeout_seconds=None` desactiva el timeout de httpx: lo gestiona quien
    llama (el pipeline usa su propio `asyncio.timeout`).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _request_kwargs(init: RequestInit) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"headers": init.headers}
    body = init.body
    if isinstance(body, MultipartForm):
        kwargs["data"] = body.fields or None
        kwargs["files"] = body.files or None
    elif isinstance(body, (bytearray, memoryview)):
        kwargs["content"] = bytes(body)
    elif body is not None:
        kwargs["content"] = body
    kwargs.update(init.extras)
    return kwargs


def make_httpx_transport(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TransportFn:
    """Devuelve la función de transporte que usa `ApiClient` por defecto.

    `transport` permite inyectar un `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()

    async def send(url: str, init: RequestInit) -> httpx.Response:
        async with build_async_client(settings, transport=transport) as client:
            return await client.request(init.method, url, **_request_kwargs(init))

    return send
