"""Contratos de los colaboradores del pipeline HTTP.

Por qué Protocol:
- El transporte, los interceptores y el logger se inyectan; el pipeline solo
  depende de su forma (duck typing), no de implementaciones concretas.
- Facilita testeo: un transporte falso es una simple función async.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

if TYPE_CHECKING:
    from sutils.core.domain.models import RequestInit


class Transport(Protocol):
    """Función estilo `fetch`: recibe URL + request construido y devuelve la respuesta.

    Debe tolerar cancelación: si el pipeline agota el timeout, la corrutina
    recibe `asyncio.CancelledError`.
    """

    def __call__(self, url: str, init: RequestInit) -> Awaitable[httpx.Response]: ...


class RequestInterceptor(Protocol):
    def __call__(
        self, url: str, init: RequestInit
    ) -> tuple[str, RequestInit] | Awaitable[tuple[str, RequestInit]]: ...


class ResponseInterceptor(Protocol):
    def __call__(self, response: httpx.Response) -> httpx.Response | Awaitable[httpx.Response]: ...


@runtime_checkable
class LoggerHandle(Protocol):
    """Canal lateral de logging: fire-and-forget, nunca altera el resultado.

    Los métodos pueden ser síncronos o `async def`; en el segundo caso el
    pipeline programa la corrutina sin esperarla.
    """

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None | Awaitable[None]: ...

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> None | Awaitable[None]: ...
