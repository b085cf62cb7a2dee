"""Pipeline de requests HTTP tipado.

Flujo de una llamada:
1. URL: el path se resuelve *siempre* relativo a la base (se quita la `/`
   inicial) y la query serializada se añade con `&` si ya existía una.
2. Headers: defaults + overrides (case-insensitive, gana el override);
   `Content-Type: application/json` solo si hay cuerpo no-multipart y no
   venía ya.
3. Interceptor de request -> transporte dentro de `asyncio.timeout` ->
   interceptor de response.
4. No-2xx -> `ClientError` localizado; 2xx -> JSON, texto o `None`.

Un único intento: sin reintentos. Los fallos de red se propagan tal cual.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx
from pydantic import TypeAdapter
from pydantic_core import to_json

from sutils.adapters.http_client import make_httpx_transport
from sutils.core.config import AppSettings
from sutils.core.domain.language import Locale
from sutils.core.domain.models import ClientConfig, MultipartForm, RequestInit, RequestOptions
from sutils.core.errors import ClientError
from sutils.core.interfaces.hooks import RequestInterceptor, ResponseInterceptor, Transport
from sutils.core.messages import resolve_error_message
from sutils.core.query_string import to_query_string

_PASSTHROUGH_BODIES = (str, bytes, bytearray, memoryview, MultipartForm)


def prepare_body(body: Any) -> str | bytes | bytearray | memoryview | MultipartForm | None:
    """Deja pasar str/bytes/multipart; el resto se serializa a JSON."""

    if body is None or body == "":
        return None
    if isinstance(body, _PASSTHROUGH_BODIES):
        return body
    # Encoder de Pydantic: tipos no serializables lanzan `PydanticSerializationError`.
    return to_json(body).decode("utf-8")


def _is_json(content_type: str | None) -> bool:
    return "json" in (content_type or "").lower()


def _has_payload(response: httpx.Response) -> bool:
    if response.status_code == 204:
        return False
    length = (response.headers.get("content-length") or "").strip()
    return bool(length) and length != "0"


class ApiClient:
    """Cliente HTTP inmutable construido a partir de un `ClientConfig`.

    Uso:
        client = ApiClient(ClientConfig(base_url="https://api.test/"))
        users = await client.get("/users", search_params={"page": 2})
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._transport: Transport = config.transport or make_httpx_transport()
        self._log_tasks: set[asyncio.Future[Any]] = set()

    @property
    def config(self) -> ClientConfig:
        return self._config

    # -------------------------
    # Atajos
    # -------------------------
    async def get(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "GET"})

    async def post(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "POST"})

    async def put(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "PUT"})

    async def patch(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "PATCH"})

    async def delete(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "DELETE"})

    # -------------------------
    # Flujo principal
    # -------------------------
    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        search_params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        error_locale: Locale | str | None = None,
        timeout_ms: float | None = None,
        response_type: Any = None,
        **extras: Any,
    ) -> Any:
        """Ejecuta una request y devuelve el payload (JSON, texto o `None`).

        Lanza `ClientError` ante respuestas no-2xx o timeout. Cualquier otra
        excepción del transporte se propaga sin envolver.
        """

        options = RequestOptions(
            method=method.upper(),
            search_params=search_params,
            body=body,
            headers=headers,
            error_locale=Locale.coerce(error_locale),
            timeout_ms=timeout_ms,
            response_type=response_type,
            extras=extras,
        )
        return await self.send(path, options)

    async def send(self, path: str, options: RequestOptions) -> Any:
        url = self.build_url(path, options.search_params)
        init = self.build_init(options)
        url, init = await self._intercept_request(url, init)

        self._log_debug("HTTP Request", {"method": init.method, "url": url, "body": options.body})

        timeout_ms = options.timeout_ms if options.timeout_ms is not None else self._config.timeout_ms
        try:
            response = await self._dispatch(url, init, timeout_ms, options.error_locale)
            response = await self._intercept_response(response)

            if not response.is_success:
                raise self._to_client_error(response, options.error_locale)

            data = self._read_payload(response)
            if data is not None and options.response_type is not None:
                data = TypeAdapter(options.response_type).validate_python(data)
        except Exception as exc:
            self._log_error("Request failed", {"path": path, "method": init.method}, exc)
            raise

        self._log_debug("HTTP Response", {"status": response.status_code, "url": url, "data": data})
        return data

    # -------------------------
    # Construcción
    # -------------------------
    def build_url(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        relative = path[1:] if path.startswith("/") else path
        url = urljoin(self._config.base_url, relative)

        query_string = to_query_string(params) if params else ""
        if not query_string:
            return url

        parts = urlsplit(url)
        query = f"{parts.query}&{query_string}" if parts.query else query_string
        return urlunsplit(parts._replace(query=query))

    def merge_headers(self, overrides: Mapping[str, str] | None = None) -> httpx.Headers:
        headers = httpx.Headers(self._config.default_headers)
        for key, value in (overrides or {}).items():
            headers[key] = value
        return headers

    def build_init(self, options: RequestOptions) -> RequestInit:
        headers = self.merge_headers(options.headers)
        body = prepare_body(options.body)
        if body is not None and not isinstance(body, MultipartForm):
            headers.setdefault("Content-Type", "application/json")
        return RequestInit(
            method=options.method,
            headers=headers,
            body=body,
            extras=dict(options.extras),
        )

    # -------------------------
    # Despacho
    # -------------------------
    async def _dispatch(
        self,
        url: str,
        init: RequestInit,
        timeout_ms: float,
        error_locale: Locale | None,
    ) -> httpx.Response:
        """Carrera transporte vs. timer: gana el primero, el perdedor se cancela.

        Si el timer venció, el resultado es 408 aunque el transporte haya
        ignorado la cancelación y devuelto una respuesta tardía.
        """

        try:
            async with asyncio.timeout(timeout_ms / 1000) as scope:
                response = await self._transport(url, init)
        except TimeoutError:
            if not scope.expired():
                raise
            raise self._timeout_error(error_locale) from None
        if scope.expired():
            raise self._timeout_error(error_locale)
        return response

    async def _intercept_request(self, url: str, init: RequestInit) -> tuple[str, RequestInit]:
        hook: RequestInterceptor | None = self._config.interceptors.request if self._config.interceptors else None
        if hook is None:
            return url, init
        try:
            result = hook(url, init)
            if inspect.isawaitable(result):
                result = await result
            new_url, new_init = result
        except Exception as exc:
            self._log_error("Request interceptor failed", {"url": url, "method": init.method}, exc)
            return url, init
        return new_url, new_init

    async def _intercept_response(self, response: httpx.Response) -> httpx.Response:
        hook: ResponseInterceptor | None = self._config.interceptors.response if self._config.interceptors else None
        if hook is None:
            return response
        try:
            result = hook(response)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            self._log_error("Response interceptor failed", {"status": response.status_code}, exc)
            return response
        return result if result is not None else response

    # -------------------------
    # Interpretación
    # -------------------------
    @staticmethod
    def _read_payload(response: httpx.Response) -> Any:
        if not _has_payload(response):
            return None
        if _is_json(response.headers.get("content-type")):
            return response.json()
        return response.text

    def _to_client_error(self, response: httpx.Response, locale: Locale | None) -> ClientError:
        body: Any
        try:
            body = response.json() if _is_json(response.headers.get("content-type")) else response.text
        except Exception:
            body = None

        message = resolve_error_message(
            response.status_code,
            response.reason_phrase,
            locale=self._config.locale,
            override=locale,
            overrides=self._config.error_messages,
        )
        return ClientError(response.status_code, response.reason_phrase, message, body)

    def _timeout_error(self, locale: Locale | None) -> ClientError:
        message = resolve_error_message(
            408,
            "Timeout",
            locale=self._config.locale,
            override=locale,
            overrides=self._config.error_messages,
        )
        return ClientError(408, "Timeout", message, None, is_timeout=True)

    # -------------------------
    # Logging (nunca altera el resultado)
    # -------------------------
    def _log_debug(self, message: str, context: dict[str, Any]) -> None:
        if self._config.logger is None:
            return
        try:
            self._schedule_log(self._config.logger.debug(message, context))
        except Exception:
            pass

    def _log_error(self, message: str, context: dict[str, Any], error: BaseException) -> None:
        if self._config.logger is None:
            return
        try:
            self._schedule_log(self._config.logger.error(message, context, error))
        except Exception:
            pass

    def _schedule_log(self, result: Any) -> None:
        """Handles async (`async def debug`) se ejecutan en segundo plano."""

        if not inspect.isawaitable(result):
            return
        task = asyncio.ensure_future(result)
        self._log_tasks.add(task)
        task.add_done_callback(_finish_log_task(self._log_tasks))


def _finish_log_task(pending: set[asyncio.Future[Any]]) -> Callable[[asyncio.Future[Any]], None]:
    def _done(task: asyncio.Future[Any]) -> None:
        pending.discard(task)
        if not task.cancelled():
            # Un sink caído no debe dejar "exception was never retrieved".
            task.exception()

    return _done


def create_api_client(config: ClientConfig | None = None, **overrides: Any) -> ApiClient:
    """Factory: usa `config` tal cual o lo construye desde `AppSettings` + overrides.

    `config` y overrides son excluyentes: combinarlos lanza `TypeError`.
    """

    if config is not None:
        if overrides:
            raise TypeError(
                f"create_api_client() got overrides together with a ready config: {sorted(overrides)}"
            )
        return ApiClient(config)

    settings = overrides.pop("settings", None) or AppSettings()
    return ApiClient(ClientConfig.from_settings(settings, **overrides))
