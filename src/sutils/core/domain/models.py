"""Modelos del dominio (Pydantic v2 + dataclasses).

Por qué Pydantic para `ClientConfig`:
- Validación en el borde (base URL, timeout, locale) y un objeto inmutable
  (`frozen=True`) que se construye una vez y se comparte entre requests.

Por qué dataclasses para `RequestOptions`/`RequestInit`:
- Son valores por llamada, efímeros, que pueden transportar cuerpos
  arbitrarios (bytes, multipart, estructuras) sin coerción.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit, urlunsplit

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from sutils.core.domain.language import Locale
from sutils.core.errors import ConfigurationError
from sutils.core.interfaces.hooks import LoggerHandle

if TYPE_CHECKING:
    from sutils.core.config import AppSettings


@dataclass
class MultipartForm:
    """Cuerpo multipart: se envía tal cual, sin `Content-Type` JSON."""

    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, Any] = field(default_factory=dict)


@dataclass
class RequestInit:
    """Request ya construido que reciben el interceptor y el transporte."""

    method: str
    headers: httpx.Headers
    body: str | bytes | bytearray | memoryview | MultipartForm | None = None
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass
class RequestOptions:
    """Opciones de una sola llamada; el pipeline no las retiene."""

    method: str = "GET"
    search_params: Mapping[str, Any] | None = None
    body: Any = None
    headers: Mapping[str, str] | None = None
    error_locale: Locale | None = None
    timeout_ms: float | None = None
    response_type: Any = None
    extras: dict[str, Any] = field(default_factory=dict)


TransportFn = Callable[[str, RequestInit], Awaitable[httpx.Response]]


class Interceptors(BaseModel):
    """Hooks opcionales; pueden ser síncronos o asíncronos."""

    model_config = ConfigDict(frozen=True)

    request: Callable[..., Any] | None = Field(
        default=None,
        description="Recibe (url, init) y devuelve un par (url, init) de reemplazo.",
    )
    response: Callable[..., Any] | None = Field(
        default=None,
        description="Recibe la respuesta cruda y puede sustituirla.",
    )


class ClientConfig(BaseModel):
    """Configuración inmutable del cliente HTTP.

    Reglas:
    - `base_url` debe ser absoluta (http/https) y se normaliza para que su
      path termine en `/`.
    - Nada se muta tras la construcción: `default_headers` y
      `error_messages` son `MappingProxyType`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    base_url: str = Field(
        ...,
        min_length=1,
        description="Origen + prefijo contra el que se resuelven los paths.",
    )
    default_headers: Mapping[str, str] = Field(
        default_factory=dict,
        description="Headers por defecto; los de cada request ganan en colisión.",
    )
    transport: TransportFn | None = Field(
        default=None,
        description="Función de transporte inyectable (por defecto httpx).",
    )
    locale: Locale = Field(
        default=Locale.SPANISH,
        description="Locale de los mensajes de error.",
    )
    error_messages: Mapping[Locale, Mapping[int, str]] = Field(
        default_factory=dict,
        description="Overrides de mensajes por locale y status.",
    )
    timeout_ms: float = Field(
        default=15_000,
        gt=0,
        description="Timeout por defecto de cada request (milisegundos).",
    )
    interceptors: Interceptors | None = None
    logger: LoggerHandle | None = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid client configuration: {exc.errors(include_url=False)}",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        parts = urlsplit(value.strip())
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
        return urlunsplit(parts._replace(path=path, fragment=""))

    # `frozen=True` solo impide reasignar campos: los mapas se exponen de solo
    # lectura para que nadie altere headers o mensajes de requests futuras.
    @field_validator("default_headers")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_validator("error_messages")
    @classmethod
    def _freeze_messages(cls, value: Mapping[Locale, Mapping[int, str]]) -> Mapping[Locale, Mapping[int, str]]:
        return MappingProxyType({locale: MappingProxyType(dict(table)) for locale, table in value.items()})

    @classmethod
    def from_settings(cls, settings: AppSettings, **overrides: Any) -> "ClientConfig":
        """Construye la configuración a partir de `AppSettings` (env/.env)."""

        data: dict[str, Any] = {
            "base_url": settings.base_url or "",
            "locale": settings.locale,
            "timeout_ms": settings.timeout_ms,
            "default_headers": {"User-Agent": settings.user_agent},
        }
        headers = overrides.pop("default_headers", None)
        if headers:
            data["default_headers"] = {**data["default_headers"], **headers}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
