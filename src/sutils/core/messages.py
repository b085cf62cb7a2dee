"""Mensajes de error localizados.

El orden de preferencia de locales es explícito: override por llamada,
locale del cliente, "es" y "en", sin duplicados y conservando la primera
aparición. Un cliente con otro locale termina igualmente en es/en.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from sutils.core.domain.language import Locale

DEFAULT_ERROR_MESSAGES: dict[Locale, dict[int, str]] = {
    Locale.SPANISH: {
        400: "La solicitud es inválida. Verifica los datos enviados.",
        401: "Necesitas iniciar sesión para continuar.",
        403: "No tienes permisos para realizar esta acción.",
        404: "El recurso solicitado no fue encontrado.",
        408: "La solicitud tardó demasiado en responder.",
        429: "Demasiadas solicitudes. Intenta nuevamente más tarde.",
        500: "Ocurrió un error interno en el servidor.",
        502: "Puerta de enlace inválida.",
        503: "Servicio no disponible temporalmente.",
        504: "Tiempo de espera agotado.",
    },
    Locale.ENGLISH: {
        400: "Invalid request. Please check your data.",
        401: "You must be signed in to continue.",
        403: "You don't have permission for this action.",
        404: "Resource not found.",
        408: "Request timeout.",
        429: "Too many requests. Try again later.",
        500: "Internal server error.",
        502: "Bad gateway.",
        503: "Service unavailable.",
        504: "Gateway timeout.",
    },
}

GENERIC_ERROR_MESSAGES: dict[Locale, Callable[[int, str], str]] = {
    Locale.SPANISH: lambda status, text: f"Error de red ({status} {text})".strip(),
    Locale.ENGLISH: lambda status, text: f"Network error ({status} {text})".strip(),
}

FALLBACK_LOCALES: tuple[Locale, ...] = (Locale.SPANISH, Locale.ENGLISH)


def locale_preference(override: Locale | None, configured: Locale) -> list[Locale]:
    """Lista ordenada y sin duplicados de locales a consultar."""

    candidates: Iterable[Locale | None] = (override, configured, *FALLBACK_LOCALES)
    seen: set[Locale] = set()
    ordered: list[Locale] = []
    for loc in candidates:
        if loc is None or loc in seen:
            continue
        seen.add(loc)
        ordered.append(loc)
    return ordered


def resolve_error_message(
    status: int,
    status_text: str,
    *,
    locale: Locale,
    override: Locale | None = None,
    overrides: Mapping[Locale, Mapping[int, str]] | None = None,
) -> str:
    """Resuelve el mensaje para `status`.

    Para cada locale preferido se mezclan los mensajes por defecto con los
    overrides configurados (ganan los overrides) y se devuelve el primer
    acierto. Sin acierto: plantilla genérica del locale del cliente, o la
    española si ese locale no tiene plantilla.
    """

    overrides = overrides or {}
    for loc in locale_preference(override, locale):
        table = {**DEFAULT_ERROR_MESSAGES.get(loc, {}), **overrides.get(loc, {})}
        message = table.get(status)
        if message:
            return message

    template = GENERIC_ERROR_MESSAGES.get(locale) or GENERIC_ERROR_MESSAGES[Locale.SPANISH]
    return template(status, status_text).strip()
