"""Locales soportados por el cliente HTTP.

Vive en el dominio para que la configuración, las tablas de mensajes y la
CLI compartan una única fuente de verdad sin importarse entre sí.
"""

from __future__ import annotations

from enum import Enum


class Locale(str, Enum):
    """Closed set of locales used for user-facing error messages."""

    SPANISH = "es"
    ENGLISH = "en"

    @classmethod
    def default(cls) -> "Locale":
        """Return the locale used when nothing else is configured."""

        return cls.SPANISH

    @classmethod
    def coerce(cls, value: "Locale | str | None") -> "Locale | None":
        """Accept either an enum member or its raw code (`"es"`, `"EN"`...)."""

        if value is None or isinstance(value, Locale):
            return value
        return cls(str(value).strip().lower())

    def label(self) -> str:
        return "Spanish" if self is Locale.SPANISH else "English"
