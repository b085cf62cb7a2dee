"""Jerarquía de errores del paquete.

Reglas:
- `ClientError` solo representa respuestas HTTP no-2xx y timeouts.
- Los fallos de red/transporte (DNS, conexión, TLS) NO se envuelven: llegan
  al llamador tal cual los lanza el transporte.
"""

from __future__ import annotations

from typing import Any


class SutilsError(Exception):
    """Base exception for every error raised by sutils itself."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SutilsError, ValueError):
    """Raised when a client is built from invalid configuration."""


class ClientError(SutilsError):
    """Non-2xx HTTP response, or a request that exceeded its timeout."""

    def __init__(
        self,
        status: int,
        status_text: str,
        message: str,
        body: Any = None,
        is_timeout: bool = False,
    ) -> None:
        super().__init__(
            message,
            details={"status": status, "status_text": status_text, "is_timeout": is_timeout},
        )
        self.status = status
        self.status_text = status_text
        self.body = body
        self.is_timeout = is_timeout

    def __repr__(self) -> str:
        return (
            f"ClientError(status={self.status!r}, status_text={self.status_text!r}, "
            f"message={self.message!r}, is_timeout={self.is_timeout!r})"
        )
