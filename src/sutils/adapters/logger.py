"""Logger estructurado sobre `logging` (stdlib) con salida Rich.

Implementa `core.interfaces.LoggerHandle`: el pipeline solo llama a
`debug`/`error` con un mensaje y un contexto (dict).
"""

from __future__ import annotations

import logging
from typing import Any

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "sutils"


def configure_logging(level: str | int = "WARNING", *, rich: bool = True) -> logging.Logger:
    """Configura el logger raíz `sutils` una sola vez (idempotente)."""

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(getattr(h, "_sutils_handler", False) for h in root.handlers):
        handler: logging.Handler
        if rich:
            handler = RichHandler(rich_tracebacks=True, show_path=False)
            handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        handler._sutils_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root


def _render(message: str, context: dict[str, Any] | None) -> str:
    if not context:
        return message
    pairs = " ".join(f"{k}={v!r}" for k, v in context.items())
    return f"{message} {pairs}"


class StdlibLogger:
    """Adaptador `LoggerHandle` -> `logging.Logger`.

    El contexto se renderiza en el mensaje y además viaja como `extra`
    (`record.context`) para handlers estructurados.
    """

    def __init__(
        self,
        namespace: str | None = None,
        *,
        logger: logging.Logger | None = None,
        silent: bool = False,
    ) -> None:
        name = f"{ROOT_LOGGER_NAME}.{namespace}" if namespace else ROOT_LOGGER_NAME
        self._logger = logger or logging.getLogger(name)
        self._silent = silent

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def is_silent(self) -> bool:
        return self._silent

    @classmethod
    def silent(cls) -> "StdlibLogger":
        """Logger que descarta todo (útil para desactivar el canal sin tocar el cliente).

        El silencio es de la instancia y lo heredan sus `child()`; el
        `logging.Logger` subyacente no se toca.
        """

        return cls(silent=True)

    def child(self, namespace: str) -> "StdlibLogger":
        return StdlibLogger(logger=self._logger.getChild(namespace), silent=self._silent)

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        if self._silent:
            return
        self._logger.debug(_render(message, context), extra={"context": context or {}})

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        if self._silent:
            return
        self._logger.error(
            _render(message, context),
            exc_info=(type(error), error, error.__traceback__) if error is not None else None,
            extra={"context": context or {}},
        )
