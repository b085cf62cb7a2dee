"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""

from sutils.core.interfaces.hooks import LoggerHandle, RequestInterceptor, ResponseInterceptor, Transport

__all__ = ["LoggerHandle", "RequestInterceptor", "ResponseInterceptor", "Transport"]
