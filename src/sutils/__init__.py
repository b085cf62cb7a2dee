"""sutils: cliente HTTP tipado con errores localizados."""

from sutils.adapters.http_client import build_async_client, make_httpx_transport
from sutils.adapters.logger import StdlibLogger, configure_logging
from sutils.core.config import AppSettings
from sutils.core.domain.language import Locale
from sutils.core.domain.models import ClientConfig, Interceptors, MultipartForm, RequestInit, RequestOptions
from sutils.core.errors import ClientError, ConfigurationError, SutilsError
from sutils.core.query_string import QueryStringOptions, to_query_string
from sutils.core.services.request_pipeline import ApiClient, create_api_client

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "AppSettings",
    "ClientConfig",
    "ClientError",
    "ConfigurationError",
    "Interceptors",
    "Locale",
    "MultipartForm",
    "QueryStringOptions",
    "RequestInit",
    "RequestOptions",
    "StdlibLogger",
    "SutilsError",
    "build_async_client",
    "configure_logging",
    "create_api_client",
    "make_httpx_transport",
    "to_query_string",
]
