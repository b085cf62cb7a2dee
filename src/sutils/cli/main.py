"""CLI principal (Typer).

Comandos:
- `request`: ejecuta una request a través de `ApiClient` y muestra el payload.
- `doctor`: diagnóstico de configuración/conectividad.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import typer
from rich.console import Console

from sutils.adapters.logger import StdlibLogger, configure_logging
from sutils.cli import doctor
from sutils.cli.ui_components import build_error_panel, print_payload
from sutils.core.config import AppSettings
from sutils.core.domain.language import Locale
from sutils.core.errors import ClientError, ConfigurationError
from sutils.core.services.request_pipeline import create_api_client

app = typer.Typer(no_args_is_help=True, help="sutils: typed HTTP client with localized errors.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def parse_query(values: list[str]) -> dict[str, Any]:
    """`["tags=a", "tags=b", "page=2"]` -> `{"tags": ["a", "b"], "page": "2"}`."""

    params: dict[str, Any] = {}
    for item in values:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--query")
        key, value = item.split("=", 1)
        key = key.strip()
        if key in params:
            current = params[key]
            params[key] = [*current, value] if isinstance(current, list) else [current, value]
        else:
            params[key] = value
    return params


def parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in values:
        if ":" not in item:
            raise typer.BadParameter(f"expected 'Name: value', got {item!r}", param_hint="--header")
        name, value = item.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


@app.command()
def request(
    method: str = typer.Argument(..., help="HTTP method (GET, POST, PUT, PATCH, DELETE)."),
    path: str = typer.Argument(..., help="Path relative to the base URL."),
    base_url: str | None = typer.Option(None, "--base-url", "-b", help="Overrides SUTILS_BASE_URL."),
    query: list[str] | None = typer.Option(None, "--query", "-q", help="Query parameter key=value (repeatable)."),
    header: list[str] | None = typer.Option(None, "--header", "-H", help="Header 'Name: value' (repeatable)."),
    json_body: str | None = typer.Option(None, "--json", help="JSON body."),
    data: str | None = typer.Option(None, "--data", "-d", help="Raw text body."),
    locale: Locale | None = typer.Option(None, "--locale", "-l", help="Locale for error messages."),
    timeout_ms: float | None = typer.Option(None, "--timeout-ms", "-t", help="Timeout in milliseconds."),
    raw: bool = typer.Option(False, "--raw", help="Print JSON payloads on a single line."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests/responses (DEBUG)."),
) -> None:
    """Issue a single HTTP request and print the result."""

    if json_body is not None and data is not None:
        raise typer.BadParameter("use either --json or --data, not both")

    body: Any = data
    if json_body is not None:
        try:
            body = json.loads(json_body)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--json") from exc

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        client = create_api_client(
            settings=settings,
            base_url=base_url,
            logger=StdlibLogger("http") if verbose else None,
        )
    except ConfigurationError as exc:
        _err_console.print(f"[red]Invalid configuration:[/red] {exc.message}")
        raise typer.Exit(code=2) from exc

    try:
        payload = asyncio.run(
            client.request(
                path,
                method=method,
                search_params=parse_query(query or []),
                body=body,
                headers=parse_headers(header or []),
                error_locale=locale,
                timeout_ms=timeout_ms,
            )
        )
    except ClientError as exc:
        _err_console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc
    except httpx.HTTPError as exc:
        _err_console.print(f"[red]Network error:[/red] {exc!r}")
        raise typer.Exit(code=1) from exc

    print_payload(_console, payload, raw=raw)


def run() -> None:
    app()
