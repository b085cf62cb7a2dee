"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from sutils.cli.ui_components import build_settings_table
from sutils.core.config import AppSettings, write_user_env_vars
from sutils.core.errors import ClientError, ConfigurationError
from sutils.core.services.request_pipeline import ApiClient, create_api_client

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(client: ApiClient) -> tuple[bool, str]:
    """Any HTTP answer (even non-2xx) proves the base URL is reachable."""

    try:
        await client.get("")
        return True, "HTTP 2xx"
    except ClientError as exc:
        if exc.is_timeout:
            return False, exc.message
        return True, f"HTTP {exc.status}"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Show the effective configuration and check connectivity to the base URL."""

    settings = AppSettings()
    _console.print(build_settings_table(settings))

    if not settings.base_url:
        _console.print("[yellow]No base URL configured.[/yellow] Run `sutils doctor setup` or set SUTILS_BASE_URL.")
        raise typer.Exit(code=1)

    try:
        client = create_api_client(settings=settings)
    except ConfigurationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {exc.message}")
        raise typer.Exit(code=2) from exc

    ok_http, detail_http = asyncio.run(_check_http(client))
    status = "[green]OK[/green]" if ok_http else "[red]FAIL[/red]"
    _console.print(f"HTTP connectivity: {status} ({detail_http})")
    if not ok_http:
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    base_url = typer.prompt("Base URL", default=settings.base_url or "", show_default=True).strip()
    locale = typer.prompt(
        "Locale (es/en)",
        default=settings.locale.value,
        show_default=True,
    ).strip().lower()
    timeout_ms = typer.prompt("Timeout (ms)", default=f"{settings.timeout_ms:g}", show_default=True).strip()

    if not base_url:
        raise typer.BadParameter("base_url is required")
    try:
        env_path = write_user_env_vars(
            {
                "SUTILS_BASE_URL": base_url,
                "SUTILS_LOCALE": locale,
                "SUTILS_TIMEOUT_MS": timeout_ms,
            }
        )
    except ConfigurationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {exc.message}")
        raise typer.Exit(code=2) from exc

    _console.print(f"[green]Saved config to:[/green] {env_path}")
