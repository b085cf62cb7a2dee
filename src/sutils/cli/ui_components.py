"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `request` y `doctor`.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sutils.core.config import AppSettings
from sutils.core.errors import ClientError


def print_payload(console: Console, payload: Any, *, raw: bool = False) -> None:
    """Imprime el resultado de una request (JSON bonito, texto o vacío)."""

    if payload is None:
        console.print(Text("(sin contenido)", style="dim"))
        return
    if isinstance(payload, str):
        console.print(payload, markup=False, highlight=False)
        return
    if raw:
        console.print(json.dumps(payload, ensure_ascii=False), markup=False, highlight=False)
        return
    console.print_json(data=payload)


def build_error_panel(error: ClientError) -> Panel:
    """Panel para presentar un `ClientError` (mensaje localizado + cuerpo)."""

    title = Text(f"HTTP {error.status} {error.status_text}".strip(), style="bold red")
    body = Text()
    body.append(error.message + "\n")
    if error.is_timeout:
        body.append("\nTimeout: la request fue cancelada.", style="yellow")
    if error.body not in (None, ""):
        body.append("\nBody: ", style="bold")
        body.append(str(error.body), style="dim")
    return Panel(body, title=title, border_style="red")


def build_settings_table(settings: AppSettings) -> Table:
    table = Table(title="sutils config")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("base_url", settings.base_url or "-")
    table.add_row("locale", settings.locale.value)
    table.add_row("timeout_ms", f"{settings.timeout_ms:g}")
    table.add_row("user_agent", settings.user_agent)
    table.add_row("log_level", settings.log_level)
    return table
