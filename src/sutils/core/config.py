"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el cliente HTTP y la CLI lean la config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sutils.core.domain.language import Locale
from sutils.core.errors import ConfigurationError


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "sutils"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "sutils"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sutils"
    return Path.home() / ".config" / "sutils"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Solo aporta *defaults*: el cliente HTTP se configura con `ClientConfig`,
    que puede construirse desde aquí con `ClientConfig.from_settings`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUTILS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str | None = Field(
        default=None,
        description="Base URL por defecto para la CLI y `create_api_client`.",
    )
    timeout_ms: float = Field(
        default=15_000,
        gt=0,
        description="Timeout por request (milisegundos).",
    )
    locale: Locale = Field(
        default=Locale.SPANISH,
        description="Locale de los mensajes de error (es/en).",
    )
    user_agent: str = Field(
        default="sutils/0.1 (+https://local)",
        min_length=1,
        description="User-Agent enviado por defecto.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel del logger `sutils` (DEBUG, INFO, WARNING...).",
    )


def _settings_env_keys() -> dict[str, str]:
    """`SUTILS_BASE_URL` -> `base_url` para cada campo de `AppSettings`."""

    prefix = AppSettings.model_config.get("env_prefix", "")
    return {f"{prefix}{name}".upper(): name for name in AppSettings.model_fields}


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Solo acepta claves `SUTILS_*` conocidas y valida los valores con
    `AppSettings` antes de tocar el fichero; si algo no valida lanza
    `ConfigurationError` y el .env queda intacto.
    """

    known = _settings_env_keys()
    updates = {key.upper(): value for key, value in values.items() if value is not None}
    unknown = sorted(set(updates) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown settings keys: {', '.join(unknown)}", details={"keys": unknown})

    try:
        AppSettings(_env_file=None, **{known[key]: value for key, value in updates.items()})
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid settings values: {exc.errors(include_url=False)}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = {k: v for k, v in dotenv_values(env_path).items() if v is not None}
    existing.update(updates)

    lines = ["# sutils user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path
