from __future__ import annotations

from pathlib import Path

import pytest

from conftest import RecordingTransport
from sutils.core.config import AppSettings, write_user_env_vars
from sutils.core.domain.language import Locale
from sutils.core.domain.models import ClientConfig
from sutils.core.errors import ConfigurationError
from sutils.core.services import request_pipeline
from sutils.core.services.request_pipeline import create_api_client


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in ("SUTILS_BASE_URL", "SUTILS_LOCALE", "SUTILS_TIMEOUT_MS", "SUTILS_USER_AGENT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUTILS_BASE_URL", "https://env.test/api")
    monkeypatch.setenv("SUTILS_LOCALE", "en")
    monkeypatch.setenv("SUTILS_TIMEOUT_MS", "2500")

    settings = AppSettings()

    assert settings.base_url == "https://env.test/api"
    assert settings.locale is Locale.ENGLISH
    assert settings.timeout_ms == 2500


def test_client_config_from_settings_applies_overrides() -> None:
    settings = AppSettings(base_url="https://env.test/api", user_agent="ua/1")

    config = ClientConfig.from_settings(
        settings,
        base_url=None,
        default_headers={"Accept": "application/json"},
        timeout_ms=100,
    )

    assert config.base_url == "https://env.test/api/"
    assert config.timeout_ms == 100
    assert config.default_headers == {"User-Agent": "ua/1", "Accept": "application/json"}
    assert config.locale is Locale.SPANISH


def test_missing_base_url_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        create_api_client(settings=AppSettings())


def test_factory_uses_default_transport_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = RecordingTransport()
    monkeypatch.setattr(request_pipeline, "make_httpx_transport", lambda: fake)

    client = create_api_client(settings=AppSettings(base_url="https://env.test"))

    assert client.config.base_url == "https://env.test/"
    assert client._transport is fake


def test_factory_accepts_a_ready_config() -> None:
    config = ClientConfig(base_url="https://api.test/", transport=RecordingTransport())
    assert create_api_client(config).config is config


def test_write_user_env_vars_merges_existing_values(tmp_path: Path) -> None:
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nSUTILS_LOCALE=en\nSUTILS_TIMEOUT_MS=100\n", encoding="utf-8")

    written = write_user_env_vars(
        {"SUTILS_BASE_URL": "https://api.test/", "SUTILS_TIMEOUT_MS": "900", "SUTILS_USER_AGENT": None},
        env_path=env_path,
    )

    assert written == env_path
    assert env_path.read_text(encoding="utf-8").splitlines() == [
        "# sutils user config (.env)",
        "SUTILS_BASE_URL=https://api.test/",
        "SUTILS_LOCALE=en",
        "SUTILS_TIMEOUT_MS=900",
    ]


def test_factory_rejects_overrides_with_a_ready_config() -> None:
    config = ClientConfig(base_url="https://api.test/", transport=RecordingTransport())

    with pytest.raises(TypeError):
        create_api_client(config, timeout_ms=5)


def test_write_user_env_vars_rejects_unknown_keys(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"

    with pytest.raises(ConfigurationError) as info:
        write_user_env_vars({"SUTILS_BASE_URL": "https://api.test/", "OPENAI_API_KEY": "x"}, env_path=env_path)

    assert info.value.details == {"keys": ["OPENAI_API_KEY"]}
    assert not env_path.exists()


@pytest.mark.parametrize(
    "values",
    [{"SUTILS_LOCALE": "fr"}, {"SUTILS_TIMEOUT_MS": "0"}, {"SUTILS_TIMEOUT_MS": "soon"}],
)
def test_write_user_env_vars_validates_values(tmp_path: Path, values: dict[str, str]) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("SUTILS_LOCALE=en\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        write_user_env_vars(values, env_path=env_path)

    assert env_path.read_text(encoding="utf-8") == "SUTILS_LOCALE=en\n"
