from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sutils.core.domain.models import ClientConfig, RequestInit  # noqa: E402
from sutils.core.services.request_pipeline import ApiClient  # noqa: E402


class RecordingTransport:
    """Fake fetch-style transport that records every call."""

    def __init__(
        self,
        response: httpx.Response | None = None,
        *,
        exc: BaseException | None = None,
        delay: float | None = None,
    ) -> None:
        self.response = response if response is not None else httpx.Response(200)
        self.exc = exc
        self.delay = delay
        self.calls: list[tuple[str, RequestInit]] = []
        self.cancelled = False

    async def __call__(self, url: str, init: RequestInit) -> httpx.Response:
        self.calls.append((url, init))
        if self.delay is not None:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.exc is not None:
            raise self.exc
        return self.response

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_init(self) -> RequestInit:
        return self.calls[-1][1]


class RecordingLogger:
    """LoggerHandle that keeps entries in memory."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.entries: list[tuple[str, str, dict[str, Any] | None, BaseException | None]] = []

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.entries.append(("debug", message, context, None))
        if self.fail:
            raise RuntimeError("log sink down")

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.entries.append(("error", message, context, error))
        if self.fail:
            raise RuntimeError("log sink down")

    def levels(self) -> list[str]:
        return [entry[0] for entry in self.entries]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_client():
    """Build an `ApiClient` around a fake transport with sensible defaults."""

    def factory(transport: RecordingTransport, **overrides: Any) -> ApiClient:
        data: dict[str, Any] = {"base_url": "https://api.test/", "locale": "es", "transport": transport}
        data.update(overrides)
        return ApiClient(ClientConfig(**data))

    return factory
