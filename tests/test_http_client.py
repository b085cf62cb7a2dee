"""Tests for the default httpx-based transport."""

from __future__ import annotations

import json

import httpx
import pytest

from sutils.adapters.http_client import build_async_client, make_httpx_transport
from sutils.core.config import AppSettings
from sutils.core.domain.models import ClientConfig, MultipartForm, RequestInit
from sutils.core.errors import ClientError
from sutils.core.services.request_pipeline import ApiClient


class Recorder:
    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.response = response or httpx.Response(200, json={"ok": True})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.response


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(user_agent="sutils-tests/1.0")


@pytest.mark.asyncio
async def test_build_async_client_sets_user_agent_and_extra_headers(settings: AppSettings) -> None:
    async with build_async_client(settings, extra_headers={"Accept": "application/json"}) as client:
        assert client.headers["user-agent"] == "sutils-tests/1.0"
        assert client.headers["accept"] == "application/json"
        assert client.follow_redirects is True
        assert client.timeout.read is None


@pytest.mark.asyncio
async def test_transport_sends_method_headers_and_content(settings: AppSettings) -> None:
    recorder = Recorder()
    send = make_httpx_transport(settings, transport=httpx.MockTransport(recorder))
    init = RequestInit(
        method="POST",
        headers=httpx.Headers({"Content-Type": "application/json", "X-Trace": "abc"}),
        body='{"a":1}',
    )

    response = await send("https://api.test/items", init)

    assert response.status_code == 200
    sent = recorder.requests[-1]
    assert sent.method == "POST"
    assert str(sent.url) == "https://api.test/items"
    assert sent.headers["x-trace"] == "abc"
    assert sent.headers["user-agent"] == "sutils-tests/1.0"
    assert json.loads(sent.content) == {"a": 1}


@pytest.mark.asyncio
async def test_transport_encodes_multipart_forms(settings: AppSettings) -> None:
    recorder = Recorder()
    send = make_httpx_transport(settings, transport=httpx.MockTransport(recorder))
    form = MultipartForm(fields={"title": "doc"}, files={"file": ("a.txt", b"hello", "text/plain")})

    await send("https://api.test/upload", RequestInit(method="POST", headers=httpx.Headers(), body=form))

    sent = recorder.requests[-1]
    assert sent.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="title"' in sent.content
    assert b"hello" in sent.content


@pytest.mark.asyncio
async def test_transport_forwards_bytes_like_bodies(settings: AppSettings) -> None:
    recorder = Recorder()
    send = make_httpx_transport(settings, transport=httpx.MockTransport(recorder))

    await send("https://api.test/blob", RequestInit(method="PUT", headers=httpx.Headers(), body=bytearray(b"\x01\x02")))

    assert recorder.requests[-1].content == b"\x01\x02"


@pytest.mark.asyncio
async def test_api_client_over_httpx_transport_end_to_end(settings: AppSettings) -> None:
    recorder = Recorder(httpx.Response(200, json=[{"id": "1"}]))
    client = ApiClient(
        ClientConfig(
            base_url="https://api.test/v1",
            default_headers={"Accept": "application/json"},
            transport=make_httpx_transport(settings, transport=httpx.MockTransport(recorder)),
        )
    )

    result = await client.get("/users", search_params={"page": 2, "tags": ["a", "b"]})

    assert result == [{"id": "1"}]
    sent = recorder.requests[-1]
    assert str(sent.url) == "https://api.test/v1/users?page=2&tags=a&tags=b"
    assert sent.headers["accept"] == "application/json"
    assert "content-type" not in sent.headers


@pytest.mark.asyncio
async def test_api_client_maps_http_errors_from_real_responses(settings: AppSettings) -> None:
    recorder = Recorder(httpx.Response(503, json={"retry_after": 30}))
    client = ApiClient(
        ClientConfig(
            base_url="https://api.test/",
            transport=make_httpx_transport(settings, transport=httpx.MockTransport(recorder)),
        )
    )

    with pytest.raises(ClientError) as info:
        await client.get("/health")

    assert info.value.status == 503
    assert info.value.message == "Servicio no disponible temporalmente."
    assert info.value.body == {"retry_after": 30}


@pytest.mark.asyncio
async def test_connect_errors_propagate_from_httpx(settings: AppSettings) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ApiClient(
        ClientConfig(
            base_url="https://api.test/",
            transport=make_httpx_transport(settings, transport=httpx.MockTransport(refuse)),
        )
    )

    with pytest.raises(httpx.ConnectError):
        await client.get("/health")
