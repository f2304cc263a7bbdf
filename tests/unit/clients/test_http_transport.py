"""
Tests for HttpxTransport and FakeTransport.

HttpxTransport is exercised against httpx.MockTransport, so no network is
touched and retry delays are zero.
"""

from __future__ import annotations

import httpx
import pytest

from src.clients.http import FakeTransport, HttpResponse, HttpxTransport, TransportProtocol
from src.core.exceptions import TransportError

URL = "https://api.github.com/repos/some/repo/contents/default.json"


def _transport(handler, max_retries: int = 3) -> HttpxTransport:  # noqa: ANN001
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxTransport(max_retries=max_retries, retry_delay=0, client=client)


class TestHttpResponse:
    """HttpResponse helpers."""

    @pytest.mark.parametrize(("status_code", "ok"), [(200, True), (204, True), (404, False), (500, False)])
    def test_ok(self, status_code: int, ok: bool) -> None:
        assert HttpResponse(status_code=status_code).ok is ok

    def test_json_and_text(self) -> None:
        response = HttpResponse(status_code=200, body=b'{"a": 1}')

        assert response.json() == {"a": 1}
        assert response.text == '{"a": 1}'

    def test_json_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            HttpResponse(status_code=200, body=b"<html>").json()


class TestHttpxTransport:
    """Retry and classification behaviour."""

    def test_implements_protocol(self) -> None:
        assert isinstance(_transport(lambda request: httpx.Response(200)), TransportProtocol)

    @pytest.mark.asyncio
    async def test_returns_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"content": "e30="})

        async with _transport(handler) as transport:
            response = await transport.request("GET", URL, headers={"Authorization": "token abc"})

        assert response.status_code == 200
        assert response.json() == {"content": "e30="}
        assert response.url == URL
        assert seen[0].headers["Authorization"] == "token abc"

    @pytest.mark.asyncio
    async def test_404_is_returned_without_retry(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(404)

        async with _transport(handler) as transport:
            response = await transport.request("GET", URL)

        assert response.status_code == 404
        assert calls == 1

    @pytest.mark.asyncio
    async def test_5xx_is_retried_then_succeeds(self) -> None:
        statuses = iter([502, 503, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), json={})

        async with _transport(handler) as transport:
            response = await transport.request("GET", URL)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_persistent_5xx_returns_last_response(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(500)

        async with _transport(handler, max_retries=2) as transport:
            response = await transport.request("GET", URL)

        assert response.status_code == 500
        assert calls == 2

    @pytest.mark.asyncio
    async def test_connect_error_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _transport(handler, max_retries=2) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.request("GET", URL)

        assert "after 2 attempts" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_then_success(self) -> None:
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise httpx.ReadTimeout("slow", request=request)
            return httpx.Response(200, content=b"{}")

        async with _transport(handler) as transport:
            response = await transport.request("GET", URL)

        assert response.body == b"{}"
        assert attempts == 2


class TestFakeTransport:
    """FakeTransport routing."""

    @pytest.mark.asyncio
    async def test_unrouted_url_is_404(self) -> None:
        response = await FakeTransport().request("GET", URL)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_replies_in_order_and_last_repeats(self) -> None:
        transport = FakeTransport().add(URL, 500).add(URL, 200, json_body={"a": 1})

        statuses = [(await transport.request("GET", URL)).status_code for _ in range(3)]

        assert statuses == [500, 200, 200]
        assert transport.requested_urls == [URL, URL, URL]

    @pytest.mark.asyncio
    async def test_routes_are_per_method(self) -> None:
        transport = FakeTransport().add(URL, 201, method="POST")

        assert (await transport.request("POST", URL)).status_code == 201
        assert (await transport.request("GET", URL)).status_code == 404

    @pytest.mark.asyncio
    async def test_error_is_raised(self) -> None:
        transport = FakeTransport().add(URL, error=TransportError("down"))

        with pytest.raises(TransportError):
            await transport.request("GET", URL)
