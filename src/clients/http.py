"""
HTTP transport for provider adapters.

Adapters only see TransportProtocol: request() returns an HttpResponse for
any HTTP status and raises TransportError when no response was obtained.

Patterns Applied:
- Connection pooling (reuse httpx.AsyncClient)
- Retry with exponential backoff for timeouts, connect errors and 5xx
- Protocol for duck typing, FakeTransport for tests
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final, Protocol, runtime_checkable

import httpx

from src.core.exceptions import TransportError
from src.core.logging import get_logger

# =============================================================================
# Module Constants
# =============================================================================

DEFAULT_TIMEOUT: Final[float] = 30.0
DEFAULT_MAX_RETRIES: Final[int] = 2
DEFAULT_RETRY_DELAY: Final[float] = 1.0
USER_AGENT: Final[str] = "preset-resolution-service/0.1"

logger = get_logger(__name__)


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Transport-neutral HTTP response."""

    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.body)


# =============================================================================
# Protocol for Duck Typing
# =============================================================================


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol for HTTP transports used by provider adapters."""

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send a request and return the response, whatever its status."""
        ...


# =============================================================================
# HttpxTransport Implementation
# =============================================================================


class HttpxTransport:
    """httpx-backed transport.

    Attributes:
        timeout: Request timeout in seconds
        max_retries: Maximum attempts per request
        retry_delay: Initial delay between attempts in seconds
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per request
            retry_delay: Initial delay between retries
            client: Pre-built client (tests inject one with httpx.MockTransport)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        # Connection pooling: single client instance
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send a request, retrying transient failures.

        A 5xx is retried; when retries run out the last 5xx response is
        returned so the caller can classify it.

        Raises:
            TransportError: If every attempt failed without a response
        """
        last_error: Exception | None = None
        last_response: httpx.Response | None = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.request(
                    method, url, headers=dict(headers or {}), content=body
                )
            except httpx.TransportError as e:
                # TimeoutException and ConnectError are both TransportError
                last_error, last_response = e, None
            else:
                if response.status_code < 500:
                    return self._to_response(response)
                last_error, last_response = None, response

            logger.debug(
                "http_retry",
                method=method,
                url=url,
                attempt=attempt + 1,
                status_code=last_response.status_code if last_response is not None else None,
                error=str(last_error) if last_error else None,
            )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.retry_delay * (2**attempt))

        if last_response is not None:
            return self._to_response(last_response)

        raise TransportError(
            f"Request failed after {self.max_retries} attempts: {last_error}",
            file_path=url,
        ) from last_error

    @staticmethod
    def _to_response(response: httpx.Response) -> HttpResponse:
        return HttpResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            url=str(response.url),
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self._client.aclose()


# =============================================================================
# FakeTransport for Testing
# =============================================================================


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    """A request seen by FakeTransport."""

    method: str
    url: str
    headers: Mapping[str, str]


class FakeTransport:
    """Fake transport for unit testing without real HTTP.

    Routes are keyed by exact URL (GET) or (method, url). Unrouted URLs
    answer 404. A routed Exception instance is raised instead of answered.

    Example:
        transport = FakeTransport()
        transport.add("https://api.github.com/repos/a/b/contents/default.json",
                      json_body={"content": "e30="})
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[HttpResponse | Exception]] = {}
        self.calls: list[RecordedRequest] = []

    def add(
        self,
        url: str,
        status_code: int = 200,
        *,
        json_body: Any = None,
        body: bytes | str | None = None,
        method: str = "GET",
        error: Exception | None = None,
    ) -> FakeTransport:
        """Queue a reply for a URL. Replies queued for the same URL are used
        in order; the last one repeats.
        """
        reply: HttpResponse | Exception
        if error is not None:
            reply = error
        else:
            if json_body is not None:
                payload = json.dumps(json_body).encode("utf-8")
            elif isinstance(body, str):
                payload = body.encode("utf-8")
            else:
                payload = body or b""
            reply = HttpResponse(status_code=status_code, body=payload, url=url)
        self._routes.setdefault((method.upper(), url), []).append(reply)
        return self

    @property
    def requested_urls(self) -> list[str]:
        return [call.url for call in self.calls]

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,  # noqa: ARG002
    ) -> HttpResponse:
        await asyncio.sleep(0)
        self.calls.append(RecordedRequest(method=method.upper(), url=url, headers=dict(headers or {})))
        replies = self._routes.get((method.upper(), url))
        if not replies:
            return HttpResponse(status_code=404, url=url)
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply
