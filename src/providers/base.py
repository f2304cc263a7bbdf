"""
Provider adapter contract and shared request handling.

Every adapter classifies responses the same way:
- 2xx: returned to the adapter
- 404: PresetNotFoundError (normal outcome, drives fallback)
- anything else, or no response at all: PlatformFailureError

Patterns Applied:
- Protocol for duck typing (PresetResolver is generic over adapters)
- Closed set of adapters keyed by Platform (see registry.py)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Protocol, runtime_checkable

from src.clients.host_rules import HostRules, HostRulesProtocol
from src.clients.http import HttpResponse, TransportProtocol
from src.core.exceptions import (
    PLATFORM_FAILURE,
    PRESET_DEP_NOT_FOUND,
    PlatformFailureError,
    PresetNotFoundError,
    TransportError,
)
from src.core.logging import get_logger
from src.presets.models import RawFileContent

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404


class Platform(str, Enum):
    """Supported hosting platforms."""

    GITHUB = "github"
    GITLAB = "gitlab"
    GITEA = "gitea"


def ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class ProviderAdapterProtocol(Protocol):
    """Capability set every hosting adapter implements."""

    platform: Platform
    default_endpoint: str
    requires_explicit_ref: bool

    def normalize_endpoint(self, endpoint: str | None = None) -> str:
        """Return endpoint (or the default) with a trailing slash."""
        ...

    async def fetch_file(
        self,
        repo: str,
        file_path: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> RawFileContent:
        """Fetch one file from repo at ref (default branch when None)."""
        ...

    async def resolve_default_branch(self, repo: str, endpoint: str | None = None) -> str:
        """Return the name of the repository's default branch."""
        ...


# =============================================================================
# Shared implementation
# =============================================================================


class BaseProviderAdapter(ABC):
    """Shared endpoint handling, authentication and response classification.

    Subclasses set platform, DEFAULT_ENDPOINT and implement the fetch
    sequence plus _auth_headers().
    """

    platform: ClassVar[Platform]
    DEFAULT_ENDPOINT: ClassVar[str]
    requires_explicit_ref: ClassVar[bool] = False

    def __init__(
        self,
        transport: TransportProtocol,
        host_rules: HostRulesProtocol | None = None,
        default_endpoint: str | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            transport: HTTP transport
            host_rules: Credential lookup; None sends unauthenticated requests
            default_endpoint: Overrides the public API base for this adapter
        """
        self._transport = transport
        self._host_rules = host_rules or HostRules()
        self.default_endpoint = ensure_trailing_slash(default_endpoint or self.DEFAULT_ENDPOINT)

    def normalize_endpoint(self, endpoint: str | None = None) -> str:
        return ensure_trailing_slash(endpoint) if endpoint else self.default_endpoint

    @abstractmethod
    def _auth_headers(self, token: str) -> dict[str, str]:
        """Return the Authorization header for a host token."""

    @abstractmethod
    async def fetch_file(
        self,
        repo: str,
        file_path: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> RawFileContent:
        """Fetch one file from repo at ref (default branch when None)."""

    @abstractmethod
    async def resolve_default_branch(self, repo: str, endpoint: str | None = None) -> str:
        """Return the name of the repository's default branch."""

    def _base_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def _headers_for(self, url: str) -> dict[str, str]:
        headers = self._base_headers()
        credentials = self._host_rules.find(host_type=self.platform.value, url=url)
        if credentials.token:
            headers.update(self._auth_headers(credentials.token))
        return headers

    async def _get(
        self,
        url: str,
        *,
        package_name: str,
        file_path: str | None = None,
    ) -> HttpResponse:
        """GET url and classify the outcome.

        Raises:
            PresetNotFoundError: On 404
            PlatformFailureError: On any other non-2xx or a transport failure
        """
        try:
            response = await self._transport.request("GET", url, headers=self._headers_for(url))
        except TransportError as e:
            logger.warning(
                "platform_unreachable",
                platform=self.platform.value,
                url=url,
                error=str(e),
            )
            raise PlatformFailureError(
                PLATFORM_FAILURE, package_name=package_name, file_path=file_path
            ) from e

        if response.ok:
            return response

        if response.status_code == HTTP_NOT_FOUND:
            logger.debug(
                "preset_file_not_found",
                platform=self.platform.value,
                url=url,
            )
            raise PresetNotFoundError(
                PRESET_DEP_NOT_FOUND, package_name=package_name, file_path=file_path
            )

        logger.warning(
            "platform_failure",
            platform=self.platform.value,
            url=url,
            status_code=response.status_code,
        )
        raise PlatformFailureError(
            PLATFORM_FAILURE,
            status_code=response.status_code,
            package_name=package_name,
            file_path=file_path,
        )
