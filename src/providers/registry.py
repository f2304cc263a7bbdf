"""
Provider adapter registry.

Adapters form a closed set keyed by Platform; callers pick one by
configuration value, never by inspecting objects at runtime.
"""

from __future__ import annotations

from typing import Final

from src.clients.host_rules import HostRulesProtocol
from src.clients.http import TransportProtocol
from src.core.exceptions import UnsupportedPlatformError
from src.providers.base import BaseProviderAdapter, Platform
from src.providers.gitea import GiteaAdapter
from src.providers.github import GitHubAdapter
from src.providers.gitlab import GitLabAdapter

ADAPTERS: Final[dict[Platform, type[BaseProviderAdapter]]] = {
    Platform.GITHUB: GitHubAdapter,
    Platform.GITLAB: GitLabAdapter,
    Platform.GITEA: GiteaAdapter,
}


def parse_platform(value: str | Platform) -> Platform:
    """Normalize a platform key ("GitHub", "gitlab", Platform.GITEA).

    Raises:
        UnsupportedPlatformError: If no adapter handles the key
    """
    if isinstance(value, Platform):
        return value
    try:
        return Platform(value.strip().lower())
    except ValueError as e:
        supported = ", ".join(p.value for p in Platform)
        raise UnsupportedPlatformError(
            f"unsupported platform '{value}' (supported: {supported})"
        ) from e


def build_adapter(
    platform: str | Platform,
    transport: TransportProtocol,
    host_rules: HostRulesProtocol | None = None,
    default_endpoint: str | None = None,
) -> BaseProviderAdapter:
    """Instantiate the adapter registered for platform."""
    adapter_cls = ADAPTERS[parse_platform(platform)]
    return adapter_cls(transport, host_rules=host_rules, default_endpoint=default_endpoint)
