"""Hosting platform adapters for preset files."""
from src.providers.base import (
    BaseProviderAdapter,
    Platform,
    ProviderAdapterProtocol,
    ensure_trailing_slash,
)
from src.providers.fakes import FakeProviderAdapter
from src.providers.gitea import GiteaAdapter
from src.providers.github import GitHubAdapter
from src.providers.gitlab import GitLabAdapter
from src.providers.registry import ADAPTERS, build_adapter, parse_platform

__all__ = [
    "ADAPTERS",
    "BaseProviderAdapter",
    "FakeProviderAdapter",
    "GiteaAdapter",
    "GitHubAdapter",
    "GitLabAdapter",
    "Platform",
    "ProviderAdapterProtocol",
    "build_adapter",
    "ensure_trailing_slash",
    "parse_platform",
]
