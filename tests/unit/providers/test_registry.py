"""Tests for the provider adapter registry."""

import pytest

from src.clients.http import FakeTransport
from src.core.exceptions import UnsupportedPlatformError
from src.providers import FakeProviderAdapter, ProviderAdapterProtocol
from src.providers.base import BaseProviderAdapter, Platform
from src.providers.registry import ADAPTERS, build_adapter, parse_platform


class TestParsePlatform:
    """parse_platform() normalization."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("github", Platform.GITHUB),
            ("GitLab", Platform.GITLAB),
            (" gitea ", Platform.GITEA),
            (Platform.GITHUB, Platform.GITHUB),
        ],
    )
    def test_accepts_known_keys(self, value: str | Platform, expected: Platform) -> None:
        assert parse_platform(value) is expected

    @pytest.mark.parametrize("value", ["bitbucket", "", "azure"])
    def test_rejects_unknown_keys(self, value: str) -> None:
        with pytest.raises(UnsupportedPlatformError, match="supported: github, gitlab, gitea"):
            parse_platform(value)


class TestBuildAdapter:
    """build_adapter() covers the closed set."""

    def test_every_platform_has_an_adapter(self) -> None:
        assert set(ADAPTERS) == set(Platform)

    @pytest.mark.parametrize("platform", list(Platform))
    def test_builds_protocol_compliant_adapter(self, platform: Platform) -> None:
        adapter = build_adapter(platform, FakeTransport())

        assert isinstance(adapter, ProviderAdapterProtocol)
        assert adapter.platform is platform

    def test_default_endpoint_override(self) -> None:
        adapter = build_adapter("gitlab", FakeTransport(), default_endpoint="https://git.example.org/api/v4")

        assert adapter.normalize_endpoint() == "https://git.example.org/api/v4/"
        assert adapter.normalize_endpoint("https://other.example.org") == "https://other.example.org/"

    def test_fake_adapter_satisfies_protocol(self) -> None:
        assert isinstance(FakeProviderAdapter(), ProviderAdapterProtocol)


class TestBaseProviderAdapter:
    """The shared base is abstract."""

    def test_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            BaseProviderAdapter(FakeTransport())  # type: ignore[abstract]

    def test_subclass_must_implement_fetch_sequence(self) -> None:
        class _HeadersOnly(BaseProviderAdapter):
            platform = Platform.GITHUB
            DEFAULT_ENDPOINT = "https://example.org/"

            def _auth_headers(self, token: str) -> dict[str, str]:
                return {"Authorization": token}

        with pytest.raises(TypeError):
            _HeadersOnly(FakeTransport())  # type: ignore[abstract]
