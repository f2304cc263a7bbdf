"""
Tests for GitLabAdapter, end to end through PresetResolver over FakeTransport.

- default branch discovery from the branches listing
- raw file fetch at files/<path>/raw?ref=<ref>
- platform failure vs missing preset
- default and custom endpoints
"""

from __future__ import annotations

import pytest

from src.clients.host_rules import HostRules
from src.clients.http import FakeTransport
from src.core.config import HostRule
from src.core.exceptions import (
    PLATFORM_FAILURE,
    PRESET_DEP_NOT_FOUND,
    InvalidPresetJSONError,
    PlatformFailureError,
    PresetNotFoundError,
)
from src.presets.models import BranchInfo, PresetReference
from src.presets.resolver import PresetResolver
from src.providers.gitlab import GitLabAdapter

GITLAB = "https://gitlab.com"
BASE_PATH = "/api/v4/projects/some%2Frepo/repository"
BRANCHES_URL = f"{GITLAB}{BASE_PATH}/branches"


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def resolver(transport: FakeTransport) -> PresetResolver:
    return PresetResolver(GitLabAdapter(transport))


class TestGetPreset:
    """get_preset() through the GitLab adapter."""

    @pytest.mark.asyncio
    async def test_throws_platform_failure(
        self, transport: FakeTransport, resolver: PresetResolver
    ) -> None:
        transport.add(BRANCHES_URL, 500)

        with pytest.raises(PlatformFailureError, match=PLATFORM_FAILURE):
            await resolver.get_preset(PresetReference("some/repo", "non-default"))

        assert transport.requested_urls == [BRANCHES_URL]

    @pytest.mark.asyncio
    async def test_throws_if_no_default_branch(
        self, transport: FakeTransport, resolver: PresetResolver
    ) -> None:
        transport.add(BRANCHES_URL, json_body=[])

        with pytest.raises(PresetNotFoundError, match=PRESET_DEP_NOT_FOUND):
            await resolver.get_preset(PresetReference("some/repo"))

        assert transport.requested_urls == [BRANCHES_URL]

    @pytest.mark.asyncio
    async def test_throws_if_missing(self, transport: FakeTransport, resolver: PresetResolver) -> None:
        transport.add(BRANCHES_URL, json_body=[{"name": "master", "default": True}])
        transport.add(f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=master", 404)
        transport.add(f"{GITLAB}{BASE_PATH}/files/renovate.json/raw?ref=master", 404)

        with pytest.raises(PresetNotFoundError, match=PRESET_DEP_NOT_FOUND):
            await resolver.get_preset(PresetReference("some/repo"))

        assert transport.requested_urls == [
            BRANCHES_URL,
            f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=master",
            f"{GITLAB}{BASE_PATH}/files/renovate.json/raw?ref=master",
        ]

    @pytest.mark.asyncio
    async def test_returns_the_preset(self, transport: FakeTransport, resolver: PresetResolver) -> None:
        transport.add(
            BRANCHES_URL,
            json_body=[{"name": "devel"}, {"name": "master", "default": True}],
        )
        transport.add(
            f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=master",
            json_body={"foo": "bar"},
        )

        assert await resolver.get_preset(PresetReference("some/repo")) == {"foo": "bar"}

    @pytest.mark.asyncio
    async def test_malformed_raw_file(self, transport: FakeTransport, resolver: PresetResolver) -> None:
        transport.add(BRANCHES_URL, json_body=[{"name": "main", "default": True}])
        transport.add(f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=main", body="{not json")

        with pytest.raises(InvalidPresetJSONError, match="invalid preset JSON"):
            await resolver.get_preset(PresetReference("some/repo"))

    @pytest.mark.asyncio
    async def test_tag_skips_branch_listing(
        self, transport: FakeTransport, resolver: PresetResolver
    ) -> None:
        transport.add(f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=v2", json_body={"a": 1})

        result = await resolver.get_preset(PresetReference("some/repo", tag="v2"))

        assert result == {"a": 1}
        assert transport.requested_urls == [f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=v2"]

    @pytest.mark.asyncio
    async def test_preset_path_is_url_encoded(
        self, transport: FakeTransport, resolver: PresetResolver
    ) -> None:
        transport.add(BRANCHES_URL, json_body=[{"name": "main", "default": True}])
        transport.add(
            f"{GITLAB}{BASE_PATH}/files/presets%2Fci.json/raw?ref=main",
            json_body={"ci": True},
        )

        result = await resolver.get_preset(
            PresetReference("some/repo", "ci", preset_path="presets")
        )

        assert result == {"ci": True}

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, transport: FakeTransport) -> None:
        rules = HostRules([HostRule(host_type="gitlab", match_host="gitlab.com", token="glpat")])
        resolver = PresetResolver(GitLabAdapter(transport, host_rules=rules))
        transport.add(BRANCHES_URL, json_body=[{"name": "main", "default": True}])
        transport.add(f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=main", json_body={})

        await resolver.get_preset(PresetReference("some/repo"))

        assert all(call.headers["Authorization"] == "Bearer glpat" for call in transport.calls)


class TestGetPresetFromEndpoint:
    """Endpoint selection."""

    @pytest.mark.asyncio
    async def test_uses_default_endpoint(self, transport: FakeTransport, resolver: PresetResolver) -> None:
        transport.add(BRANCHES_URL, json_body=[{"name": "devel", "default": True}])
        transport.add(
            f"{GITLAB}{BASE_PATH}/files/some.json/raw?ref=devel",
            json_body={"preset": {"file": {}}},
        )

        assert await resolver.get_preset_from_endpoint("some/repo", "some/preset/file") == {}

    @pytest.mark.asyncio
    async def test_uses_custom_endpoint(self, transport: FakeTransport, resolver: PresetResolver) -> None:
        custom = "https://gitlab.example.org"
        transport.add(
            f"{custom}{BASE_PATH}/branches", json_body=[{"name": "devel", "default": True}]
        )
        transport.add(f"{custom}{BASE_PATH}/files/some.json/raw?ref=devel", 404)

        with pytest.raises(PresetNotFoundError, match=PRESET_DEP_NOT_FOUND):
            await resolver.get_preset_from_endpoint(
                "some/repo", "some/preset/file", f"{custom}/api/v4"
            )

        assert transport.requested_urls == [
            f"{custom}{BASE_PATH}/branches",
            f"{custom}{BASE_PATH}/files/some.json/raw?ref=devel",
        ]


class TestBranches:
    """Branch listing."""

    @pytest.mark.asyncio
    async def test_list_branches(self, transport: FakeTransport) -> None:
        adapter = GitLabAdapter(transport)
        transport.add(
            BRANCHES_URL,
            json_body=[{"name": "devel"}, {"name": "master", "default": True}, "junk"],
        )

        branches = await adapter.list_branches("some/repo")

        assert branches == [BranchInfo("devel", False), BranchInfo("master", True)]

    @pytest.mark.asyncio
    async def test_fetch_file_discovers_branch_when_called_directly(
        self, transport: FakeTransport
    ) -> None:
        adapter = GitLabAdapter(transport)
        transport.add(BRANCHES_URL, json_body=[{"name": "trunk", "default": True}])
        transport.add(f"{GITLAB}{BASE_PATH}/files/default.json/raw?ref=trunk", body=b"{}")

        raw = await adapter.fetch_file("some/repo", "default.json")

        assert raw.payload == b"{}"
        assert raw.source_url.endswith("ref=trunk")
