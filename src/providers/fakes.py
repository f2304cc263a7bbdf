"""
Fake provider adapter for testing.

Implements ProviderAdapterProtocol over an in-memory file table so resolver
behaviour can be tested without HTTP.
"""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Any

from src.core.exceptions import PRESET_DEP_NOT_FOUND, PresetNotFoundError
from src.presets.models import ContentEncoding, RawFileContent
from src.providers.base import Platform, ensure_trailing_slash


class FakeProviderAdapter:
    """In-memory adapter.

    Files are registered per (repo, file_path). A registered Exception is
    raised on fetch. Every fetch is recorded in fetched, every branch lookup
    in branch_lookups.

    Example:
        adapter = FakeProviderAdapter()
        adapter.add_json("some/repo", "default.json", {"foo": "bar"})
    """

    platform = Platform.GITHUB
    default_endpoint = "https://fake.example.org/"

    def __init__(
        self,
        default_branch: str | None = "main",
        requires_explicit_ref: bool = False,
    ) -> None:
        self.requires_explicit_ref = requires_explicit_ref
        self._default_branch = default_branch
        self._files: dict[tuple[str, str], bytes | str | None | Exception] = {}
        self.fetched: list[tuple[str, str, str, str | None]] = []
        self.branch_lookups: list[str] = []

    def add_json(self, repo: str, file_path: str, document: Any) -> FakeProviderAdapter:
        encoded = base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")
        self._files[(repo, file_path)] = encoded
        return self

    def add_raw(
        self, repo: str, file_path: str, payload: bytes | str | None
    ) -> FakeProviderAdapter:
        """Register a base64 payload verbatim (None means empty envelope)."""
        self._files[(repo, file_path)] = payload
        return self

    def add_error(self, repo: str, file_path: str, error: Exception) -> FakeProviderAdapter:
        self._files[(repo, file_path)] = error
        return self

    def normalize_endpoint(self, endpoint: str | None = None) -> str:
        return ensure_trailing_slash(endpoint) if endpoint else self.default_endpoint

    async def fetch_file(
        self,
        repo: str,
        file_path: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> RawFileContent:
        await asyncio.sleep(0)
        self.fetched.append((repo, file_path, self.normalize_endpoint(endpoint), ref))
        if (repo, file_path) not in self._files:
            raise PresetNotFoundError(PRESET_DEP_NOT_FOUND, package_name=repo, file_path=file_path)
        entry = self._files[(repo, file_path)]
        if isinstance(entry, Exception):
            raise entry
        return RawFileContent(
            payload=entry,
            encoding=ContentEncoding.BASE64,
            package_name=repo,
            file_path=file_path,
        )

    async def resolve_default_branch(self, repo: str, endpoint: str | None = None) -> str:  # noqa: ARG002
        await asyncio.sleep(0)
        self.branch_lookups.append(repo)
        if self._default_branch is None:
            raise PresetNotFoundError(PRESET_DEP_NOT_FOUND, package_name=repo)
        return self._default_branch
