"""
GitHub preset adapter.

Endpoints:
- GET {endpoint}repos/{repo}/contents/{path}[?ref={ref}]
  Response: {"content": "<base64>", "encoding": "base64", ...}
- GET {endpoint}repos/{repo}
  Response: {"default_branch": "main", ...}

The contents endpoint reads the default branch when no ref is given, so no
branch discovery happens before a file fetch.
"""

from __future__ import annotations

from typing import Any, Final
from urllib.parse import quote

from src.core.exceptions import PRESET_DEP_NOT_FOUND, PresetNotFoundError
from src.presets.models import ContentEncoding, RawFileContent
from src.providers.base import BaseProviderAdapter, Platform

GITHUB_ENDPOINT: Final[str] = "https://api.github.com/"
GITHUB_ACCEPT: Final[str] = "application/vnd.github.v3+json"


class GitHubAdapter(BaseProviderAdapter):
    """Fetch preset files through the GitHub REST contents API."""

    platform = Platform.GITHUB
    DEFAULT_ENDPOINT = GITHUB_ENDPOINT

    def _base_headers(self) -> dict[str, str]:
        return {"Accept": GITHUB_ACCEPT}

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"token {token}"}

    def contents_url(self, repo: str, file_path: str, endpoint: str, ref: str | None = None) -> str:
        url = f"{endpoint}repos/{repo}/contents/{quote(file_path)}"
        if ref:
            url = f"{url}?ref={quote(ref, safe='')}"
        return url

    async def fetch_file(
        self,
        repo: str,
        file_path: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> RawFileContent:
        """Fetch a file's base64 content envelope.

        A 200 without a usable "content" string yields a RawFileContent with
        payload None, which the decoder rejects as invalid JSON.
        """
        url = self.contents_url(repo, file_path, self.normalize_endpoint(endpoint), ref)
        response = await self._get(url, package_name=repo, file_path=file_path)

        content: Any = None
        try:
            envelope = response.json()
        except ValueError:
            envelope = None
        if isinstance(envelope, dict) and isinstance(envelope.get("content"), str):
            content = envelope["content"]

        return RawFileContent(
            payload=content,
            encoding=ContentEncoding.BASE64,
            package_name=repo,
            file_path=file_path,
            source_url=url,
        )

    async def resolve_default_branch(self, repo: str, endpoint: str | None = None) -> str:
        url = f"{self.normalize_endpoint(endpoint)}repos/{repo}"
        response = await self._get(url, package_name=repo)
        try:
            data = response.json()
        except ValueError:
            data = None
        branch = data.get("default_branch") if isinstance(data, dict) else None
        if not isinstance(branch, str) or not branch:
            raise PresetNotFoundError(PRESET_DEP_NOT_FOUND, package_name=repo)
        return branch
