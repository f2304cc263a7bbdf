"""
GitLab preset adapter.

Endpoints (endpoint includes the /api/v4 prefix):
- GET {endpoint}projects/{urlencoded repo}/repository/branches
  Response: [{"name": "devel"}, {"name": "master", "default": true}]
- GET {endpoint}projects/{urlencoded repo}/repository/files/{urlencoded path}/raw?ref={ref}
  Response: raw file body, no envelope

The files API requires a ref, so the resolver discovers the default branch
once per resolution (requires_explicit_ref).
"""

from __future__ import annotations

from typing import Final
from urllib.parse import quote

from src.core.exceptions import PRESET_DEP_NOT_FOUND, PresetNotFoundError
from src.core.logging import get_logger
from src.presets.models import BranchInfo, ContentEncoding, RawFileContent
from src.providers.base import BaseProviderAdapter, Platform

GITLAB_ENDPOINT: Final[str] = "https://gitlab.com/api/v4/"

logger = get_logger(__name__)


def _encode(value: str) -> str:
    return quote(value, safe="")


class GitLabAdapter(BaseProviderAdapter):
    """Fetch preset files through the GitLab v4 repository files API."""

    platform = Platform.GITLAB
    DEFAULT_ENDPOINT = GITLAB_ENDPOINT
    requires_explicit_ref = True

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def list_branches(self, repo: str, endpoint: str | None = None) -> list[BranchInfo]:
        url = f"{self.normalize_endpoint(endpoint)}projects/{_encode(repo)}/repository/branches"
        response = await self._get(url, package_name=repo)
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, list):
            return []
        return [BranchInfo.from_api(item) for item in data if isinstance(item, dict)]

    async def resolve_default_branch(self, repo: str, endpoint: str | None = None) -> str:
        """Find the branch flagged as default.

        Raises:
            PresetNotFoundError: If no branch is marked default
        """
        for branch in await self.list_branches(repo, endpoint):
            if branch.is_default and branch.name:
                return branch.name
        logger.debug("default_branch_missing", platform=self.platform.value, repo=repo)
        raise PresetNotFoundError(PRESET_DEP_NOT_FOUND, package_name=repo)

    async def fetch_file(
        self,
        repo: str,
        file_path: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> RawFileContent:
        base = self.normalize_endpoint(endpoint)
        if ref is None:
            ref = await self.resolve_default_branch(repo, base)
        url = (
            f"{base}projects/{_encode(repo)}/repository/files/"
            f"{_encode(file_path)}/raw?ref={_encode(ref)}"
        )
        response = await self._get(url, package_name=repo, file_path=file_path)
        return RawFileContent(
            payload=response.body,
            encoding=ContentEncoding.RAW,
            package_name=repo,
            file_path=file_path,
            source_url=url,
        )
