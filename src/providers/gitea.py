"""
Gitea preset adapter.

Gitea mirrors the GitHub contents API under /api/v1:
- GET {endpoint}repos/{repo}/contents/{path}[?ref={ref}] -> {"content": "<base64>"}
- GET {endpoint}repos/{repo} -> {"default_branch": "main"}
"""

from __future__ import annotations

from typing import Final

from src.providers.base import Platform
from src.providers.github import GitHubAdapter

GITEA_ENDPOINT: Final[str] = "https://gitea.com/api/v1/"


class GiteaAdapter(GitHubAdapter):
    """Fetch preset files through the Gitea contents API."""

    platform = Platform.GITEA
    DEFAULT_ENDPOINT = GITEA_ENDPOINT

    def _base_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}
