"""Source-control content API clients."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from ..core.errors import ContentClientError
from ..utils.file_utils import split_repo_key

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ContentEntry:
    path: str
    type: str


@dataclasses.dataclass
class RepoContent:
    """A contents API answer: a file (base64 ``content``) or a directory (``entries``)."""

    type: str
    path: str
    content: Optional[str] = None
    entries: List[ContentEntry] = dataclasses.field(default_factory=list)


class ContentClient:
    """Abstract source-control content API."""

    async def get_content(self, repo_key: str, path: str = "") -> RepoContent:
        raise NotImplementedError

    async def aclose(self) -> None:
        pass


class GitHubContentClient(ContentClient):
    """GitHub REST ``/repos/{owner}/{repo}/contents/{path}`` client."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, cfg: Dict) -> "GitHubContentClient":
        gh = cfg.get("github", {})
        return cls(
            token=gh.get("token"),
            api_url=gh.get("api_url", "https://api.github.com"),
            timeout=float(gh.get("timeout", 30.0)),
        )

    async def get_content(self, repo_key: str, path: str = "") -> RepoContent:
        owner, repo = split_repo_key(repo_key)
        url = f"/repos/{owner}/{repo}/contents/{quote(path.strip('/'))}"
        response = await self._client.get(url)
        if response.status_code != 200:
            raise ContentClientError(
                f"GET {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        data = response.json()
        if isinstance(data, list):
            return RepoContent(
                type="dir",
                path=path,
                entries=[ContentEntry(path=item["path"], type=item["type"]) for item in data],
            )
        return RepoContent(
            type=data.get("type", "file"),
            path=data.get("path", path),
            # files above 1MB come back without inline content
            content=data.get("content") or None,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
