"""Recursive repository file discovery."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from ..core.errors import DiscoveryError
from .github import ContentClient, ContentEntry
from .policy import DEFAULT_POLICY, ExclusionPolicy

logger = logging.getLogger(__name__)


class FileDiscoverer:
    """Enumerates indexable file paths of a repository.

    Sibling directories are listed concurrently. The first failed listing
    aborts discovery with ``DiscoveryError``: an incomplete tree would
    silently under-index the repository.
    """

    def __init__(self, client: ContentClient, policy: Optional[ExclusionPolicy] = None):
        self.client = client
        self.policy = policy or DEFAULT_POLICY

    async def discover(self, repo_key: str, start_path: str = "") -> List[str]:
        try:
            content = await self.client.get_content(repo_key, start_path)
        except DiscoveryError:
            raise
        except Exception as e:
            raise DiscoveryError(f"Failed to list {repo_key}:{start_path or '/'}: {e}") from e

        if content.type != "dir":
            if content.type == "file" and self.policy.include_path(content.path):
                return [content.path]
            return []

        tasks = [asyncio.ensure_future(self._visit(repo_key, entry)) for entry in content.entries]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # stop sibling listings once the run has failed
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [path for paths in results for path in paths]

    async def _visit(self, repo_key: str, entry: ContentEntry) -> List[str]:
        if entry.type == "dir":
            if self.policy.skip_directory(entry.path):
                logger.debug(f"Skipping directory: {entry.path}")
                return []
            return await self.discover(repo_key, entry.path)

        if entry.type == "file":
            if self.policy.include_file(entry.path):
                return [entry.path]
            logger.debug(f"Skipping file: {entry.path}")

        # symlinks and submodules are not indexed
        return []
