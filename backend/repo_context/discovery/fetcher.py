"""Batched file content retrieval."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from ..core.errors import FetchError
from ..core.models import FileRecord, ItemFailure
from ..utils.concurrency import GroupedExecutor
from ..utils.file_utils import decode_base64_text
from .github import ContentClient

logger = logging.getLogger(__name__)

FETCH_BATCH_SIZE = 20


@dataclasses.dataclass
class FetchResult:
    records: List[FileRecord]
    failed: List[ItemFailure]


class ContentFetcher:
    """Fetches file contents ``batch_size`` at a time.

    A batch starts only after the previous one settled, so at most
    ``batch_size`` requests are outstanding against the host.
    """

    def __init__(self, client: ContentClient, batch_size: int = FETCH_BATCH_SIZE, timeout: Optional[float] = None):
        self.client = client
        self.executor = GroupedExecutor(batch_size, timeout=timeout, label="fetch")

    async def _fetch_one(self, repo_key: str, path: str) -> FileRecord:
        content = await self.client.get_content(repo_key, path)
        if content.type != "file":
            raise FetchError(f"{path} is a {content.type}, not a file")
        if not content.content:
            raise FetchError(f"{path} has no inline content")
        text = decode_base64_text(content.content)
        if text is None:
            raise FetchError(f"{path} is binary or not valid base64")
        return FileRecord(path=path, content=text)

    async def fetch(self, repo_key: str, paths: List[str]) -> FetchResult:
        outcomes = await self.executor.run(paths, lambda p: self._fetch_one(repo_key, p))

        records: List[FileRecord] = []
        failed: List[ItemFailure] = []
        for outcome in outcomes:
            path = paths[outcome.index]
            if outcome.ok:
                records.append(outcome.value)
            else:
                logger.warning(f"Failed to fetch {path}: {outcome.error}")
                failed.append(ItemFailure(key=path, stage="fetch", error=str(outcome.error) or type(outcome.error).__name__))

        logger.info(f"Fetched {len(records)}/{len(paths)} files for {repo_key}")
        return FetchResult(records=records, failed=failed)
